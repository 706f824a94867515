"""Request models: the inclusive date range sent upstream."""

from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .consts import TRAILING_WINDOW_DAYS

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class DateRange(BaseModel):
    """Inclusive calendar date range sent upstream as start_date/end_date."""

    model_config = ConfigDict(frozen=True)

    start_date: str = Field(
        ..., pattern=ISO_DATE_PATTERN, description="Start date in YYYY-MM-DD format"
    )
    end_date: str = Field(
        ..., pattern=ISO_DATE_PATTERN, description="End date in YYYY-MM-DD format"
    )

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        start = date.fromisoformat(self.start_date)
        end = date.fromisoformat(self.end_date)
        if start > end:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self

    @classmethod
    def trailing_window(
        cls, today: date, days: int = TRAILING_WINDOW_DAYS
    ) -> "DateRange":
        """The ``days`` calendar days ending on ``today`` (inclusive)."""
        start = today - timedelta(days=days - 1)
        return cls(start_date=start.isoformat(), end_date=today.isoformat())

    def as_query_params(self) -> dict[str, str]:
        return {"start_date": self.start_date, "end_date": self.end_date}
