"""Resource-read and tool-call handlers generated from the endpoint catalog."""

import json
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .catalog import EndpointDescriptor, get_endpoint
from .client import OuraClient
from .exceptions import ValidationError
from .models import DateRange

logger = logging.getLogger("oura-mcp.dispatcher")


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(UTC).date()


def to_json_text(payload: Any) -> str:
    """Compact JSON text of an upstream payload, key order preserved."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class RequestDispatcher:
    """Turns catalog entries into resource reads and tool calls.

    Every invocation is independent: the only state shared between calls
    lives in the client's credential provider.
    """

    def __init__(self, client: OuraClient, clock: Callable[[], date] = utc_today):
        """Initialize RequestDispatcher.

        Args:
            client: Client used for upstream fetches.
            clock: Returns the current calendar date, used for default windows.
                Defaults to the UTC date.
        """
        self.client = client
        self.clock = clock

    async def read_resource(self, category: str) -> str:
        """Read ``oura://<category>``.

        Date-ranged categories use the trailing 7-day window ending today.

        Returns:
            JSON text of the upstream payload.
        """
        endpoint = get_endpoint(category)
        date_range = None
        if endpoint.requires_date_range:
            date_range = DateRange.trailing_window(self.clock())

        logger.info(f"Reading resource {category}")
        data = await self.client.fetch(category, date_range)
        return to_json_text(data)

    async def call_tool(self, category: str, arguments: Any) -> str:
        """Run ``get_<category>`` with caller-supplied dates.

        Args:
            category: Date-ranged catalog entry.
            arguments: Mapping with ``startDate`` and ``endDate``.

        Returns:
            JSON text of the upstream payload.

        Raises:
            ValidationError: Before any network call, if the arguments or
                category are unusable.
            AuthenticationError: If a token cannot be obtained.
            UpstreamError: If the upstream request fails.
        """
        endpoint = self._tool_endpoint(category)
        date_range = self.parse_date_range(endpoint.name, arguments)

        logger.info(
            f"Calling get_{category} for {date_range.start_date}..{date_range.end_date}"
        )
        data = await self.client.fetch(category, date_range)
        return to_json_text(data)

    @staticmethod
    def parse_date_range(category: str, arguments: Any) -> DateRange:
        """Validate tool arguments into a DateRange.

        Raises:
            ValidationError: If arguments are not a mapping, either date is
                missing or empty, a date is malformed, or start is after end.
        """
        if not isinstance(arguments, Mapping):
            raise ValidationError(
                f"Invalid arguments for {category}: expected object with startDate and endDate"
            )

        start_date = arguments.get("startDate")
        end_date = arguments.get("endDate")
        if not start_date or not end_date:
            missing = [
                name
                for name, value in (("startDate", start_date), ("endDate", end_date))
                if not value
            ]
            raise ValidationError(
                f"Missing required parameters for {category}: startDate and endDate are required",
                errors=[f"Missing: {name}" for name in missing],
                suggestions=["Pass dates in YYYY-MM-DD format"],
            )

        try:
            return DateRange(start_date=start_date, end_date=end_date)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid date range for {category}: dates must be YYYY-MM-DD "
                "with startDate on or before endDate",
                errors=[err["msg"] for err in e.errors()],
                context={"startDate": str(start_date), "endDate": str(end_date)},
            ) from e

    @staticmethod
    def _tool_endpoint(category: str) -> EndpointDescriptor:
        try:
            endpoint = get_endpoint(category)
        except KeyError:
            raise ValidationError(f"Unknown category: {category}") from None
        if not endpoint.requires_date_range:
            raise ValidationError(f"{category} does not accept a date range")
        return endpoint
