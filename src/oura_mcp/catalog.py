"""Upstream data endpoints exposed as resources and tools."""

from pydantic import BaseModel, ConfigDict


class EndpointDescriptor(BaseModel):
    """One upstream data category."""

    model_config = ConfigDict(frozen=True)

    name: str
    requires_date_range: bool
    description: str


ENDPOINTS: tuple[EndpointDescriptor, ...] = (
    EndpointDescriptor(
        name="personal_info",
        requires_date_range=False,
        description="Get user profile information including age, email, and biological sex",
    ),
    EndpointDescriptor(
        name="daily_activity",
        requires_date_range=True,
        description=(
            "Get daily activity metrics including steps, calories burned, activity targets, "
            "movement metrics, and sedentary time. Returns activity score and detailed breakdown."
        ),
    ),
    EndpointDescriptor(
        name="daily_readiness",
        requires_date_range=True,
        description=(
            "Get daily readiness scores and contributing factors including body temperature, "
            "HRV balance, recovery metrics, and previous day activity impact. "
            "Indicates overall recovery state."
        ),
    ),
    EndpointDescriptor(
        name="daily_sleep",
        requires_date_range=True,
        description=(
            "Get daily sleep summaries including total sleep time, sleep stages breakdown, "
            "sleep score, efficiency, and timing. Provides high-level sleep quality insights."
        ),
    ),
    EndpointDescriptor(
        name="sleep",
        requires_date_range=True,
        description=(
            "Get detailed sleep session data with 5-minute granularity including heart rate, "
            "HRV, movement, sleep stages, and respiratory rate throughout the night."
        ),
    ),
    EndpointDescriptor(
        name="sleep_time",
        requires_date_range=True,
        description=(
            "Get recommended bedtime windows based on sleep patterns and circadian rhythm. "
            "Helps optimize sleep timing for better recovery."
        ),
    ),
    EndpointDescriptor(
        name="workout",
        requires_date_range=True,
        description=(
            "Get workout sessions including activity type, duration, intensity, "
            "calories burned, and heart rate data during exercise periods."
        ),
    ),
    EndpointDescriptor(
        name="session",
        requires_date_range=True,
        description=(
            "Get meditation, breathing, or other mindfulness sessions including type, "
            "duration, and physiological responses like heart rate and HRV."
        ),
    ),
    EndpointDescriptor(
        name="daily_spo2",
        requires_date_range=True,
        description=(
            "Get daily blood oxygen saturation (SpO2) averages and breathing regularity "
            "metrics. Useful for altitude adaptation and respiratory health tracking."
        ),
    ),
    EndpointDescriptor(
        name="rest_mode_period",
        requires_date_range=True,
        description=(
            "Get rest mode periods when the user explicitly enabled rest/recovery mode. "
            "Indicates intentional recovery periods or illness."
        ),
    ),
    EndpointDescriptor(
        name="ring_configuration",
        requires_date_range=False,
        description=(
            "Get Oura ring hardware configuration including color, design, "
            "firmware version, and hardware generation details."
        ),
    ),
    EndpointDescriptor(
        name="daily_stress",
        requires_date_range=True,
        description=(
            "Get daily stress metrics including daytime stress levels, stress high/recovery "
            "time balance, and restoration periods throughout the day."
        ),
    ),
    EndpointDescriptor(
        name="daily_resilience",
        requires_date_range=True,
        description=(
            "Get daily resilience scores showing ability to handle stress based on long-term "
            "HRV trends and recovery patterns over the past 2 weeks."
        ),
    ),
    EndpointDescriptor(
        name="daily_cardiovascular_age",
        requires_date_range=True,
        description=(
            "Get estimated cardiovascular age based on HRV, resting heart rate, and other "
            "cardiac metrics compared to population norms."
        ),
    ),
    EndpointDescriptor(
        name="vO2_max",
        requires_date_range=True,
        description=(
            "Get estimated VO2 max (maximal oxygen uptake) values indicating cardiovascular "
            "fitness level based on heart rate during activities."
        ),
    ),
    EndpointDescriptor(
        name="heartrate",
        requires_date_range=True,
        description=(
            "Get individual heart rate measurements throughout the day including daytime and "
            "workout heart rate. Returns BPM values with timestamps and measurement source."
        ),
    ),
    EndpointDescriptor(
        name="enhanced_tag",
        requires_date_range=True,
        description=(
            "Get multi-day tags with optional comments for annotating events, symptoms, or "
            "behaviors. Includes tag type, start/end times, and custom notes."
        ),
    ),
)

_BY_NAME = {endpoint.name: endpoint for endpoint in ENDPOINTS}


def get_endpoint(name: str) -> EndpointDescriptor:
    """Look up a catalog entry.

    Raises:
        KeyError: If no category has that name.
    """
    return _BY_NAME[name]


def date_ranged_endpoints() -> tuple[EndpointDescriptor, ...]:
    """Catalog entries that take a start/end date and so also get a tool."""
    return tuple(e for e in ENDPOINTS if e.requires_date_range)
