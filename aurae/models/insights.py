"""Insights report models"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from aurae.utils.datetime_helpers import format_duration


class ReportModel(BaseModel):
    """Immutable report value; serializes with camelCase keys for export"""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimeOfDay(str, Enum):
    """Four contiguous buckets covering the full day"""
    MORNING = "Morning"      # 06:00-11:59
    AFTERNOON = "Afternoon"  # 12:00-16:59
    EVENING = "Evening"      # 17:00-21:59
    NIGHT = "Night"          # 22:00-05:59

    @classmethod
    def from_hour(cls, hour: int) -> "TimeOfDay":
        if 6 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimeOfDay":
        return cls.from_hour(dt.hour)


class RankedCount(ReportModel):
    """A display name and how many episodes it appeared in"""
    name: str
    count: int


class WeatherCorrelation(ReportModel):
    """
    A weather condition that was present during a share of episodes.

    Descriptions only report how often something was present; they never
    claim a statistical or causal relationship.
    """
    factor: str  # e.g. "Falling pressure"
    correlation: str  # Frequently / Sometimes / Occasionally present
    description: str
    strength: float = Field(ge=0, le=1)


class SleepCorrelation(ReportModel):
    """Average sleep before high-severity vs low-severity episodes"""
    avg_sleep_on_bad_days: float
    avg_sleep_on_good_days: float
    insight: str


class MedicationEffectiveness(ReportModel):
    """Mean self-rated relief (1-5) for one medication"""
    name: str
    avg_effectiveness: float


class InsightsReport(ReportModel):
    """
    Aggregate statistics over a user's logged episodes.

    When fewer than minimum_logs_required episodes exist the report is
    "empty": only total_logs and minimum_logs_required carry information
    and every statistic keeps its zero/empty default.
    """
    minimum_logs_required: int
    total_logs: int

    # Summary
    average_severity: float = 0.0
    average_duration: Optional[float] = None  # seconds, None if nothing resolved
    streak_days: int = 0

    # Top 5 by frequency
    most_common_triggers: list[RankedCount] = Field(default_factory=list)
    most_common_symptoms: list[RankedCount] = Field(default_factory=list)

    # Temporal patterns (1 = Sunday ... 7 = Saturday)
    severity_by_day_of_week: dict[int, float] = Field(default_factory=dict)
    severity_by_time_of_day: dict[TimeOfDay, float] = Field(default_factory=dict)

    # Co-occurrence findings
    weather_correlations: list[WeatherCorrelation] = Field(default_factory=list)
    sleep_correlation: Optional[SleepCorrelation] = None

    # Ranked by avg effectiveness, only medications with >= 2 ratings
    medication_effectiveness: list[MedicationEffectiveness] = Field(default_factory=list)

    # Trailing 90 days, local calendar day -> episodes that day
    headache_frequency: dict[date, int] = Field(default_factory=dict)

    # Severity bucket (1, 3, 5) -> episodes
    severity_distribution: dict[int, int] = Field(default_factory=dict)

    @computed_field
    @property
    def minimum_logs_met(self) -> bool:
        return self.total_logs >= self.minimum_logs_required

    @property
    def formatted_average_duration(self) -> Optional[str]:
        """Average duration as "2h 15m"; None when nothing resolved"""
        return format_duration(self.average_duration)

    @classmethod
    def empty(cls, total_logs: int, minimum: int) -> "InsightsReport":
        """Insufficient-data report"""
        return cls(minimum_logs_required=minimum, total_logs=total_logs)

    def to_export_dict(self) -> dict[str, Any]:
        """JSON-safe dict for the export layer (camelCase keys, ISO dates)"""
        return self.model_dump(mode="json", by_alias=True)
