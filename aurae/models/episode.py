"""Pydantic models for logged headache episodes

Episodes are read-only snapshots handed to the insights engine. They carry
only value types (no references to live persistence records), and every
model is frozen so the engine cannot write back.
"""
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """Frozen model accepting both snake_case names and camelCase aliases"""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SeverityLevel(IntEnum):
    """Three-level severity scale: 1 = Mild, 3 = Moderate, 5 = Severe"""
    MILD = 1
    MODERATE = 3
    SEVERE = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_raw(cls, value: int) -> "SeverityLevel":
        """
        Map any stored severity onto the three-level scale

        Values are clamped to 1-5. Legacy values from the old five-level
        scale are rounded up: 2 -> Moderate, 4 -> Severe.
        """
        clamped = max(1, min(5, int(value)))
        if clamped <= 1:
            return cls.MILD
        if clamped <= 3:
            return cls.MODERATE
        return cls.SEVERE


def _within(value: Any, low: float, high: Optional[float] = None) -> Any:
    # Optional measurements outside their range are treated as missing
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < low or (high is not None and value > high):
            return None
    return value


class PressureTrend(str, Enum):
    """Direction of pressure change over the hour before capture"""
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class WeatherSnapshot(SnapshotModel):
    """Weather captured at onset. Every measurement may be missing."""
    pressure: Optional[float] = None  # hPa
    pressure_trend: Optional[str] = None  # rising, falling, stable
    humidity: Optional[float] = None  # relative humidity, 0-100 %
    temperature: Optional[float] = None  # °C

    @field_validator('pressure_trend')
    @classmethod
    def normalize_trend(cls, v: Optional[str]) -> Optional[str]:
        """Store trend lower-cased; unknown values are kept as-is"""
        if v is None:
            return None
        return v.strip().lower() or None

    @property
    def is_falling(self) -> bool:
        return self.pressure_trend == PressureTrend.FALLING.value


class RetrospectiveSnapshot(SnapshotModel):
    """Post-episode detail entered by the user. All sections are optional."""
    environmental_triggers: list[str] = Field(default_factory=list)
    meals: list[str] = Field(default_factory=list)
    skipped_meal: bool = False
    stress_level: Optional[int] = None  # 1-5
    symptoms: list[str] = Field(default_factory=list)
    sleep_hours: Optional[float] = None
    medication_name: Optional[str] = None
    medication_effectiveness: Optional[int] = None  # 1-5

    @field_validator('stress_level', 'medication_effectiveness', mode='before')
    @classmethod
    def drop_out_of_scale_rating(cls, v: Any) -> Any:
        """Ratings outside 1-5 count as not recorded"""
        return _within(v, 1, 5)

    @field_validator('sleep_hours', mode='before')
    @classmethod
    def drop_negative_sleep(cls, v: Any) -> Any:
        return _within(v, 0)


class Episode(SnapshotModel):
    """One logged headache, from onset to (optional) resolution"""
    severity: int = Field(ge=1, le=5)
    onset_time: datetime
    resolved_time: Optional[datetime] = None
    is_active: bool = True
    weather: Optional[WeatherSnapshot] = None
    health_sleep_hours: Optional[float] = None
    retrospective: Optional[RetrospectiveSnapshot] = None

    @field_validator('health_sleep_hours', mode='before')
    @classmethod
    def drop_negative_health_sleep(cls, v: Any) -> Any:
        return _within(v, 0)

    @model_validator(mode='before')
    @classmethod
    def derive_is_active(cls, data: Any) -> Any:
        """Default is_active to 'not resolved' when the caller omits it"""
        if isinstance(data, dict) and "is_active" not in data and "isActive" not in data:
            resolved = data.get("resolved_time", data.get("resolvedTime"))
            data = {**data, "is_active": resolved is None}
        return data

    @property
    def duration(self) -> Optional[float]:
        """Seconds from onset to resolution; None while unresolved"""
        if self.resolved_time is None:
            return None
        return (self.resolved_time - self.onset_time).total_seconds()

    @property
    def sleep_hours(self) -> Optional[float]:
        """Sleep before onset: retrospective entry wins over the health capture"""
        if self.retrospective is not None and self.retrospective.sleep_hours is not None:
            return self.retrospective.sleep_hours
        return self.health_sleep_hours

    @property
    def severity_level(self) -> SeverityLevel:
        return SeverityLevel.from_raw(self.severity)
