"""Episode input snapshots and insights report models"""

from aurae.models.episode import (
    Episode,
    PressureTrend,
    RetrospectiveSnapshot,
    SeverityLevel,
    WeatherSnapshot,
)
from aurae.models.insights import (
    InsightsReport,
    MedicationEffectiveness,
    RankedCount,
    SleepCorrelation,
    TimeOfDay,
    WeatherCorrelation,
)

__all__ = [
    # Input
    "Episode",
    "PressureTrend",
    "RetrospectiveSnapshot",
    "SeverityLevel",
    "WeatherSnapshot",
    # Output
    "InsightsReport",
    "MedicationEffectiveness",
    "RankedCount",
    "SleepCorrelation",
    "TimeOfDay",
    "WeatherCorrelation",
]
