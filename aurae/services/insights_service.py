"""
Insights Service - Headache Pattern Analysis

Pure, on-device style pattern analysis over logged episodes. Computation is
synchronous and stateless: no I/O, no persistence, no side effects. The
report contains only aggregates (averages, counts, frequencies).

All findings describe how often something was present alongside a headache.
Wording such as "correlated", "causes" or "predicts" is never used in a
description; these are frequency observations, not statistical claims.

Key Features:
- Minimum-data guard (5 logs) before any statistic is computed
- Trigger, symptom and medication rankings from retrospectives
- Weekday and time-of-day severity averages
- Weather and sleep co-occurrence heuristics
- Headache-free streak and trailing 90-day frequency
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from statistics import fmean
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from aurae.models.episode import Episode, SeverityLevel, WeatherSnapshot
from aurae.models.insights import (
    InsightsReport,
    MedicationEffectiveness,
    RankedCount,
    SleepCorrelation,
    TimeOfDay,
    WeatherCorrelation,
)
from aurae.utils.datetime_helpers import (
    days_ago,
    get_timezone,
    now_local,
    start_of_day,
    to_local,
    weekday_index,
)
from aurae.utils.display_names import (
    meal_display_name,
    symptom_display_name,
    trigger_display_name,
)

logger = logging.getLogger(__name__)

# Statistical floor below which no statistic is reported
MINIMUM_LOGS = 5

TOP_N = 5
FREQUENCY_WINDOW_DAYS = 90
STREAK_SAFETY_CAP_DAYS = 365

HIGH_STRESS_LEVEL = 4
BAD_DAY_SEVERITY = 4
GOOD_DAY_SEVERITY = 2
MIN_MEDICATION_RATINGS = 2
MIN_SLEEP_POINTS = 2
SLEEP_DIFF_HOURS = 0.5

# Weather heuristics
MIN_WEATHER_EPISODES = 3
FALLING_PRESSURE_RATE = 0.2
LOW_PRESSURE_HPA = 1013.0
LOW_PRESSURE_SEVERITY_GAP = 0.3
HIGH_HUMIDITY_PCT = 70.0
HIGH_HUMIDITY_MIN_COUNT = 2
HIGH_HUMIDITY_RATE = 0.3
TEMPERATURE_MIN_SPREAD = 10.0
TEMPERATURE_SEVERITY_GAP = 0.3


def correlation_label(strength: float) -> str:
    """Frequency wording for a 0-1 strength"""
    if strength >= 0.7:
        return "Frequently present"
    if strength >= 0.4:
        return "Sometimes present"
    return "Occasionally present"


def _mean_severity(episodes: Sequence[Episode]) -> float:
    if not episodes:
        return 0.0
    return sum(e.severity for e in episodes) / len(episodes)


def _top(counts: dict[str, int], limit: int = TOP_N) -> list[RankedCount]:
    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [RankedCount(name=name, count=count) for name, count in ranked[:limit]]


class InsightsService:
    """
    Builds an InsightsReport from a collection of episodes.

    The service holds no state besides the timezone used for calendar math,
    so one instance can be shared across threads.
    """

    minimum_logs = MINIMUM_LOGS

    def __init__(self, tz: Optional[ZoneInfo] = None):
        """
        Args:
            tz: Timezone for day boundaries, weekdays and hours
                (defaults to config.TIMEZONE)
        """
        self.tz = tz or get_timezone()

    def build_report(
        self,
        episodes: Iterable[Episode],
        now: Optional[datetime] = None
    ) -> InsightsReport:
        """
        Analyse episodes and return a fully populated report.

        Args:
            episodes: Episode snapshots (or dicts of episode fields) in any order
            now: Reference time for streak and frequency window
                 (defaults to the current time)

        Returns:
            InsightsReport; the empty form when fewer than 5 episodes exist
        """
        episodes = [
            e if isinstance(e, Episode) else Episode.model_validate(e)
            for e in episodes
        ]
        if len(episodes) < self.minimum_logs:
            logger.debug(
                f"Only {len(episodes)} episodes logged, "
                f"{self.minimum_logs} required for insights"
            )
            return InsightsReport.empty(total_logs=len(episodes), minimum=self.minimum_logs)

        now = to_local(now, self.tz) if now is not None else now_local(self.tz)

        report = InsightsReport(
            minimum_logs_required=self.minimum_logs,
            total_logs=len(episodes),
            average_severity=_mean_severity(episodes),
            average_duration=self._average_duration(episodes),
            streak_days=self._current_streak(episodes, now),
            most_common_triggers=self._top_triggers(episodes),
            most_common_symptoms=self._top_symptoms(episodes),
            severity_by_day_of_week=self._severity_by_weekday(episodes),
            severity_by_time_of_day=self._severity_by_time_of_day(episodes),
            weather_correlations=self._weather_correlations(episodes),
            sleep_correlation=self._sleep_correlation(episodes),
            medication_effectiveness=self._medication_effectiveness(episodes),
            headache_frequency=self._headache_frequency(episodes, now),
            severity_distribution=self._severity_distribution(episodes),
        )

        logger.debug(
            f"Built insights report: {report.total_logs} logs, "
            f"avg severity {report.average_severity:.2f}, "
            f"{len(report.weather_correlations)} weather findings, "
            f"streak {report.streak_days}d"
        )
        return report

    # Duration

    def _average_duration(self, episodes: Sequence[Episode]) -> Optional[float]:
        durations = [
            (to_local(e.resolved_time, self.tz) - to_local(e.onset_time, self.tz)).total_seconds()
            for e in episodes
            if e.resolved_time is not None
        ]
        if not durations:
            return None
        return fmean(durations)

    # Streak

    def _current_streak(self, episodes: Sequence[Episode], now: datetime) -> int:
        """
        Headache-free calendar days counted back from today (today included).

        Unlike the mobile app, the count is not reduced by one: a last episode
        three days ago gives a streak of 3.
        """
        headache_days = {start_of_day(self._local(e.onset_time)) for e in episodes}
        day = start_of_day(now)
        streak = 0
        while day not in headache_days and streak < STREAK_SAFETY_CAP_DAYS:
            streak += 1
            day -= timedelta(days=1)
        return max(0, streak)

    # Triggers & symptoms

    def _top_triggers(self, episodes: Sequence[Episode]) -> list[RankedCount]:
        counts: dict[str, int] = defaultdict(int)
        for episode in episodes:
            retro = episode.retrospective
            if retro is None:
                continue
            for trigger in retro.environmental_triggers:
                if trigger:
                    counts[trigger_display_name(trigger)] += 1
            for meal in retro.meals:
                if meal:
                    counts[meal_display_name(meal)] += 1
            if retro.skipped_meal:
                counts["Skipped meal"] += 1
            if retro.stress_level is not None and retro.stress_level >= HIGH_STRESS_LEVEL:
                counts["High stress"] += 1
        return _top(counts)

    def _top_symptoms(self, episodes: Sequence[Episode]) -> list[RankedCount]:
        counts: dict[str, int] = defaultdict(int)
        for episode in episodes:
            retro = episode.retrospective
            if retro is None:
                continue
            for symptom in retro.symptoms:
                if symptom:
                    counts[symptom_display_name(symptom)] += 1
        return _top(counts)

    # Temporal patterns

    def _severity_by_weekday(self, episodes: Sequence[Episode]) -> dict[int, float]:
        buckets: dict[int, list[int]] = defaultdict(list)
        for episode in episodes:
            buckets[weekday_index(self._local(episode.onset_time))].append(episode.severity)
        return {weekday: fmean(values) for weekday, values in buckets.items()}

    def _severity_by_time_of_day(self, episodes: Sequence[Episode]) -> dict[TimeOfDay, float]:
        buckets: dict[TimeOfDay, list[int]] = defaultdict(list)
        for episode in episodes:
            bucket = TimeOfDay.from_datetime(self._local(episode.onset_time))
            buckets[bucket].append(episode.severity)
        return {bucket: fmean(values) for bucket, values in buckets.items()}

    # Weather

    def _weather_correlations(self, episodes: Sequence[Episode]) -> list[WeatherCorrelation]:
        pairs = [
            (e, e.weather) for e in episodes
            if e.weather is not None and e.weather.pressure is not None
        ]
        if len(pairs) < MIN_WEATHER_EPISODES:
            return []

        findings = []
        for check in (
            self._falling_pressure,
            self._low_pressure,
            self._high_humidity,
            self._temperature,
        ):
            finding = check(pairs)
            if finding is not None:
                findings.append(finding)
        return findings

    def _falling_pressure(
        self, pairs: list[tuple[Episode, WeatherSnapshot]]
    ) -> Optional[WeatherCorrelation]:
        falling = sum(1 for _, w in pairs if w.is_falling)
        rate = falling / len(pairs)
        if rate <= FALLING_PRESSURE_RATE:
            return None

        strength = min(rate * 2, 1.0)
        return WeatherCorrelation(
            factor="Falling pressure",
            correlation=correlation_label(strength),
            description=f"{int(rate * 100)}% of your headaches occurred when barometric pressure was falling.",
            strength=strength,
        )

    def _low_pressure(
        self, pairs: list[tuple[Episode, WeatherSnapshot]]
    ) -> Optional[WeatherCorrelation]:
        low = [e for e, w in pairs if w.pressure < LOW_PRESSURE_HPA]
        if not low:
            return None
        high = [e for e, w in pairs if w.pressure >= LOW_PRESSURE_HPA]
        diff = _mean_severity(low) - _mean_severity(high)
        if diff <= LOW_PRESSURE_SEVERITY_GAP:
            return None

        strength = min(diff / 2.0, 1.0)
        return WeatherCorrelation(
            factor="Low pressure",
            correlation=correlation_label(strength),
            description=(
                f"Headaches logged when pressure was below {LOW_PRESSURE_HPA:.0f} hPa "
                f"averaged {diff:.1f} points higher in severity."
            ),
            strength=strength,
        )

    def _high_humidity(
        self, pairs: list[tuple[Episode, WeatherSnapshot]]
    ) -> Optional[WeatherCorrelation]:
        humid = [
            e for e, w in pairs
            if w.humidity is not None and w.humidity > HIGH_HUMIDITY_PCT
        ]
        if len(humid) < HIGH_HUMIDITY_MIN_COUNT:
            return None
        rate = len(humid) / len(pairs)
        if rate <= HIGH_HUMIDITY_RATE:
            return None

        strength = min(rate * 1.5, 1.0)
        return WeatherCorrelation(
            factor="High humidity",
            correlation=correlation_label(strength),
            description=f"{int(rate * 100)}% of your headaches occurred when humidity exceeded {HIGH_HUMIDITY_PCT:.0f}%.",
            strength=strength,
        )

    def _temperature(
        self, pairs: list[tuple[Episode, WeatherSnapshot]]
    ) -> Optional[WeatherCorrelation]:
        with_temp = [(e, w.temperature) for e, w in pairs if w.temperature is not None]
        if not with_temp:
            return None
        temps = sorted(t for _, t in with_temp)
        if temps[-1] - temps[0] <= TEMPERATURE_MIN_SPREAD:
            return None

        median = temps[len(temps) // 2]
        warm = [e for e, t in with_temp if t > median]
        cold = [e for e, t in with_temp if t <= median]
        if not warm or not cold:
            return None
        avg_warm = _mean_severity(warm)
        avg_cold = _mean_severity(cold)
        diff = abs(avg_warm - avg_cold)
        if diff <= TEMPERATURE_SEVERITY_GAP:
            return None

        warmer = avg_warm > avg_cold
        strength = min(diff / 2.0, 1.0)
        return WeatherCorrelation(
            factor="High temperature" if warmer else "Low temperature",
            correlation=correlation_label(strength),
            description=(
                f"Headaches logged in {'warmer' if warmer else 'colder'} weather "
                f"averaged {diff:.1f} points higher in severity."
            ),
            strength=strength,
        )

    # Sleep

    def _sleep_correlation(self, episodes: Sequence[Episode]) -> Optional[SleepCorrelation]:
        bad = [
            e.sleep_hours for e in episodes
            if e.severity >= BAD_DAY_SEVERITY and e.sleep_hours is not None
        ]
        good = [
            e.sleep_hours for e in episodes
            if e.severity <= GOOD_DAY_SEVERITY and e.sleep_hours is not None
        ]
        if len(bad) < MIN_SLEEP_POINTS or len(good) < MIN_SLEEP_POINTS:
            return None

        avg_bad = fmean(bad)
        avg_good = fmean(good)
        diff = avg_good - avg_bad
        if diff > SLEEP_DIFF_HOURS:
            insight = (
                f"You slept {diff:.1f} hour(s) more on average before milder headaches. "
                f"Shorter sleep was more often present before your more severe headaches."
            )
        else:
            insight = "Sleep duration shows little variation between milder and high-severity headache days."

        return SleepCorrelation(
            avg_sleep_on_bad_days=avg_bad,
            avg_sleep_on_good_days=avg_good,
            insight=insight,
        )

    # Medication

    def _medication_effectiveness(
        self, episodes: Sequence[Episode]
    ) -> list[MedicationEffectiveness]:
        scores: dict[str, list[int]] = defaultdict(list)
        for episode in episodes:
            retro = episode.retrospective
            if (
                retro is None
                or not retro.medication_name
                or retro.medication_effectiveness is None
            ):
                continue
            scores[retro.medication_name].append(retro.medication_effectiveness)

        ranked = [
            MedicationEffectiveness(name=name, avg_effectiveness=fmean(values))
            for name, values in scores.items()
            if len(values) >= MIN_MEDICATION_RATINGS
        ]
        ranked.sort(key=lambda m: m.avg_effectiveness, reverse=True)
        return ranked

    # Frequency & distribution

    def _headache_frequency(self, episodes: Sequence[Episode], now: datetime) -> dict[date, int]:
        cutoff = days_ago(now, FREQUENCY_WINDOW_DAYS)
        frequency: dict[date, int] = defaultdict(int)
        for episode in episodes:
            onset = self._local(episode.onset_time)
            if onset >= cutoff:
                frequency[start_of_day(onset)] += 1
        return dict(frequency)

    def _severity_distribution(self, episodes: Sequence[Episode]) -> dict[int, int]:
        distribution = {level.value: 0 for level in SeverityLevel}
        for episode in episodes:
            distribution[episode.severity_level.value] += 1
        return distribution

    def _local(self, dt: datetime) -> datetime:
        return to_local(dt, self.tz)


def build_report(
    episodes: Iterable[Episode],
    now: Optional[datetime] = None,
    tz: Optional[ZoneInfo] = None
) -> InsightsReport:
    """Build a report with a one-off service (see InsightsService.build_report)"""
    return InsightsService(tz=tz).build_report(episodes, now=now)
