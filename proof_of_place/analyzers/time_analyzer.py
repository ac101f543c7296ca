"""Timestamp plausibility analysis.

Contributes 20% of the final score. Checks, in order:
1. No timestamp: neutral 0.5
2. Future timestamp: 0.1
3. Older than one year: 0.3
4. Hour of day against the schedule of the inferred venue type:
   typical event hours 0.9, otherwise plausible band 0.7, otherwise 0.4

The hour is read from the timestamp as written, so an offset-qualified
timestamp is evaluated in the poster's local time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

from loguru import logger

from proof_of_place.config.scoring_tables import (
    DEFAULT_VENUE_TYPE,
    TIME_EVENT_HOURS_SCORE,
    TIME_FUTURE_SCORE,
    TIME_MIN_PLAUSIBLE_SCORE,
    TIME_NEUTRAL_SCORE,
    TIME_OUTSIDE_HOURS_SCORE,
    TIME_PLAUSIBLE_CUTOFF,
    TIME_PLAUSIBLE_SCORE,
    TIME_TOO_OLD_SCORE,
    ScoringTables,
)
from proof_of_place.data_management.schemas import Coordinates, PointOfInterest
from proof_of_place.utils.timestamps import ensure_aware, one_year_before, utc_now


@dataclass
class TimeAnalysisResult:
    """Result of time plausibility analysis.

    Attributes:
        score: Time plausibility score (0.0-1.0)
        is_plausible: score >= 0.4
        reason: Human-readable reason, quoted verbatim in the explanation
        venue_type: Inferred venue type (None when the hour was not evaluated)
    """

    score: float
    is_plausible: bool
    reason: str
    venue_type: Optional[str] = None


class TimeAnalyzer:
    """
    Judges whether a post time fits the claimed venue.

    Usage:
        analyzer = TimeAnalyzer()
        result = analyzer.analyze(post_time, poi)

    Attributes:
        tables: Lookup tables (venue-type keywords, event hours, schedules)
        clock: Callable returning the current time (timezone-aware)
    """

    def __init__(
        self,
        tables: Optional[ScoringTables] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.tables = tables or ScoringTables()
        self.clock = clock or utc_now
        self.logger = logger.bind(component="TimeAnalyzer")

    def analyze(
        self,
        timestamp: Optional[datetime],
        location: Union[Coordinates, PointOfInterest],
    ) -> TimeAnalysisResult:
        """
        Analyze timestamp plausibility for the claimed location.

        Args:
            timestamp: Post time, or None
            location: Claimed coordinates or POI

        Returns:
            TimeAnalysisResult
        """
        if timestamp is None:
            return TimeAnalysisResult(
                score=TIME_NEUTRAL_SCORE,
                is_plausible=True,
                reason="No timestamp provided",
            )

        post_time = ensure_aware(timestamp)
        now = ensure_aware(self.clock())

        if post_time > now:
            return TimeAnalysisResult(
                score=TIME_FUTURE_SCORE,
                is_plausible=False,
                reason="Timestamp is in the future",
            )

        if post_time < one_year_before(now):
            return TimeAnalysisResult(
                score=TIME_TOO_OLD_SCORE,
                is_plausible=False,
                reason="Timestamp is more than 1 year old",
            )

        hour = timestamp.hour
        venue_type = self.infer_venue_type(location)

        if self.is_within_event_hours(hour, venue_type):
            score = TIME_EVENT_HOURS_SCORE
            reason = f"Time is within typical {venue_type} hours"
        elif self.plausibility(hour, venue_type) > TIME_PLAUSIBLE_CUTOFF:
            score = TIME_PLAUSIBLE_SCORE
            reason = "Time is plausible for venue type"
        else:
            score = TIME_OUTSIDE_HOURS_SCORE
            reason = "Time is outside typical hours for venue type"

        self.logger.debug(
            f"Time score: {score}",
            hour=hour,
            venue_type=venue_type,
        )

        return TimeAnalysisResult(
            score=score,
            is_plausible=score >= TIME_MIN_PLAUSIBLE_SCORE,
            reason=reason,
            venue_type=venue_type,
        )

    def infer_venue_type(self, location: Union[Coordinates, PointOfInterest]) -> str:
        """
        Infer a coarse venue type from the POI name.

        Coordinates carry no name and always map to "general".
        """
        if not isinstance(location, PointOfInterest):
            return DEFAULT_VENUE_TYPE

        name = location.name.lower()
        for venue_type, keywords in self.tables.venue_type_keywords.items():
            if any(keyword in name for keyword in keywords):
                return venue_type
        return DEFAULT_VENUE_TYPE

    def plausibility(self, hour: int, venue_type: str) -> float:
        """Plausibility (0.0-1.0) of posting at this hour for the venue type."""
        schedule = self.tables.venue_schedules.get(venue_type)
        if schedule is None:
            schedule = self.tables.venue_schedules[DEFAULT_VENUE_TYPE]
        return schedule.plausibility(hour)

    def is_within_event_hours(self, hour: int, venue_type: str) -> bool:
        """Whether the hour falls in the venue type's typical event hours (inclusive)."""
        hours = self.tables.event_hours.get(venue_type)
        if hours is None:
            hours = self.tables.event_hours[DEFAULT_VENUE_TYPE]
        start, end = hours
        return start <= hour <= end


__all__ = ["TimeAnalyzer", "TimeAnalysisResult"]
