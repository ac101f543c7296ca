"""Scoring constants and lookup tables for proof-of-place validation.

Scoring model:
- Text-place consistency: 40%
- Image evidence: 30%
- Time plausibility: 20%
- Spam risk: 10% multiplicative penalty (not a positive signal)

Weights, thresholds and per-analyzer bands are module constants fixed at
build time. The lookup tables (venue keywords, nicknames, city tokens,
venue-type hour bands) are held in ScoringTables so a deployment can ship a
versioned JSON file instead of rebuilding.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# Aggregate weights
TEXT_WEIGHT = 0.4
IMAGE_WEIGHT = 0.3
TIME_WEIGHT = 0.2
SPAM_PENALTY_WEIGHT = 0.1

# Classification thresholds (score >= PASS -> PASS, >= LOW -> LOW_CONFIDENCE)
PASS_THRESHOLD = 0.70
LOW_CONFIDENCE_THRESHOLD = 0.40

SCORE_PRECISION = 4

# Explanation bands
STRONG_SIGNAL = 0.7
MODERATE_SIGNAL = 0.4
SPAM_REPORT_ALL_REASONS = 0.3

# Text analyzer contributions
TEXT_NO_MATCH_FLOOR = 0.1
TEXT_EXACT_POI = 0.5
TEXT_POI_WORD = 0.1
TEXT_POI_WORD_CAP = 0.3
TEXT_NICKNAME = 0.3
TEXT_CITY = 0.2
TEXT_ENTITY = 0.05
TEXT_ENTITY_CAP = 0.2
TEXT_COORDINATES_PENALTY = 0.7
TEXT_MIN_POI_WORD_LENGTH = 3  # words must be longer than this

# Image analyzer
IMAGE_NEUTRAL_SCORE = 0.5
IMAGE_BASE_SCORE = 0.5
IMAGE_DUPLICATE_PENALTY = 0.3
IMAGE_STRING_FINGERPRINT_LENGTH = 50
EARTH_RADIUS_METERS = 6_371_000
# (max distance in meters, score); first band the distance falls under wins
IMAGE_DISTANCE_BANDS: List[Tuple[float, float]] = [
    (100.0, 0.9),
    (1_000.0, 0.7),
    (5_000.0, 0.5),
]
IMAGE_FAR_SCORE = 0.2

# Time analyzer
TIME_NEUTRAL_SCORE = 0.5
TIME_FUTURE_SCORE = 0.1
TIME_TOO_OLD_SCORE = 0.3
TIME_EVENT_HOURS_SCORE = 0.9
TIME_PLAUSIBLE_SCORE = 0.7
TIME_OUTSIDE_HOURS_SCORE = 0.4
TIME_PLAUSIBLE_CUTOFF = 0.5  # band plausibility must exceed this
TIME_MIN_PLAUSIBLE_SCORE = 0.4

# Spam analyzer
SPAM_DUPLICATE_RISK = 0.4
SPAM_SHORT_TEXT_LENGTH = 10
SPAM_SHORT_TEXT_RISK = 0.2
SPAM_MAX_HASHTAGS = 10
SPAM_HASHTAG_RISK = 0.2
SPAM_MAX_URLS = 3
SPAM_URL_RISK = 0.3
SPAM_BURST_WINDOW_SECONDS = 5 * 60
SPAM_BURST_HIGH_THRESHOLD = 5
SPAM_BURST_HIGH_RISK = 0.5
SPAM_BURST_MEDIUM_THRESHOLD = 3
SPAM_BURST_MEDIUM_RISK = 0.3
SPAM_SHINGLE_SIZE = 5
SPAM_SHINGLE_HIGH_REPEAT = 3
SPAM_SHINGLE_HIGH_RISK = 0.4
SPAM_SHINGLE_MEDIUM_REPEAT = 2
SPAM_SHINGLE_MEDIUM_RISK = 0.2
MAX_SUBMISSION_HISTORY = 100

# Default lookup data
VENUE_KEYWORDS: List[str] = [
    "theater", "theatre", "stadium", "arena", "hall", "center", "centre",
    "venue", "club", "bar", "restaurant", "cafe", "museum", "gallery",
    "park", "plaza", "square", "bridge", "tower", "building",
]

# Key: canonical POI name (lowercase)
VENUE_NICKNAMES: Dict[str, List[str]] = {
    "madison square garden": ["msg", "the garden"],
    "staples center": ["staples"],
    "yankee stadium": ["yankee", "yankees"],
    "dodger stadium": ["dodger", "dodgers"],
    "wembley stadium": ["wembley"],
    "olympic stadium": ["olympic"],
}

# Matched as whole words when only coordinates are claimed
CITY_TOKENS: List[str] = [
    "new york", "nyc", "los angeles", "la", "chicago", "san francisco",
]

# Checked in order; first venue type with a keyword in the POI name wins
VENUE_TYPE_KEYWORDS: Dict[str, List[str]] = {
    "sports_venue": ["stadium", "arena"],
    "performance_venue": ["theater", "theatre", "hall"],
    "dining": ["restaurant", "cafe", "bar"],
    "outdoor": ["park", "plaza"],
    "cultural": ["museum", "gallery"],
}

DEFAULT_VENUE_TYPE = "general"

# Inclusive (start_hour, end_hour)
EVENT_HOURS: Dict[str, Tuple[int, int]] = {
    "sports_venue": (19, 23),
    "performance_venue": (19, 23),
    "dining": (11, 22),
    "outdoor": (6, 21),
    "cultural": (10, 18),
    "general": (8, 22),
}


class HourBand(BaseModel):
    """Inclusive hour range carrying a plausibility value."""

    start: int = Field(..., ge=0, le=23)
    end: int = Field(..., ge=0, le=23)
    plausibility: float = Field(..., ge=0.0, le=1.0)

    def contains(self, hour: int) -> bool:
        return self.start <= hour <= self.end


class VenueSchedule(BaseModel):
    """Plausibility bands for one venue type; first matching band wins."""

    bands: List[HourBand] = Field(default_factory=list)
    default: float = Field(0.5, ge=0.0, le=1.0)

    def plausibility(self, hour: int) -> float:
        for band in self.bands:
            if band.contains(hour):
                return band.plausibility
        return self.default


def _schedule(bands: List[Tuple[int, int, float]], default: float) -> VenueSchedule:
    return VenueSchedule(
        bands=[HourBand(start=s, end=e, plausibility=p) for s, e, p in bands],
        default=default,
    )


VENUE_SCHEDULES: Dict[str, VenueSchedule] = {
    "sports_venue": _schedule([(19, 23, 0.9), (12, 18, 0.7), (0, 6, 0.2)], 0.5),
    "performance_venue": _schedule([(19, 23, 0.9), (14, 18, 0.6), (0, 6, 0.2)], 0.4),
    "dining": _schedule([(11, 22, 0.9), (7, 10, 0.7), (23, 23, 0.3), (0, 6, 0.3)], 0.5),
    "outdoor": _schedule([(6, 21, 0.9), (22, 23, 0.4), (0, 5, 0.4)], 0.7),
    "cultural": _schedule([(10, 18, 0.9), (19, 23, 0.4), (0, 9, 0.4)], 0.6),
    "general": _schedule([(8, 22, 0.8)], 0.5),
}


class ScoringTables(BaseModel):
    """Versionable lookup data consumed by the text and time analyzers.

    Defaults reproduce the built-in tables. A JSON file with any subset of
    these fields overrides the matching defaults. Event hours and venue
    schedules are merged per venue type, so "general" and every built-in
    type always resolve.
    """

    version: str = "1"
    venue_keywords: List[str] = Field(default_factory=lambda: list(VENUE_KEYWORDS))
    venue_nicknames: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in VENUE_NICKNAMES.items()}
    )
    city_tokens: List[str] = Field(default_factory=lambda: list(CITY_TOKENS))
    venue_type_keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in VENUE_TYPE_KEYWORDS.items()}
    )
    event_hours: Dict[str, Tuple[int, int]] = Field(
        default_factory=lambda: dict(EVENT_HOURS)
    )
    venue_schedules: Dict[str, VenueSchedule] = Field(
        default_factory=lambda: {k: v.model_copy(deep=True) for k, v in VENUE_SCHEDULES.items()}
    )

    @field_validator("event_hours")
    @classmethod
    def _merge_event_hours(cls, value: Dict[str, Tuple[int, int]]) -> Dict[str, Tuple[int, int]]:
        # Venue types absent from a loaded file keep their built-in hours
        return {**EVENT_HOURS, **value}

    @field_validator("venue_schedules")
    @classmethod
    def _merge_venue_schedules(cls, value: Dict[str, VenueSchedule]) -> Dict[str, VenueSchedule]:
        merged = {k: v.model_copy(deep=True) for k, v in VENUE_SCHEDULES.items()}
        merged.update(value)
        return merged

    def nicknames_for(self, poi_name: str) -> List[str]:
        return self.venue_nicknames.get(poi_name.lower(), [])

    model_config = {"frozen": True}


def load_scoring_tables(path: Optional[str] = None) -> ScoringTables:
    """
    Load lookup tables from a JSON file, or the built-in defaults.

    Args:
        path: Path to a JSON document matching ScoringTables. None returns defaults.

    Returns:
        ScoringTables instance

    Raises:
        FileNotFoundError: If path is given but does not exist
        pydantic.ValidationError: If the file content does not match the schema
    """
    if not path:
        return ScoringTables()
    return ScoringTables.model_validate_json(Path(path).read_text(encoding="utf-8"))
