"""Scoring engine for proof-of-place validation.

Combines the four analyzer signals into one score:

    base  = text * 0.4 + image * 0.3 + time * 0.2
    final = base * (1 - spam_risk * 0.1)

The final score is clamped to [0, 1], rounded to 4 places together with the
signals, and classified:

    score >= 0.70         PASS
    0.40 <= score < 0.70  LOW_CONFIDENCE
    score < 0.40          FLAGGED

The engine owns one SubmissionStore shared by its image and spam analyzers;
engines that must not see each other's history get separate stores.
"""

from datetime import datetime
from typing import Callable, Optional

from loguru import logger
from structlog.contextvars import bound_contextvars

from proof_of_place.analyzers import ImageAnalyzer, SpamAnalyzer, TextAnalyzer, TimeAnalyzer
from proof_of_place.analyzers.exif import ExifReader
from proof_of_place.config.scoring_tables import (
    IMAGE_WEIGHT,
    LOW_CONFIDENCE_THRESHOLD,
    PASS_THRESHOLD,
    SCORE_PRECISION,
    SPAM_PENALTY_WEIGHT,
    TEXT_WEIGHT,
    TIME_WEIGHT,
    ScoringTables,
)
from proof_of_place.data_management.schemas import (
    Classification,
    SignalBreakdown,
    ValidationRequest,
    ValidationResponse,
)
from proof_of_place.data_management.submission_store import SubmissionStore
from proof_of_place.scoring.explanation import ExplanationDetails, build_explanation
from proof_of_place.utils.logging import new_request_id


def classify(score: float) -> Classification:
    """Map a score to its classification via the fixed thresholds."""
    if score >= PASS_THRESHOLD:
        return Classification.PASS
    if score >= LOW_CONFIDENCE_THRESHOLD:
        return Classification.LOW_CONFIDENCE
    return Classification.FLAGGED


def combine_signals(text: float, image: float, time: float, spam_risk: float) -> float:
    """Weighted base score with the spam penalty applied, clamped to [0, 1]."""
    base = text * TEXT_WEIGHT + image * IMAGE_WEIGHT + time * TIME_WEIGHT
    final = base * (1 - spam_risk * SPAM_PENALTY_WEIGHT)
    return max(0.0, min(1.0, final))


class ScoringEngine:
    """
    Validates location-tagged posts.

    Usage:
        engine = ScoringEngine()
        response = await engine.validate(request)
        print(response.classification, response.score)

    Attributes:
        store: Duplicate/history indices shared by the stateful analyzers
        tables: Lookup tables for the text and time analyzers
    """

    def __init__(
        self,
        store: Optional[SubmissionStore] = None,
        tables: Optional[ScoringTables] = None,
        exif_reader: Optional[ExifReader] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the engine and its analyzers.

        Args:
            store: Shared store (a fresh one if None)
            tables: Lookup tables (built-in defaults if None)
            exif_reader: EXIF GPS capability (NoExifReader if None)
            clock: Current-time source for the time analyzer (UTC now if None)
        """
        self.store = store if store is not None else SubmissionStore()
        self.tables = tables or ScoringTables()

        self.text_analyzer = TextAnalyzer(tables=self.tables)
        self.image_analyzer = ImageAnalyzer(store=self.store, exif_reader=exif_reader)
        self.time_analyzer = TimeAnalyzer(tables=self.tables, clock=clock)
        self.spam_analyzer = SpamAnalyzer(store=self.store)

        self.logger = logger.bind(component="ScoringEngine")

    async def validate(self, request: ValidationRequest) -> ValidationResponse:
        """
        Score a validation request.

        Args:
            request: Validated request (intake preconditions already hold)

        Returns:
            ValidationResponse with score, classification, signals, explanation
        """
        request_id = new_request_id()

        # Store log lines emitted by the analyzers carry this request_id
        with bound_contextvars(request_id=request_id):
            text_result = self.text_analyzer.analyze(request.text, request.location)
            image_result = await self.image_analyzer.analyze(request.image, request.location)
            time_result = self.time_analyzer.analyze(request.timestamp, request.location)
            spam_result = self.spam_analyzer.analyze(
                request.text,
                submitter_id=request.submitter_id,
                timestamp=request.timestamp,
            )

        signals = SignalBreakdown(
            text_place_match=round(text_result.score, SCORE_PRECISION),
            image_landmark=round(image_result.score, SCORE_PRECISION),
            time_plausibility=round(time_result.score, SCORE_PRECISION),
            spam_risk=round(spam_result.risk, SCORE_PRECISION),
        )

        score = round(
            combine_signals(
                text_result.score,
                image_result.score,
                time_result.score,
                spam_result.risk,
            ),
            SCORE_PRECISION,
        )
        classification = classify(score)

        explanation = build_explanation(
            score,
            classification,
            signals,
            ExplanationDetails(
                text_matches=text_result.matches,
                image_duplicate=image_result.is_duplicate,
                time_reason=time_result.reason,
                spam_reasons=spam_result.reasons,
            ),
        )

        self.logger.info(
            f"Validated post: {classification.value} ({score:.4f})",
            request_id=request_id,
            text=signals.text_place_match,
            image=signals.image_landmark,
            time=signals.time_plausibility,
            spam=signals.spam_risk,
        )

        return ValidationResponse(
            score=score,
            classification=classification,
            signals=signals,
            explanation=explanation,
        )


__all__ = ["ScoringEngine", "classify", "combine_signals"]
