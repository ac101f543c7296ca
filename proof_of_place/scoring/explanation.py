"""Human-readable explanation for a scored request.

Pure formatting over already-computed signals, so the wording can be tested
without running any analyzer.
"""

from dataclasses import dataclass, field
from typing import List

from proof_of_place.config.scoring_tables import (
    MODERATE_SIGNAL,
    SPAM_REPORT_ALL_REASONS,
    STRONG_SIGNAL,
)
from proof_of_place.data_management.schemas import Classification, SignalBreakdown


@dataclass
class ExplanationDetails:
    """Analyzer details quoted in the explanation."""

    text_matches: List[str] = field(default_factory=list)
    image_duplicate: bool = False
    time_reason: str = ""
    spam_reasons: List[str] = field(default_factory=list)


def _text_line(score: float, match_count: int) -> str:
    if score >= STRONG_SIGNAL:
        return f"✓ Strong location match in text ({match_count} matches found)"
    if score >= MODERATE_SIGNAL:
        return "⚠ Moderate location match in text"
    return "✗ Weak or no location match in text"


def _image_line(score: float) -> str:
    if score >= STRONG_SIGNAL:
        return "✓ Strong image evidence"
    if score >= MODERATE_SIGNAL:
        return "⚠ Moderate image evidence"
    return "✗ Weak or no image evidence"


def _spam_line(risk: float, reasons: List[str]) -> str:
    if risk > SPAM_REPORT_ALL_REASONS:
        return f"⚠ Spam indicators detected: {', '.join(reasons)}"
    if risk > 0:
        return f"Minor spam indicators: {reasons[0] if reasons else 'unspecified'}"
    return "✓ No spam indicators detected"


def build_explanation(
    score: float,
    classification: Classification,
    signals: SignalBreakdown,
    details: ExplanationDetails,
) -> str:
    """
    Render the explanation text for a scored request.

    Args:
        score: Final score (0.0-1.0)
        classification: Verdict for the score
        signals: Per-analyzer signals
        details: Match list, duplicate flag, time reason, spam reasons

    Returns:
        Newline-joined explanation lines
    """
    lines = [
        f"Overall confidence score: {score * 100:.1f}%",
        f"Classification: {classification.value}",
        _text_line(signals.text_place_match, len(details.text_matches)),
        _image_line(signals.image_landmark),
    ]

    if details.image_duplicate:
        lines.append("⚠ Image appears to be reused from another location")

    lines.append(f"Time plausibility: {details.time_reason}")
    lines.append(_spam_line(signals.spam_risk, details.spam_reasons))

    return "\n".join(lines)


__all__ = ["ExplanationDetails", "build_explanation"]
