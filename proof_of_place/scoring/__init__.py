"""Score aggregation, classification and explanation.

Usage:
    from proof_of_place.scoring import ScoringEngine

    engine = ScoringEngine()
    response = await engine.validate(request)
"""

from proof_of_place.scoring.explanation import ExplanationDetails, build_explanation
from proof_of_place.scoring.scoring_engine import ScoringEngine, classify, combine_signals

__all__ = [
    "ScoringEngine",
    "classify",
    "combine_signals",
    "ExplanationDetails",
    "build_explanation",
]
