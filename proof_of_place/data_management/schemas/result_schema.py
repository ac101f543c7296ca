"""Response schema for proof-of-place validation.

The response is what the transport layer serializes: a flat JSON object
with score, classification, the four signals, and a newline-joined
explanation.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Classification(str, Enum):
    """Three-way verdict derived from the final score.

    PASS: score >= 0.70
    LOW_CONFIDENCE: 0.40 <= score < 0.70
    FLAGGED: score < 0.40
    """

    PASS = "PASS"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    FLAGGED = "FLAGGED"


class SignalBreakdown(BaseModel):
    """Per-analyzer scalars feeding the weighted score.

    spam_risk is a risk (higher is worse); the other three are positive
    evidence.
    """

    text_place_match: float = Field(..., ge=0.0, le=1.0)
    image_landmark: float = Field(..., ge=0.0, le=1.0)
    time_plausibility: float = Field(..., ge=0.0, le=1.0)
    spam_risk: float = Field(..., ge=0.0, le=1.0)


class ValidationResponse(BaseModel):
    """Scored verdict for one validation request."""

    score: float = Field(..., ge=0.0, le=1.0)
    classification: Classification
    signals: SignalBreakdown
    explanation: str

    def to_json(self) -> str:
        return self.model_dump_json()

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "score": 0.73,
                    "classification": "PASS",
                    "signals": {
                        "text_place_match": 1.0,
                        "image_landmark": 0.5,
                        "time_plausibility": 0.9,
                        "spam_risk": 0.0,
                    },
                    "explanation": "Overall confidence score: 73.0%\nClassification: PASS",
                }
            ]
        }
    }
