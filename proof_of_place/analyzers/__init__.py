"""Signal analyzers for proof-of-place scoring.

Each analyzer reads the same validation request and produces one scalar
signal independently of the others:
- TextAnalyzer: text-place consistency (40%)
- ImageAnalyzer: image evidence and duplicate-image detection (30%)
- TimeAnalyzer: timestamp plausibility for the venue type (20%)
- SpamAnalyzer: spam/gaming risk (multiplicative penalty, up to 10%)

ImageAnalyzer and SpamAnalyzer update a shared SubmissionStore.
"""

from proof_of_place.analyzers.image_analyzer import ImageAnalysisResult, ImageAnalyzer
from proof_of_place.analyzers.spam_analyzer import SpamAnalysisResult, SpamAnalyzer
from proof_of_place.analyzers.text_analyzer import TextAnalysisResult, TextAnalyzer
from proof_of_place.analyzers.time_analyzer import TimeAnalysisResult, TimeAnalyzer

__all__ = [
    "ImageAnalyzer",
    "ImageAnalysisResult",
    "SpamAnalyzer",
    "SpamAnalysisResult",
    "TextAnalyzer",
    "TextAnalysisResult",
    "TimeAnalyzer",
    "TimeAnalysisResult",
]
