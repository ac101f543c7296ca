"""Tests for build_explanation.

Tests cover:
- Header lines (score percentage and classification)
- Strong / moderate / weak bands for text and image
- Duplicate-image warning
- Spam line variants
"""

import pytest

from proof_of_place.data_management.schemas import Classification, SignalBreakdown
from proof_of_place.scoring import ExplanationDetails, build_explanation


def signals(text=0.5, image=0.5, time=0.5, spam=0.0) -> SignalBreakdown:
    return SignalBreakdown(
        text_place_match=text,
        image_landmark=image,
        time_plausibility=time,
        spam_risk=spam,
    )


def lines_for(sig, details=None, score=0.5, classification=Classification.LOW_CONFIDENCE):
    return build_explanation(score, classification, sig, details or ExplanationDetails()).split("\n")


class TestHeader:
    def test_score_and_classification(self):
        lines = lines_for(signals(), score=0.7312, classification=Classification.PASS)

        assert lines[0] == "Overall confidence score: 73.1%"
        assert lines[1] == "Classification: PASS"

    def test_line_order(self):
        details = ExplanationDetails(
            text_matches=["exact_poi:x"],
            image_duplicate=True,
            time_reason="No timestamp provided",
            spam_reasons=["No spam indicators"],
        )
        lines = lines_for(signals(), details)

        assert len(lines) == 7
        assert lines[4] == "⚠ Image appears to be reused from another location"
        assert lines[5] == "Time plausibility: No timestamp provided"
        assert lines[6] == "✓ No spam indicators detected"


class TestSignalBands:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (1.0, "✓ Strong location match in text (3 matches found)"),
            (0.7, "✓ Strong location match in text (3 matches found)"),
            (0.69, "⚠ Moderate location match in text"),
            (0.4, "⚠ Moderate location match in text"),
            (0.39, "✗ Weak or no location match in text"),
        ],
    )
    def test_text_line(self, score, expected):
        details = ExplanationDetails(text_matches=["a", "b", "c"])
        assert lines_for(signals(text=score), details)[2] == expected

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0.9, "✓ Strong image evidence"),
            (0.5, "⚠ Moderate image evidence"),
            (0.15, "✗ Weak or no image evidence"),
        ],
    )
    def test_image_line(self, score, expected):
        assert lines_for(signals(image=score))[3] == expected

    def test_no_duplicate_line_by_default(self):
        lines = lines_for(signals())
        assert not any("reused" in line for line in lines)


class TestSpamLine:
    def test_high_risk_lists_all_reasons(self):
        details = ExplanationDetails(
            spam_reasons=["Text appears 1 time(s) before", "Burst submission pattern detected"]
        )
        line = lines_for(signals(spam=0.9), details)[-1]

        assert line == (
            "⚠ Spam indicators detected: Text appears 1 time(s) before, "
            "Burst submission pattern detected"
        )

    def test_minor_risk_quotes_first_reason(self):
        details = ExplanationDetails(spam_reasons=["Excessive hashtags detected (11, maximum 10 allowed)"])
        line = lines_for(signals(spam=0.2), details)[-1]

        assert line == "Minor spam indicators: Excessive hashtags detected (11, maximum 10 allowed)"

    def test_boundary_is_minor(self):
        details = ExplanationDetails(spam_reasons=["Multiple URLs detected (4, maximum 3 allowed)"])
        assert lines_for(signals(spam=0.3), details)[-1].startswith("Minor spam indicators")

    def test_no_risk(self):
        assert lines_for(signals(spam=0.0))[-1] == "✓ No spam indicators detected"
