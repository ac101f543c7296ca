"""Tests for SpamAnalyzer.

Tests cover:
- Clean text and the "No spam indicators" reason
- Duplicate text (including trivially reworded reposts)
- Short text, excessive hashtags and URLs
- Burst detection from submitter history
- Copy-paste (repeated 5-word phrase) detection
- Risk cap and submission recording
"""

from datetime import datetime, timedelta, timezone

import pytest

from proof_of_place.analyzers.spam_analyzer import (
    NO_SPAM_REASON,
    SpamAnalysisResult,
    SpamAnalyzer,
    normalize_text,
    text_fingerprint,
)
from proof_of_place.data_management.submission_store import SubmissionStore

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
CLEAN = "Amazing concert at Madison Square Garden tonight"


@pytest.fixture
def store() -> SubmissionStore:
    return SubmissionStore()


@pytest.fixture
def analyzer(store) -> SpamAnalyzer:
    return SpamAnalyzer(store=store)


def seed_history(store: SubmissionStore, submitter: str, offsets_seconds) -> None:
    """Record prior submissions at NOW minus each offset."""
    for i, offset in enumerate(offsets_seconds):
        store.record_submission(submitter, NOW - timedelta(seconds=offset), f"prior-{i}")


class TestNormalization:
    """Tests for normalize_text and text_fingerprint."""

    def test_normalize(self):
        assert normalize_text("  Great   PLACE!!  ") == "great place"

    def test_reworded_repost_shares_fingerprint(self):
        assert text_fingerprint("Great place!") == text_fingerprint("great   place")

    def test_different_text_differs(self):
        assert text_fingerprint("Great place") != text_fingerprint("Great spot")


class TestContentChecks:
    """Tests for the stateless content checks."""

    def test_clean_text(self, analyzer):
        result = analyzer.analyze(CLEAN)

        assert isinstance(result, SpamAnalysisResult)
        assert result.risk == 0.0
        assert result.reasons == [NO_SPAM_REASON]

    def test_short_text(self, analyzer):
        result = analyzer.analyze("Nice spot")

        assert result.risk == pytest.approx(0.2)
        assert result.reasons == ["Text is very short (9 characters, minimum 10 expected)"]

    def test_ten_characters_is_not_short(self, analyzer):
        assert analyzer.analyze("Nice spot!").risk == 0.0

    def test_excessive_hashtags(self, analyzer):
        text = " ".join(f"#tag{i}" for i in range(11))
        result = analyzer.analyze(text)

        assert result.risk == pytest.approx(0.2)
        assert result.reasons == ["Excessive hashtags detected (11, maximum 10 allowed)"]

    def test_ten_hashtags_allowed(self, analyzer):
        text = " ".join(f"#tag{i}" for i in range(10))
        assert analyzer.analyze(text).risk == 0.0

    def test_multiple_urls(self, analyzer):
        text = "see https://a.example http://b.example https://c.example http://d.example"
        result = analyzer.analyze(text)

        assert result.risk == pytest.approx(0.3)
        assert result.reasons == ["Multiple URLs detected (4, maximum 3 allowed)"]

    def test_three_urls_allowed(self, analyzer):
        text = "see https://a.example http://b.example https://c.example"
        assert analyzer.analyze(text).risk == 0.0


class TestDuplicateText:
    """Tests for the text occurrence index."""

    def test_second_submission_is_duplicate(self, analyzer):
        analyzer.analyze(CLEAN)
        result = analyzer.analyze(CLEAN)

        assert result.risk == pytest.approx(0.4)
        assert result.reasons == ["Text appears 1 time(s) before"]

    def test_reworded_duplicate(self, analyzer):
        analyzer.analyze(CLEAN)
        result = analyzer.analyze("  AMAZING concert at Madison Square Garden tonight!!! ")

        assert result.risk == pytest.approx(0.4)

    def test_count_grows(self, analyzer):
        for _ in range(3):
            analyzer.analyze(CLEAN)

        result = analyzer.analyze(CLEAN)
        assert result.reasons == ["Text appears 3 time(s) before"]

    def test_duplicate_plus_short(self, analyzer):
        analyzer.analyze("Nice spot")
        result = analyzer.analyze("Nice spot")

        assert result.risk == pytest.approx(0.6)
        assert len(result.reasons) == 2

    def test_great_place_repeat(self, analyzer):
        """Twelve characters is long enough; only the duplicate check fires."""
        analyzer.analyze("Great place!")
        result = analyzer.analyze("Great place!")

        assert result.risk == pytest.approx(0.4)


class TestBurstDetection:
    """Tests for burst detection from submitter history."""

    def test_five_prior_posts(self, analyzer, store):
        seed_history(store, "user-1", [10, 30, 60, 120, 240])

        result = analyzer.analyze(CLEAN, submitter_id="user-1", timestamp=NOW)

        assert result.risk == pytest.approx(0.5)
        assert "Burst submission pattern detected" in result.reasons

    def test_three_prior_posts(self, analyzer, store):
        seed_history(store, "user-1", [10, 60, 200])

        result = analyzer.analyze(CLEAN, submitter_id="user-1", timestamp=NOW)

        assert result.risk == pytest.approx(0.3)

    def test_two_prior_posts(self, analyzer, store):
        seed_history(store, "user-1", [10, 60])

        result = analyzer.analyze(CLEAN, submitter_id="user-1", timestamp=NOW)

        assert result.risk == 0.0

    def test_posts_outside_window_ignored(self, analyzer, store):
        """The window start is exclusive: a post exactly 5 minutes old is out."""
        seed_history(store, "user-1", [300, 301, 600, 3600, 10])

        assert analyzer.burst_risk("user-1", NOW) == 0.0

    def test_later_posts_ignored(self, analyzer, store):
        seed_history(store, "user-1", [-10, -20, -30])

        assert analyzer.burst_risk("user-1", NOW) == 0.0

    def test_other_submitters_ignored(self, analyzer, store):
        seed_history(store, "user-2", [10, 20, 30, 40, 50])

        assert analyzer.burst_risk("user-1", NOW) == 0.0

    def test_no_timestamp_skips_burst(self, analyzer, store):
        seed_history(store, "user-1", [10, 20, 30, 40, 50])

        result = analyzer.analyze(CLEAN, submitter_id="user-1", timestamp=None)

        assert result.risk == 0.0

    def test_naive_timestamp(self, analyzer, store):
        seed_history(store, "user-1", [10, 20, 30])

        result = analyzer.analyze(
            CLEAN, submitter_id="user-1", timestamp=NOW.replace(tzinfo=None)
        )

        assert result.risk == pytest.approx(0.3)

    def test_consecutive_posts_build_burst(self, analyzer):
        for i in range(3):
            analyzer.analyze(
                f"Post number {i} from the arena tonight",
                submitter_id="user-1",
                timestamp=NOW + timedelta(seconds=i * 10),
            )

        result = analyzer.analyze(
            "Post number 3 from the arena tonight",
            submitter_id="user-1",
            timestamp=NOW + timedelta(seconds=30),
        )

        assert result.reasons == ["Burst submission pattern detected"]


class TestCopyPaste:
    """Tests for repeated 5-word phrases."""

    def test_three_repeats(self, analyzer):
        result = analyzer.analyze("buy cheap tickets now today " * 3)

        assert result.risk == pytest.approx(0.4)
        assert result.reasons == ["Copy-paste pattern detected"]

    def test_two_repeats(self, analyzer):
        assert analyzer.copy_paste_risk("buy cheap tickets now today " * 2) == pytest.approx(0.2)

    def test_short_posts_never_repeat(self, analyzer):
        assert analyzer.copy_paste_risk("one two three four five six seven eight nine") == 0.0

    def test_case_insensitive(self, analyzer):
        text = "Buy Cheap Tickets Now Today buy cheap tickets now today"
        assert analyzer.copy_paste_risk(text) == pytest.approx(0.2)

    def test_varied_text(self, analyzer):
        text = "the crowd went wild when the band came back for a second encore"
        assert analyzer.copy_paste_risk(text) == 0.0


class TestRiskCapAndRecording:
    """Tests for the 1.0 cap and the always-record rule."""

    def test_risk_capped(self, analyzer, store):
        text = (
            " ".join(f"#tag{i}" for i in range(11))
            + " https://a.example https://b.example https://c.example https://d.example"
        )
        store.record_text(text_fingerprint(text))
        seed_history(store, "user-1", [10, 20, 30, 40, 50])

        result = analyzer.analyze(text, submitter_id="user-1", timestamp=NOW)

        assert result.risk == 1.0
        assert len(result.reasons) == 4

    def test_every_submission_recorded(self, analyzer, store):
        analyzer.analyze("buy cheap tickets now today " * 3)

        assert store.text_occurrences(text_fingerprint("buy cheap tickets now today " * 3)) == 1

    def test_history_needs_submitter_and_timestamp(self, analyzer, store):
        analyzer.analyze(CLEAN, submitter_id="user-1")
        analyzer.analyze(CLEAN, timestamp=NOW)
        assert store.history("user-1") == []

        analyzer.analyze(CLEAN, submitter_id="user-1", timestamp=NOW)
        history = store.history("user-1")
        assert len(history) == 1
        assert history[0].text_fingerprint == text_fingerprint(CLEAN)

    def test_history_capped(self):
        store = SubmissionStore(max_history=5)
        analyzer = SpamAnalyzer(store=store)

        for i in range(8):
            analyzer.analyze(
                f"Unique post {i} about the game",
                submitter_id="user-1",
                timestamp=NOW - timedelta(hours=8 - i),
            )

        history = store.history("user-1")
        assert len(history) == 5
        assert history[0].timestamp == NOW - timedelta(hours=5)
