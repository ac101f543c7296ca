"""Spam and gaming detection for location-tagged posts.

Applied as a multiplicative penalty on the final score (up to 10%), not as
a positive signal. Risk accumulates from independent checks, capped at 1.0:

| Check        | Trigger                                        | Risk      |
|--------------|------------------------------------------------|-----------|
| Duplicate    | normalized text seen before                    | +0.4      |
| Short text   | fewer than 10 characters                       | +0.2      |
| Hashtags     | more than 10 #tags                             | +0.2      |
| URLs         | more than 3 links                              | +0.3      |
| Burst        | >= 5 / >= 3 prior posts by submitter in 5 min  | +0.5/+0.3 |
| Copy-paste   | a 5-word phrase repeated >= 3 / >= 2 times     | +0.4/+0.2 |

Every analyzed submission is recorded, whatever its risk, so repeat
offenders accumulate history.
"""

import hashlib
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from loguru import logger

from proof_of_place.config.scoring_tables import (
    SPAM_BURST_HIGH_RISK,
    SPAM_BURST_HIGH_THRESHOLD,
    SPAM_BURST_MEDIUM_RISK,
    SPAM_BURST_MEDIUM_THRESHOLD,
    SPAM_BURST_WINDOW_SECONDS,
    SPAM_DUPLICATE_RISK,
    SPAM_HASHTAG_RISK,
    SPAM_MAX_HASHTAGS,
    SPAM_MAX_URLS,
    SPAM_SHINGLE_HIGH_REPEAT,
    SPAM_SHINGLE_HIGH_RISK,
    SPAM_SHINGLE_MEDIUM_REPEAT,
    SPAM_SHINGLE_MEDIUM_RISK,
    SPAM_SHINGLE_SIZE,
    SPAM_SHORT_TEXT_LENGTH,
    SPAM_SHORT_TEXT_RISK,
    SPAM_URL_RISK,
)
from proof_of_place.data_management.submission_store import SubmissionStore
from proof_of_place.utils.timestamps import ensure_aware

_HASHTAG_PATTERN = re.compile(r"#\w+")
_URL_PATTERN = re.compile(r"https?://\S+")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")

NO_SPAM_REASON = "No spam indicators"


@dataclass
class SpamAnalysisResult:
    """Result of spam analysis.

    Attributes:
        risk: Accumulated spam risk (0.0-1.0)
        reasons: One entry per triggered check, or ["No spam indicators"]
    """

    risk: float
    reasons: List[str] = field(default_factory=list)


def normalize_text(text: str) -> str:
    """Lower-case, trim, collapse whitespace and drop punctuation."""
    collapsed = _WHITESPACE_PATTERN.sub(" ", text.lower().strip())
    return _PUNCTUATION_PATTERN.sub("", collapsed)


def text_fingerprint(text: str) -> str:
    """SHA256 of the normalized text; equal for trivially reworded reposts."""
    return hashlib.sha256(normalize_text(text).encode("utf-8")).hexdigest()


class SpamAnalyzer:
    """
    Detects spam and gaming patterns and records submissions.

    Usage:
        analyzer = SpamAnalyzer(store=SubmissionStore())
        result = analyzer.analyze(text, submitter_id="user-1", timestamp=post_time)

    Attributes:
        store: Shared submission store (text index and submitter history)
        burst_window: Trailing window for burst detection
    """

    def __init__(
        self,
        store: Optional[SubmissionStore] = None,
        burst_window_seconds: int = SPAM_BURST_WINDOW_SECONDS,
    ):
        self.store = store if store is not None else SubmissionStore()
        self.burst_window = timedelta(seconds=burst_window_seconds)
        self.logger = logger.bind(component="SpamAnalyzer")

    def analyze(
        self,
        text: str,
        submitter_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> SpamAnalysisResult:
        """
        Analyze content for spam/gaming patterns, then record the submission.

        Args:
            text: Post text
            submitter_id: Optional submitter handle (enables burst detection)
            timestamp: Post time (burst detection and history need it)

        Returns:
            SpamAnalysisResult with capped risk and reasons
        """
        reasons: List[str] = []
        risk = 0.0
        fingerprint = text_fingerprint(text)
        post_time = ensure_aware(timestamp) if timestamp is not None else None

        prior_count = self.store.text_occurrences(fingerprint)
        if prior_count > 0:
            risk += SPAM_DUPLICATE_RISK
            reasons.append(f"Text appears {prior_count} time(s) before")

        if len(text) < SPAM_SHORT_TEXT_LENGTH:
            risk += SPAM_SHORT_TEXT_RISK
            reasons.append(
                f"Text is very short ({len(text)} characters, "
                f"minimum {SPAM_SHORT_TEXT_LENGTH} expected)"
            )

        hashtag_count = len(_HASHTAG_PATTERN.findall(text))
        if hashtag_count > SPAM_MAX_HASHTAGS:
            risk += SPAM_HASHTAG_RISK
            reasons.append(
                f"Excessive hashtags detected ({hashtag_count}, "
                f"maximum {SPAM_MAX_HASHTAGS} allowed)"
            )

        url_count = len(_URL_PATTERN.findall(text))
        if url_count > SPAM_MAX_URLS:
            risk += SPAM_URL_RISK
            reasons.append(
                f"Multiple URLs detected ({url_count}, maximum {SPAM_MAX_URLS} allowed)"
            )

        if submitter_id and post_time is not None:
            burst_risk = self.burst_risk(submitter_id, post_time)
            if burst_risk > 0:
                risk += burst_risk
                reasons.append("Burst submission pattern detected")

        copy_paste_risk = self.copy_paste_risk(text)
        if copy_paste_risk > 0:
            risk += copy_paste_risk
            reasons.append("Copy-paste pattern detected")

        risk = min(1.0, risk)

        self._record(fingerprint, submitter_id, post_time)

        if reasons:
            self.logger.debug(f"Spam risk: {risk:.2f}", reasons=reasons)

        return SpamAnalysisResult(
            risk=risk,
            reasons=reasons or [NO_SPAM_REASON],
        )

    def burst_risk(self, submitter_id: str, timestamp: datetime) -> float:
        """
        Risk from the submitter's prior posts in the trailing window.

        Args:
            submitter_id: Submitter handle
            timestamp: Current post time (window end, inclusive)

        Returns:
            0.5 for >= 5 prior posts, 0.3 for >= 3, else 0.0
        """
        recent = self.store.count_recent(
            submitter_id,
            window_start=timestamp - self.burst_window,
            window_end=timestamp,
        )

        if recent >= SPAM_BURST_HIGH_THRESHOLD:
            return SPAM_BURST_HIGH_RISK
        if recent >= SPAM_BURST_MEDIUM_THRESHOLD:
            return SPAM_BURST_MEDIUM_RISK
        return 0.0

    def copy_paste_risk(self, text: str) -> float:
        """
        Risk from repeated 5-word phrases within one post.

        Posts shorter than two shingles cannot repeat one and score 0.0.
        """
        words = text.lower().split()
        if len(words) < SPAM_SHINGLE_SIZE * 2:
            return 0.0

        shingles = Counter(
            " ".join(words[i:i + SPAM_SHINGLE_SIZE])
            for i in range(len(words) - SPAM_SHINGLE_SIZE + 1)
        )
        max_repeat = max(shingles.values())

        if max_repeat >= SPAM_SHINGLE_HIGH_REPEAT:
            return SPAM_SHINGLE_HIGH_RISK
        if max_repeat >= SPAM_SHINGLE_MEDIUM_REPEAT:
            return SPAM_SHINGLE_MEDIUM_RISK
        return 0.0

    def _record(
        self,
        fingerprint: str,
        submitter_id: Optional[str],
        timestamp: Optional[datetime],
    ) -> None:
        self.store.record_text(fingerprint)
        if submitter_id and timestamp is not None:
            self.store.record_submission(submitter_id, timestamp, fingerprint)


__all__ = ["SpamAnalyzer", "SpamAnalysisResult", "normalize_text", "text_fingerprint"]
