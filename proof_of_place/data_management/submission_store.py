"""In-memory indices backing duplicate and burst detection.

Holds the three pieces of mutable state the image and spam analyzers
consult and update on every request:

- Image index: image fingerprint -> set of location keys it was claimed at
- Text index: normalized-text fingerprint -> occurrence count
- Submission history: submitter_id -> most recent submissions (FIFO, capped)

One store is owned by a ScoringEngine and injected into its analyzers.
Every operation takes the store lock, so each index update is atomic. A
caller that reads and later records (the spam analyzer) may interleave
with another request; that bounded miscount is accepted.

The image and text indices have no retention policy and grow for the life
of the process. Only the per-submitter history is bounded.

Usage:
    from proof_of_place.data_management.submission_store import SubmissionStore

    store = SubmissionStore()
    reused = store.observe_image("ab12...", "Madison Square Garden_New York")
    store.record_text("9f3c...")
"""

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Dict, Optional, Set

from proof_of_place.config.scoring_tables import MAX_SUBMISSION_HISTORY
from proof_of_place.utils.logging import get_structured_logger


@dataclass(frozen=True)
class SubmissionRecord:
    """One past submission from a submitter."""

    timestamp: datetime
    text_fingerprint: str


class SubmissionStore:
    """Thread-safe duplicate/history indices for the stateful analyzers.

    Attributes:
        max_history: Per-submitter history cap (oldest entries evicted first)
    """

    def __init__(self, max_history: int = MAX_SUBMISSION_HISTORY) -> None:
        """
        Initialize empty indices.

        Args:
            max_history: Number of submissions retained per submitter
        """
        self.max_history = max_history

        self._image_locations: Dict[str, Set[str]] = {}
        self._text_counts: Dict[str, int] = {}
        self._history: Dict[str, Deque[SubmissionRecord]] = {}

        self._lock = threading.Lock()
        self._logger = get_structured_logger(__name__, component="SubmissionStore")

    # ── Image index ──────────────────────────────────────────────────────

    def observe_image(self, fingerprint: str, location_key: str) -> bool:
        """
        Check an image fingerprint against the index, then record it.

        Args:
            fingerprint: Image content fingerprint
            location_key: Key of the location the image is claimed at

        Returns:
            True if the fingerprint was seen before under a different
            location key. First sightings, and reuse at the same location,
            return False.
        """
        with self._lock:
            known = self._image_locations.setdefault(fingerprint, set())
            reused_elsewhere = bool(known) and location_key not in known
            known.add(location_key)

        if reused_elsewhere:
            self._logger.debug(
                "image_reused",
                fingerprint=fingerprint[:16],
                location_key=location_key,
            )
        return reused_elsewhere

    def image_locations(self, fingerprint: str) -> frozenset[str]:
        """Location keys recorded for a fingerprint (empty if unseen)."""
        with self._lock:
            return frozenset(self._image_locations.get(fingerprint, ()))

    # ── Text index ───────────────────────────────────────────────────────

    def text_occurrences(self, fingerprint: str) -> int:
        """Number of times a text fingerprint has been recorded."""
        with self._lock:
            return self._text_counts.get(fingerprint, 0)

    def record_text(self, fingerprint: str) -> int:
        """
        Increment the occurrence count for a text fingerprint.

        Returns:
            The count after incrementing
        """
        with self._lock:
            count = self._text_counts.get(fingerprint, 0) + 1
            self._text_counts[fingerprint] = count
        self._logger.debug("text_recorded", fingerprint=fingerprint[:16], occurrences=count)
        return count

    # ── Submission history ───────────────────────────────────────────────

    def count_recent(
        self,
        submitter_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> int:
        """
        Count a submitter's recorded submissions inside a time window.

        Args:
            submitter_id: Submitter handle
            window_start: Exclusive lower bound
            window_end: Inclusive upper bound

        Returns:
            Number of records with window_start < timestamp <= window_end
        """
        with self._lock:
            history = self._history.get(submitter_id)
            if not history:
                return 0
            return sum(
                1 for record in history
                if window_start < record.timestamp <= window_end
            )

    def record_submission(
        self,
        submitter_id: str,
        timestamp: datetime,
        text_fingerprint: str,
    ) -> None:
        """Append a submission to the submitter's history, evicting the oldest past the cap."""
        with self._lock:
            history = self._history.get(submitter_id)
            if history is None:
                history = deque(maxlen=self.max_history)
                self._history[submitter_id] = history
            history.append(SubmissionRecord(timestamp=timestamp, text_fingerprint=text_fingerprint))
            size = len(history)

        self._logger.debug("submission_recorded", submitter_id=submitter_id, history_size=size)

    def history(self, submitter_id: str) -> list[SubmissionRecord]:
        """Snapshot of a submitter's retained history, oldest first."""
        with self._lock:
            return list(self._history.get(submitter_id, ()))

    # ── Maintenance ──────────────────────────────────────────────────────

    def stats(self) -> Dict[str, int]:
        """Sizes of the three indices."""
        with self._lock:
            return {
                "image_fingerprints": len(self._image_locations),
                "text_fingerprints": len(self._text_counts),
                "submitters": len(self._history),
                "history_records": sum(len(h) for h in self._history.values()),
            }

    def reset(self, submitter_id: Optional[str] = None) -> None:
        """
        Clear indices. Not used during normal scoring.

        Args:
            submitter_id: Clear only this submitter's history. None clears everything.
        """
        with self._lock:
            if submitter_id is not None:
                self._history.pop(submitter_id, None)
            else:
                self._image_locations.clear()
                self._text_counts.clear()
                self._history.clear()
        self._logger.info("store_reset", submitter_id=submitter_id)


__all__ = ["SubmissionStore", "SubmissionRecord"]
