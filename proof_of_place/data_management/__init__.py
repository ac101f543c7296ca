"""State and schemas shared by the analyzers and the scoring engine."""

from proof_of_place.data_management.submission_store import (
    SubmissionRecord,
    SubmissionStore,
)

__all__ = ["SubmissionRecord", "SubmissionStore"]
