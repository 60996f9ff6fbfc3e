"""Feedback submission domain."""

from qms_feedback.domains.feedback.client import FeedbackClient
from qms_feedback.domains.feedback.schemas import (
    FeedbackSubmission,
    FeedbackSubmissionResponse,
)

__all__ = [
    "FeedbackClient",
    "FeedbackSubmission",
    "FeedbackSubmissionResponse",
]
