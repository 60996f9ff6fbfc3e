"""Feedback submission schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qms_feedback.core.exceptions import NoRatingError

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating: int) -> None:
    """Raise ``NoRatingError`` unless the rating is 1-5 (0 means unset)."""
    if not MIN_RATING <= rating <= MAX_RATING:
        raise NoRatingError(rating)


class FeedbackSubmission(BaseModel):
    """Body of ``POST /feedbacks``."""

    rate: int = Field(..., ge=MIN_RATING, le=MAX_RATING, description="Rating from 1-5 stars")
    token_number: str
    comment: str = Field("", description="Optional comment, may be empty")


class FeedbackSubmissionResponse(BaseModel):
    """
    Envelope returned by ``POST /feedbacks``.

    ``success`` is kept as sent; only a literal ``true`` counts as accepted.
    A ``message`` that is not text (numbers aside) is dropped so the caller
    falls back to its default wording.
    """

    model_config = ConfigDict(extra="ignore")

    success: Any = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.success is True

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v):
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None
