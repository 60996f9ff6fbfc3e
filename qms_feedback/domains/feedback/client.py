"""Feedback submission client."""

import logging

from pydantic import ValidationError as PydanticValidationError

from qms_feedback.core.exceptions import (
    HttpStatusError,
    MalformedResponseError,
    ServerRejectionError,
)
from qms_feedback.domains.feedback.schemas import (
    FeedbackSubmission,
    FeedbackSubmissionResponse,
    validate_rating,
)
from qms_feedback.integrations.http import ApiClient, client_errors, decode_json

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to submit feedback"


class FeedbackClient:
    """Posts a rating and comment for one ticket. Single attempt, no retry."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def submit_feedback(
        self,
        ticket_number: str,
        rating: int,
        comment: str = "",
    ) -> FeedbackSubmissionResponse:
        """
        Submit feedback for a completed service.

        Args:
            ticket_number: Ticket the feedback is for
            rating: 1-5 stars; 0 means no rating was selected
            comment: Optional free-text comment

        Returns:
            The accepted response envelope

        Raises:
            NoRatingError: If the rating is unset or out of range (no request is sent)
            FeedbackClientError: On any transport or server failure
        """
        validate_rating(rating)

        submission = FeedbackSubmission(
            rate=rating,
            token_number=ticket_number,
            comment=comment or "",
        )

        with client_errors(f"submit_feedback({ticket_number})"):
            logger.info(f"Submitting feedback for ticket {ticket_number}: {rating}/5")
            response = await self._api.post_json("/feedbacks", submission.model_dump())

            if response.status_code not in (200, 201):
                logger.debug(f"Feedback rejected with body: {response.text}")
                raise HttpStatusError(
                    response.status_code,
                    f"{DEFAULT_FAILURE_MESSAGE}: {response.status_code}",
                )

            data = decode_json(response)
            try:
                result = FeedbackSubmissionResponse.model_validate(data)
            except PydanticValidationError as e:
                raise MalformedResponseError(details={"errors": e.errors()}) from e

            if not result.accepted:
                raise ServerRejectionError(result.message or DEFAULT_FAILURE_MESSAGE)

            logger.info(f"Feedback accepted for ticket {ticket_number}")
            return result
