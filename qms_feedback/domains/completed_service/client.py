"""Completed-service client."""

import logging

from pydantic import ValidationError as PydanticValidationError

from qms_feedback.core.exceptions import (
    HttpStatusError,
    MalformedResponseError,
    ServerRejectionError,
)
from qms_feedback.domains.completed_service.models import CompletedService
from qms_feedback.domains.completed_service.schemas import FeedbackTokensResponse
from qms_feedback.integrations.http import ApiClient, client_errors, decode_json

logger = logging.getLogger(__name__)


class CompletedServiceClient:
    """Fetches tickets a department has completed but not yet had rated."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def fetch_completed_services(self, department_id: int) -> list[CompletedService]:
        """
        Fetch completed services awaiting feedback for a department.

        Args:
            department_id: Department ID

        Returns:
            Fresh list of completed services

        Raises:
            FeedbackClientError: On any failure
        """
        with client_errors(f"fetch_completed_services({department_id})"):
            response = await self._api.get(f"/departments/{department_id}/feedback-tokens")

            if response.status_code != 200:
                raise HttpStatusError(
                    response.status_code,
                    f"Failed to load completed services: {response.status_code}",
                )

            data = decode_json(response)
            if data.get("success") is not True:
                raise ServerRejectionError("Failed to load completed services")

            try:
                payload = FeedbackTokensResponse.model_validate(data)
            except PydanticValidationError as e:
                raise MalformedResponseError(details={"errors": e.errors()}) from e

            services = payload.to_completed_services()
            logger.debug(
                f"Department {department_id}: {len(services)} completed services"
            )
            return services
