"""Department directory client."""

import logging

from pydantic import ValidationError as PydanticValidationError

from qms_feedback.core.exceptions import HttpStatusError, MalformedResponseError
from qms_feedback.domains.department.models import Department
from qms_feedback.domains.department.schemas import DepartmentListResponse
from qms_feedback.integrations.http import ApiClient, client_errors, decode_json

logger = logging.getLogger(__name__)

STATUS_MESSAGES: dict[int, str] = {
    400: "Bad request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Department not found",
    500: "Internal server error",
    503: "Service unavailable",
}


def department_status_message(status_code: int) -> str:
    """Human-readable reason for a failed directory request."""
    return STATUS_MESSAGES.get(
        status_code,
        f"Failed to load departments (Status code: {status_code})",
    )


class DepartmentClient:
    """Fetches the list of selectable departments."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def fetch_departments(self) -> list[Department]:
        """
        Fetch all departments.

        Returns:
            Departments in the order the API lists them

        Raises:
            FeedbackClientError: On any failure; there is no internal retry
        """
        with client_errors("fetch_departments"):
            response = await self._api.get("/departments")

            if response.status_code != 200:
                raise HttpStatusError(
                    response.status_code,
                    department_status_message(response.status_code),
                )

            data = decode_json(response)
            try:
                payload = DepartmentListResponse.model_validate(data)
            except PydanticValidationError as e:
                raise MalformedResponseError(details={"errors": e.errors()}) from e

            logger.debug(f"Loaded {len(payload.departments)} departments")
            return payload.departments
