"""Department API response schemas."""

from pydantic import BaseModel

from qms_feedback.domains.department.models import Department


class DepartmentListResponse(BaseModel):
    """Body of ``GET /departments``."""

    departments: list[Department]
