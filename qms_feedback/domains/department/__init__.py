"""Department directory domain."""

from qms_feedback.domains.department.client import (
    DepartmentClient,
    department_status_message,
)
from qms_feedback.domains.department.models import Department

__all__ = [
    "Department",
    "DepartmentClient",
    "department_status_message",
]
