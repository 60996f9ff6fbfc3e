"""Completed service (pending-feedback ticket) model."""

from pydantic import BaseModel, ConfigDict

TICKET_PLACEHOLDER = "N/A"
COUNTER_PLACEHOLDER = "Counter N/A"
SERVICE_PLACEHOLDER = "Service N/A"
DEPARTMENT_PLACEHOLDER = "Department N/A"


class CompletedService(BaseModel):
    """A finished service interaction awaiting a feedback rating.

    Rebuilt on every poll; two polls never share instances.
    """

    model_config = ConfigDict(frozen=True)

    ticket_number: str = TICKET_PLACEHOLDER
    counter_name: str = COUNTER_PLACEHOLDER
    service_name: str = SERVICE_PLACEHOLDER
    department_name: str = DEPARTMENT_PLACEHOLDER
