"""Controller state snapshot."""

from dataclasses import dataclass, field
from enum import Enum

from qms_feedback.core.exceptions import FeedbackClientError
from qms_feedback.domains.completed_service.models import CompletedService
from qms_feedback.domains.department.models import Department


class ControllerPhase(str, Enum):
    """Most recent transition of the controller."""

    IDLE = "idle"
    DIRECTORY_LOADING = "directory_loading"
    DIRECTORY_READY = "directory_ready"
    DIRECTORY_ERROR = "directory_error"
    SERVICE_LOADING = "service_loading"
    SERVICE_READY = "service_ready"
    SERVICE_ERROR = "service_error"
    SUBMISSION_IN_FLIGHT = "submission_in_flight"
    SUBMISSION_ACCEPTED = "submission_accepted"
    SUBMISSION_FAILED = "submission_failed"


@dataclass(frozen=True)
class ControllerState:
    """Immutable snapshot; the controller swaps in a new one per transition."""

    phase: ControllerPhase = ControllerPhase.IDLE

    # Directory
    departments: tuple[Department, ...] | None = None
    directory_error: FeedbackClientError | None = None
    directory_loading: bool = False

    # Selected department view
    selected_department: Department | None = None
    services: tuple[CompletedService, ...] = ()
    services_error: FeedbackClientError | None = None
    services_loading: bool = False

    # Submission
    submitting_tickets: frozenset[str] = field(default_factory=frozenset)
    acknowledgement_visible: bool = False

    @property
    def submitting(self) -> bool:
        return bool(self.submitting_tickets)

    @property
    def can_refresh(self) -> bool:
        """Whether the manual refresh control is enabled."""
        return self.selected_department is not None and not self.services_loading


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one feedback submission."""

    accepted: bool
    error: FeedbackClientError | None = None
    keep_open: bool = False  # whether the feedback form stays open for a retry
