"""Application state controller - mediates between the display layer and the API clients."""

import asyncio
import logging
from dataclasses import replace

from qms_feedback.controller.display import DisplayLayer
from qms_feedback.controller.state import (
    ControllerPhase,
    ControllerState,
    SubmissionResult,
)
from qms_feedback.core.config import Settings
from qms_feedback.core.exceptions import (
    DuplicateSubmissionError,
    FeedbackClientError,
    ValidationError,
)
from qms_feedback.domains.completed_service.client import CompletedServiceClient
from qms_feedback.domains.completed_service.models import CompletedService
from qms_feedback.domains.completed_service.poller import CompletedServicePoller
from qms_feedback.domains.department.client import DepartmentClient
from qms_feedback.domains.department.models import Department
from qms_feedback.domains.feedback.client import FeedbackClient
from qms_feedback.domains.feedback.schemas import validate_rating

logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT_MESSAGE = "Thank you for your feedback!"


class ApplicationStateController:
    """
    Owns the selected department, cached lists and in-flight flags.

    Every transition replaces the ``ControllerState`` snapshot and pushes it to
    the display layer. Must be driven from a running event loop.
    """

    def __init__(
        self,
        display: DisplayLayer,
        department_client: DepartmentClient,
        service_client: CompletedServiceClient,
        feedback_client: FeedbackClient,
        settings: Settings,
    ):
        self._display = display
        self._departments = department_client
        self._services = service_client
        self._feedback = feedback_client
        self._settings = settings

        self._state = ControllerState()
        self._poller: CompletedServicePoller | None = None
        self._ack_handle: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def poller(self) -> CompletedServicePoller | None:
        return self._poller

    @property
    def closed(self) -> bool:
        return self._closed

    # ============================================================
    # Directory
    # ============================================================

    async def load_departments(self) -> bool:
        """
        Fetch the department directory. Also serves as the retry action.

        Returns:
            True if the directory was loaded
        """
        if self._closed or self._state.directory_loading:
            return False

        self._update(
            phase=self._directory_phase(ControllerPhase.DIRECTORY_LOADING),
            directory_loading=True,
            directory_error=None,
        )

        try:
            departments = await self._departments.fetch_departments()
        except FeedbackClientError as e:
            self._update(
                phase=self._directory_phase(ControllerPhase.DIRECTORY_ERROR),
                directory_loading=False,
                directory_error=e,
                departments=None,
            )
            return False

        self._update(
            phase=self._directory_phase(ControllerPhase.DIRECTORY_READY),
            directory_loading=False,
            departments=tuple(departments),
        )
        return True

    def _directory_phase(self, phase: ControllerPhase) -> ControllerPhase:
        # Directory reloads don't disturb an open department view
        if self._state.selected_department is not None:
            return self._state.phase
        return phase

    # ============================================================
    # Department view
    # ============================================================

    def select_department(self, department: Department) -> None:
        """Enter a department view and start polling its completed services."""
        if self._closed:
            raise RuntimeError("Controller is closed")

        self._stop_poller()
        self._update(
            phase=ControllerPhase.SERVICE_LOADING,
            selected_department=department,
            services=(),
            services_error=None,
            services_loading=False,
        )

        self._poller = CompletedServicePoller(
            client=self._services,
            department_id=department.id,
            interval=self._settings.poll_interval_seconds,
            on_result=self._on_services_loaded,
            on_error=self._on_services_failed,
            on_fetch_start=self._on_services_loading,
        )
        self._poller.start()

    def leave_department(self) -> None:
        """Exit the department view; the poll timer is cancelled."""
        self._stop_poller()
        self._cancel_acknowledgement()
        if self._closed:
            return

        self._update(
            phase=(
                ControllerPhase.DIRECTORY_READY
                if self._state.departments is not None
                else ControllerPhase.IDLE
            ),
            selected_department=None,
            services=(),
            services_error=None,
            services_loading=False,
            acknowledgement_visible=False,
        )

    def refresh(self) -> bool:
        """
        Manual refresh of the completed-service list.

        Returns:
            True if a fetch was started, False if skipped
        """
        if self._poller is None:
            return False
        return self._poller.trigger() is not None

    def _on_services_loading(self) -> None:
        self._update(
            phase=self._service_phase(ControllerPhase.SERVICE_LOADING),
            services_loading=True,
        )

    def _on_services_loaded(self, services: list[CompletedService]) -> None:
        self._update(
            phase=self._service_phase(ControllerPhase.SERVICE_READY),
            services=tuple(services),
            services_error=None,
            services_loading=False,
        )

    def _on_services_failed(self, error: FeedbackClientError) -> None:
        # No partial list on failure
        self._update(
            phase=self._service_phase(ControllerPhase.SERVICE_ERROR),
            services=(),
            services_error=error,
            services_loading=False,
        )

    def _service_phase(self, phase: ControllerPhase) -> ControllerPhase:
        if self._state.submitting:
            return ControllerPhase.SUBMISSION_IN_FLIGHT
        return phase

    def _stop_poller(self) -> None:
        if self._poller is not None:
            self._poller.stop()
            self._poller = None

    # ============================================================
    # Feedback
    # ============================================================

    async def submit_feedback(
        self,
        ticket_number: str,
        rating: int,
        comment: str = "",
    ) -> SubmissionResult:
        """
        Submit feedback for a ticket and apply the outcome to the display.

        Recoverable failures (connectivity, timeout, missing rating, duplicate
        submit) keep the feedback form open; anything else closes it.
        """
        if self._closed:
            raise RuntimeError("Controller is closed")

        try:
            validate_rating(rating)
            if ticket_number in self._state.submitting_tickets:
                raise DuplicateSubmissionError(ticket_number)
        except ValidationError as e:
            logger.info(f"Submission for ticket {ticket_number} refused: {e.message}")
            self._display.show_notification(e.message)
            return SubmissionResult(accepted=False, error=e, keep_open=True)

        self._update(
            phase=ControllerPhase.SUBMISSION_IN_FLIGHT,
            submitting_tickets=self._state.submitting_tickets | {ticket_number},
        )
        # The department view that owns the feedback form
        origin = self._poller

        try:
            await self._feedback.submit_feedback(ticket_number, rating, comment)
        except FeedbackClientError as e:
            result = SubmissionResult(accepted=False, error=e, keep_open=e.recoverable)
            if self._view_is_current(origin):
                self._finish_submission(ticket_number, ControllerPhase.SUBMISSION_FAILED)
                self._display.show_notification(e.message)
                if not result.keep_open:
                    self._display.close_submission_surface()
        else:
            result = SubmissionResult(accepted=True)
            if self._view_is_current(origin):
                self._finish_submission(
                    ticket_number,
                    ControllerPhase.SUBMISSION_ACCEPTED,
                    acknowledgement_visible=True,
                )
                self._display.close_submission_surface()
                self._display.show_acknowledgement(ACKNOWLEDGEMENT_MESSAGE)
                self._schedule_acknowledgement_dismissal()
        finally:
            if ticket_number in self._state.submitting_tickets:
                if self._view_is_current(origin):
                    self._finish_submission(ticket_number, ControllerPhase.SUBMISSION_FAILED)
                else:
                    self._release_ticket(ticket_number)

        if not self._view_is_current(origin):
            logger.info(f"Submission for ticket {ticket_number} finished after its view was left")
            return result

        # No-op while a poll is already outstanding
        self.refresh()
        return result

    def _view_is_current(self, origin: CompletedServicePoller | None) -> bool:
        return not self._closed and self._poller is origin

    def _release_ticket(self, ticket_number: str) -> None:
        # The phase belongs to whatever view is showing now
        remaining = self._state.submitting_tickets - {ticket_number}
        phase = self._state.phase
        if phase == ControllerPhase.SUBMISSION_IN_FLIGHT and not remaining:
            phase = self._resting_service_phase()
        self._update(phase=phase, submitting_tickets=remaining)

    def _resting_service_phase(self) -> ControllerPhase:
        if self._state.services_loading:
            return ControllerPhase.SERVICE_LOADING
        if self._state.services_error is not None:
            return ControllerPhase.SERVICE_ERROR
        return ControllerPhase.SERVICE_READY

    def _finish_submission(
        self,
        ticket_number: str,
        phase: ControllerPhase,
        **changes,
    ) -> None:
        self._update(
            phase=phase,
            submitting_tickets=self._state.submitting_tickets - {ticket_number},
            **changes,
        )

    def _schedule_acknowledgement_dismissal(self) -> None:
        self._cancel_acknowledgement()
        loop = asyncio.get_running_loop()
        self._ack_handle = loop.call_later(
            self._settings.acknowledgement_seconds,
            self._dismiss_acknowledgement,
        )

    def _dismiss_acknowledgement(self) -> None:
        self._ack_handle = None
        # The view may have been torn down while the timer was pending
        if self._closed or not self._state.acknowledgement_visible:
            return
        self._update(acknowledgement_visible=False)
        self._display.dismiss_acknowledgement()

    def _cancel_acknowledgement(self) -> None:
        if self._ack_handle is not None:
            self._ack_handle.cancel()
            self._ack_handle = None

    # ============================================================
    # Lifecycle
    # ============================================================

    async def close(self) -> None:
        """Tear down: stop polling and drop pending timers. Idempotent."""
        if self._closed:
            return

        self._closed = True
        poller = self._poller
        self._stop_poller()
        self._cancel_acknowledgement()
        if poller is not None:
            await poller.wait_closed()
        logger.debug("Controller closed")

    def _update(self, **changes) -> None:
        if self._closed:
            return
        self._state = replace(self._state, **changes)
        self._display.render(self._state)
