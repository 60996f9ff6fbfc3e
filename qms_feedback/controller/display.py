"""Display layer interface."""

import logging
from abc import ABC, abstractmethod

from qms_feedback.controller.state import ControllerState

logger = logging.getLogger(__name__)


class DisplayLayer(ABC):
    """Abstract presentation surface driven by the controller.

    Implementations render state and surface transient events; they never
    call the API clients directly.
    """

    @abstractmethod
    def render(self, state: ControllerState) -> None:
        """Render a new state snapshot."""
        pass

    @abstractmethod
    def show_notification(self, message: str) -> None:
        """Show a transient, non-blocking notification."""
        pass

    @abstractmethod
    def close_submission_surface(self) -> None:
        """Close the active feedback form."""
        pass

    @abstractmethod
    def show_acknowledgement(self, message: str) -> None:
        """Show the post-submit acknowledgement."""
        pass

    @abstractmethod
    def dismiss_acknowledgement(self) -> None:
        """Hide the post-submit acknowledgement."""
        pass


class LoggingDisplay(DisplayLayer):
    """Display layer that writes every event to the log."""

    def render(self, state: ControllerState) -> None:
        if state.selected_department is None:
            count = len(state.departments) if state.departments is not None else 0
            logger.info(f"[{state.phase.value}] {count} departments")
        else:
            logger.info(
                f"[{state.phase.value}] {state.selected_department.name}: "
                f"{len(state.services)} completed services"
            )
        for service in state.services:
            logger.info(
                f"  {service.ticket_number} | {service.counter_name} | "
                f"{service.department_name} => {service.service_name}"
            )
        error = state.directory_error or state.services_error
        if error is not None:
            logger.warning(f"  Error: {error.message}")

    def show_notification(self, message: str) -> None:
        logger.warning(message)

    def close_submission_surface(self) -> None:
        logger.debug("Feedback form closed")

    def show_acknowledgement(self, message: str) -> None:
        logger.info(message)

    def dismiss_acknowledgement(self) -> None:
        logger.debug("Acknowledgement dismissed")
