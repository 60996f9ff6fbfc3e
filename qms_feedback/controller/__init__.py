"""Application state controller and display layer interface."""

from qms_feedback.controller.display import DisplayLayer, LoggingDisplay
from qms_feedback.controller.service import ApplicationStateController
from qms_feedback.controller.state import (
    ControllerPhase,
    ControllerState,
    SubmissionResult,
)

__all__ = [
    "ApplicationStateController",
    "ControllerPhase",
    "ControllerState",
    "DisplayLayer",
    "LoggingDisplay",
    "SubmissionResult",
]
