"""Completed-service domain: pending-feedback tickets and their poller."""

from qms_feedback.domains.completed_service.client import CompletedServiceClient
from qms_feedback.domains.completed_service.models import CompletedService
from qms_feedback.domains.completed_service.poller import CompletedServicePoller

__all__ = [
    "CompletedService",
    "CompletedServiceClient",
    "CompletedServicePoller",
]
