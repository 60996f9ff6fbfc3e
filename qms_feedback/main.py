"""Controller factory and session lifespan."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx

from qms_feedback.controller.display import DisplayLayer
from qms_feedback.controller.service import ApplicationStateController
from qms_feedback.core.config import Settings, get_settings
from qms_feedback.domains.completed_service.client import CompletedServiceClient
from qms_feedback.domains.department.client import DepartmentClient
from qms_feedback.domains.feedback.client import FeedbackClient
from qms_feedback.integrations.http import ApiClient

logger = logging.getLogger(__name__)


def create_controller(
    display: DisplayLayer,
    api: ApiClient,
    settings: Settings | None = None,
) -> ApplicationStateController:
    """Wire the API clients into a controller."""
    settings = settings or get_settings()
    return ApplicationStateController(
        display=display,
        department_client=DepartmentClient(api),
        service_client=CompletedServiceClient(api),
        feedback_client=FeedbackClient(api),
        settings=settings,
    )


@asynccontextmanager
async def feedback_session(
    display: DisplayLayer,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncGenerator[ApplicationStateController, None]:
    """
    Open an API connection and a controller; tear both down on exit.

    Usage:
        async with feedback_session(display) as controller:
            await controller.load_departments()
    """
    settings = settings or get_settings()

    # Startup
    logger.info(f"Starting feedback session against {settings.api_base_url}")
    api = ApiClient.from_settings(settings, transport=transport)
    controller = create_controller(display, api, settings)

    try:
        yield controller
    finally:
        # Shutdown
        await controller.close()
        await api.aclose()
        logger.info("Feedback session closed")
