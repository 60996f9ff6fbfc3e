"""Pytest configuration and shared fixtures."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Awaitable, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from httpx import ASGITransport

from qms_feedback.controller.display import DisplayLayer
from qms_feedback.controller.service import ApplicationStateController
from qms_feedback.controller.state import ControllerState
from qms_feedback.core.config import Settings
from qms_feedback.integrations.http import ApiClient
from qms_feedback.main import create_controller


TEST_BASE_URL = "http://test/api"


# ============================================================
# Fake feedback API
# ============================================================


@dataclass
class FakeEndpoint:
    """Canned response for one endpoint, with an optional gate to stall it."""

    status_code: int = 200
    body: Any = None
    gate: asyncio.Event | None = None
    calls: int = 0


@dataclass
class FakeFeedbackApi:
    """Mutable state behind the fake API app."""

    departments: FakeEndpoint = field(default_factory=FakeEndpoint)
    tokens: FakeEndpoint = field(default_factory=FakeEndpoint)
    feedbacks: FakeEndpoint = field(default_factory=FakeEndpoint)
    token_requests: list[int] = field(default_factory=list)
    submissions: list[dict] = field(default_factory=list)
    submission_headers: list[dict] = field(default_factory=list)


async def _respond(endpoint: FakeEndpoint) -> Response:
    endpoint.calls += 1
    if endpoint.gate is not None:
        await endpoint.gate.wait()
    if isinstance(endpoint.body, str):
        return Response(
            content=endpoint.body,
            status_code=endpoint.status_code,
            media_type="text/plain",
        )
    return JSONResponse(status_code=endpoint.status_code, content=endpoint.body)


def create_fake_api(state: FakeFeedbackApi) -> FastAPI:
    """Build a FastAPI app mimicking the feedback API."""
    app = FastAPI()

    @app.get("/api/departments")
    async def list_departments():
        return await _respond(state.departments)

    @app.get("/api/departments/{department_id}/feedback-tokens")
    async def list_feedback_tokens(department_id: int):
        state.token_requests.append(department_id)
        return await _respond(state.tokens)

    @app.post("/api/feedbacks")
    async def create_feedback(request: Request):
        state.submissions.append(await request.json())
        state.submission_headers.append(dict(request.headers))
        return await _respond(state.feedbacks)

    return app


def _department_data(**overrides) -> dict:
    data = {
        "id": 7,
        "name": "Registry",
        "description": "Births, deaths and marriages",
        "logo": "logos/registry.png",
    }
    data.update(overrides)
    return data


def _token_data(**overrides) -> dict:
    data = {
        "token_no": "R-042",
        "user": {"name": "Counter 3"},
        "service": {"name": "Birth certificate"},
        "department": {"name": "Registry"},
    }
    data.update(overrides)
    return data


@pytest.fixture
def sample_department() -> Callable[..., dict]:
    """Factory for a department record as the API sends it."""
    return _department_data


@pytest.fixture
def sample_token() -> Callable[..., dict]:
    """Factory for a feedback-token record as the API sends it."""
    return _token_data


@pytest.fixture
def fake_api() -> FakeFeedbackApi:
    """Fake API state with happy-path defaults."""
    return FakeFeedbackApi(
        departments=FakeEndpoint(
            body={
                "departments": [
                    _department_data(),
                    _department_data(id=9, name="Licensing", description="", logo=None),
                ]
            }
        ),
        tokens=FakeEndpoint(body={"success": True, "tokens": [_token_data()]}),
        feedbacks=FakeEndpoint(status_code=201, body={"success": True}),
    )


@pytest.fixture
def fake_transport(fake_api: FakeFeedbackApi) -> ASGITransport:
    """Transport that routes requests into the fake API app."""
    return ASGITransport(app=create_fake_api(fake_api))


# ============================================================
# Settings and clients
# ============================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short timers so tests run fast."""
    return Settings(
        api_base_url=TEST_BASE_URL,
        asset_base_url="http://test",
        request_timeout_seconds=0.5,
        poll_interval_seconds=60.0,
        acknowledgement_seconds=0.05,
    )


@pytest_asyncio.fixture(scope="function")
async def api(
    fake_transport: ASGITransport, test_settings: Settings
) -> AsyncGenerator[ApiClient, None]:
    """API client routed to the fake app."""
    async with ApiClient.from_settings(test_settings, transport=fake_transport) as client:
        yield client


@pytest.fixture
def mock_api() -> Callable[..., ApiClient]:
    """Factory for an API client whose transport is a plain handler, for injecting faults."""

    def _mock_api(handler, timeout: float = 0.5) -> ApiClient:
        return ApiClient(
            base_url=TEST_BASE_URL,
            timeout=timeout,
            transport=httpx.MockTransport(handler),
        )

    return _mock_api


# ============================================================
# Display layer and controller
# ============================================================


class RecordingDisplay(DisplayLayer):
    """Display layer that records everything it is asked to do."""

    def __init__(self):
        self.states: list[ControllerState] = []
        self.notifications: list[str] = []
        self.acknowledgements: list[str] = []
        self.surface_closed = 0
        self.acknowledgements_dismissed = 0

    def render(self, state: ControllerState) -> None:
        self.states.append(state)

    def show_notification(self, message: str) -> None:
        self.notifications.append(message)

    def close_submission_surface(self) -> None:
        self.surface_closed += 1

    def show_acknowledgement(self, message: str) -> None:
        self.acknowledgements.append(message)

    def dismiss_acknowledgement(self) -> None:
        self.acknowledgements_dismissed += 1


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest_asyncio.fixture(scope="function")
async def controller(
    display: RecordingDisplay,
    api: ApiClient,
    test_settings: Settings,
) -> AsyncGenerator[ApplicationStateController, None]:
    """Controller wired to the fake API."""
    ctrl = create_controller(display, api, test_settings)
    yield ctrl
    await ctrl.close()


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[None]]:
    """Yield to the event loop until ``predicate()`` holds."""
    return _wait_until
