"""Tests for the completed-service client and token decoding."""

import asyncio

import pytest

from qms_feedback.core.exceptions import (
    HttpStatusError,
    MalformedResponseError,
    RequestTimeoutError,
    ServerRejectionError,
)
from qms_feedback.domains.completed_service import (
    CompletedService,
    CompletedServiceClient,
)
from qms_feedback.domains.completed_service.schemas import FeedbackToken

pytestmark = pytest.mark.asyncio


async def test_fetch_maps_tokens(api, fake_api, sample_token):
    fake_api.tokens.body = {
        "success": True,
        "tokens": [sample_token(), sample_token(token_no="R-043")],
    }

    services = await CompletedServiceClient(api).fetch_completed_services(7)

    assert services == [
        CompletedService(
            ticket_number="R-042",
            counter_name="Counter 3",
            service_name="Birth certificate",
            department_name="Registry",
        ),
        CompletedService(
            ticket_number="R-043",
            counter_name="Counter 3",
            service_name="Birth certificate",
            department_name="Registry",
        ),
    ]
    assert fake_api.token_requests == [7]


@pytest.mark.parametrize(
    "overrides,field,placeholder",
    [
        ({"token_no": None}, "ticket_number", "N/A"),
        ({"user": None}, "counter_name", "Counter N/A"),
        ({"user": {}}, "counter_name", "Counter N/A"),
        ({"service": {"name": None}}, "service_name", "Service N/A"),
        ({"department": "Registry"}, "department_name", "Department N/A"),
    ],
)
async def test_missing_field_falls_back_independently(
    sample_token, overrides, field, placeholder
):
    service = FeedbackToken.model_validate(sample_token(**overrides)).to_completed_service()
    expected = FeedbackToken.model_validate(sample_token()).to_completed_service()

    assert getattr(service, field) == placeholder
    # every other field is untouched
    assert service.model_copy(update={field: getattr(expected, field)}) == expected


async def test_token_missing_everything_is_all_placeholders(api, fake_api):
    fake_api.tokens.body = {"success": True, "tokens": [{}, None]}

    services = await CompletedServiceClient(api).fetch_completed_services(7)

    assert services == [CompletedService(), CompletedService()]
    assert services[0].ticket_number == "N/A"
    assert services[0].counter_name == "Counter N/A"
    assert services[0].service_name == "Service N/A"
    assert services[0].department_name == "Department N/A"


async def test_numeric_token_number_is_text(sample_token):
    service = FeedbackToken.model_validate(sample_token(token_no=42)).to_completed_service()

    assert service.ticket_number == "42"


async def test_success_false_is_rejected(api, fake_api, sample_token):
    fake_api.tokens.body = {"success": False, "tokens": [sample_token()]}

    with pytest.raises(ServerRejectionError) as exc_info:
        await CompletedServiceClient(api).fetch_completed_services(7)

    assert exc_info.value.message == "Failed to load completed services"


@pytest.mark.parametrize(
    "body",
    [
        {"success": True},
        {"success": True, "tokens": {"token_no": "R-1"}},
        "not json",
    ],
)
async def test_malformed_envelope(api, fake_api, body):
    fake_api.tokens.body = body

    with pytest.raises(MalformedResponseError):
        await CompletedServiceClient(api).fetch_completed_services(7)


async def test_http_error_status(api, fake_api):
    fake_api.tokens.status_code = 500
    fake_api.tokens.body = {"message": "boom"}

    with pytest.raises(HttpStatusError) as exc_info:
        await CompletedServiceClient(api).fetch_completed_services(7)

    assert exc_info.value.message == "Failed to load completed services: 500"


async def test_slow_response_times_out(api, fake_api, test_settings):
    fake_api.tokens.gate = asyncio.Event()  # never released

    with pytest.raises(RequestTimeoutError) as exc_info:
        await CompletedServiceClient(api).fetch_completed_services(7)

    assert exc_info.value.details["timeout"] == test_settings.request_timeout_seconds
