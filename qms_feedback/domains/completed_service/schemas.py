"""Feedback-token API response schemas.

Tokens are decoded defensively: every nested field that is missing, null or of
the wrong shape falls back to its own placeholder instead of failing the record.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from qms_feedback.domains.completed_service.models import (
    COUNTER_PLACEHOLDER,
    DEPARTMENT_PLACEHOLDER,
    SERVICE_PLACEHOLDER,
    TICKET_PLACEHOLDER,
    CompletedService,
)


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class NamedRef(BaseModel):
    """Nested ``{"name": ...}`` object (user, service, department)."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v):
        return _as_text(v)


class FeedbackToken(BaseModel):
    """One element of the ``tokens`` array."""

    model_config = ConfigDict(extra="ignore")

    token_no: str | None = None
    user: NamedRef | None = None  # the counter operator
    service: NamedRef | None = None
    department: NamedRef | None = None

    @model_validator(mode="before")
    @classmethod
    def coerce_object(cls, data):
        return data if isinstance(data, dict) else {}

    @field_validator("token_no", mode="before")
    @classmethod
    def coerce_token_no(cls, v):
        return _as_text(v)

    @field_validator("user", "service", "department", mode="before")
    @classmethod
    def coerce_ref(cls, v):
        return v if isinstance(v, dict) else None

    def to_completed_service(self) -> CompletedService:
        """Map to a ``CompletedService``, filling placeholders independently."""
        return CompletedService(
            ticket_number=_or(self.token_no, TICKET_PLACEHOLDER),
            counter_name=_or(self.user and self.user.name, COUNTER_PLACEHOLDER),
            service_name=_or(self.service and self.service.name, SERVICE_PLACEHOLDER),
            department_name=_or(
                self.department and self.department.name, DEPARTMENT_PLACEHOLDER
            ),
        )


def _or(value: str | None, placeholder: str) -> str:
    # Only absent values fall back; an empty string is kept as sent
    return placeholder if value is None else value


class FeedbackTokensResponse(BaseModel):
    """Body of ``GET /departments/{id}/feedback-tokens``."""

    success: bool
    tokens: list[FeedbackToken]

    def to_completed_services(self) -> list[CompletedService]:
        return [token.to_completed_service() for token in self.tokens]
