"""Submission Schemas — normalization of accepted payloads and the public record shape.

Invariants:
    - Wire names are camelCase (firstName, submittedAt, ...); Python names are snake_case
    - SubmissionCreate only normalizes, it never rejects: presence and email
      checks live in core/validate_submission.py and run first
    - Text fields accept any JSON value; non-strings are stored as their JSON text
      (5551234 → "5551234", true → "true")
    - firstName, lastName, email, phone, comments are stripped when they are strings
    - termsAccepted is True only when the payload holds the literal boolean true
    - Empty phone/comments become None; empty frequency becomes "weekly"
    - interests is kept as given (string or list)
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_FREQUENCY = "weekly"


def as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class SubmissionCreate(BaseModel):
    """Accepted submission payload, normalized for storage."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    interests: Any
    subscription: str
    frequency: str = DEFAULT_FREQUENCY
    comments: str | None = None
    terms_accepted: bool = False

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> str:
        return as_text(v).strip()

    @field_validator("subscription", mode="before")
    @classmethod
    def subscription_text(cls, v: Any) -> str:
        return as_text(v)

    @field_validator("phone", "comments", mode="before")
    @classmethod
    def strip_optional(cls, v: Any) -> str | None:
        if not v:
            return None
        return as_text(v).strip() or None

    @field_validator("frequency", mode="before")
    @classmethod
    def default_frequency(cls, v: Any) -> str:
        return as_text(v) if v else DEFAULT_FREQUENCY

    @field_validator("terms_accepted", mode="before")
    @classmethod
    def only_literal_true(cls, v: Any) -> bool:
        # "true", 1 and "yes" are all False: only JSON true counts
        return v is True


class SubmissionResponse(BaseModel):
    """Public submission record."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    interests: Any
    subscription: str
    frequency: str
    comments: str | None
    terms_accepted: bool
    submitted_at: datetime

    def to_json(self) -> dict:
        """JSON-ready dict with camelCase keys (gateway handler bodies)."""
        return self.model_dump(mode="json", by_alias=True)


class DeleteConfirmation(BaseModel):
    message: str = "Submission deleted successfully"
