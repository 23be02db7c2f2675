"""Submission Validation — presence and email-shape checks on raw payloads.

Invariants:
    - Runs before anything is persisted; a raised error means no row is written
    - Missing fields are reported before email shape (a missing email is "missing", not "invalid")
    - Only the five required fields and the email pattern are checked; every
      other field is accepted verbatim
"""

import re
from typing import Any

from formapp.core.errors import InvalidEmailError, MalformedBodyError, MissingFieldsError

REQUIRED_FIELDS: tuple[str, ...] = (
    "firstName", "lastName", "email", "interests", "subscription",
)

# local@domain.tld — no whitespace, exactly one "@", at least one "." after it
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def find_missing_fields(payload: dict[str, Any]) -> list[str]:
    """Required fields that are absent, null, empty, or whitespace-only."""
    missing = []
    for name in REQUIRED_FIELDS:
        value = payload.get(name)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            missing.append(name)
    return missing


def validate_submission(payload: Any) -> dict[str, Any]:
    """Check a decoded request body and return it unchanged when acceptable.

    Raises:
        MalformedBodyError: payload is not a JSON object.
        MissingFieldsError: a required field is missing or empty.
        InvalidEmailError: email fails the pattern check.
    """
    if not isinstance(payload, dict):
        raise MalformedBodyError("request body must be a JSON object")
    missing = find_missing_fields(payload)
    if missing:
        raise MissingFieldsError(missing, REQUIRED_FIELDS)
    if not is_valid_email(payload["email"]):
        raise InvalidEmailError()
    return payload
