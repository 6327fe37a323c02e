"""Contact form payload validation.

Validation is a pure function returning either a ``ContactMessage`` or a
``ValidationFailure``; nothing is raised for bad input so the caller can map
the result to a response in one place.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

ANONYMOUS_NAME = "Anonymous"

# Permissive syntactic check: local@domain.tld without spaces or extra '@'
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class ValidationReason(str, Enum):
    """Why a payload was rejected; the value is the client-facing message."""

    EMPTY_MESSAGE = "Message cannot be empty"
    INVALID_EMAIL = "Invalid email format"
    MALFORMED_BODY = "Request body must be a JSON object"
    INVALID_FIELD_TYPE = "Invalid field type"


@dataclass(frozen=True)
class ValidationFailure:
    reason: ValidationReason

    @property
    def message(self) -> str:
        return self.reason.value


@dataclass(frozen=True)
class ContactMessage:
    """A validated contact form submission.

    Fields are kept as submitted; ``display_name`` only affects rendering.
    """

    message: str
    name: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or ANONYMOUS_NAME

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())


def is_valid_email(email: str) -> bool:
    """Check an address against the permissive ``x@y.z`` pattern.

    Examples:
        >>> is_valid_email("a@b.co")
        True
        >>> is_valid_email("not-an-email")
        False
    """
    return EMAIL_PATTERN.fullmatch(email) is not None


def _optional_str(payload: dict[str, Any], field: str) -> tuple[bool, str | None]:
    value = payload.get(field)
    if value is None:
        return True, None
    if not isinstance(value, str):
        return False, None
    return True, value


def _display_label(value: Any) -> tuple[bool, str | None]:
    # Any JSON scalar is a usable label; falsy values fall back to the default
    if isinstance(value, (dict, list)):
        return False, None
    if not value:
        return True, None
    if isinstance(value, str):
        return True, value
    return True, json.dumps(value)


def validate_contact_payload(payload: Any) -> ContactMessage | ValidationFailure:
    """Validate a decoded JSON payload.

    Args:
        payload: Decoded request body.

    Returns:
        ContactMessage when the payload is acceptable, otherwise a
        ValidationFailure naming the first problem found.
    """
    if not isinstance(payload, dict):
        return ValidationFailure(ValidationReason.MALFORMED_BODY)

    ok, message = _optional_str(payload, "message")
    if not ok:
        return ValidationFailure(ValidationReason.INVALID_FIELD_TYPE)
    if message is None or not message.strip():
        return ValidationFailure(ValidationReason.EMPTY_MESSAGE)

    ok, email = _optional_str(payload, "email")
    if not ok:
        return ValidationFailure(ValidationReason.INVALID_FIELD_TYPE)
    if email and not is_valid_email(email):
        return ValidationFailure(ValidationReason.INVALID_EMAIL)

    ok, name = _display_label(payload.get("name"))
    if not ok:
        return ValidationFailure(ValidationReason.INVALID_FIELD_TYPE)

    return ContactMessage(message=message, name=name, email=email)
