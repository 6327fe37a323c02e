"""Tests for contact payload validation."""

import pytest

from app.services.contact_validation import (
    ContactMessage,
    ValidationFailure,
    ValidationReason,
    is_valid_email,
    validate_contact_payload,
)


@pytest.mark.parametrize(
    "payload",
    [
        {"message": ""},
        {"message": "   "},
        {"message": "\n\t "},
        {"message": None},
        {},
        {"name": "Alice", "email": "alice@example.com"},
    ],
)
def test_blank_or_missing_message_is_empty_message(payload: dict) -> None:
    result = validate_contact_payload(payload)

    assert isinstance(result, ValidationFailure)
    assert result.reason is ValidationReason.EMPTY_MESSAGE
    assert result.message == "Message cannot be empty"


def test_invalid_email_rejected() -> None:
    result = validate_contact_payload({"message": "hi", "email": "not-an-email"})

    assert isinstance(result, ValidationFailure)
    assert result.reason is ValidationReason.INVALID_EMAIL
    assert result.message == "Invalid email format"


def test_valid_email_accepted() -> None:
    result = validate_contact_payload({"message": "hi", "email": "a@b.co"})

    assert result == ContactMessage(message="hi", email="a@b.co")


def test_empty_message_checked_before_email() -> None:
    result = validate_contact_payload({"message": " ", "email": "broken"})

    assert isinstance(result, ValidationFailure)
    assert result.reason is ValidationReason.EMPTY_MESSAGE


@pytest.mark.parametrize("email", ["", None])
def test_empty_email_is_treated_as_absent(email) -> None:
    result = validate_contact_payload({"message": "hi", "email": email})

    assert isinstance(result, ContactMessage)
    assert result.has_email is False


@pytest.mark.parametrize(
    "email,expected",
    [
        ("a@b.co", True),
        ("first.last@sub.example.org", True),
        ("a@b.c.d", True),
        ("a@b", False),
        ("@b.co", False),
        ("a@.co", False),
        ("a b@c.de", False),
        ("a@@b.co", False),
        (" a@b.co", False),
        ("a@b.", False),
    ],
)
def test_email_pattern(email: str, expected: bool) -> None:
    assert is_valid_email(email) is expected


@pytest.mark.parametrize("payload", [[], "message", 42, None])
def test_non_object_body_is_malformed(payload) -> None:
    result = validate_contact_payload(payload)

    assert isinstance(result, ValidationFailure)
    assert result.reason is ValidationReason.MALFORMED_BODY


@pytest.mark.parametrize(
    "payload",
    [
        {"message": 123},
        {"message": "hi", "email": ["a@b.co"]},
        {"message": "hi", "name": {"first": "A"}},
    ],
)
def test_wrong_field_types_are_rejected(payload) -> None:
    result = validate_contact_payload(payload)

    assert isinstance(result, ValidationFailure)
    assert result.reason is ValidationReason.INVALID_FIELD_TYPE
    assert result.message == "Invalid field type"


@pytest.mark.parametrize(
    "name,expected",
    [(42, "42"), (3.5, "3.5"), (True, "true"), (0, None), (False, None)],
)
def test_scalar_names_become_labels(name, expected) -> None:
    result = validate_contact_payload({"message": "hi", "name": name})

    assert isinstance(result, ContactMessage)
    assert result.name == expected


def test_unknown_fields_ignored_and_message_kept_as_submitted() -> None:
    result = validate_contact_payload(
        {"message": "  Hello there  ", "name": "Bob", "phone": "555", "extra": {"x": 1}}
    )

    assert isinstance(result, ContactMessage)
    assert result.message == "  Hello there  "
    assert result.name == "Bob"


@pytest.mark.parametrize("name", [None, ""])
def test_display_name_defaults_to_anonymous(name) -> None:
    result = validate_contact_payload({"message": "hi", "name": name})

    assert isinstance(result, ContactMessage)
    assert result.display_name == "Anonymous"
    assert result.name == name
