"""Field validation for user creation."""

import pytest

from app.application.services.user_service import validate_user_payload
from app.core.exceptions import ErrorKind, ValidationFailedError


def test_valid_payload_is_accepted(user_payload):
    user_in = validate_user_payload(user_payload)
    assert (user_in.name, user_in.email, user_in.phone) == ("Ana", "ana@x.com", "123")


def test_values_are_trimmed():
    user_in = validate_user_payload({"name": "  Ana ", "email": " ana@x.com", "phone": "123 "})
    assert user_in.name == "Ana"
    assert user_in.email == "ana@x.com"
    assert user_in.phone == "123"


def test_unknown_keys_are_ignored(user_payload):
    user_in = validate_user_payload({**user_payload, "role": "admin"})
    assert not hasattr(user_in, "role")


@pytest.mark.parametrize("field", ["name", "email", "phone"])
def test_missing_field_is_reported(user_payload, field):
    payload = {k: v for k, v in user_payload.items() if k != field}
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload(payload)
    assert excinfo.value.fields == [field]
    assert excinfo.value.kind is ErrorKind.VALIDATION_FAILED


@pytest.mark.parametrize("field", ["name", "email", "phone"])
@pytest.mark.parametrize("value", ["", "   ", None, 123])
def test_empty_or_non_string_field_is_reported(user_payload, field, value):
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload({**user_payload, field: value})
    assert excinfo.value.fields == [field]


def test_every_violated_field_is_listed():
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload({"email": "nope"})
    assert excinfo.value.fields == ["name", "email", "phone"]
    messages = {e["field"]: e["message"] for e in excinfo.value.errors}
    assert messages["name"] == "field is required"
    assert messages["email"] == "must be a valid email address"


@pytest.mark.parametrize(
    "email",
    ["plain", "no-at.example.com", "a@b", "a@@b.com", "a b@c.com", "a@b..com", ".a@b.com", "a.@b.com", "a@-b.com"],
)
def test_bad_email_shapes_are_rejected(user_payload, email):
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload({**user_payload, "email": email})
    assert excinfo.value.fields == ["email"]


@pytest.mark.parametrize(
    "email",
    ["ana@x.com", "first.last@sub.mailhost.org", "user+tag@domain.co", "o'neil@mail-host.io", "josé@x.com", "user@münchen.de"],
)
def test_good_email_shapes_are_accepted(user_payload, email):
    assert validate_user_payload({**user_payload, "email": email}).email == email


@pytest.mark.parametrize("field", ["name", "phone"])
def test_values_longer_than_the_column_are_reported(user_payload, field):
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload({**user_payload, field: "x" * 256})
    assert excinfo.value.fields == [field]
    assert excinfo.value.errors == [{"field": field, "message": "must be at most 255 characters"}]


def test_over_long_email_is_reported(user_payload):
    with pytest.raises(ValidationFailedError) as excinfo:
        validate_user_payload({**user_payload, "email": "a" * 250 + "@x.com"})
    assert excinfo.value.fields == ["email"]
