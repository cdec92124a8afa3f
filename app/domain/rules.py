"""Field rules shared by the request schema and the ORM model."""

from pydantic import EmailStr, TypeAdapter

REQUIRED_USER_FIELDS = ("name", "email", "phone")
MAX_FIELD_LENGTH = 255

_email_adapter = TypeAdapter(EmailStr)


def is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def normalize_email(value: object) -> str:
    """Validate with the same EmailStr rules as the request schema.

    Raises pydantic.ValidationError when the value is not an email address.
    """
    return _email_adapter.validate_python(value)
