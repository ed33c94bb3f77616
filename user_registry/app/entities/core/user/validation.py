"""Field validation for user payloads."""

import re

from user_registry.app.core.errors import FieldError, UserValidationError
from user_registry.app.entities.core.user.entity import UserFields, UserPayload

# local@domain.tld, no whitespace and exactly one "@"
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")

_REQUIRED_MESSAGES = {
    "name": "Name is required",
    "address": "Address is required",
    "email": "Email is required",
    "telephone": "Telephone is required",
}

INVALID_EMAIL_MESSAGE = "Email should be valid: prefix@domain.com"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_user(payload: UserPayload) -> list[FieldError]:
    """Return every field error in ``payload``, in field order.

    An empty list means the payload can be stored.
    """
    errors: list[FieldError] = []
    for field, message in _REQUIRED_MESSAGES.items():
        if _is_blank(getattr(payload, field)):
            errors.append(FieldError(field, message))

    if not _is_blank(payload.email) and not EMAIL_PATTERN.match(payload.email.strip()):
        errors.append(FieldError("email", INVALID_EMAIL_MESSAGE))

    return errors


def require_valid_user(payload: UserPayload) -> UserFields:
    """Validate ``payload`` and return its fields, or raise ``UserValidationError``."""
    errors = validate_user(payload)
    if errors:
        raise UserValidationError(errors)
    return UserFields(
        name=payload.name,
        address=payload.address,
        email=payload.email.strip(),
        telephone=payload.telephone,
    )
