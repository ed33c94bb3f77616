"""Domain exceptions raised by stores and routers.

The HTTP layer maps each of these to a status code and error envelope in
``user_registry.app.api.http.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single failed field check."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class UserRegistryError(Exception):
    """Base class for all domain errors."""


class UserValidationError(UserRegistryError):
    """One or more fields of a user payload failed validation."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        super().__init__("Validation failed: " + "; ".join(str(e) for e in errors))


class UserNotFoundError(UserRegistryError):
    """No user exists with the requested id."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class DuplicateEmailError(UserRegistryError):
    """Another user already owns this email address."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered")
