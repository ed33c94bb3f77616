"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity returned by the stores
- UserFields / UserPayload: Validated values and raw request body
- UserTable: Database persistence model
- validate_user: Explicit field validation
"""

from .entity import User, UserFields, UserPayload
from .table import UserTable
from .validation import require_valid_user, validate_user

__all__ = [
    "User",
    "UserFields",
    "UserPayload",
    "UserTable",
    "require_valid_user",
    "validate_user",
]
