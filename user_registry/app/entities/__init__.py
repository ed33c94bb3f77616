"""Entities module with hybrid entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- validation.py: Field rules for incoming payloads
"""

from .core.user import User, UserFields, UserPayload, UserTable

__all__ = [
    "User",
    "UserFields",
    "UserPayload",
    "UserTable",
]
