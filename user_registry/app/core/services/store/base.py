"""User store interface.

Provides a unified interface over the places user records can live: an
in-process map for demos and tests, or a relational table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from user_registry.app.core.models.page import Page
from user_registry.app.entities.core.user import User, UserFields


class UserStore(ABC):
    """Abstract interface for user record storage backends."""

    @abstractmethod
    def create(self, fields: UserFields) -> User:
        """Persist a new user and return it with its freshly assigned id.

        Raises:
            DuplicateEmailError: If the backend enforces unique emails and
                the address is taken.
        """

    @abstractmethod
    def get(self, user_id: int) -> User | None:
        """Return the user with ``user_id``, or None if there is none."""

    @abstractmethod
    def list_all(self) -> list[User]:
        """Return every user in insertion (id) order."""

    @abstractmethod
    def list_paginated(self, page: int, size: int) -> list[User]:
        """Return the ``page``-th slice of ``size`` users from ``list_all``.

        Returns an empty list once ``page * size`` reaches the total.

        Raises:
            ValueError: If ``page`` is negative or ``size`` is not positive.
        """

    @abstractmethod
    def search(self, query: str, page: int, size: int) -> Page[User]:
        """Page through users whose name, address, email or telephone contain ``query``.

        Matching is case-insensitive. A blank query matches every user.
        """

    @abstractmethod
    def update(self, user_id: int, fields: UserFields) -> User | None:
        """Overwrite all mutable fields of ``user_id``; None if it does not exist."""

    @abstractmethod
    def delete(self, user_id: int) -> bool:
        """Remove ``user_id``. Returns False if it did not exist."""

    @abstractmethod
    def count(self) -> int:
        """Total number of stored users."""

    @abstractmethod
    def health_check(self) -> bool:
        """True if the backend can serve requests."""

    def page(self, page: int, size: int) -> Page[User]:
        """Unfiltered page wrapped in the pagination envelope."""
        return Page[User].build(self.list_paginated(page, size), page, size, self.count())
