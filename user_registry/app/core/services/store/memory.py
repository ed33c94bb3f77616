"""In-process user store."""

import itertools
import threading

from loguru import logger

from user_registry.app.core.models.page import Page, check_page_request, slice_bounds
from user_registry.app.core.services.store.base import UserStore
from user_registry.app.entities.core.user import User, UserFields

SEARCHABLE_FIELDS = ("name", "address", "email", "telephone")


def matches_query(user: User, query: str) -> bool:
    """Case-insensitive substring match over the searchable fields."""
    needle = query.lower()
    return any(needle in getattr(user, field).lower() for field in SEARCHABLE_FIELDS)


class InMemoryUserStore(UserStore):
    """User store backed by a dict, safe to share between worker threads.

    Ids come from a counter that only moves forward, so a deleted id is
    never handed out again. Email uniqueness is not enforced.
    """

    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def create(self, fields: UserFields) -> User:
        with self._lock:
            user = User(id=next(self._ids), **fields.model_dump())
            self._users[user.id] = user
        logger.info("Created new user with ID: {}", user.id)
        return user

    def get(self, user_id: int) -> User | None:
        logger.debug("Fetching user with ID: {}", user_id)
        with self._lock:
            return self._users.get(user_id)

    def list_all(self) -> list[User]:
        with self._lock:
            users = list(self._users.values())
        logger.debug("Fetching all users. Total count: {}", len(users))
        return users

    def list_paginated(self, page: int, size: int) -> list[User]:
        check_page_request(page, size)
        logger.debug("Fetching users - page: {}, size: {}", page, size)
        users = self.list_all()
        start, end = slice_bounds(page, size, len(users))
        return users[start:end]

    def search(self, query: str, page: int, size: int) -> Page[User]:
        check_page_request(page, size)
        if not query.strip():
            return self.page(page, size)

        logger.debug("Querying users for '{}'", query)
        hits = [user for user in self.list_all() if matches_query(user, query)]
        start, end = slice_bounds(page, size, len(hits))
        return Page[User].build(hits[start:end], page, size, len(hits))

    def update(self, user_id: int, fields: UserFields) -> User | None:
        with self._lock:
            if user_id not in self._users:
                logger.warning("User with ID {} not found for update", user_id)
                return None
            user = User(id=user_id, **fields.model_dump())
            self._users[user_id] = user
        logger.info("Updated user with ID: {}", user_id)
        return user

    def delete(self, user_id: int) -> bool:
        with self._lock:
            removed = self._users.pop(user_id, None)
        if removed is None:
            logger.warning("User with ID {} not found for deletion", user_id)
            return False
        logger.info("Deleted user with ID: {}", user_id)
        return True

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def health_check(self) -> bool:
        return True
