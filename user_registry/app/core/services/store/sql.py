"""Relational user store built on SQLModel."""

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from user_registry.app.core.errors import DuplicateEmailError
from user_registry.app.core.models.page import Page, check_page_request, slice_bounds
from user_registry.app.core.services.database.db_session import DbSessionService
from user_registry.app.core.services.store.base import UserStore
from user_registry.app.entities.core.user import User, UserFields, UserTable


def _to_entity(row: UserTable) -> User:
    return User.model_validate(row, from_attributes=True)


def _search_clause(query: str):
    needle = query.lower()
    return or_(
        *(
            func.lower(col(column)).contains(needle, autoescape=True)
            for column in (UserTable.name, UserTable.address, UserTable.email, UserTable.telephone)
        )
    )


class SqlUserStore(UserStore):
    """User store persisted in the ``users`` table.

    Each operation runs in its own transaction; atomicity across requests is
    left to the database engine. Emails are unique at the table level.
    """

    def __init__(self, db_service: DbSessionService):
        self._db = db_service

    def _flush(self, session: Session, email: str) -> None:
        try:
            session.flush()
        except IntegrityError as exc:
            raise DuplicateEmailError(email) from exc

    def create(self, fields: UserFields) -> User:
        logger.debug("Creating new user: {}", fields)
        with self._db.session_scope() as session:
            row = UserTable(**fields.model_dump())
            session.add(row)
            self._flush(session, fields.email)
            session.refresh(row)
            user = _to_entity(row)
        logger.info("Created new user with ID: {}", user.id)
        return user

    def get(self, user_id: int) -> User | None:
        logger.debug("Fetching user with ID: {}", user_id)
        with self._db.session_scope() as session:
            row = session.get(UserTable, user_id)
            return _to_entity(row) if row is not None else None

    def list_all(self) -> list[User]:
        logger.debug("Fetching all users")
        with self._db.session_scope() as session:
            rows = session.exec(select(UserTable).order_by(col(UserTable.id))).all()
            return [_to_entity(row) for row in rows]

    def list_paginated(self, page: int, size: int) -> list[User]:
        check_page_request(page, size)
        logger.debug("Fetching paged users: page={}, size={}", page, size)
        with self._db.session_scope() as session:
            total = session.exec(select(func.count()).select_from(UserTable)).one()
            start, end = slice_bounds(page, size, total)
            if start == end:
                return []
            statement = (
                select(UserTable)
                .order_by(col(UserTable.id))
                .offset(start)
                .limit(end - start)
            )
            return [_to_entity(row) for row in session.exec(statement).all()]

    def search(self, query: str, page: int, size: int) -> Page[User]:
        check_page_request(page, size)
        if not query.strip():
            return self.page(page, size)

        logger.debug("Querying users for '{}'", query)
        clause = _search_clause(query)
        count_statement = select(func.count()).select_from(UserTable).where(clause)
        with self._db.session_scope() as session:
            total = session.exec(count_statement).one()
            # OFFSET and LIMIT stay within the matching rows
            start, end = slice_bounds(page, size, total)
            content = []
            if start < end:
                statement = (
                    select(UserTable)
                    .where(clause)
                    .order_by(col(UserTable.id))
                    .offset(start)
                    .limit(end - start)
                )
                content = [_to_entity(row) for row in session.exec(statement).all()]
        return Page[User].build(content, page, size, total)

    def update(self, user_id: int, fields: UserFields) -> User | None:
        logger.debug("Updating user with ID: {}", user_id)
        with self._db.session_scope() as session:
            row = session.get(UserTable, user_id)
            if row is None:
                logger.warning("User with ID {} not found for update", user_id)
                return None
            for name, value in fields.model_dump().items():
                setattr(row, name, value)
            session.add(row)
            self._flush(session, fields.email)
            user = _to_entity(row)
        logger.info("Updated user with ID: {}", user_id)
        return user

    def delete(self, user_id: int) -> bool:
        logger.info("Attempting to delete user with ID: {}", user_id)
        with self._db.session_scope() as session:
            row = session.get(UserTable, user_id)
            if row is None:
                logger.warning("User with ID {} not found for deletion", user_id)
                return False
            session.delete(row)
        return True

    def count(self) -> int:
        with self._db.session_scope() as session:
            return session.exec(select(func.count()).select_from(UserTable)).one()

    def health_check(self) -> bool:
        return self._db.health_check()
