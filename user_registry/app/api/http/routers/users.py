"""User API router with CRUD, paging and search.

Every successful mutation publishes exactly one tagged event on the users
channel after the store has been updated. Reads never publish.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from loguru import logger

from user_registry.app.api.http.deps import get_user_events, get_user_store
from user_registry.app.core.errors import UserNotFoundError
from user_registry.app.core.models import Page
from user_registry.app.core.services import UserEvent, UserEventPublisher, UserStore
from user_registry.app.entities.core.user import (
    User,
    UserFields,
    UserPayload,
    require_valid_user,
)

router = APIRouter()


def _create(
    store: UserStore,
    events: UserEventPublisher,
    fields: UserFields,
    request: Request,
    response: Response,
) -> User:
    user = store.create(fields)
    response.headers["Location"] = request.url_for("get_user", user_id=user.id).path
    events.publish(UserEvent.ADD)
    logger.info("Created user {}", user.id)
    return user


def _update(
    store: UserStore,
    events: UserEventPublisher,
    user_id: int,
    fields: UserFields,
) -> User:
    user = store.update(user_id, fields)
    if user is None:
        raise UserNotFoundError(user_id)
    events.publish(UserEvent.EDIT)
    logger.info("Updated user {}", user_id)
    return user


@router.get("", response_model=list[User])
def list_users(store: UserStore = Depends(get_user_store)) -> list[User]:
    """List all users in id order."""
    return store.list_all()


@router.get("/paginated", response_model=Page[User])
def list_users_paginated(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, gt=0),
    store: UserStore = Depends(get_user_store),
) -> Page[User]:
    """Page through users with query parameters."""
    return store.page(page, size)


@router.get("/{page}/{size}", response_model=Page[User])
def get_users_page(
    page: int = Path(ge=0, description="Zero-based page index"),
    size: int = Path(gt=0, description="Records per page"),
    store: UserStore = Depends(get_user_store),
) -> Page[User]:
    """Page through users with path parameters."""
    return store.page(page, size)


@router.get("/{page}/{size}/search/{query}", response_model=Page[User])
def search_users(
    query: str,
    page: int = Path(ge=0, description="Zero-based page index"),
    size: int = Path(gt=0, description="Records per page"),
    store: UserStore = Depends(get_user_store),
) -> Page[User]:
    """Page through users whose name, address, email or telephone contain ``query``."""
    return store.search(query, page, size)


@router.get("/{user_id}", response_model=User, name="get_user")
def get_user(user_id: int, store: UserStore = Depends(get_user_store)) -> User:
    """Get a user by ID."""
    user = store.get(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def save_user(
    payload: UserPayload,
    request: Request,
    response: Response,
    store: UserStore = Depends(get_user_store),
    events: UserEventPublisher = Depends(get_user_events),
) -> User:
    """Create a user, or update it when the body carries an ``id``."""
    fields = require_valid_user(payload)
    if payload.id is not None:
        response.status_code = status.HTTP_200_OK
        return _update(store, events, payload.id, fields)
    return _create(store, events, fields, request, response)


@router.post("/add", response_model=User, status_code=status.HTTP_201_CREATED)
def add_user(
    payload: UserPayload,
    request: Request,
    response: Response,
    store: UserStore = Depends(get_user_store),
    events: UserEventPublisher = Depends(get_user_events),
) -> User:
    """Create a user; any ``id`` in the body is ignored."""
    fields = require_valid_user(payload)
    return _create(store, events, fields, request, response)


@router.put("/{user_id}", response_model=User)
@router.put("/edit/{user_id}", response_model=User, include_in_schema=False)
def update_user(
    user_id: int,
    payload: UserPayload,
    store: UserStore = Depends(get_user_store),
    events: UserEventPublisher = Depends(get_user_events),
) -> User:
    """Overwrite every field of an existing user."""
    fields = require_valid_user(payload)
    return _update(store, events, user_id, fields)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
    events: UserEventPublisher = Depends(get_user_events),
) -> Response:
    """Delete a user."""
    if not store.delete(user_id):
        raise UserNotFoundError(user_id)
    events.publish(UserEvent.DELETE)
    logger.info("Deleted user {}", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
