"""User domain entity and request payloads."""

from pydantic import BaseModel, Field

from user_registry.app.entities.core._base import Entity


class UserFields(BaseModel):
    """The mutable part of a user record, already validated."""

    name: str = Field(description="Full name")
    address: str = Field(description="Postal address")
    email: str = Field(description="Email address")
    telephone: str = Field(description="Telephone number")


class User(UserFields, Entity):
    """User entity representing a registered person.

    The ``id`` is assigned once by the store when the record is created and
    never changes afterwards.
    """

    def fields(self) -> UserFields:
        return UserFields(
            name=self.name,
            address=self.address,
            email=self.email,
            telephone=self.telephone,
        )


class UserPayload(BaseModel):
    """Incoming request body for create, update and upsert.

    Every field is optional at the parsing stage so that missing values are
    reported by ``validate_user`` together with the other field errors
    instead of failing one at a time.
    """

    id: int | None = Field(default=None, description="Present only for upserts")
    name: str | None = None
    address: str | None = None
    email: str | None = None
    telephone: str | None = None
