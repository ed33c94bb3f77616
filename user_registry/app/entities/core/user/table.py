"""User database table model."""

from sqlmodel import Field

from user_registry.app.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "users"
    # SQLite would otherwise recycle the id of the most recently deleted row
    __table_args__ = {"sqlite_autoincrement": True}

    name: str = Field(nullable=False)
    address: str = Field(nullable=False)
    email: str = Field(nullable=False, unique=True, index=True)
    telephone: str = Field(nullable=False)
