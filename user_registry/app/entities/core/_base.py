from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


class Entity(BaseModel):
    """Base entity class with a store-assigned integer identifier."""

    model_config = ConfigDict(from_attributes=True)

    id: int = PydanticField(description="Unique identifier for the entity")


class EntityTable(SQLModel, table=False):
    """Base table class with an autoincrementing integer primary key."""

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Unique identifier for the entity",
    )
