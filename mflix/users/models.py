"""User and session models.

Both map one-to-one onto documents of the ``users`` and ``sessions``
collections. The store-assigned ``_id`` is exposed as ``id`` and
rendered as a string.
"""

from typing import Any, Self

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Document(BaseModel):
    """Common handling of the store-assigned ``_id``."""

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        populate_by_name=True,
    )

    id: str | None = Field(
        default=None, alias="_id", description="Store-assigned identifier"
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_document(self) -> dict[str, Any]:
        """Render as a MongoDB document.

        ``_id`` is only included once assigned, so inserts let the
        server generate it.
        """
        document = self.model_dump(exclude={"id"})
        if self.id is not None:
            document["_id"] = ObjectId(self.id) if ObjectId.is_valid(self.id) else self.id
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls.model_validate(document)


class User(_Document):
    """A registered MFlix user.

    ``email`` is the business key. ``preferences`` is opaque to the
    store and only ever replaced as a whole.
    """

    name: str = Field(default="", description="Display name")
    email: str = Field(..., min_length=1, description="Unique login email")
    hashedpw: str | None = Field(default=None, description="Password hash")
    preferences: dict[str, Any] = Field(
        default_factory=dict, description="Free-form user preferences"
    )

    @field_validator("preferences", mode="before")
    @classmethod
    def _missing_preferences(cls, value: Any) -> Any:
        return {} if value is None else value


class Session(_Document):
    """Login session of a user. At most one exists per ``user_id``."""

    user_id: str = Field(..., min_length=1, description="Owning user's email")
    jwt: str = Field(..., description="Issued token")
