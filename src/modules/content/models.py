"""Content item and content type definition models for MongoDB."""

from datetime import datetime
from enum import Enum

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from src.core.models import PyObjectId, generate_id


class ContentItem(BaseModel):
    """Content item as stored in MongoDB.

    Only the common header is modelled. The type section (keyed by the
    content type name) and ``BagPart`` are kept as extra fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: PyObjectId | None = Field(default=None, alias="_id")
    content_item_id: str = Field(default_factory=generate_id, alias="ContentItemId")
    content_item_version_id: str = Field(
        default_factory=generate_id, alias="ContentItemVersionId"
    )
    content_type: str = Field(alias="ContentType")
    display_text: str = Field(default="", alias="DisplayText")
    latest: bool = Field(default=True, alias="Latest")
    published: bool = Field(default=True, alias="Published")
    owner: str | None = Field(default=None, alias="Owner")
    author: str | None = Field(default=None, alias="Author")
    created_utc: datetime | None = Field(default=None, alias="CreatedUtc")
    modified_utc: datetime | None = Field(default=None, alias="ModifiedUtc")
    published_utc: datetime | None = Field(default=None, alias="PublishedUtc")

    def to_mongo(self) -> dict:
        """Convert to MongoDB document format."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if data.get("_id"):
            data["_id"] = ObjectId(data["_id"])
        return data

    def to_raw(self) -> dict:
        """Storage shape without the Mongo ``_id``."""
        return self.model_dump(by_alias=True, exclude={"id"})

    @classmethod
    def from_mongo(cls, doc: dict) -> "ContentItem":
        """Create instance from MongoDB document."""
        if doc is None:
            return None
        return cls(**doc)


class FieldType(str, Enum):
    TEXT = "TextField"
    HTML = "HtmlField"
    NUMERIC = "NumericField"
    BOOLEAN = "BooleanField"
    DATE = "DateField"
    CONTENT_PICKER = "ContentPickerField"
    USER_PICKER = "UserPickerField"
    MULTI_TEXT = "MultiTextField"
    MEDIA = "MediaField"


BAG_PART = "BagPart"


class ContentFieldDefinition(BaseModel):
    """One field of a content type."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    field_type: FieldType = Field(alias="fieldType")


class ContentTypeDefinition(BaseModel):
    """Content type definition as stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True)

    id: PyObjectId | None = Field(default=None, alias="_id")
    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    fields: list[ContentFieldDefinition] = Field(default_factory=list)
    parts: list[str] = Field(default_factory=list)

    @property
    def has_bag(self) -> bool:
        return BAG_PART in self.parts

    def to_mongo(self) -> dict:
        """Convert to MongoDB document format."""
        data = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        if data.get("_id"):
            data["_id"] = ObjectId(data["_id"])
        return data

    @classmethod
    def from_mongo(cls, doc: dict) -> "ContentTypeDefinition":
        """Create instance from MongoDB document."""
        if doc is None:
            return None
        return cls(**doc)
