"""Schemas for content type definition management."""

from pydantic import BaseModel, ConfigDict, Field

from src.modules.content.models import ContentFieldDefinition


class ContentTypeDefinitionUpdate(BaseModel):
    """Schema for creating or replacing a content type definition."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName")
    fields: list[ContentFieldDefinition] = Field(default_factory=list)
    parts: list[str] = Field(default_factory=list)


class ContentTypeDefinitionResponse(ContentTypeDefinitionUpdate):
    """Schema for a stored content type definition."""

    name: str
