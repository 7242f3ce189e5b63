"""Content schemas - write responses."""

from pydantic import BaseModel, ConfigDict


class ContentWriteResponse(BaseModel):
    """Schema for a created or updated item."""

    id: str
    title: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": "4qk8v1y0d7c3x9p2m5n6b8z1wr", "title": "Fido"}
        },
    )


class ContentDeleteResponse(BaseModel):
    """Schema for a removed item."""

    success: bool = True
    id: str
