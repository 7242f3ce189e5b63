"""User model for MongoDB."""

from datetime import datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.core.models import PyObjectId, generate_id, utc_now


class UserInDB(BaseModel):
    """User document as stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True)

    id: PyObjectId | None = Field(default=None, alias="_id")
    user_id: str = Field(default_factory=generate_id)
    username: str
    email: EmailStr
    hashed_password: str
    phone: str | None = None
    roles: list[str] = Field(default_factory=list)
    # Custom profile properties, PascalCase keys (FirstName, LastName)
    properties: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_profile(self) -> dict:
        """Identity shape used to enrich user picker values."""
        return {
            "Email": self.email,
            "PhoneNumber": self.phone,
            "Properties": dict(self.properties),
        }

    def to_mongo(self) -> dict:
        """Convert to MongoDB document format."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if data.get("_id"):
            data["_id"] = ObjectId(data["_id"])
        return data

    @classmethod
    def from_mongo(cls, doc: dict) -> "UserInDB":
        """Create instance from MongoDB document."""
        if doc is None:
            return None
        return cls(**doc)
