"""
User-related Pydantic models
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, StrictStr, field_serializer

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

# Keeps skip = (page - 1) * perPage well inside a BSON int64
MAX_PAGE = 1_000_000_000
MAX_PER_PAGE = 1000

ErrorMessages = Dict[Tuple[str, str], str]

EMAIL_MESSAGES: ErrorMessages = {
    ("email", "value_error"): "Email is invalid",
}


class UserFilterQuery(BaseModel):
    """Query parameters for listing users; page and perPage arrive as strings"""
    name: Optional[str] = Field(None, description="Case-insensitive substring of the user's name")
    page: int = Field(..., ge=1, le=MAX_PAGE, description="Page number, starting at 1")
    perPage: int = Field(..., ge=1, le=MAX_PER_PAGE, description="Number of users per page")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.perPage


class UserIdParams(BaseModel):
    error_messages: ClassVar[ErrorMessages] = {
        ("id", "missing"): "Id is required",
        ("id", "string_pattern_mismatch"): "Invalid ObjectId format",
    }

    id: StrictStr = Field(..., pattern=OBJECT_ID_PATTERN)


class UserCreateRequest(BaseModel):
    error_messages: ClassVar[ErrorMessages] = {
        ("name", "missing"): "Name is required",
        ("email", "missing"): "Email is required",
        ("age", "missing"): "Age is required",
        **EMAIL_MESSAGES,
    }

    name: StrictStr
    email: EmailStr
    age: StrictInt
    phone: Optional[StrictStr] = None
    address: Optional[StrictStr] = None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UserUpdateRequest(BaseModel):
    """Partial update; omitted and null fields are left untouched"""
    error_messages: ClassVar[ErrorMessages] = EMAIL_MESSAGES

    name: Optional[StrictStr] = None
    email: Optional[EmailStr] = None
    age: Optional[StrictInt] = None
    phone: Optional[StrictStr] = None
    address: Optional[StrictStr] = None

    def to_patch(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def format_timestamp(value: datetime) -> str:
    """Render as ISO-8601 UTC with millisecond precision, e.g. 2025-01-20T09:00:00.000Z"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    email: str
    age: int
    phone: Optional[str] = None
    address: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime

    @field_serializer("createdAt", "updatedAt")
    def serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserResponse":
        return cls.model_validate({**document, "_id": str(document["_id"])})

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UserListResponse(BaseModel):
    page: int
    perPage: int
    totalItems: int
    users: List[UserResponse]

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
