"""Group schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import PaginationMeta
from app.schemas.member import MemberInput, MemberResponse


class GroupCreate(BaseModel):
    """Schema for creating a group; the creator becomes its first member"""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    creator: MemberInput
    members: List[MemberInput] = Field(default_factory=list)


class GroupResponse(BaseModel):
    """Complete group response schema"""

    id: str
    name: str
    description: Optional[str] = None
    currency: str
    created_by: str
    members: List[MemberResponse]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupListResponse(BaseModel):
    """Response schema for group list"""

    items: List[GroupResponse]
    pagination: PaginationMeta
