"""Member schemas"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class MemberInput(BaseModel):
    """Input schema for a group member"""

    id: Optional[str] = Field(
        default=None, min_length=1, max_length=64,
        description="Member id; generated when omitted",
    )
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)


class MemberResponse(BaseModel):
    """Response schema for a group member"""

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
