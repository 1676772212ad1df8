"""Group expense schemas"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.expense import SplitType
from app.schemas.common import PaginationMeta


class GroupExpenseBase(BaseModel):
    """Base group expense schema"""

    description: str = Field(..., max_length=500, min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    paid_by: str = Field(..., min_length=1, max_length=64)
    category: str = Field(default="Other", min_length=1, max_length=100)
    expense_date: date = Field(default_factory=date.today)
    split_type: SplitType = SplitType.EQUAL

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Convert amount to Decimal"""
        return Decimal(str(v))


class GroupExpenseCreate(GroupExpenseBase):
    """
    Schema for creating a group expense.

    `split_inputs` maps member id to the raw value for the split type: an
    exact amount, a percentage or a share weight. It is ignored for equal
    splits.
    """

    split_inputs: Dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("split_inputs", mode="before")
    @classmethod
    def convert_split_inputs(cls, v):
        """Convert numeric values to Decimal"""
        if v is None:
            return {}
        return {member_id: Decimal(str(value)) for member_id, value in v.items()}


class GroupExpenseResponse(GroupExpenseBase):
    """Complete group expense response schema"""

    id: str
    group_id: str
    currency: str
    splits: Dict[str, Decimal]
    split_inputs: Dict[str, Decimal] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupExpenseListResponse(BaseModel):
    """Response schema for group expense list"""

    items: List[GroupExpenseResponse]
    pagination: PaginationMeta


class SplitPreviewRequest(BaseModel):
    """Split calculation request that is not persisted"""

    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    split_type: SplitType
    split_inputs: Dict[str, Decimal] = Field(default_factory=dict)


class SplitPreviewResponse(BaseModel):
    """Calculated splits plus whether the raw input total is consistent"""

    split_type: SplitType
    splits: Dict[str, Decimal]
    total: Decimal
    input_total: Decimal
    total_valid: bool
