"""Balance and settlement schemas"""
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class MemberBalance(BaseModel):
    """Paid, owed and net amounts of one member across a group's expenses"""
    member_id: str
    paid: Decimal = Decimal("0")
    owed: Decimal = Decimal("0")
    net: Decimal = Decimal("0")


class SettlementSuggestion(BaseModel):
    """A single payment that reduces outstanding group debt"""
    from_member_id: str
    to_member_id: str
    amount: Decimal = Field(..., gt=0)


class GroupBalancesResponse(BaseModel):
    """Response schema for a group's balances"""
    group_id: str
    currency: str
    balances: List[MemberBalance]
    warnings: List[str] = Field(default_factory=list)


class SettlementPlanResponse(BaseModel):
    """Response schema for a group's settlement suggestions"""
    group_id: str
    currency: str
    settlements: List[SettlementSuggestion]
    warnings: List[str] = Field(default_factory=list)
