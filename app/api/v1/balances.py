"""Balance and settlement endpoints"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.database import get_db
from app.schemas.balance import GroupBalancesResponse, SettlementPlanResponse
from app.services.balance_service import BalanceService

router = APIRouter(prefix="/groups/{group_id}", tags=["Balances"])


@router.get("/balances", response_model=GroupBalancesResponse)
async def get_group_balances(group_id: str, db: AsyncSession = Depends(get_db)):
    """
    Get every member's balance in a group.

    `paid` is what the member paid for others, `owed` the total of their
    splits and `net` the difference (positive = the group owes them).
    Balances are recomputed from the stored expenses on every request.

    Raises:
        404: If group not found
    """
    try:
        return await BalanceService.get_group_balances(group_id, db)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/settlements", response_model=SettlementPlanResponse)
async def get_settlement_suggestions(group_id: str, db: AsyncSession = Depends(get_db)):
    """
    Suggest payments that settle every balance in the group.

    The member owed the most is paired with the member owing the most until
    everyone is settled.

    Raises:
        404: If group not found
    """
    try:
        return await BalanceService.get_settlement_plan(group_id, db)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
