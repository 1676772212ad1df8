"""Group expense endpoints"""
import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.database import get_db
from app.schemas.common import PaginationMeta
from app.schemas.expense import (GroupExpenseCreate, GroupExpenseListResponse,
                                 GroupExpenseResponse, SplitPreviewRequest,
                                 SplitPreviewResponse)
from app.services.cache_service import CacheService
from app.services.expense_service import ExpenseService

router = APIRouter(prefix="/groups/{group_id}", tags=["Expenses"])


@router.post(
    "/expenses",
    response_model=GroupExpenseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    group_id: str,
    expense_data: GroupExpenseCreate,
    db: AsyncSession = Depends(get_db),
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")
):
    """
    Create a new group expense.

    Supports idempotency via the `Idempotency-Key` header: repeating a request
    with the same key returns the original expense instead of recording it
    twice.

    Raises:
        400: If the payer is not a member or the split input is invalid
        404: If group not found
    """
    cache_key = None
    if idempotency_key:
        cache_key = CacheService.idempotency_key("group_expense", idempotency_key, group_id)
        cached_response = await CacheService.get(cache_key)

        if cached_response:
            return GroupExpenseResponse(**json.loads(cached_response))

    try:
        expense = await ExpenseService.create_expense(group_id, expense_data, db)
        response = GroupExpenseResponse.model_validate(expense)

        if cache_key:
            await CacheService.set(cache_key, response.model_dump_json())

        return response
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )


@router.get("/expenses", response_model=GroupExpenseListResponse)
async def list_expenses(
    group_id: str,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    category: Optional[str] = Query(None, description="Filter by category"),
    db: AsyncSession = Depends(get_db)
):
    """
    List a group's expenses, most recent date first.

    Raises:
        404: If group not found
    """
    try:
        expenses, total_count = await ExpenseService.get_group_expenses(
            group_id, db, page=page, page_size=page_size, category=category
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )

    return GroupExpenseListResponse(
        items=[GroupExpenseResponse.model_validate(expense) for expense in expenses],
        pagination=PaginationMeta.build(page, page_size, total_count)
    )


@router.get("/expenses/{expense_id}", response_model=GroupExpenseResponse)
async def get_expense(
    group_id: str,
    expense_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get one expense with its splits.

    Raises:
        404: If expense not found in the group
    """
    try:
        expense = await ExpenseService.get_expense_details(group_id, expense_id, db)
        return GroupExpenseResponse.model_validate(expense)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    group_id: str,
    expense_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Delete an expense.

    Raises:
        404: If expense not found in the group
    """
    try:
        await ExpenseService.delete_expense(group_id, expense_id, db)
        return None
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )


@router.post("/splits/preview", response_model=SplitPreviewResponse)
async def preview_splits(
    group_id: str,
    preview_data: SplitPreviewRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Calculate splits without saving them.

    Inconsistent exact or percentage totals are not rejected here;
    `total_valid` reports whether the entered values add up.

    Raises:
        400: If the input cannot be split (unknown member, zero shares, ...)
        404: If group not found
    """
    try:
        return await ExpenseService.preview_splits(group_id, preview_data, db)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )
