"""Group expense business logic"""
from typing import List, Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.expense import GroupExpense, SplitType
from app.models.expense_split import ExpenseSplit
from app.repositories.expense_repository import GroupExpenseRepository
from app.schemas.expense import (GroupExpenseCreate, SplitPreviewRequest,
                                 SplitPreviewResponse)
from app.services.group_service import GroupService
from app.services.split_strategies import (calculate_participant_splits,
                                           validate_total)
from app.utils.decimal_utils import round_decimal, sum_decimals

settings = get_settings()
logger = structlog.get_logger(__name__)


class ExpenseService:
    """Service for group expense operations"""

    @staticmethod
    def validate_paid_by(paid_by: str, member_ids: List[str]) -> None:
        """
        Validate that the payer belongs to the group.

        Raises:
            ValidationError: If paid_by is not a group member
        """
        if paid_by not in member_ids:
            raise ValidationError(f"Payer '{paid_by}' is not a member of the group")

    @staticmethod
    async def create_expense(
        group_id: str,
        expense_data: GroupExpenseCreate,
        db: AsyncSession
    ) -> GroupExpense:
        """
        Split and save a new group expense.

        Args:
            group_id: Group id
            expense_data: Expense creation data
            db: Database session

        Returns:
            Created expense with splits

        Raises:
            NotFoundError: If group not found
            ValidationError: If the payer or split input is invalid
            DatabaseError: If the expense cannot be saved
        """
        group = await GroupService.get_group(group_id, db)
        member_ids = group.member_ids

        ExpenseService.validate_paid_by(expense_data.paid_by, member_ids)

        calculated_splits = calculate_participant_splits(
            expense_data.amount,
            expense_data.split_type,
            member_ids,
            expense_data.split_inputs,
            strict=settings.strict_split_totals,
        )

        expense = GroupExpense(
            group_id=group_id,
            description=expense_data.description,
            amount=round_decimal(expense_data.amount),
            currency=group.currency,
            paid_by=expense_data.paid_by,
            category=expense_data.category,
            expense_date=expense_data.expense_date,
            split_type=expense_data.split_type,
            split_entries=[
                ExpenseSplit(
                    member_id=split.member_id,
                    amount_owed=split.amount_owed,
                    input_value=split.input_value,
                    position=position,
                )
                for position, split in enumerate(calculated_splits)
            ],
        )

        try:
            created_expense = await GroupExpenseRepository.create(db, expense)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("group_expense_save_failed", group_id=group_id, error=str(e))
            raise DatabaseError("Failed to save expense")

        logger.info(
            "group_expense_created",
            group_id=group_id,
            expense_id=created_expense.id,
            split_type=expense_data.split_type.value,
            amount=str(expense.amount),
        )

        return await GroupExpenseRepository.get_with_splits(db, group_id, created_expense.id)

    @staticmethod
    async def preview_splits(
        group_id: str,
        preview_data: SplitPreviewRequest,
        db: AsyncSession
    ) -> SplitPreviewResponse:
        """
        Calculate splits without saving, tolerating inconsistent totals.

        The response tells whether the raw input adds up (the expense amount
        for exact splits, 100 for percentages) so a form can flag it.

        Raises:
            NotFoundError: If group not found
            ValidationError: If the input cannot be split at all
        """
        group = await GroupService.get_group(group_id, db)

        calculated_splits = calculate_participant_splits(
            preview_data.amount,
            preview_data.split_type,
            group.member_ids,
            preview_data.split_inputs,
            strict=False,
        )
        splits = {split.member_id: split.amount_owed for split in calculated_splits}
        total = sum_decimals(splits.values())

        if preview_data.split_type == SplitType.PERCENTAGE:
            input_total = sum_decimals(preview_data.split_inputs.values())
            total_valid = validate_total(preview_data.split_inputs, 100)
        elif preview_data.split_type == SplitType.EXACT:
            input_total = sum_decimals(preview_data.split_inputs.values())
            total_valid = validate_total(preview_data.split_inputs, preview_data.amount)
        else:
            input_total = total
            total_valid = validate_total(splits, preview_data.amount)

        return SplitPreviewResponse(
            split_type=preview_data.split_type,
            splits=splits,
            total=total,
            input_total=input_total,
            total_valid=total_valid,
        )

    @staticmethod
    async def get_group_expenses(
        group_id: str,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        category: Optional[str] = None
    ) -> Tuple[List[GroupExpense], int]:
        """
        Get a group's expenses with pagination.

        Args:
            group_id: Group id
            db: Database session
            page: Page number (1-indexed)
            page_size: Items per page
            category: Optional category filter

        Returns:
            Tuple of (expenses list, total count)

        Raises:
            NotFoundError: If group not found
        """
        await GroupService.get_group(group_id, db)

        skip = (page - 1) * page_size

        expenses = await GroupExpenseRepository.list_by_group(
            db, group_id, skip=skip, limit=page_size, category=category
        )
        total_count = await GroupExpenseRepository.count_by_group(
            db, group_id, category=category
        )

        return expenses, total_count

    @staticmethod
    async def get_expense_details(
        group_id: str,
        expense_id: str,
        db: AsyncSession
    ) -> GroupExpense:
        """
        Get one expense of a group.

        Raises:
            NotFoundError: If expense not found in the group
        """
        expense = await GroupExpenseRepository.get_with_splits(db, group_id, expense_id)

        if not expense:
            raise NotFoundError("Expense not found")

        return expense

    @staticmethod
    async def delete_expense(
        group_id: str,
        expense_id: str,
        db: AsyncSession
    ) -> bool:
        """
        Delete an expense and its splits.

        Returns:
            True if deleted

        Raises:
            NotFoundError: If expense not found in the group
        """
        deleted = await GroupExpenseRepository.delete(db, group_id, expense_id)
        if not deleted:
            raise NotFoundError("Expense not found")

        await db.commit()

        logger.info("group_expense_deleted", group_id=group_id, expense_id=expense_id)
        return True
