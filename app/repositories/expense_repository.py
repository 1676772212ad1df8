"""Group expense data access"""

from typing import List, Optional

from sqlalchemy import delete as sql_delete
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.expense import GroupExpense
from app.models.expense_split import ExpenseSplit


class GroupExpenseRepository:
    """Repository for GroupExpense database operations"""

    @staticmethod
    async def create(db: AsyncSession, expense: GroupExpense) -> GroupExpense:
        """
        Save a new expense together with its split entries.

        Args:
            db: Database session
            expense: GroupExpense with split_entries attached

        Returns:
            Created expense
        """
        db.add(expense)
        await db.flush()
        return expense

    @staticmethod
    async def get_with_splits(
        db: AsyncSession, group_id: str, expense_id: str
    ) -> Optional[GroupExpense]:
        """
        Get one expense of a group with its splits eagerly loaded.

        Args:
            db: Database session
            group_id: Group id
            expense_id: Expense id

        Returns:
            Expense if found in the group, None otherwise
        """
        result = await db.execute(
            select(GroupExpense)
            .where(GroupExpense.id == expense_id, GroupExpense.group_id == group_id)
            .options(selectinload(GroupExpense.split_entries))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_group(db: AsyncSession, group_id: str) -> List[GroupExpense]:
        """
        Get every expense of a group, with splits.

        Args:
            db: Database session
            group_id: Group id

        Returns:
            List of expenses in creation order
        """
        result = await db.execute(
            select(GroupExpense)
            .where(GroupExpense.group_id == group_id)
            .order_by(GroupExpense.created_at, GroupExpense.id)
            .options(selectinload(GroupExpense.split_entries))
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_by_group(
        db: AsyncSession,
        group_id: str,
        skip: int = 0,
        limit: int = 20,
        category: Optional[str] = None,
    ) -> List[GroupExpense]:
        """
        List a group's expenses, most recent date first.

        Args:
            db: Database session
            group_id: Group id
            skip: Number of records to skip
            limit: Maximum number of records to return
            category: Optional category filter

        Returns:
            List of expenses
        """
        query = select(GroupExpense).where(GroupExpense.group_id == group_id)

        if category:
            query = query.where(GroupExpense.category == category)

        query = (
            query.order_by(GroupExpense.expense_date.desc(), GroupExpense.created_at.desc())
            .offset(skip)
            .limit(limit)
            .options(selectinload(GroupExpense.split_entries))
        )

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count_by_group(
        db: AsyncSession, group_id: str, category: Optional[str] = None
    ) -> int:
        """
        Count a group's expenses.

        Args:
            db: Database session
            group_id: Group id
            category: Optional category filter

        Returns:
            Total count of expenses
        """
        query = select(func.count(GroupExpense.id)).where(GroupExpense.group_id == group_id)
        if category:
            query = query.where(GroupExpense.category == category)

        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def member_is_referenced(db: AsyncSession, group_id: str, member_id: str) -> bool:
        """
        Check whether any expense of the group was paid by or split to a member.

        Args:
            db: Database session
            group_id: Group id
            member_id: Member id

        Returns:
            True if referenced, False otherwise
        """
        split_subquery = select(ExpenseSplit.expense_id).where(ExpenseSplit.member_id == member_id)
        result = await db.execute(
            select(func.count(GroupExpense.id)).where(
                GroupExpense.group_id == group_id,
                or_(GroupExpense.paid_by == member_id, GroupExpense.id.in_(split_subquery)),
            )
        )
        return result.scalar_one() > 0

    @staticmethod
    async def delete(db: AsyncSession, group_id: str, expense_id: str) -> bool:
        """
        Delete an expense and its splits.

        Args:
            db: Database session
            group_id: Group id
            expense_id: Expense id

        Returns:
            True if deleted, False if not found
        """
        result = await db.execute(
            select(GroupExpense.id).where(
                GroupExpense.id == expense_id, GroupExpense.group_id == group_id
            )
        )
        if result.scalar_one_or_none() is None:
            return False

        await db.execute(sql_delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense_id))
        await db.execute(sql_delete(GroupExpense).where(GroupExpense.id == expense_id))
        await db.flush()
        return True
