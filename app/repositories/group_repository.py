"""Group and member data access"""

from typing import List, Optional

from sqlalchemy import delete as sql_delete
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.expense import GroupExpense
from app.models.expense_split import ExpenseSplit
from app.models.group import ExpenseGroup, GroupMember


class GroupRepository:
    """Repository for ExpenseGroup and GroupMember database operations"""

    @staticmethod
    async def create(db: AsyncSession, group: ExpenseGroup) -> ExpenseGroup:
        """
        Create a new group together with its members.

        Args:
            db: Database session
            group: ExpenseGroup object with members attached

        Returns:
            Created group
        """
        db.add(group)
        await db.flush()
        return group

    @staticmethod
    async def get_by_id(db: AsyncSession, group_id: str) -> Optional[ExpenseGroup]:
        """
        Get group by ID without members.

        Args:
            db: Database session
            group_id: Group id

        Returns:
            Group if found, None otherwise
        """
        result = await db.execute(select(ExpenseGroup).where(ExpenseGroup.id == group_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_with_members(db: AsyncSession, group_id: str) -> Optional[ExpenseGroup]:
        """
        Get group with its members eagerly loaded, in member order.

        Args:
            db: Database session
            group_id: Group id

        Returns:
            Group with members if found, None otherwise
        """
        result = await db.execute(
            select(ExpenseGroup)
            .where(ExpenseGroup.id == group_id)
            .options(selectinload(ExpenseGroup.members))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_groups(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 20,
        member_id: Optional[str] = None,
    ) -> List[ExpenseGroup]:
        """
        List groups, newest first.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return
            member_id: Only groups containing this member

        Returns:
            List of groups with members loaded
        """
        query = select(ExpenseGroup)

        if member_id:
            member_subquery = select(GroupMember.group_id).where(GroupMember.id == member_id)
            query = query.where(ExpenseGroup.id.in_(member_subquery))

        query = (
            query.order_by(ExpenseGroup.created_at.desc(), ExpenseGroup.id)
            .offset(skip)
            .limit(limit)
            .options(selectinload(ExpenseGroup.members))
        )

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count_groups(db: AsyncSession, member_id: Optional[str] = None) -> int:
        """
        Count groups, optionally only those containing a member.

        Args:
            db: Database session
            member_id: Optional member filter

        Returns:
            Total count of groups
        """
        query = select(func.count(ExpenseGroup.id))
        if member_id:
            member_subquery = select(GroupMember.group_id).where(GroupMember.id == member_id)
            query = query.where(ExpenseGroup.id.in_(member_subquery))

        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def add_member(db: AsyncSession, member: GroupMember) -> GroupMember:
        """
        Add a member to a group.

        Args:
            db: Database session
            member: GroupMember with group_id and position set

        Returns:
            Created member
        """
        db.add(member)
        await db.flush()
        return member

    @staticmethod
    async def member_exists(db: AsyncSession, group_id: str, member_id: str) -> bool:
        """
        Check if a member id is already used in a group.

        Args:
            db: Database session
            group_id: Group id
            member_id: Member id

        Returns:
            True if exists, False otherwise
        """
        result = await db.execute(
            select(GroupMember.id).where(
                GroupMember.group_id == group_id, GroupMember.id == member_id
            )
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def delete_member(db: AsyncSession, group_id: str, member_id: str) -> bool:
        """
        Remove a member from a group.

        Args:
            db: Database session
            group_id: Group id
            member_id: Member id

        Returns:
            True if deleted, False if not found
        """
        result = await db.execute(
            sql_delete(GroupMember).where(
                GroupMember.group_id == group_id, GroupMember.id == member_id
            )
        )
        await db.flush()
        return result.rowcount > 0

    @staticmethod
    async def delete(db: AsyncSession, group_id: str) -> bool:
        """
        Delete a group with its members, expenses and splits.

        Args:
            db: Database session
            group_id: Group id

        Returns:
            True if deleted, False if not found
        """
        group = await GroupRepository.get_by_id(db, group_id)
        if not group:
            return False

        expense_subquery = select(GroupExpense.id).where(GroupExpense.group_id == group_id)
        await db.execute(
            sql_delete(ExpenseSplit).where(ExpenseSplit.expense_id.in_(expense_subquery))
        )
        await db.execute(sql_delete(GroupExpense).where(GroupExpense.group_id == group_id))
        await db.execute(sql_delete(GroupMember).where(GroupMember.group_id == group_id))
        await db.execute(sql_delete(ExpenseGroup).where(ExpenseGroup.id == group_id))
        await db.flush()
        return True
