"""Group and membership business logic"""
import uuid
from typing import List, Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import (ConflictError, DatabaseError, NotFoundError,
                                 ValidationError)
from app.models.group import ExpenseGroup, GroupMember
from app.repositories.expense_repository import GroupExpenseRepository
from app.repositories.group_repository import GroupRepository
from app.schemas.group import GroupCreate
from app.schemas.member import MemberInput

settings = get_settings()
logger = structlog.get_logger(__name__)


class GroupService:
    """Service for group operations"""

    @staticmethod
    def _build_member(member_data: MemberInput, position: int) -> GroupMember:
        """Create a GroupMember, generating an id when none was given"""
        return GroupMember(
            id=member_data.id or str(uuid.uuid4()),
            name=member_data.name,
            email=member_data.email,
            phone=member_data.phone,
            position=position,
        )

    @staticmethod
    async def create_group(group_data: GroupCreate, db: AsyncSession) -> ExpenseGroup:
        """
        Create a group. The creator is always its first member.

        Args:
            group_data: Group creation data
            db: Database session

        Returns:
            Created group with members

        Raises:
            ValidationError: If two members share an id
        """
        member_inputs = [group_data.creator, *group_data.members]
        members = [
            GroupService._build_member(member_data, position)
            for position, member_data in enumerate(member_inputs)
        ]

        member_ids = [member.id for member in members]
        duplicates = sorted({member_id for member_id in member_ids if member_ids.count(member_id) > 1})
        if duplicates:
            raise ValidationError(
                f"Duplicate member id(s): {', '.join(duplicates)}",
                details={"duplicate_member_ids": duplicates},
            )

        group = ExpenseGroup(
            name=group_data.name,
            description=group_data.description,
            created_by=members[0].id,
            currency=settings.default_currency,
            members=members,
        )

        try:
            created_group = await GroupRepository.create(db, group)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("group_save_failed", error=str(e))
            raise DatabaseError("Failed to save group")

        logger.info("group_created", group_id=created_group.id, members=len(members))

        return await GroupRepository.get_with_members(db, created_group.id)

    @staticmethod
    async def get_group(group_id: str, db: AsyncSession) -> ExpenseGroup:
        """
        Get group with members.

        Args:
            group_id: Group id
            db: Database session

        Returns:
            Group with members

        Raises:
            NotFoundError: If group not found
        """
        group = await GroupRepository.get_with_members(db, group_id)
        if not group:
            raise NotFoundError(f"Group with ID {group_id} not found")
        return group

    @staticmethod
    async def list_groups(
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        member_id: Optional[str] = None,
    ) -> Tuple[List[ExpenseGroup], int]:
        """
        Get groups with pagination.

        Args:
            db: Database session
            page: Page number (1-indexed)
            page_size: Items per page
            member_id: Only groups containing this member

        Returns:
            Tuple of (groups list, total count)
        """
        skip = (page - 1) * page_size

        groups = await GroupRepository.list_groups(
            db, skip=skip, limit=page_size, member_id=member_id
        )
        total_count = await GroupRepository.count_groups(db, member_id=member_id)

        return groups, total_count

    @staticmethod
    async def delete_group(group_id: str, db: AsyncSession) -> bool:
        """
        Delete a group and every expense recorded in it.

        Raises:
            NotFoundError: If group not found
        """
        deleted = await GroupRepository.delete(db, group_id)
        if not deleted:
            raise NotFoundError(f"Group with ID {group_id} not found")

        await db.commit()
        logger.info("group_deleted", group_id=group_id)
        return True

    @staticmethod
    async def add_member(
        group_id: str, member_data: MemberInput, db: AsyncSession
    ) -> ExpenseGroup:
        """
        Add a member at the end of the group's member list.

        Args:
            group_id: Group id
            member_data: New member
            db: Database session

        Returns:
            Updated group with members

        Raises:
            NotFoundError: If group not found
            ConflictError: If the member id is already used in the group
        """
        group = await GroupService.get_group(group_id, db)

        next_position = max((m.position for m in group.members), default=-1) + 1
        member = GroupService._build_member(member_data, position=next_position)
        if await GroupRepository.member_exists(db, group_id, member.id):
            raise ConflictError(f"Member '{member.id}' is already in the group")

        member.group_id = group_id

        await GroupRepository.add_member(db, member)
        await db.commit()

        logger.info("group_member_added", group_id=group_id, member_id=member.id)
        return await GroupRepository.get_with_members(db, group_id)

    @staticmethod
    async def remove_member(group_id: str, member_id: str, db: AsyncSession) -> ExpenseGroup:
        """
        Remove a member that no expense refers to.

        Raises:
            NotFoundError: If group or member not found
            ValidationError: If the member is the group creator
            ConflictError: If an expense was paid by or split to the member
        """
        group = await GroupService.get_group(group_id, db)

        if member_id not in group.member_ids:
            raise NotFoundError(f"Member '{member_id}' not found in group")

        if member_id == group.created_by:
            raise ValidationError("The group creator cannot be removed")

        if await GroupExpenseRepository.member_is_referenced(db, group_id, member_id):
            raise ConflictError(
                f"Member '{member_id}' is referenced by expenses and cannot be removed"
            )

        await GroupRepository.delete_member(db, group_id, member_id)
        await db.commit()

        logger.info("group_member_removed", group_id=group_id, member_id=member_id)
        return await GroupRepository.get_with_members(db, group_id)
