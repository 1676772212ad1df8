"""Group endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.database import get_db
from app.schemas.common import PaginationMeta
from app.schemas.group import GroupCreate, GroupListResponse, GroupResponse
from app.schemas.member import MemberInput
from app.services.group_service import GroupService

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new group.

    The creator is stored as the first member, followed by `members`.

    Raises:
        400: If two members share an id
    """
    try:
        group = await GroupService.create_group(group_data, db)
        return GroupResponse.model_validate(group)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )


@router.get("", response_model=GroupListResponse)
async def list_groups(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    member_id: Optional[str] = Query(None, description="Only groups containing this member"),
    db: AsyncSession = Depends(get_db)
):
    """
    List groups, newest first.

    Returns:
        Paginated list of groups with metadata
    """
    groups, total_count = await GroupService.list_groups(
        db, page=page, page_size=page_size, member_id=member_id
    )

    return GroupListResponse(
        items=[GroupResponse.model_validate(group) for group in groups],
        pagination=PaginationMeta.build(page, page_size, total_count)
    )


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get a group with its members.

    Raises:
        404: If group not found
    """
    try:
        group = await GroupService.get_group(group_id, db)
        return GroupResponse.model_validate(group)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a group. All of its expenses are deleted with it.

    Raises:
        404: If group not found
    """
    try:
        await GroupService.delete_group(group_id, db)
        return None
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )


@router.post(
    "/{group_id}/members",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    group_id: str,
    member_data: MemberInput,
    db: AsyncSession = Depends(get_db)
):
    """
    Add a member to a group.

    Raises:
        404: If group not found
        409: If the member id is already used in the group
    """
    try:
        group = await GroupService.add_member(group_id, member_data, db)
        return GroupResponse.model_validate(group)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message
        )


@router.delete("/{group_id}/members/{member_id}", response_model=GroupResponse)
async def remove_member(
    group_id: str,
    member_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Remove a member that no expense refers to.

    Raises:
        400: If the member is the group creator
        404: If group or member not found
        409: If an expense was paid by or split to the member
    """
    try:
        group = await GroupService.remove_member(group_id, member_id, db)
        return GroupResponse.model_validate(group)
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
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message
        )
