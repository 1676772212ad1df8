"""Expense group and member models"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ExpenseGroup(Base):
    """A group of members sharing expenses"""

    __tablename__ = "expense_groups"

    id = Column(String(36), primary_key=True, default=_new_id, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    created_by = Column(String(64), nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    members = relationship(
        "GroupMember",
        back_populates="group",
        order_by="GroupMember.position",
        cascade="all, delete-orphan",
    )

    @property
    def member_ids(self) -> list:
        return [member.id for member in self.members]

    def __repr__(self) -> str:
        return f"<ExpenseGroup(id={self.id}, name={self.name}, members={len(self.members)})>"


class GroupMember(Base):
    """Member of an expense group; ids are unique per group"""

    __tablename__ = "group_members"

    group_id = Column(String(36), ForeignKey("expense_groups.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    group = relationship("ExpenseGroup", back_populates="members")

    def __repr__(self) -> str:
        return f"<GroupMember(group_id={self.group_id}, id={self.id}, name={self.name})>"
