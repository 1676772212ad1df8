"""Group expense model"""
import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict

from sqlalchemy import (CheckConstraint, Column, Date, DateTime, Enum,
                        ForeignKey, Numeric, String)
from sqlalchemy.orm import relationship

from app.database import Base


class SplitType(str, enum.Enum):
    """Enum for split types"""
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"
    SHARES = "shares"


class GroupExpense(Base):
    """Expense paid by one member and split across members of the same group"""

    __tablename__ = "group_expenses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    group_id = Column(String(36), ForeignKey("expense_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    paid_by = Column(String(64), nullable=False, index=True)
    category = Column(String(100), nullable=False, default="Other")
    expense_date = Column(Date, nullable=False, index=True)
    split_type = Column(Enum(SplitType), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Constraints
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_amount_positive'),
    )

    # Relationships
    split_entries = relationship(
        "ExpenseSplit",
        back_populates="expense",
        order_by="ExpenseSplit.position",
        cascade="all, delete-orphan",
    )

    @property
    def splits(self) -> Dict[str, Decimal]:
        """Owed amount per member id, in member order"""
        return {entry.member_id: entry.amount_owed for entry in self.split_entries}

    @property
    def split_inputs(self) -> Dict[str, Decimal]:
        """Raw per-member input (exact amount, percentage or share weight)"""
        return {
            entry.member_id: entry.input_value
            for entry in self.split_entries
            if entry.input_value is not None
        }

    def __repr__(self) -> str:
        return f"<GroupExpense(id={self.id}, description={self.description}, amount={self.amount})>"
