"""Expense split model"""
import uuid

from sqlalchemy import (CheckConstraint, Column, ForeignKey, Integer, Numeric,
                        String, UniqueConstraint)
from sqlalchemy.orm import relationship

from app.database import Base


class ExpenseSplit(Base):
    """Amount one member owes for one group expense"""

    __tablename__ = "expense_splits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    expense_id = Column(String(36), ForeignKey("group_expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(String(64), nullable=False, index=True)
    amount_owed = Column(Numeric(12, 2), nullable=False, default=0)
    input_value = Column(Numeric(12, 4), nullable=True)
    position = Column(Integer, nullable=False, default=0)

    # Constraints
    __table_args__ = (
        UniqueConstraint('expense_id', 'member_id', name='uq_expense_member'),
        CheckConstraint('amount_owed >= 0', name='check_amount_owed_non_negative'),
    )

    # Relationships
    expense = relationship("GroupExpense", back_populates="split_entries")

    def __repr__(self) -> str:
        return f"<ExpenseSplit(expense_id={self.expense_id}, member_id={self.member_id}, owed={self.amount_owed})>"
