"""SQLAlchemy models"""
from app.models.group import ExpenseGroup, GroupMember
from app.models.expense import GroupExpense, SplitType
from app.models.expense_split import ExpenseSplit

__all__ = ["ExpenseGroup", "GroupMember", "GroupExpense", "ExpenseSplit", "SplitType"]
