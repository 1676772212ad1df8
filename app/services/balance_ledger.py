"""Per-member balances of a group, folded from its expense history"""

import warnings
from decimal import Decimal
from typing import Dict, Iterable

import structlog

from app.core.exceptions import DataIntegrityWarning, MemberReferenceError
from app.schemas.balance import MemberBalance
from app.utils.decimal_utils import MINOR_UNIT, sum_decimals, to_decimal

logger = structlog.get_logger(__name__)


def compute_balances(group, expenses: Iterable) -> Dict[str, MemberBalance]:
    """
    Compute paid, owed and net amounts for every member of a group.

    Works on ORM objects and schemas alike: the group needs `members` (each
    with an `id`), every expense needs `id`, `amount`, `paid_by` and a
    `splits` mapping of member id to owed amount.

    Args:
        group: Group whose members are balanced
        expenses: The group's expenses, in any order

    Returns:
        Mapping of member id to MemberBalance, in group member order

    Raises:
        MemberReferenceError: If an expense mentions a member outside the group
    """
    paid: Dict[str, Decimal] = {}
    owed: Dict[str, Decimal] = {}
    for member in group.members:
        paid[member.id] = Decimal("0")
        owed[member.id] = Decimal("0")

    for expense in expenses:
        expense_id = getattr(expense, "id", None)

        if expense.paid_by not in paid:
            raise MemberReferenceError(expense.paid_by, expense_id)
        paid[expense.paid_by] += to_decimal(expense.amount)

        for member_id, share in expense.splits.items():
            if member_id not in owed:
                raise MemberReferenceError(member_id, expense_id)
            owed[member_id] += to_decimal(share)

    balances = {
        member_id: MemberBalance(
            member_id=member_id,
            paid=paid[member_id],
            owed=owed[member_id],
            net=paid[member_id] - owed[member_id],
        )
        for member_id in paid
    }

    check_zero_sum(balances.values())
    return balances


def check_zero_sum(balances: Iterable[MemberBalance]) -> bool:
    """
    Warn when net balances do not cancel out.

    Every expense credits its payer with the amount it debits across its
    splits, so a non-zero total means the stored splits are inconsistent.

    Returns:
        True if the nets sum to zero within 0.01
    """
    total = sum_decimals(balance.net for balance in balances)
    if abs(total) <= MINOR_UNIT:
        return True

    message = f"Net balances sum to {total} instead of 0"
    logger.warning("balances_not_zero_sum", total=str(total))
    warnings.warn(message, DataIntegrityWarning, stacklevel=2)
    return False
