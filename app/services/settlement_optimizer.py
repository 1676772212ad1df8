"""Greedy debt simplification"""

import heapq
import warnings
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple, Union

import structlog

from app.core.exceptions import DataIntegrityWarning
from app.schemas.balance import MemberBalance, SettlementSuggestion
from app.utils.decimal_utils import MINOR_UNIT, to_decimal

logger = structlog.get_logger(__name__)

# (-remaining, input position, member id): largest remaining first, ties in input order
HeapEntry = Tuple[Decimal, int, str]


def _net_items(
    balances: Union[Dict[str, MemberBalance], Dict[str, Decimal], Iterable[MemberBalance]]
) -> List[Tuple[str, Decimal]]:
    """Normalize the accepted balance shapes to (member id, net) pairs"""
    if isinstance(balances, dict):
        items = []
        for member_id, balance in balances.items():
            net = balance.net if isinstance(balance, MemberBalance) else balance
            items.append((member_id, to_decimal(net)))
        return items
    return [(balance.member_id, to_decimal(balance.net)) for balance in balances]


def suggest_settlements(balances, epsilon: Decimal = MINOR_UNIT) -> List[SettlementSuggestion]:
    """
    Propose payments that bring every net balance to zero.

    Repeatedly matches the member owed the most with the member owing the
    most and transfers the smaller of the two amounts. Each transfer clears
    at least one of them, so at most creditors + debtors - 1 suggestions are
    produced. The input is not modified.

    Args:
        balances: Mapping of member id to MemberBalance (or to a net Decimal),
            or an iterable of MemberBalance
        epsilon: Balances within epsilon of zero count as settled

    Returns:
        Ordered list of SettlementSuggestion
    """
    creditors: List[HeapEntry] = []
    debtors: List[HeapEntry] = []

    for position, (member_id, net) in enumerate(_net_items(balances)):
        if net > epsilon:
            heapq.heappush(creditors, (-net, position, member_id))
        elif net < -epsilon:
            heapq.heappush(debtors, (net, position, member_id))

    suggestions: List[SettlementSuggestion] = []

    while creditors and debtors:
        credit_neg, creditor_pos, creditor = heapq.heappop(creditors)
        debt_neg, debtor_pos, debtor = heapq.heappop(debtors)

        credit = -credit_neg
        debt = -debt_neg
        amount = min(credit, debt)

        suggestions.append(
            SettlementSuggestion(from_member_id=debtor, to_member_id=creditor, amount=amount)
        )

        remaining_credit = credit - amount
        remaining_debt = debt - amount
        if remaining_credit > epsilon:
            heapq.heappush(creditors, (-remaining_credit, creditor_pos, creditor))
        if remaining_debt > epsilon:
            heapq.heappush(debtors, (-remaining_debt, debtor_pos, debtor))

    residual = [(member_id, -neg) for neg, _, member_id in creditors]
    residual += [(member_id, neg) for neg, _, member_id in debtors]
    if residual:
        logger.warning(
            "settlement_residual_balance",
            residual={member_id: str(amount) for member_id, amount in residual},
        )
        warnings.warn(
            "Unmatched balance left after settlement: "
            + ", ".join(f"{member_id}={amount}" for member_id, amount in residual),
            DataIntegrityWarning,
            stacklevel=2,
        )

    return suggestions
