"""Split calculation strategies"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from app.core.exceptions import ValidationError
from app.models.expense import SplitType
from app.services.split_strategies.base import (BaseSplitStrategy,
                                                ParticipantSplit,
                                                validate_total)
from app.services.split_strategies.equal_split import EqualSplitStrategy
from app.services.split_strategies.exact_split import ExactSplitStrategy
from app.services.split_strategies.percentage_split import \
    PercentageSplitStrategy
from app.services.split_strategies.shares_split import SharesSplitStrategy
from app.utils.decimal_utils import (MAX_AMOUNT, MINOR_UNIT, to_decimal,
                                     to_minor_units)


def get_split_strategy(split_type: SplitType) -> BaseSplitStrategy:
    """
    Get appropriate split strategy based on split type.

    Args:
        split_type: Type of split (EQUAL, EXACT, PERCENTAGE or SHARES)

    Returns:
        Instance of appropriate strategy

    Raises:
        ValidationError: If split_type is not recognized
    """
    strategies = {
        SplitType.EQUAL: EqualSplitStrategy(),
        SplitType.EXACT: ExactSplitStrategy(),
        SplitType.PERCENTAGE: PercentageSplitStrategy(),
        SplitType.SHARES: SharesSplitStrategy(),
    }

    try:
        split_type = SplitType(split_type)
    except ValueError:
        raise ValidationError(f"Unknown split type: {split_type}")

    return strategies[split_type]


def calculate_participant_splits(
    amount: Decimal,
    split_type: SplitType,
    member_ids: Sequence[str],
    raw_input: Optional[Dict[str, Decimal]] = None,
    strict: bool = True,
) -> List[ParticipantSplit]:
    """
    Validate the input and run the strategy for split_type.

    Returns:
        List of ParticipantSplit in group member order

    Raises:
        ValidationError: On an amount outside 0.01 to MAX_AMOUNT, an empty
            group, an unknown split type, or input the strategy rejects
    """
    amount = to_decimal(amount)
    if amount <= 0:
        raise ValidationError(f"Amount must be positive, got {amount}")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}, got {amount}")
    if to_minor_units(amount) <= 0:
        raise ValidationError(f"Amount must be at least {MINOR_UNIT}, got {amount}")
    if not member_ids:
        raise ValidationError("Group has no members")
    if len(set(member_ids)) != len(member_ids):
        raise ValidationError("Group member ids must be unique")

    strategy = get_split_strategy(split_type)
    return strategy.calculate_splits(amount, list(member_ids), raw_input or {}, strict)


def compute_splits(
    amount: Decimal,
    split_type: SplitType,
    member_ids: Sequence[str],
    raw_input: Optional[Dict[str, Decimal]] = None,
    strict: bool = True,
) -> Dict[str, Decimal]:
    """
    Compute the owed amount per member for one expense.

    Args:
        amount: Total expense amount (positive)
        split_type: How the amount is divided
        member_ids: Ids of all group members, in group order
        raw_input: Per-member exact amount, percentage or share weight
        strict: Reject exact/percentage input whose total is off by more than 0.01

    Returns:
        Mapping of member id to owed amount, in group member order
    """
    splits = calculate_participant_splits(amount, split_type, member_ids, raw_input, strict)
    return {split.member_id: split.amount_owed for split in splits}


__all__ = [
    "BaseSplitStrategy",
    "ParticipantSplit",
    "EqualSplitStrategy",
    "ExactSplitStrategy",
    "PercentageSplitStrategy",
    "SharesSplitStrategy",
    "get_split_strategy",
    "calculate_participant_splits",
    "compute_splits",
    "validate_total",
]
