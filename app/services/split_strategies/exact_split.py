"""Exact split strategy"""
from decimal import Decimal
from typing import Dict, List, Sequence

import structlog

from app.core.exceptions import ValidationError
from app.services.split_strategies.base import (BaseSplitStrategy,
                                                ParticipantSplit,
                                                validate_total)
from app.utils.decimal_utils import (MAX_AMOUNT, from_minor_units,
                                     to_minor_units)

logger = structlog.get_logger(__name__)


class ExactSplitStrategy(BaseSplitStrategy):
    """Strategy for splits with literal per-member amounts"""

    def calculate_splits(
        self,
        total_amount: Decimal,
        member_ids: Sequence[str],
        raw_input: Dict[str, Decimal],
        strict: bool = True,
    ) -> List[ParticipantSplit]:
        """
        Use the entered amounts. A total within 0.01 of the amount has the
        difference added to the first member in group order.

        Args:
            total_amount: Total expense amount
            member_ids: Ids of all group members
            raw_input: Member id -> amount owed
            strict: Reject amounts that do not sum to total_amount

        Returns:
            List of ParticipantSplit with the entered amounts

        Raises:
            ValidationError: If an amount is negative, a member is unknown, or
                (strict) the amounts don't sum to total_amount within 0.01
        """
        entries = self.ordered_inputs(member_ids, raw_input, "amount")

        for member_id, value in entries:
            if value > MAX_AMOUNT:
                raise ValidationError(
                    f"Amount must not exceed {MAX_AMOUNT}, got {value} for member {member_id}"
                )

        ids = [member_id for member_id, _ in entries]
        values = [value for _, value in entries]
        units = [to_minor_units(value) for value in values]

        if validate_total([from_minor_units(u) for u in units], total_amount):
            # Absorb the tolerated cent so stored shares add up to the amount
            difference = to_minor_units(total_amount) - sum(units)
            if difference:
                for index, amount_units in enumerate(units):
                    if amount_units + difference >= 0:
                        units[index] += difference
                        break
            return self.to_splits(ids, units, values)

        total_assigned = from_minor_units(sum(units))
        if strict:
            raise ValidationError(
                f"Sum of exact amounts ({total_assigned}) must equal total amount ({total_amount})"
            )
        logger.warning(
            "exact_split_total_mismatch",
            total_assigned=str(total_assigned),
            total_amount=str(total_amount),
        )
        return self.to_splits(ids, units, values)
