"""Percentage split strategy"""

from decimal import Decimal
from typing import Dict, List, Sequence

import structlog

from app.core.exceptions import ValidationError
from app.services.split_strategies.base import (BaseSplitStrategy,
                                                ParticipantSplit,
                                                validate_total)
from app.utils.decimal_utils import round_decimal, sum_decimals, to_minor_units

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")


class PercentageSplitStrategy(BaseSplitStrategy):
    """Strategy for splitting expense by percentage"""

    def calculate_splits(
        self,
        total_amount: Decimal,
        member_ids: Sequence[str],
        raw_input: Dict[str, Decimal],
        strict: bool = True,
    ) -> List[ParticipantSplit]:
        """
        Calculate percentage-based split.

        Args:
            total_amount: Total expense amount
            member_ids: Ids of all group members
            raw_input: Member id -> percentage (0 to 100)
            strict: Reject percentages that do not sum to 100

        Returns:
            List of ParticipantSplit with calculated amounts

        Raises:
            ValidationError: If a percentage is out of range, a member is
                unknown, or (strict) percentages don't sum to 100
        """
        entries = self.ordered_inputs(member_ids, raw_input, "percentage")

        for member_id, percentage in entries:
            if percentage > HUNDRED:
                raise ValidationError(
                    f"Percentage must be between 0 and 100, got {percentage}"
                )

        percentages = [percentage for _, percentage in entries]
        ids = [member_id for member_id, _ in entries]

        if validate_total(percentages, HUNDRED):
            # Spread the full amount so shares add up exactly
            units = self.allocate_proportionally(to_minor_units(total_amount), percentages)
            return self.to_splits(ids, units, percentages)

        total_percentage = sum_decimals(percentages)
        if strict:
            raise ValidationError(
                f"Percentages must sum to 100%, got {total_percentage}%"
            )

        logger.warning(
            "percentage_split_total_mismatch",
            total_percentage=str(total_percentage),
        )
        return [
            ParticipantSplit(
                member_id=member_id,
                amount_owed=round_decimal(total_amount * percentage / HUNDRED),
                input_value=percentage,
            )
            for member_id, percentage in entries
        ]
