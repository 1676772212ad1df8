"""Shares split strategy"""

from decimal import Decimal
from typing import Dict, List, Sequence

from app.core.exceptions import ValidationError
from app.services.split_strategies.base import (BaseSplitStrategy,
                                                ParticipantSplit)
from app.utils.decimal_utils import sum_decimals, to_minor_units


class SharesSplitStrategy(BaseSplitStrategy):
    """Strategy for splitting expense proportionally to share weights"""

    def calculate_splits(
        self,
        total_amount: Decimal,
        member_ids: Sequence[str],
        raw_input: Dict[str, Decimal],
        strict: bool = True,
    ) -> List[ParticipantSplit]:
        """
        Convert share weights to amounts, e.g. weights {A: 1, B: 3} on 50.00
        give A 12.50 and B 37.50.

        Raises:
            ValidationError: If a weight is negative, a member is unknown, or
                all weights are zero
        """
        entries = self.ordered_inputs(member_ids, raw_input, "share")

        weights = [weight for _, weight in entries]
        if sum_decimals(weights) == 0:
            raise ValidationError("zero total shares")

        units = self.allocate_proportionally(to_minor_units(total_amount), weights)
        return self.to_splits([member_id for member_id, _ in entries], units, weights)
