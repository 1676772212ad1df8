"""Equal split strategy"""

from decimal import Decimal
from typing import Dict, List, Sequence

from app.core.exceptions import ValidationError
from app.services.split_strategies.base import (BaseSplitStrategy,
                                                ParticipantSplit)
from app.utils.decimal_utils import to_minor_units


class EqualSplitStrategy(BaseSplitStrategy):
    """Strategy for splitting expense equally among all group members"""

    def calculate_splits(
        self,
        total_amount: Decimal,
        member_ids: Sequence[str],
        raw_input: Dict[str, Decimal],
        strict: bool = True,
    ) -> List[ParticipantSplit]:
        """
        Calculate equal split for every group member.

        Raw input is ignored. When the amount does not divide evenly, the
        leftover minor units go one each to the first members in group order,
        so 100.00 over three members is 33.34, 33.33, 33.33.

        Args:
            total_amount: Total expense amount
            member_ids: Ids of all group members
            raw_input: Unused
            strict: Unused

        Returns:
            List of ParticipantSplit, one per member
        """
        if not member_ids:
            raise ValidationError("Cannot split an expense across an empty group")

        units = self.allocate_proportionally(
            to_minor_units(total_amount), [Decimal("1")] * len(member_ids)
        )
        return self.to_splits(member_ids, units)
