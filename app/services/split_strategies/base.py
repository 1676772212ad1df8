"""Base strategy interface"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from app.core.exceptions import ValidationError
from app.utils.decimal_utils import (MINOR_UNIT, from_minor_units, sum_decimals,
                                     to_decimal, within_tolerance)


class ParticipantSplit(BaseModel):
    """Result of split calculation for a member"""

    member_id: str
    amount_owed: Decimal = Field(..., ge=0)
    input_value: Optional[Decimal] = None


class BaseSplitStrategy(ABC):
    """Base class for split strategies"""

    @abstractmethod
    def calculate_splits(
        self,
        total_amount: Decimal,
        member_ids: Sequence[str],
        raw_input: Dict[str, Decimal],
        strict: bool = True,
    ) -> List[ParticipantSplit]:
        """
        Calculate split amounts for group members.

        Args:
            total_amount: Total expense amount
            member_ids: Ids of all group members, in group order
            raw_input: Per-member value whose meaning depends on the strategy
            strict: Reject inputs whose totals do not add up

        Returns:
            List of ParticipantSplit objects in group member order
        """
        pass

    @staticmethod
    def ordered_inputs(
        member_ids: Sequence[str], raw_input: Dict[str, Decimal], label: str
    ) -> List[Tuple[str, Decimal]]:
        """
        Validate raw per-member input and order it by group member order.

        Raises:
            ValidationError: On empty input, unknown member ids or negative values
        """
        if not raw_input:
            raise ValidationError(f"At least one {label} is required")

        unknown = [member_id for member_id in raw_input if member_id not in member_ids]
        if unknown:
            raise ValidationError(
                f"Unknown member id(s) in split: {', '.join(sorted(unknown))}",
                details={"unknown_member_ids": unknown},
            )

        ordered = []
        for member_id in member_ids:
            if member_id not in raw_input:
                continue
            value = to_decimal(raw_input[member_id])
            if value < 0:
                raise ValidationError(
                    f"{label.capitalize()} cannot be negative, got {value} for member {member_id}"
                )
            ordered.append((member_id, value))

        return ordered

    @staticmethod
    def allocate_proportionally(
        total_units: int, weights: Sequence[Decimal]
    ) -> List[int]:
        """
        Split an integer amount of minor units proportionally to weights.

        Each portion is floored; the leftover units go one at a time to the
        earliest entries so the portions always add up to total_units.
        """
        weight_total = sum(weights, Decimal("0"))
        portions = [int(total_units * weight // weight_total) for weight in weights]

        leftover = total_units - sum(portions)
        index = 0
        while leftover > 0:
            # Zero-weight entries never receive leftover units
            if weights[index % len(weights)] > 0:
                portions[index % len(weights)] += 1
                leftover -= 1
            index += 1

        return portions

    @staticmethod
    def to_splits(
        member_ids: Sequence[str],
        units: Sequence[int],
        input_values: Optional[Sequence[Decimal]] = None,
    ) -> List[ParticipantSplit]:
        """Build ParticipantSplit objects from minor-unit amounts"""
        splits = []
        for position, (member_id, amount_units) in enumerate(zip(member_ids, units)):
            splits.append(
                ParticipantSplit(
                    member_id=member_id,
                    amount_owed=from_minor_units(amount_units),
                    input_value=input_values[position] if input_values else None,
                )
            )
        return splits


def validate_total(
    values: Union[Dict[str, Decimal], Iterable[Decimal]],
    expected_total: Decimal,
    tolerance: Decimal = MINOR_UNIT,
) -> bool:
    """
    Check that split values add up to the expected total.

    Args:
        values: Mapping of member id to value, or plain values
        expected_total: The expense amount for exact splits, 100 for percentages
        tolerance: Largest accepted deviation (default 0.01)

    Returns:
        True if the sum is within tolerance of expected_total
    """
    if isinstance(values, dict):
        values = values.values()
    total = sum_decimals(to_decimal(value) for value in values)
    return within_tolerance(total, to_decimal(expected_total), tolerance)
