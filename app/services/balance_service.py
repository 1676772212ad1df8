"""Group balance and settlement orchestration"""

import warnings
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DataIntegrityWarning
from app.repositories.expense_repository import GroupExpenseRepository
from app.schemas.balance import (GroupBalancesResponse, MemberBalance,
                                 SettlementPlanResponse)
from app.services.balance_ledger import compute_balances
from app.services.group_service import GroupService
from app.services.settlement_optimizer import suggest_settlements


class BalanceService:
    """Service for balance calculation operations"""

    @staticmethod
    def _collect_integrity_warnings(caught: List[warnings.WarningMessage]) -> List[str]:
        """Keep the messages of DataIntegrityWarnings, re-emit anything else"""
        messages = []
        for warning in caught:
            if issubclass(warning.category, DataIntegrityWarning):
                messages.append(str(warning.message))
            else:
                warnings.warn_explicit(
                    warning.message, warning.category, warning.filename, warning.lineno
                )
        return messages

    @staticmethod
    async def _load_balances(
        group_id: str, db: AsyncSession
    ) -> Tuple[str, List[MemberBalance], List[str]]:
        """
        Load a group with its expenses and fold them into balances.

        Returns:
            Tuple of (currency, balances in member order, integrity warnings)

        Raises:
            NotFoundError: If group not found
            MemberReferenceError: If an expense refers to a non-member
        """
        group = await GroupService.get_group(group_id, db)
        expenses = await GroupExpenseRepository.get_by_group(db, group_id)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DataIntegrityWarning)
            balances = compute_balances(group, expenses)

        return (
            group.currency,
            list(balances.values()),
            BalanceService._collect_integrity_warnings(caught),
        )

    @staticmethod
    async def get_group_balances(group_id: str, db: AsyncSession) -> GroupBalancesResponse:
        """
        Get every member's paid, owed and net amounts.

        Args:
            group_id: Group id
            db: Database session

        Returns:
            GroupBalancesResponse with balances in member order
        """
        currency, balances, integrity_warnings = await BalanceService._load_balances(group_id, db)

        return GroupBalancesResponse(
            group_id=group_id,
            currency=currency,
            balances=balances,
            warnings=integrity_warnings,
        )

    @staticmethod
    async def get_settlement_plan(group_id: str, db: AsyncSession) -> SettlementPlanResponse:
        """
        Suggest payments that settle the group.

        Args:
            group_id: Group id
            db: Database session

        Returns:
            SettlementPlanResponse with ordered suggestions
        """
        currency, balances, integrity_warnings = await BalanceService._load_balances(group_id, db)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DataIntegrityWarning)
            settlements = suggest_settlements(balances)

        integrity_warnings += BalanceService._collect_integrity_warnings(caught)

        return SettlementPlanResponse(
            group_id=group_id,
            currency=currency,
            settlements=settlements,
            warnings=integrity_warnings,
        )
