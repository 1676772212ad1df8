"""Database seeding script (demo trip group)"""
import asyncio
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.append(str(Path(__file__).parent.parent))

import structlog

from app.core.logging_config import configure_logging
from app.database import AsyncSessionLocal, init_models
from app.models.expense import SplitType
from app.schemas.expense import GroupExpenseCreate
from app.schemas.group import GroupCreate
from app.schemas.member import MemberInput
from app.services.balance_service import BalanceService
from app.services.expense_service import ExpenseService
from app.services.group_service import GroupService

logger = structlog.get_logger("seed_database")


async def seed_trip_group():
    """Create a three-member group with one expense of each split type"""
    async with AsyncSessionLocal() as session:
        group = await GroupService.create_group(
            GroupCreate(
                name="Goa Trip",
                description="Demo group",
                creator=MemberInput(id="asha", name="Asha", email="asha@example.com"),
                members=[
                    MemberInput(id="ravi", name="Ravi"),
                    MemberInput(id="meera", name="Meera"),
                ],
            ),
            session,
        )

        expenses = [
            GroupExpenseCreate(
                description="Hotel", amount=Decimal("9000"), paid_by="asha",
                category="Accommodation", expense_date=date.today(),
                split_type=SplitType.EQUAL,
            ),
            GroupExpenseCreate(
                description="Dinner", amount=Decimal("2400"), paid_by="ravi",
                category="Food & Dining", expense_date=date.today(),
                split_type=SplitType.EXACT,
                split_inputs={"asha": Decimal("700"), "ravi": Decimal("900"), "meera": Decimal("800")},
            ),
            GroupExpenseCreate(
                description="Scooter rental", amount=Decimal("1500"), paid_by="meera",
                category="Transportation", expense_date=date.today(),
                split_type=SplitType.PERCENTAGE,
                split_inputs={"asha": Decimal("50"), "ravi": Decimal("25"), "meera": Decimal("25")},
            ),
            GroupExpenseCreate(
                description="Groceries", amount=Decimal("1200"), paid_by="asha",
                category="Groceries", expense_date=date.today(),
                split_type=SplitType.SHARES,
                split_inputs={"asha": Decimal("1"), "ravi": Decimal("2"), "meera": Decimal("1")},
            ),
        ]
        for expense_data in expenses:
            await ExpenseService.create_expense(group.id, expense_data, session)

        plan = await BalanceService.get_settlement_plan(group.id, session)

        logger.info("seed_group_created", group_id=group.id, expenses=len(expenses))
        for settlement in plan.settlements:
            logger.info(
                "seed_settlement",
                from_member=settlement.from_member_id,
                to_member=settlement.to_member_id,
                amount=str(settlement.amount),
            )


async def main():
    """Main function to run seeding"""
    configure_logging()
    await init_models()

    try:
        await seed_trip_group()
        logger.info("seed_completed")
    except Exception:
        logger.exception("seed_failed")
        raise


if __name__ == "__main__":
    asyncio.run(main())
