"""
Recompute user point aggregates from the contributions ledger.

Repairs total_points, daily_points and words_discovered after a crash
between a ledger append and the aggregate update.

Run:
    python scripts/reconcile_points.py            # every user
    python scripts/reconcile_points.py 12 15      # selected user ids
"""

import asyncio
import os
import sys

# Add parent directory to path to allow importing core modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import SessionLocal, engine
from services.points.ledger import reconcile_all_users, reconcile_user_aggregates
from utils.logging import get_logger, setup_logging

logger = get_logger("reconcile_points")


async def run(user_ids):
    async with SessionLocal() as db:
        if not user_ids:
            await reconcile_all_users(db)
            return

        for user_id in user_ids:
            corrected = await reconcile_user_aggregates(db, user_id)
            if corrected is None:
                logger.warning(f"User {user_id} does not exist")
            else:
                logger.info(f"User {user_id}: {corrected}")

    await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run([int(arg) for arg in sys.argv[1:]]))
