import asyncio
import logging

from wya.core.config import Settings
from wya.core.deps import get_push_client, open_store
from wya.services.notification_service import NotificationService, ScanSummary

logger = logging.getLogger(__name__)


async def run_inactivity_scan(state, settings: Settings) -> ScanSummary:
    async with open_store(state) as store:
        service = NotificationService(
            store, get_push_client(settings), inactivity_days=settings.inactivity_days
        )
        summary = await service.check_inactive_users()
    logger.info(f"Inactivity scan finished: {summary.as_dict()}")
    return summary


async def inactivity_loop(state, settings: Settings) -> None:
    while True:
        try:
            await run_inactivity_scan(state, settings)
        except Exception:
            # don't crash the loop
            logger.exception("Inactivity scan failed")
        await asyncio.sleep(settings.inactivity_scan_interval_seconds)
