import logging

from wya.core.errors import UserNotFound
from wya.models.report import Report
from wya.stores.base import UserStore

logger = logging.getLogger(__name__)


async def file_report(store: UserStore, reporter_id: str, reported_id: str, explanation: str) -> Report:
    for identity_id in (reporter_id, reported_id):
        if await store.get_user(identity_id) is None:
            raise UserNotFound(identity_id)

    report = await store.create_report(reporter_id, reported_id, explanation.strip())
    logger.info(f"Report {report.id} filed by {reporter_id} against {reported_id}")
    return report
