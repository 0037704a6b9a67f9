from fastapi import APIRouter, Depends

from wya.core.deps import get_notification_service
from wya.services.notification_service import NotificationService

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.post("/check-inactive-users")
async def check_inactive_users(
    notifications: NotificationService = Depends(get_notification_service),
):
    """Run the inactivity scan once. Safe to call repeatedly within a month."""
    summary = await notifications.check_inactive_users()
    return {"success": True, **summary.as_dict()}
