from wya.models.user import User, Avatar
from wya.models.notification import Notification
from wya.models.report import Report, ReportStatus

__all__ = [
    "User", "Avatar",
    "Notification",
    "Report", "ReportStatus",
]
