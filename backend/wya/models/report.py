import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from wya.core.database import Base


class ReportStatus(str, enum.Enum):
    pending = "pending"


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reporter_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    reported_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[ReportStatus] = mapped_column(
        SAEnum(ReportStatus), nullable=False, default=ReportStatus.pending
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
