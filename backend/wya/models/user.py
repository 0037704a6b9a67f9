import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import String, Float, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from wya.core.database import Base


class Avatar(str, enum.Enum):
    bluey = "bluey"
    catto = "catto"
    greeny = "greeny"
    mrfox = "mrfox"
    porky = "porky"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    external_identity_id: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    # Not unique: re-signup with the same number creates a second record.
    phone_number: Mapped[str | None] = mapped_column(String, index=True, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, nullable=True)
    show_location: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    show_city: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    avatar: Mapped[str | None] = mapped_column(String, nullable=True)
    blocked: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    blocked_by: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    expo_push_token: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
