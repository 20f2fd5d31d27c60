"""
World: a created game world. Generation metadata is folded into metadata_ after the generator runs.
"""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from worldforge.database import Base
from worldforge.models.types import UuidType, utcnow


class WorldRecord(Base):
    __tablename__ = "worlds"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(UuidType(), nullable=False, index=True)
    shape: Mapped[str] = mapped_column(String(20), nullable=False, default="sphere")
    radius: Mapped[float | None] = mapped_column(Float, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("shape IN ('sphere', 'cube', 'infinite')", name="worlds_shape_check"),
    )
