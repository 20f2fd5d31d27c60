"""
WorldConfigurationRecord: structured output of a completed interview, one per interview.
List/map fields are JSON. world_name is unique case-insensitively across all rows.
"""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from worldforge.database import Base
from worldforge.models.types import UuidType, utcnow


class WorldConfigurationRecord(Base):
    __tablename__ = "world_configurations"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    interview_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("world_interviews.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    world_id: Mapped[uuid.UUID | None] = mapped_column(UuidType(), nullable=True, index=True)
    created_by: Mapped[uuid.UUID] = mapped_column(UuidType(), nullable=False, index=True)
    world_name: Mapped[str] = mapped_column(String(100), nullable=False)

    theme: Mapped[str] = mapped_column(String(255), nullable=False)
    tone: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tech_level: Mapped[str] = mapped_column(String(30), nullable=False)
    magic_level: Mapped[str | None] = mapped_column(String(30), nullable=True)
    planet_size: Mapped[str] = mapped_column(String(255), nullable=False)
    climate_range: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Remaining descriptive fields (strings and lists) as one JSON document.
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    sentient_species: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    biome_weights: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    resource_distribution: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    species_start_attributes: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


# Case-insensitive uniqueness of world names
Index(
    "ix_world_configurations_world_name_lower",
    func.lower(WorldConfigurationRecord.world_name),
    unique=True,
)
