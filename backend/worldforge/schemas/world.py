"""
World configuration (structured interview output), world aggregate, and generator result types.
"""
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorldConfiguration(BaseModel):
    """Validated world parameters. Required for generation: theme, tech_level, planet_size, sentient_species."""
    id: UUID = Field(default_factory=uuid4)
    interview_id: UUID
    world_id: UUID | None = None
    created_by: UUID
    world_name: str = ""

    # Theme
    theme: str = ""
    tone: str = ""
    inspirations: list[str] = Field(default_factory=list)
    unique_aspect: str = ""
    major_conflicts: list[str] = Field(default_factory=list)

    # Technology and magic
    tech_level: str = ""  # stone_age | medieval | renaissance | industrial | modern | futuristic | mixed
    magic_level: str = ""  # none | rare | common | dominant
    advanced_tech: str = ""
    magic_impact: str = ""

    # Geography
    planet_size: str = ""
    climate_range: str = ""
    land_water_ratio: str = ""
    geological_age: str = ""  # young | mature | old
    water_level: str = ""  # "high", "low", "60%", ...
    natural_satellites: str = ""  # none | one | many | random | a number
    unique_features: list[str] = Field(default_factory=list)
    extreme_environments: list[str] = Field(default_factory=list)

    # Culture
    sentient_species: list[str] = Field(default_factory=list)
    political_structure: str = ""
    cultural_values: list[str] = Field(default_factory=list)
    economic_system: str = ""
    religions: list[str] = Field(default_factory=list)
    taboos: list[str] = Field(default_factory=list)

    # Derived generation parameters
    biome_weights: dict[str, float] = Field(default_factory=dict)
    resource_distribution: dict[str, float] = Field(default_factory=dict)
    species_start_attributes: dict[str, dict[str, float]] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_now)


class World(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    owner_id: UUID
    shape: str = "sphere"
    radius: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)


class GenerationMetadata(BaseModel):
    seed: int
    generation_time_seconds: float
    sea_level: float
    land_ratio: float
    width: int
    height: int


class GeneratedWorld(BaseModel):
    """Result of the external procedural generator; geography and weather are opaque here."""
    geography: Any = None
    weather: Any = None
    metadata: GenerationMetadata
