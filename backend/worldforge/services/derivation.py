"""
Deterministic generation parameters derived from qualitative configuration fields.
No model calls: identical climate / tech level / species always give identical tables.
"""
from worldforge.schemas.world import WorldConfiguration

# (keywords, weights); first matching row wins, so order matters (tropical before temperate, etc.)
_BIOME_TABLE: tuple[tuple[tuple[str, ...], dict[str, float]], ...] = (
    (("tropical",), {"tropical_rainforest": 0.4, "tropical_savanna": 0.3, "jungle": 0.3}),
    (("frozen", "arctic"), {"tundra": 0.5, "ice_sheet": 0.3, "taiga": 0.2}),
    (("desert",), {"desert": 0.6, "arid_scrubland": 0.4}),
    (("temperate", "varied"), {
        "temperate_forest": 0.25,
        "grassland": 0.25,
        "temperate_rainforest": 0.15,
        "woodland": 0.15,
        "mediterranean": 0.1,
        "mountain": 0.1,
    }),
)
_DEFAULT_BIOMES = {"temperate_forest": 0.3, "grassland": 0.3, "mountain": 0.2, "desert": 0.2}

_RESOURCE_TABLE: dict[str, dict[str, float]] = {
    "stone_age": {"stone": 0.5, "wood": 0.3, "food": 0.2},
    "medieval": {"iron": 0.3, "wood": 0.3, "stone": 0.2, "food": 0.2},
    "industrial": {"coal": 0.25, "iron": 0.25, "oil": 0.2, "copper": 0.15, "food": 0.15},
    "modern": {"coal": 0.25, "iron": 0.25, "oil": 0.2, "copper": 0.15, "food": 0.15},
    "futuristic": {"energy_crystals": 0.3, "rare_metals": 0.3, "quantum_materials": 0.2, "synthesized_food": 0.2},
}
_MIXED_RESOURCES = {"basic_materials": 0.4, "food": 0.3, "advanced_materials": 0.3}

_SPECIES_ARCHETYPES: tuple[tuple[tuple[str, ...], dict[str, float]], ...] = (
    (("human",), {"adaptability": 0.8, "social": 0.7, "technology_affinity": 0.7}),
    (("elf", "elves"), {"longevity": 0.9, "magic_affinity": 0.8, "agility": 0.8}),
    (("dwarf", "dwarves"), {"strength": 0.8, "crafting": 0.9, "resilience": 0.8}),
    (("orc",), {"strength": 0.9, "endurance": 0.8, "aggression": 0.7}),
)
_NEUTRAL_SPECIES = {"adaptability": 0.6, "intelligence": 0.6, "strength": 0.6}


def derive_biome_weights(climate_range: str) -> dict[str, float]:
    climate = (climate_range or "").strip().lower()
    if not climate:
        return {}
    for keywords, weights in _BIOME_TABLE:
        if any(k in climate for k in keywords):
            return dict(weights)
    return dict(_DEFAULT_BIOMES)


def derive_resource_distribution(tech_level: str) -> dict[str, float]:
    level = (tech_level or "").strip()
    if not level:
        return {}
    return dict(_RESOURCE_TABLE.get(level, _MIXED_RESOURCES))


def derive_species_attributes(species: list[str]) -> dict[str, dict[str, float]]:
    out: dict[str, dict[str, float]] = {}
    for name in species:
        lowered = name.lower()
        profile = _NEUTRAL_SPECIES
        for keywords, attrs in _SPECIES_ARCHETYPES:
            if any(k in lowered for k in keywords):
                profile = attrs
                break
        out[name] = dict(profile)
    return out


def derive_generation_parameters(config: WorldConfiguration) -> WorldConfiguration:
    """Fill the three derived maps in place and return the config."""
    config.biome_weights = derive_biome_weights(config.climate_range)
    config.resource_distribution = derive_resource_distribution(config.tech_level)
    config.species_start_attributes = derive_species_attributes(config.sentient_species)
    return config
