"""
Derived generation parameters: fixed tables, first-match keyword rules, deterministic output.
"""
import uuid

import pytest

from worldforge.schemas.world import WorldConfiguration
from worldforge.services.derivation import (
    derive_biome_weights,
    derive_generation_parameters,
    derive_resource_distribution,
    derive_species_attributes,
)


@pytest.mark.parametrize(
    "climate,key",
    [
        ("Tropical paradise", "tropical_rainforest"),
        ("ARCTIC wastes", "tundra"),
        ("frozen north", "ice_sheet"),
        ("endless desert", "desert"),
        ("varied and temperate", "temperate_forest"),
    ],
)
def test_biome_keywords(climate, key):
    assert key in derive_biome_weights(climate)


def test_biome_first_match_wins():
    """'tropical' is checked before 'desert', so a mixed description gets the tropical table."""
    weights = derive_biome_weights("tropical coasts and an inland desert")
    assert weights == {"tropical_rainforest": 0.4, "tropical_savanna": 0.3, "jungle": 0.3}


def test_biome_default_and_empty():
    assert derive_biome_weights("volcanic") == {"temperate_forest": 0.3, "grassland": 0.3, "mountain": 0.2, "desert": 0.2}
    assert derive_biome_weights("") == {}


def test_biome_weights_sum_to_one():
    for climate in ("tropical", "arctic", "desert", "temperate", "volcanic"):
        assert sum(derive_biome_weights(climate).values()) == pytest.approx(1.0)


def test_resource_tables():
    assert derive_resource_distribution("stone_age") == {"stone": 0.5, "wood": 0.3, "food": 0.2}
    assert derive_resource_distribution("industrial") == derive_resource_distribution("modern")
    assert derive_resource_distribution("renaissance") == {"basic_materials": 0.4, "food": 0.3, "advanced_materials": 0.3}
    assert derive_resource_distribution("") == {}


def test_species_archetypes_and_neutral():
    attrs = derive_species_attributes(["Wood Elves", "Mountain Dwarves", "Orcs", "Lizardfolk"])
    assert attrs["Wood Elves"]["magic_affinity"] == 0.8
    assert attrs["Mountain Dwarves"]["crafting"] == 0.9
    assert attrs["Orcs"]["aggression"] == 0.7
    assert attrs["Lizardfolk"] == {"adaptability": 0.6, "intelligence": 0.6, "strength": 0.6}


def test_species_profiles_are_independent_copies():
    attrs = derive_species_attributes(["Humans", "Human nomads"])
    attrs["Humans"]["social"] = 0.0
    assert attrs["Human nomads"]["social"] == 0.7
    assert derive_species_attributes(["Humans"])["Humans"]["social"] == 0.7


def test_derivation_is_deterministic():
    def make():
        return WorldConfiguration(
            interview_id=uuid.uuid4(),
            created_by=uuid.uuid4(),
            climate_range="temperate",
            tech_level="medieval",
            sentient_species=["humans", "elves"],
        )

    a, b = derive_generation_parameters(make()), derive_generation_parameters(make())
    assert a.biome_weights == b.biome_weights
    assert a.resource_distribution == b.resource_distribution
    assert a.species_start_attributes == b.species_start_attributes
