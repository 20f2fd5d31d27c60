"""
Configuration validation: required fields and enumerations checked before a world is created.
Returns every issue at once so the player sees the full list.
"""
from dataclasses import dataclass

from worldforge.exceptions import ConfigurationInvalidError
from worldforge.schemas.world import WorldConfiguration

VALID_TECH_LEVELS = ("stone_age", "medieval", "renaissance", "industrial", "modern", "futuristic", "mixed")
VALID_MAGIC_LEVELS = ("none", "rare", "common", "dominant")


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str


def validate_configuration(config: WorldConfiguration) -> list[ValidationIssue]:
    """All problems with config; empty list means it can be used for generation."""
    issues: list[ValidationIssue] = []
    if not config.theme.strip():
        issues.append(ValidationIssue("theme", "Theme is required"))
    if not config.tech_level.strip():
        issues.append(ValidationIssue("tech_level", "Tech level is required"))
    elif config.tech_level not in VALID_TECH_LEVELS:
        issues.append(ValidationIssue(
            "tech_level", "Invalid tech level. Must be one of: " + ", ".join(VALID_TECH_LEVELS)
        ))
    if config.magic_level and config.magic_level not in VALID_MAGIC_LEVELS:
        issues.append(ValidationIssue(
            "magic_level", "Invalid magic level. Must be one of: " + ", ".join(VALID_MAGIC_LEVELS)
        ))
    if not config.planet_size.strip():
        issues.append(ValidationIssue("planet_size", "Planet size is required"))
    if not config.sentient_species:
        issues.append(ValidationIssue("sentient_species", "At least one sentient species is required"))
    return issues


def ensure_valid_configuration(config: WorldConfiguration) -> WorldConfiguration:
    """Raise ConfigurationInvalidError listing every issue; return config unchanged if valid."""
    issues = validate_configuration(config)
    if issues:
        raise ConfigurationInvalidError(issues)
    return config
