"""
Extraction: turn the full set of interview answers into a WorldConfiguration.
One model call with a schema-describing prompt; the reply must be a single JSON object.
Cleaning is limited to trimming and stripping code fences; anything that still fails to parse
is an ExtractionError (no repair, no retry).
"""
import json
import logging
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from worldforge.exceptions import ExtractionError, UpstreamError
from worldforge.llm.base import TextGenerator
from worldforge.schemas.world import WorldConfiguration
from worldforge.services.derivation import derive_generation_parameters
from worldforge.services.topic_catalog import ALL_TOPICS

logger = logging.getLogger(__name__)

EXTRACTION_PREFIX = "You are a data extraction assistant."

EXTRACTION_SCHEMA = """{
  "theme": "string - world type (e.g., 'high fantasy', 'sci-fi')",
  "tone": "string - overall tone (e.g., 'grim', 'hopeful')",
  "inspirations": ["array of inspiration strings"],
  "uniqueAspect": "string - what makes this world unique",
  "conflicts": ["array of major conflicts/tensions"],
  "techLevel": "string - one of: stone_age, medieval, renaissance, industrial, modern, futuristic, mixed",
  "magicLevel": "string - one of: none, rare, common, dominant (or null)",
  "advancedTech": "string - most advanced technology",
  "magicImpact": "string - how magic affects daily life",
  "planetSize": "string - planet size description",
  "climateRange": "string - climate description",
  "landWaterRatio": "string - land/water distribution",
  "geologicalAge": "string - one of: young, mature, old (or null)",
  "waterLevel": "string - e.g. 'high', 'low', '60%' (or null)",
  "naturalSatellites": "string - none, one, many, random, or a number",
  "uniqueFeatures": ["array of unique geographical features"],
  "extremeEnvironments": ["array of extreme environments"],
  "sentientSpecies": ["array of sentient species - REQUIRED, at least one"],
  "politicalStructure": "string - political system",
  "culturalValues": ["array of main cultural values"],
  "economicSystem": "string - economic system",
  "religions": ["array of religions/belief systems"],
  "taboos": ["array of taboos/forbidden things"]
}"""


class ExtractedWorld(BaseModel):
    """Shape of the model's JSON reply (camelCase keys); nulls become empty values."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    theme: str | None = None
    tone: str | None = None
    inspirations: list[str] | None = None
    unique_aspect: str | None = Field(None, alias="uniqueAspect")
    conflicts: list[str] | None = None
    tech_level: str | None = Field(None, alias="techLevel")
    magic_level: str | None = Field(None, alias="magicLevel")
    advanced_tech: str | None = Field(None, alias="advancedTech")
    magic_impact: str | None = Field(None, alias="magicImpact")
    planet_size: str | None = Field(None, alias="planetSize")
    climate_range: str | None = Field(None, alias="climateRange")
    land_water_ratio: str | None = Field(None, alias="landWaterRatio")
    geological_age: str | None = Field(None, alias="geologicalAge")
    water_level: str | None = Field(None, alias="waterLevel")
    natural_satellites: str | None = Field(None, alias="naturalSatellites")
    unique_features: list[str] | None = Field(None, alias="uniqueFeatures")
    extreme_environments: list[str] | None = Field(None, alias="extremeEnvironments")
    sentient_species: list[str] | None = Field(None, alias="sentientSpecies")
    political_structure: str | None = Field(None, alias="politicalStructure")
    cultural_values: list[str] | None = Field(None, alias="culturalValues")
    economic_system: str | None = Field(None, alias="economicSystem")
    religions: list[str] | None = None
    taboos: list[str] | None = None

    @field_validator(
        "inspirations", "conflicts", "unique_features", "extreme_environments",
        "sentient_species", "cultural_values", "religions", "taboos",
        mode="before",
    )
    @classmethod
    def _single_string_as_list(cls, v):
        # Models sometimes answer a list field with one string
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v

    @field_validator("natural_satellites", mode="before")
    @classmethod
    def _number_as_string(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


def normalize_enum_value(value: str | None) -> str:
    """'Stone Age' / 'stone-age' / ' Medieval ' -> 'stone_age' / 'medieval'."""
    s = (value or "").strip().lower()
    return "_".join(s.replace("-", " ").split())


def _clean_list(items: list[str] | None) -> list[str]:
    return [s.strip() for s in (items or []) if isinstance(s, str) and s.strip()]


def build_extraction_prompt(answers: dict[str, str]) -> str:
    """Every answered topic as a Q/A pair (catalog order) plus the JSON schema to fill."""
    history = ["Interview Conversation:", ""]
    for t in ALL_TOPICS:
        if t.name in answers:
            history.append(f"Q: {t.name}\nA: {answers[t.name]}\n")
    return (
        f"{EXTRACTION_PREFIX} Extract structured world parameters from this interview conversation.\n\n"
        + "\n".join(history)
        + "\nReturn ONLY a valid JSON object with these exact fields (use null for missing data):\n"
        + EXTRACTION_SCHEMA
        + "\n\nCRITICAL: Return ONLY the JSON object, no explanatory text before or after."
    )


def strip_code_fences(text: str) -> str:
    """Remove an optional ``` / ```json fence and any text outside the outermost {...}."""
    t = (text or "").strip()
    if t.startswith("```"):
        lines = t.split("\n")
        if lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        t = "\n".join(lines)
    start = t.find("{")
    end = t.rfind("}")
    if start != -1 and end != -1 and end > start:
        t = t[start : end + 1]
    return t.strip()


def parse_extraction_response(raw: str) -> ExtractedWorld:
    """Parse the model reply; raise ExtractionError on empty, non-JSON, or wrongly shaped output."""
    if not raw or not raw.strip():
        raise ExtractionError("Extraction response was empty")
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(
            "Extraction JSON parse failed: %s. raw response (first 1000 chars): %s",
            e,
            (raw[:1000] + "..." if len(raw) > 1000 else raw),
        )
        raise ExtractionError(f"Extraction response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ExtractionError("Extraction response must be a JSON object")
    try:
        return ExtractedWorld.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"Extraction response has unexpected field types: {e}") from e


class ExtractionService:
    """Answers -> prompt -> model -> parsed WorldConfiguration with derived parameters."""

    def __init__(self, client: TextGenerator):
        self._client = client

    def extract(
        self,
        answers: dict[str, str],
        interview_id: UUID,
        user_id: UUID,
        world_name: str,
    ) -> WorldConfiguration:
        prompt = build_extraction_prompt(answers)
        try:
            raw = self._client.generate(prompt)
        except Exception as e:
            logger.exception("Extraction call failed for interview %s", interview_id)
            raise UpstreamError(f"Failed to generate extraction: {e}") from e

        parsed = parse_extraction_response(raw)
        config = WorldConfiguration(
            interview_id=interview_id,
            created_by=user_id,
            world_name=world_name.strip(),
            theme=(parsed.theme or "").strip(),
            tone=(parsed.tone or "").strip(),
            inspirations=_clean_list(parsed.inspirations),
            unique_aspect=(parsed.unique_aspect or "").strip(),
            major_conflicts=_clean_list(parsed.conflicts),
            tech_level=normalize_enum_value(parsed.tech_level),
            magic_level=normalize_enum_value(parsed.magic_level),
            advanced_tech=(parsed.advanced_tech or "").strip(),
            magic_impact=(parsed.magic_impact or "").strip(),
            planet_size=(parsed.planet_size or "").strip(),
            climate_range=(parsed.climate_range or "").strip(),
            land_water_ratio=(parsed.land_water_ratio or "").strip(),
            geological_age=normalize_enum_value(parsed.geological_age),
            water_level=(parsed.water_level or "").strip(),
            natural_satellites=(parsed.natural_satellites or "").strip().lower(),
            unique_features=_clean_list(parsed.unique_features),
            extreme_environments=_clean_list(parsed.extreme_environments),
            sentient_species=_clean_list(parsed.sentient_species),
            political_structure=(parsed.political_structure or "").strip(),
            cultural_values=_clean_list(parsed.cultural_values),
            economic_system=(parsed.economic_system or "").strip(),
            religions=_clean_list(parsed.religions),
            taboos=_clean_list(parsed.taboos),
        )
        derive_generation_parameters(config)
        logger.info(
            "Extracted configuration for interview %s: theme=%r tech_level=%r species=%s",
            interview_id,
            config.theme,
            config.tech_level,
            len(config.sentient_species),
        )
        return config
