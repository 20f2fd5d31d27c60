"""
Fixed, ordered catalog of interview topics. Order is the question order for every session;
answers are stored by index into ALL_TOPICS, so never reorder or insert in the middle.
The last topic is always "World Name".
"""
from dataclasses import dataclass
from enum import Enum


class TopicCategory(str, Enum):
    THEME = "Theme"
    TECH_LEVEL = "Tech Level"
    GEOGRAPHY = "Geography"
    CULTURE = "Culture"


@dataclass(frozen=True)
class Topic:
    category: TopicCategory
    name: str
    description: str  # guidance for the model, not shown to the player


WORLD_NAME_TOPIC = "World Name"

ALL_TOPICS: tuple[Topic, ...] = (
    # Theme
    Topic(TopicCategory.THEME, "Core Concept",
          "The genre and central idea of the world, e.g. high fantasy, science fiction, post-apocalyptic."),
    Topic(TopicCategory.THEME, "Tone",
          "The overall mood: grim, hopeful, whimsical, epic, mysterious."),
    Topic(TopicCategory.THEME, "Inspirations",
          "Books, games, films or myths that inspire this world."),
    Topic(TopicCategory.THEME, "Unique Aspect",
          "The one thing that makes this world different from any other."),
    Topic(TopicCategory.THEME, "Major Conflicts",
          "The main tensions, wars or struggles shaping the world."),
    # Tech level
    Topic(TopicCategory.TECH_LEVEL, "Technology Level",
          "Overall technology: stone age, medieval, renaissance, industrial, modern, futuristic, or mixed."),
    Topic(TopicCategory.TECH_LEVEL, "Magic Level",
          "How common magic is: none, rare, common, or dominant."),
    Topic(TopicCategory.TECH_LEVEL, "Advanced Technology",
          "The most advanced technology anyone possesses and who controls it."),
    Topic(TopicCategory.TECH_LEVEL, "Magic Impact",
          "How magic (or its absence) affects daily life, work and power."),
    # Geography
    Topic(TopicCategory.GEOGRAPHY, "Planet Size",
          "How big the world is compared to Earth: small, Earth-like, large, huge."),
    Topic(TopicCategory.GEOGRAPHY, "Climate",
          "The range of climates: tropical, arctic, desert, temperate, varied."),
    Topic(TopicCategory.GEOGRAPHY, "Land and Water",
          "How land and ocean are distributed, and whether sea levels are high or low."),
    Topic(TopicCategory.GEOGRAPHY, "Geological Age",
          "Whether the world is geologically young (sharp mountains, volcanoes), mature, or old and worn."),
    Topic(TopicCategory.GEOGRAPHY, "Moons",
          "Natural satellites: none, one, many, or leave it to chance."),
    Topic(TopicCategory.GEOGRAPHY, "Unique Features",
          "Remarkable landmarks or geographic wonders."),
    Topic(TopicCategory.GEOGRAPHY, "Extreme Environments",
          "Dangerous or hostile regions: volcanic wastes, poisoned seas, endless storms."),
    Topic(TopicCategory.GEOGRAPHY, "Branch",
          "A decision point: ask whether the player wants to add anything else about the land "
          "before moving on to the peoples of the world."),
    # Culture
    Topic(TopicCategory.CULTURE, "Sentient Species",
          "The intelligent species or peoples that inhabit the world. At least one is required."),
    Topic(TopicCategory.CULTURE, "Political Structure",
          "How societies are governed: empires, city-states, tribes, councils, theocracies."),
    Topic(TopicCategory.CULTURE, "Cultural Values",
          "What the main cultures value most: honor, knowledge, wealth, freedom, tradition."),
    Topic(TopicCategory.CULTURE, "Economic System",
          "How trade and wealth work: barter, coin, guilds, corporations, gift economies."),
    Topic(TopicCategory.CULTURE, "Religions",
          "Belief systems, gods, spirits or philosophies."),
    Topic(TopicCategory.CULTURE, "Taboos",
          "Forbidden acts, things never spoken of, or lines no one crosses."),
    Topic(TopicCategory.CULTURE, WORLD_NAME_TOPIC,
          "The name of the world. It must be unique; letters, numbers, spaces, hyphens and apostrophes only."),
)

TOTAL_TOPICS = len(ALL_TOPICS)


def topic_index(name: str) -> int | None:
    """Index of the topic with exactly this name (case-insensitive), or None."""
    wanted = name.strip().lower()
    for i, t in enumerate(ALL_TOPICS):
        if t.name.lower() == wanted:
            return i
    return None


def find_topic(name: str) -> Topic | None:
    """
    Resolve a player-typed topic name: exact match first (case-insensitive), then a substring
    match if exactly one topic contains it. Ambiguous or unknown names return None.
    """
    idx = topic_index(name)
    if idx is not None:
        return ALL_TOPICS[idx]
    wanted = name.strip().lower()
    if not wanted:
        return None
    candidates = [t for t in ALL_TOPICS if wanted in t.name.lower()]
    return candidates[0] if len(candidates) == 1 else None


def topic_names() -> list[str]:
    return [t.name for t in ALL_TOPICS]
