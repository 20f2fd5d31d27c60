"""
Prompt builders for the interview turns: next question, review summary, and name suggestions.
All pure string formatting; answers are always listed in catalog order so prompts are reproducible.
"""
from worldforge.services.topic_catalog import ALL_TOPICS, Topic

NAME_SUGGESTION_PREFIX = "Based on the following world description, generate EXACTLY 3"

REVIEW_HINT = (
    "Is this correct? Type 'reply yes' to create your world, "
    "or 'reply change <topic> to <value>' to modify an answer."
)


def _answered_pairs(answers: dict[str, str]) -> list[tuple[str, str]]:
    return [(t.name, answers[t.name]) for t in ALL_TOPICS if t.name in answers]


def build_interview_prompt(
    answered: int,
    total: int,
    answers: dict[str, str],
    topic: Topic,
    last_answer: str | None = None,
) -> str:
    """
    Prompt for the next interview question: running tally, everything answered so far,
    the topic to ask about, and the style rules (short question, follow up on vague answers).
    """
    lines = [
        "You are interviewing a player to design a new world for a text-based multiplayer game.",
        f"Progress: {answered} of {total} topics covered.",
        "",
    ]
    pairs = _answered_pairs(answers)
    if pairs:
        lines.append("What the player has decided so far:")
        for name, answer in pairs:
            lines.append(f"- {name}: {answer}")
        lines.append("")
    if last_answer:
        lines.append(f"Their most recent answer was: \"{last_answer}\"")
        lines.append("")
    lines.extend([
        f"Next category: {topic.category.value}",
        f"Next topic: {topic.name}",
        f"About this topic: {topic.description}",
        "",
        "Ask ONE question about the next topic. Keep it to 1-2 sentences.",
        "If the most recent answer was vague or very short, briefly acknowledge it and invite more detail "
        "while still moving on to the next topic.",
        "Output only the question.",
    ])
    return "\n".join(lines)


def build_review_summary(answers: dict[str, str]) -> str:
    """Every topic with its answer (or a placeholder), followed by the confirm/change hint."""
    lines = ["Here is the vision for your world:", ""]
    for t in ALL_TOPICS:
        lines.append(f"- **{t.name}**: {answers.get(t.name, '(Not answered)')}")
    lines.extend(["", REVIEW_HINT])
    return "\n".join(lines)


def build_name_suggestion_prompt(answers: dict[str, str]) -> str:
    """Independent prompt asking for three alternative world names."""
    description = " ".join(
        f"{answers[name].strip().rstrip('.')}."
        for name in ("Core Concept", "Tone", "Climate")
        if (answers.get(name) or "").strip()
    ) or "A newly imagined world."
    return (
        f"{NAME_SUGGESTION_PREFIX} creative, unique world names.\n"
        "Each name should be on a new line with no numbering or formatting.\n"
        "Use only letters, spaces, hyphens and apostrophes.\n\n"
        f"World Description: {description}\n\n"
        "Return only the 3 names, one per line."
    )
