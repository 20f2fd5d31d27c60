"""
Text generation interface used by the interview engine.
One method: prompt in, text out. No streaming and no structured-output guarantee; callers impose
structure through prompt instructions and validate what comes back.
"""
from typing import Protocol


class TextGenerator(Protocol):
    """Anything with generate(prompt) -> str. Implementations raise on failure (never return None)."""

    def generate(self, prompt: str) -> str:
        ...
