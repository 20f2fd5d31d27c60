"""
Persistence for the interview engine.
"""
from worldforge.repositories.base import InterviewRepository, WorldRepository
from worldforge.repositories.memory import InMemoryInterviewRepository, InMemoryWorldRepository
from worldforge.repositories.sql import SqlInterviewRepository, SqlWorldRepository

__all__ = [
    "InterviewRepository",
    "WorldRepository",
    "InMemoryInterviewRepository",
    "InMemoryWorldRepository",
    "SqlInterviewRepository",
    "SqlWorldRepository",
]
