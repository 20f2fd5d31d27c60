"""
Column types shared by the models so the same schema runs on SQLite and PostgreSQL.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, TypeDecorator


class UuidType(TypeDecorator):
    """UUID stored as its 36-char canonical string; strings are validated on the way in."""
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


def utcnow() -> datetime:
    """Timezone-aware now; used as Python-side default so SQLite rows carry timestamps too."""
    return datetime.now(timezone.utc)
