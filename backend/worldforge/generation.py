"""
Procedural world generator interface. The generator itself lives outside this service; it is
plugged in through settings.world_generator ("package.module:attribute").
"""
import importlib
import logging
from typing import Protocol
from uuid import UUID

from worldforge.config import settings
from worldforge.schemas.world import GeneratedWorld, WorldConfiguration

logger = logging.getLogger(__name__)


class WorldGenerator(Protocol):
    def generate_world(self, world_id: UUID, config: WorldConfiguration) -> GeneratedWorld:
        ...


def load_world_generator(path: str | None = None) -> WorldGenerator | None:
    """
    Import the configured generator. The attribute may be an instance or a zero-arg factory/class.
    Returns None when nothing is configured; a bad path raises (misconfiguration should fail startup).
    """
    target = (path if path is not None else settings.world_generator).strip()
    if not target:
        return None
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ValueError(f"WORLD_GENERATOR must look like 'package.module:attribute', got {target!r}")
    obj = getattr(importlib.import_module(module_name), attr)
    generator = obj if hasattr(obj, "generate_world") and not isinstance(obj, type) else obj()
    logger.info("World generator loaded: %s", target)
    return generator
