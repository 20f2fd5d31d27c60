"""
World creation after a confirmed interview: create the world row, run the procedural generator,
fold its metadata back into the world. Generation is best-effort: the world row commits first and
survives a generator failure; regenerate() fills in the metadata later.
"""
import logging
import time
from uuid import UUID

from worldforge.config import settings
from worldforge.generation import WorldGenerator
from worldforge.repositories.base import InterviewRepository, WorldRepository
from worldforge.schemas.world import GeneratedWorld, World, WorldConfiguration

logger = logging.getLogger(__name__)


def apply_generation_metadata(world: World, generated: GeneratedWorld) -> World:
    meta = generated.metadata
    world.metadata.update({
        "generated": True,
        "generation_seed": meta.seed,
        "generation_time": f"{meta.generation_time_seconds:.3f}s",
        "sea_level": meta.sea_level,
        "land_ratio": meta.land_ratio,
        "dimensions": {"width": meta.width, "height": meta.height},
    })
    return world


class WorldCreationTrigger:
    def __init__(
        self,
        world_repo: WorldRepository,
        interview_repo: InterviewRepository,
        generator: WorldGenerator | None = None,
    ):
        self._worlds = world_repo
        self._interviews = interview_repo
        self._generator = generator

    def create_world(self, config: WorldConfiguration, owner_id: UUID) -> World:
        """Create the world, try to generate it, then link config.world_id and save the config."""
        description = f"A {config.theme} world"
        description += f" with {config.tone} tone." if config.tone else "."
        world = World(
            name=config.world_name,
            owner_id=owner_id,
            shape="sphere",
            radius=settings.default_world_radius,
            metadata={"theme": config.theme, "description": description},
        )
        self._worlds.create_world(world)
        logger.info("Created world %s (%r) for user %s", world.id, world.name, owner_id)

        self._generate(world, config)

        config.world_id = world.id
        self._interviews.save_configuration(config)
        return world

    def regenerate(self, world_id: UUID) -> World:
        """Re-run generation for a world that was created but never got generation metadata."""
        world = self._worlds.get_world(world_id)
        if world is None:
            raise LookupError(f"World {world_id} not found")
        config = self._interviews.get_configuration_by_world_id(world_id)
        if config is None:
            raise LookupError(f"No configuration linked to world {world_id}")
        self._generate(world, config)
        return world

    def _generate(self, world: World, config: WorldConfiguration) -> bool:
        if self._generator is None:
            logger.info("No world generator configured; world %s created without generation", world.id)
            return False
        t_start = time.perf_counter()
        try:
            generated = self._generator.generate_world(world.id, config)
        except Exception:
            logger.exception("World generation failed for %s; keeping world without generation metadata", world.id)
            return False
        apply_generation_metadata(world, generated)
        try:
            self._worlds.update_world(world)
        except Exception:
            logger.exception("Failed to store generation metadata for world %s", world.id)
            return False
        logger.info(
            "World %s generated in %.2fs (seed=%s, land_ratio=%.2f)",
            world.id,
            time.perf_counter() - t_start,
            generated.metadata.seed,
            generated.metadata.land_ratio,
        )
        return True
