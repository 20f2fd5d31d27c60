"""
SQLAlchemy repositories. Each write commits immediately; one Session per request (see api.deps).
"""
import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from worldforge.exceptions import InterviewNotFoundError
from worldforge.models.interview import InterviewAnswerRecord, InterviewRecord
from worldforge.models.world import WorldRecord
from worldforge.models.world_configuration import WorldConfigurationRecord
from worldforge.schemas.interview import Answer, Interview, InterviewStatus
from worldforge.schemas.world import World, WorldConfiguration

logger = logging.getLogger(__name__)

# WorldConfiguration fields kept in the JSON "details" column rather than their own columns
_DETAIL_FIELDS = (
    "inspirations", "unique_aspect", "major_conflicts", "advanced_tech", "magic_impact",
    "land_water_ratio", "geological_age", "water_level", "natural_satellites", "unique_features",
    "extreme_environments", "political_structure", "cultural_values", "economic_system",
    "religions", "taboos",
)


def _config_from_record(row: WorldConfigurationRecord) -> WorldConfiguration:
    details = row.details or {}
    return WorldConfiguration(
        id=row.id,
        interview_id=row.interview_id,
        world_id=row.world_id,
        created_by=row.created_by,
        world_name=row.world_name,
        theme=row.theme,
        tone=row.tone or "",
        tech_level=row.tech_level,
        magic_level=row.magic_level or "",
        planet_size=row.planet_size,
        climate_range=row.climate_range or "",
        sentient_species=list(row.sentient_species or []),
        biome_weights=dict(row.biome_weights or {}),
        resource_distribution=dict(row.resource_distribution or {}),
        species_start_attributes=dict(row.species_start_attributes or {}),
        created_at=row.created_at,
        **{k: details[k] for k in _DETAIL_FIELDS if k in details},
    )


class SqlInterviewRepository:
    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, interview_id: UUID) -> InterviewRecord:
        row = self.db.query(InterviewRecord).filter(InterviewRecord.id == interview_id).first()
        if not row:
            raise InterviewNotFoundError(f"Interview {interview_id} not found")
        return row

    def create_interview(self, user_id: UUID) -> Interview:
        existing = (
            self.db.query(InterviewRecord)
            .filter(
                InterviewRecord.user_id == user_id,
                InterviewRecord.status != InterviewStatus.COMPLETED.value,
            )
            .order_by(InterviewRecord.created_at.desc())
            .first()
        )
        if existing:
            return Interview.model_validate(existing)
        row = InterviewRecord(
            user_id=user_id,
            status=InterviewStatus.NOT_STARTED.value,
            current_question_index=0,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Created interview %s for user %s", row.id, user_id)
        return Interview.model_validate(row)

    def get_interview(self, user_id: UUID) -> Interview | None:
        q = self.db.query(InterviewRecord).filter(InterviewRecord.user_id == user_id)
        row = (
            q.filter(InterviewRecord.status != InterviewStatus.COMPLETED.value)
            .order_by(InterviewRecord.created_at.desc())
            .first()
        )
        if row is None:
            row = q.order_by(InterviewRecord.created_at.desc()).first()
        return Interview.model_validate(row) if row else None

    def update_interview_status(self, interview_id: UUID, status: InterviewStatus) -> None:
        row = self._get_record(interview_id)
        row.status = InterviewStatus(status).value
        self.db.commit()

    def update_question_index(self, interview_id: UUID, index: int) -> None:
        row = self._get_record(interview_id)
        row.current_question_index = index
        self.db.commit()

    def save_answer(self, interview_id: UUID, question_index: int, text: str) -> None:
        row = (
            self.db.query(InterviewAnswerRecord)
            .filter(
                InterviewAnswerRecord.interview_id == interview_id,
                InterviewAnswerRecord.question_index == question_index,
            )
            .first()
        )
        if row:
            row.answer_text = text
        else:
            self.db.add(InterviewAnswerRecord(
                interview_id=interview_id,
                question_index=question_index,
                answer_text=text,
            ))
        self.db.commit()

    def get_answers(self, interview_id: UUID) -> list[Answer]:
        rows = (
            self.db.query(InterviewAnswerRecord)
            .filter(InterviewAnswerRecord.interview_id == interview_id)
            .order_by(InterviewAnswerRecord.question_index)
            .all()
        )
        return [Answer.model_validate(r) for r in rows]

    def save_configuration(self, config: WorldConfiguration) -> None:
        row = self.db.query(WorldConfigurationRecord).filter(WorldConfigurationRecord.id == config.id).first()
        if row is None:
            row = WorldConfigurationRecord(id=config.id, created_at=config.created_at)
            self.db.add(row)
        row.interview_id = config.interview_id
        row.world_id = config.world_id
        row.created_by = config.created_by
        row.world_name = config.world_name
        row.theme = config.theme
        row.tone = config.tone or None
        row.tech_level = config.tech_level
        row.magic_level = config.magic_level or None
        row.planet_size = config.planet_size
        row.climate_range = config.climate_range or None
        row.sentient_species = list(config.sentient_species)
        row.details = {k: getattr(config, k) for k in _DETAIL_FIELDS}
        row.biome_weights = dict(config.biome_weights)
        row.resource_distribution = dict(config.resource_distribution)
        row.species_start_attributes = dict(config.species_start_attributes)
        self.db.commit()

    def get_configuration_by_user_id(self, user_id: UUID) -> WorldConfiguration | None:
        row = (
            self.db.query(WorldConfigurationRecord)
            .filter(WorldConfigurationRecord.created_by == user_id)
            .order_by(WorldConfigurationRecord.created_at.desc())
            .first()
        )
        return _config_from_record(row) if row else None

    def get_configuration_by_world_id(self, world_id: UUID) -> WorldConfiguration | None:
        row = self.db.query(WorldConfigurationRecord).filter(WorldConfigurationRecord.world_id == world_id).first()
        return _config_from_record(row) if row else None

    def is_world_name_taken(self, name: str, exclude_interview_id: UUID | None = None) -> bool:
        wanted = (name or "").strip().lower()
        q = self.db.query(func.count(WorldConfigurationRecord.id)).filter(
            func.lower(WorldConfigurationRecord.world_name) == wanted
        )
        if exclude_interview_id is not None:
            q = q.filter(WorldConfigurationRecord.interview_id != exclude_interview_id)
        return bool(q.scalar())


class SqlWorldRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_world(self, world: World) -> None:
        self.db.add(WorldRecord(
            id=world.id,
            name=world.name,
            owner_id=world.owner_id,
            shape=world.shape,
            radius=world.radius,
            metadata_=dict(world.metadata),
            created_at=world.created_at,
        ))
        self.db.commit()

    def update_world(self, world: World) -> None:
        row = self.db.query(WorldRecord).filter(WorldRecord.id == world.id).first()
        if row is None:
            raise LookupError(f"World {world.id} not found")
        row.name = world.name
        row.shape = world.shape
        row.radius = world.radius
        # new dict so the JSON column is flagged dirty
        row.metadata_ = dict(world.metadata)
        self.db.commit()

    def get_world(self, world_id: UUID) -> World | None:
        row = self.db.query(WorldRecord).filter(WorldRecord.id == world_id).first()
        if row is None:
            return None
        return World(
            id=row.id,
            name=row.name,
            owner_id=row.owner_id,
            shape=row.shape,
            radius=row.radius,
            metadata=dict(row.metadata_ or {}),
            created_at=row.created_at,
        )
