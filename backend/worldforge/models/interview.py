"""
InterviewRecord: one user's world-creation conversation (status + current topic index).
InterviewAnswerRecord: free-text answer per topic index; (interview_id, question_index) is unique so saves overwrite.
"""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worldforge.database import Base
from worldforge.models.types import UuidType, utcnow


class InterviewRecord(Base):
    __tablename__ = "world_interviews"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UuidType(), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="not_started", index=True)
    current_question_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('not_started', 'in_progress', 'completed')", name="world_interviews_status_check"
        ),
        CheckConstraint("current_question_index >= 0", name="world_interviews_index_check"),
    )

    answers = relationship(
        "InterviewAnswerRecord",
        back_populates="interview",
        cascade="all, delete-orphan",
        order_by="InterviewAnswerRecord.question_index",
    )


class InterviewAnswerRecord(Base):
    __tablename__ = "world_interview_answers"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    interview_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("world_interviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_index: Mapped[int] = mapped_column(Integer, nullable=False)
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("interview_id", "question_index", name="world_interview_answers_topic_key"),
    )

    interview = relationship("InterviewRecord", back_populates="answers")
