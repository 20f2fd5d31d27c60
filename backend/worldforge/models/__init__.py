"""
SQLAlchemy models. Import here so init_db() and the repositories can use them.
"""
from worldforge.models.interview import InterviewAnswerRecord, InterviewRecord
from worldforge.models.world import WorldRecord
from worldforge.models.world_configuration import WorldConfigurationRecord

__all__ = ["InterviewRecord", "InterviewAnswerRecord", "WorldRecord", "WorldConfigurationRecord"]
