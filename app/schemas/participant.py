"""Participant Schemas — registration, session, and withdrawal payloads.

Invariants:
    - username: 2–50 chars; email lower-cased and shape-checked
    - study_group and demographic fields validated against their enums
"""

from datetime import datetime

from pydantic import Field, field_validator

from app.core.domain_types import (
    AcademicLevel, DataScienceExperience, StudyGroup,
)
from app.schemas.base import CamelModel


_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class DemographicData(CamelModel):
    academic_level: AcademicLevel
    data_science_experience: DataScienceExperience


class ParticipantRegister(CamelModel):
    username: str = Field(min_length=2, max_length=50)
    email: str = Field(max_length=320, pattern=_EMAIL_PATTERN)
    study_group: StudyGroup
    demographic_data: DemographicData

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ParticipantRegistered(CamelModel):
    participant_id: str
    username: str
    study_group: StudyGroup
    token: str
    message: str


class SessionOut(CamelModel):
    session_id: str
    started_at: datetime
    ended_at: datetime | None = None
    tasks_completed_count: int = 0
    duration_minutes: int | None = None


class SessionStarted(CamelModel):
    session_id: str
    participant_id: str


class WithdrawRequest(CamelModel):
    reason: str | None = Field(None, max_length=500)


class ParticipantInfo(CamelModel):
    participant_id: str
    username: str
    study_group: StudyGroup
    consent_given: bool
    is_active: bool
    withdrew_from_study: bool
    last_active_at: datetime | None = None
    sessions: list[SessionOut]
