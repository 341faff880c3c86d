"""Participant ORM — an anonymized study participant and their session history.

Invariants:
    - id is the public participant id ("P" + epoch millis + 5 base36 chars)
    - study_group is fixed at registration and never updated
    - sessions is a JSON array managed only through core/participant_session.py
    - withdrawing sets is_active=False; inactive participants cannot authenticate

Design Decisions:
    - Sessions embedded as JSON (same document pattern as Problem.interactions)
    - version_id_col: session start/end and task counters are read-modify-write
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Participant(Base):
    """Research participant — owns Problems (one-to-many, via problems.owner_id)."""
    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    study_group: Mapped[str] = mapped_column(String(20), nullable=False)
    academic_level: Mapped[str] = mapped_column(String(20), nullable=False)
    data_science_experience: Mapped[str] = mapped_column(
        String(20), nullable=False,
    )
    consent_given: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    consent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    last_active_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    withdrew_from_study: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    withdrawal_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    withdrawal_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    sessions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __mapper_args__ = {"version_id_col": version}
