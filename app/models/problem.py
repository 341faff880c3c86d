"""Problem ORM — the aggregate root for one participant's framing task.

Invariants:
    - id and owner_id are immutable after creation
    - status is one of: in-progress, completed, abandoned (core/domain_types.ProblemStatus)
    - interactions is an append-only JSON array; storage order is the canonical order
    - version increments on every UPDATE; a stale write raises StaleDataError

Design Decisions:
    - JSON column for interactions: the record is a document with an embedded array,
      not a child table — an interaction has no lifecycle outside its Problem
    - version_id_col for optimistic concurrency: concurrent read-modify-write
      on the same Problem cannot silently lose an appended interaction
    - Column values change only through core transition descriptors applied by
      services/concurrency.mutate_with_retry
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Problem(Base):
    """One research task instance owned by a participant."""
    __tablename__ = "problems"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    owner_id: Mapped[str] = mapped_column(
        String(40), ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    task_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    task_category: Mapped[str] = mapped_column(String(20), nullable=False)
    initial_statement: Mapped[str] = mapped_column(Text, nullable=False)
    current_statement: Mapped[str] = mapped_column(Text, nullable=False)
    final_statement: Mapped[str | None] = mapped_column(Text, nullable=True)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="in-progress", index=True,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    abandon_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    interactions: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    evaluation: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    device_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __mapper_args__ = {"version_id_col": version}
