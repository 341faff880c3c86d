"""Problem Service — persistence shell around the lifecycle, interaction log and rating ledger.

Invariants:
    - Every lookup is scoped by owner_id: another participant's problem is indistinguishable
      from a missing one (404)
    - Every mutation goes through mutate_with_retry: core decides, shell writes,
      version counter rejects lost updates
    - An interaction record is built once, before the retry loop, so a retried
      append keeps the same interaction_id and created_at
    - Completing a problem bumps the owner's open-session task counter in a
      separate write (Participant and Problem never share a transaction); a failed
      counter write is logged and never undoes or hides the completion

Design Decisions:
    - Class over module functions: mirrors the handler classes that take db in __init__
    - Rating lookup scans the owner's problems in Python: per-participant problem counts
      are small and JSON path queries differ between PostgreSQL and SQLite
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import interaction_log, problem_lifecycle, rating_ledger
from app.core.domain_types import ProblemStatus, PromptType, StudyGroup
from app.core.errors import ErrorContext, FrameLabError, ResourceNotFoundError
from app.core.problem_lifecycle import LifecyclePolicy
from app.core.prompt_sequencer import count_prompt_types, next_mode
from app.models.problem import Problem
from app.services.concurrency import mutate_with_retry, utc_now
from app.services.participant_service import ParticipantService

logger = logging.getLogger(__name__)


class ProblemService:
    """Owner-scoped problem operations."""

    def __init__(
        self,
        db: AsyncSession,
        policy: LifecyclePolicy = LifecyclePolicy(),
        retry_attempts: int = 3,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.policy = policy
        self.retry_attempts = retry_attempts
        self.clock = clock

    # ─── Reads ──────────────────────────────────────────────────

    async def get_owned(
        self,
        problem_id: str,
        owner_id: str,
        statuses: tuple[ProblemStatus, ...] | None = None,
    ) -> Problem:
        """Load a problem owned by owner_id, optionally restricted to statuses."""
        query = (
            select(Problem)
            .where(Problem.id == problem_id)
            .where(Problem.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        if statuses:
            query = query.where(Problem.status.in_([s.value for s in statuses]))
        result = await self.db.execute(query)
        problem = result.scalar_one_or_none()
        if not problem:
            raise ResourceNotFoundError(
                "Problem", problem_id, ErrorContext(problem_id=problem_id),
            )
        return problem

    async def list_owned(
        self,
        owner_id: str,
        status: ProblemStatus | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Problem], int]:
        query = select(Problem).where(Problem.owner_id == owner_id)
        count_query = select(func.count()).select_from(Problem).where(
            Problem.owner_id == owner_id,
        )
        if status:
            query = query.where(Problem.status == status.value)
            count_query = count_query.where(Problem.status == status.value)
        query = query.order_by(Problem.created_at.desc()).limit(limit).offset(offset)
        problems = (await self.db.execute(query)).scalars().all()
        total = (await self.db.execute(count_query)).scalar_one()
        return list(problems), total

    async def suggest_next_mode(
        self, study_group: StudyGroup, owner_id: str, problem_id: str | None = None,
    ) -> tuple[PromptType, dict[PromptType, int]]:
        """Sequencer suggestion from one problem's history, or all of the owner's."""
        if problem_id:
            interactions = (await self.get_owned(problem_id, owner_id)).interactions
        else:
            problems, _ = await self.list_owned(owner_id, limit=1000)
            interactions = [i for p in problems for i in (p.interactions or [])]
        return next_mode(study_group, interactions), count_prompt_types(interactions)

    # ─── Lifecycle ──────────────────────────────────────────────

    async def create(
        self,
        owner_id: str,
        task_prompt: str,
        task_category: str,
        initial_statement: str,
        device_info: dict | None = None,
    ) -> Problem:
        fields = problem_lifecycle.initial_fields(
            task_prompt, task_category, initial_statement, self.clock(),
        )
        problem = Problem(owner_id=owner_id, device_info=device_info, **fields)
        self.db.add(problem)
        await self.db.commit()
        logger.info(
            "Problem created",
            extra={"problem_id": problem.id, "participant_id": owner_id},
        )
        return problem

    async def update_draft(self, problem_id: str, owner_id: str, text: str) -> bool:
        """Returns False when the problem is terminal and the edit was ignored."""
        _, applied = await mutate_with_retry(
            self.db,
            lambda: self.get_owned(problem_id, owner_id),
            lambda p: problem_lifecycle.update_draft(p, text),
            self.retry_attempts,
        )
        return applied

    async def complete(
        self, problem_id: str, owner_id: str, final_statement: str, reasoning: str,
    ) -> Problem:
        now = self.clock()
        problem, _ = await mutate_with_retry(
            self.db,
            lambda: self.get_owned(problem_id, owner_id),
            lambda p: problem_lifecycle.complete(
                p, final_statement, reasoning, now, self.policy,
            ),
            self.retry_attempts,
        )
        logger.info(
            "Problem completed",
            extra={"problem_id": problem_id, "participant_id": owner_id},
        )
        try:
            await ParticipantService(
                self.db, self.retry_attempts, self.clock,
            ).increment_tasks_completed(owner_id)
        except (FrameLabError, SQLAlchemyError) as e:
            logger.warning(
                f"Session task counter not updated: {e}",
                extra={"problem_id": problem_id, "participant_id": owner_id},
            )
            await self.db.rollback()
            problem = await self.get_owned(problem_id, owner_id)
        return problem

    async def abandon(
        self, problem_id: str, owner_id: str, reason: str | None = None,
    ) -> Problem:
        now = self.clock()
        problem, _ = await mutate_with_retry(
            self.db,
            lambda: self.get_owned(problem_id, owner_id),
            lambda p: problem_lifecycle.abandon(p, now, reason),
            self.retry_attempts,
        )
        logger.info(
            "Problem abandoned",
            extra={"problem_id": problem_id, "participant_id": owner_id},
        )
        return problem

    # ─── Interaction log ────────────────────────────────────────

    async def append_interaction(
        self,
        problem_id: str,
        owner_id: str,
        prompt_type: PromptType,
        user_input: str | None,
        ai_response_text: str,
    ) -> dict:
        record = interaction_log.new_interaction_record(
            prompt_type, user_input, ai_response_text, self.clock(),
        )

        def decide(problem: Problem) -> dict:
            problem_lifecycle.check_can_append(problem.status, self.policy)
            return {
                "interactions": interaction_log.append_interaction(
                    problem.interactions or [], record,
                ),
            }

        await mutate_with_retry(
            self.db,
            lambda: self.get_owned(
                problem_id, owner_id,
                (ProblemStatus.IN_PROGRESS, ProblemStatus.COMPLETED),
            ),
            decide,
            self.retry_attempts,
        )
        logger.info(
            "Interaction appended",
            extra={
                "problem_id": problem_id,
                "interaction_id": record["interaction_id"],
                "prompt_type": record["prompt_type"],
            },
        )
        return record

    async def update_interaction_timing(
        self, problem_id: str, owner_id: str, interaction_id: str, seconds: int,
    ) -> None:
        await mutate_with_retry(
            self.db,
            lambda: self.get_owned(problem_id, owner_id),
            lambda p: {
                "interactions": interaction_log.update_timing(
                    p.interactions or [], interaction_id, seconds,
                ),
            },
            self.retry_attempts,
        )

    async def rate_interaction(
        self,
        owner_id: str,
        interaction_id: str,
        rating: dict,
        feedback_text: str | None = None,
        was_accepted: bool | None = None,
    ) -> None:
        """Overwrite the rating of one of the owner's interactions."""
        problem_id = await self._find_problem_with_interaction(owner_id, interaction_id)
        await mutate_with_retry(
            self.db,
            lambda: self.get_owned(problem_id, owner_id),
            lambda p: {
                "interactions": rating_ledger.apply_rating(
                    p.interactions or [], interaction_id, rating,
                    feedback_text, was_accepted, self.policy,
                ),
            },
            self.retry_attempts,
        )
        logger.info(
            "Interaction rated",
            extra={"problem_id": problem_id, "interaction_id": interaction_id},
        )

    async def _find_problem_with_interaction(
        self, owner_id: str, interaction_id: str,
    ) -> str:
        result = await self.db.execute(
            select(Problem.id, Problem.interactions)
            .where(Problem.owner_id == owner_id),
        )
        for problem_id, interactions in result.all():
            if any(
                i.get("interaction_id") == interaction_id
                for i in (interactions or [])
            ):
                return problem_id
        raise ResourceNotFoundError(
            "Interaction", interaction_id,
            ErrorContext(interaction_id=interaction_id),
        )
