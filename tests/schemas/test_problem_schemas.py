"""Problem Schemas — boundary validation and response builders.

Tests cover:
    - camelCase input accepted; unknown fields rejected
    - Length bounds on taskPrompt / initialProblem / finalProblem / reasoning
    - timeSpent must be a strict integer within [0, 3600]
    - build_detail derives primaryPromptType and attaches UTC to naive datetimes
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.core.domain_types import PromptType
from app.schemas.problem import (
    ProblemComplete, ProblemCreate, TimingUpdate, build_detail, build_summary,
)


def _create_payload(**overrides):
    payload = {
        "taskPrompt": "Reduce hospital readmission rates",
        "taskCategory": "healthcare",
        "initialProblem": "Predict which patients will be readmitted",
    }
    payload.update(overrides)
    return payload


def test_create_accepts_camel_case():
    body = ProblemCreate.model_validate(_create_payload())
    assert body.initial_problem.startswith("Predict")
    assert body.task_category.value == "healthcare"


def test_create_rejects_unknown_field():
    with pytest.raises(ValidationError):
        ProblemCreate.model_validate(_create_payload(priority="high"))


def test_create_rejects_unknown_category():
    with pytest.raises(ValidationError):
        ProblemCreate.model_validate(_create_payload(taskCategory="sports"))


def test_create_length_checked_after_strip():
    with pytest.raises(ValidationError):
        ProblemCreate.model_validate(_create_payload(initialProblem="   short   "))


def test_complete_bounds():
    ProblemComplete.model_validate({
        "finalProblem": "Predict 30-day readmission",
        "reasoning": "AUC is interpretable for staff triage",
    })
    with pytest.raises(ValidationError):
        ProblemComplete.model_validate({
            "finalProblem": "Predict 30-day readmission",
            "reasoning": "too short",
        })


@pytest.mark.parametrize("value", [-1, 3601, 1.5, "60"])
def test_timing_rejects_out_of_range_or_non_int(value):
    with pytest.raises(ValidationError):
        TimingUpdate.model_validate({"timeSpent": value})


def _row(interactions):
    return SimpleNamespace(
        id="p1",
        task_prompt="Reduce hospital readmission rates",
        task_category="healthcare",
        initial_statement="Predict which patients will be readmitted",
        current_statement="Predict which patients will be readmitted",
        final_statement=None,
        reasoning="",
        status="in-progress",
        started_at=datetime(2026, 3, 2, 9, 0),
        ended_at=None,
        duration_minutes=None,
        abandon_reason=None,
        interactions=interactions,
        device_info=None,
        evaluation=None,
    )


def _interaction(iid, prompt_type):
    return {
        "interaction_id": iid,
        "created_at": "2026-03-02T09:05:00+00:00",
        "prompt_type": prompt_type,
        "user_input": None,
        "ai_response_text": "Reply",
        "rating": None,
        "feedback_text": None,
        "was_accepted": False,
        "time_spent_seconds": 0,
    }


def test_summary_counts_interactions_and_sets_utc():
    summary = build_summary(_row([_interaction("a", "editor")]))
    assert summary.interaction_count == 1
    assert summary.start_time.tzinfo == timezone.utc


def test_detail_primary_prompt_type():
    detail = build_detail(_row([
        _interaction("a", "challenger"),
        _interaction("b", "challenger"),
        _interaction("c", "editor"),
    ]))
    assert detail.primary_prompt_type is PromptType.CHALLENGER
    assert [i.interaction_id for i in detail.interactions] == ["a", "b", "c"]


def test_detail_serializes_camel_case():
    dumped = build_detail(_row([])).model_dump(by_alias=True)
    assert "currentProblem" in dumped
    assert dumped["primaryPromptType"] == PromptType.EDITOR
