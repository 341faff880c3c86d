"""Problem Lifecycle — pure transitions for in-progress → completed | abandoned.

Tests cover:
    - initial_fields: starts in-progress with an empty history
    - complete: duration rounding, trimming, length checks, terminal rejection
    - abandon: only from in-progress; reason recorded
    - update_draft: ignored once terminal
    - check_can_append: completed allowed by policy, abandoned never
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.domain_types import ProblemStatus, TaskCategory
from app.core.errors import InputValidationError, InvalidStateError
from app.core.problem_lifecycle import (
    LifecyclePolicy, abandon, check_can_append, complete,
    compute_duration_minutes, initial_fields, update_draft,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
FINAL = "Predict 30-day readmission using claims+EHR features, AUC≥0.75 target"
REASONING = (
    "Chose AUC as interpretable, actionable threshold for clinical staff "
    "triage workflows."
)


def _problem(status="in-progress", started_at=T0):
    return SimpleNamespace(
        status=status, started_at=started_at,
        current_statement="Predict hospital readmission risk from EHR data",
    )


def test_initial_fields_start_in_progress():
    fields = initial_fields(
        "Reduce readmissions", TaskCategory.HEALTHCARE,
        "Predict hospital readmission risk from EHR data", T0,
    )
    assert fields["status"] == "in-progress"
    assert fields["interactions"] == []
    assert fields["current_statement"] == fields["initial_statement"]
    assert fields["task_category"] == "healthcare"
    assert fields["ended_at"] is None


def test_initial_fields_require_aware_start():
    with pytest.raises(InputValidationError):
        initial_fields("Reduce readmissions", "healthcare", "statement", None)
    with pytest.raises(InputValidationError):
        initial_fields(
            "Reduce readmissions", "healthcare", "statement", datetime(2026, 1, 1),
        )


def test_complete_after_twelve_minutes():
    changes = complete(_problem(), FINAL, REASONING, T0 + timedelta(minutes=12))
    assert changes["status"] == "completed"
    assert changes["duration_minutes"] == 12
    assert changes["final_statement"] == FINAL
    assert changes["current_statement"] == FINAL
    assert changes["ended_at"] == T0 + timedelta(minutes=12)


@pytest.mark.parametrize("seconds, minutes", [
    (0, 0), (29, 0), (30, 1), (89, 1), (90, 2), (12 * 60 + 29, 12),
])
def test_duration_rounds_half_up(seconds, minutes):
    assert compute_duration_minutes(T0, T0 + timedelta(seconds=seconds)) == minutes


def test_duration_accepts_naive_storage_values():
    naive_start = T0.replace(tzinfo=None)
    assert compute_duration_minutes(naive_start, T0 + timedelta(minutes=5)) == 5


def test_duration_rejects_negative_span():
    with pytest.raises(InputValidationError):
        compute_duration_minutes(T0, T0 - timedelta(seconds=1))


def test_complete_trims_whitespace():
    changes = complete(_problem(), f"  {FINAL}  ", f"\n{REASONING}\n", T0)
    assert changes["final_statement"] == FINAL
    assert changes["reasoning"] == REASONING


@pytest.mark.parametrize("final, reasoning, field", [
    ("too short", REASONING, "finalProblem"),
    ("x" * 2001, REASONING, "finalProblem"),
    (FINAL, "short reasoning", "reasoning"),
    (FINAL, "y" * 3001, "reasoning"),
])
def test_complete_length_bounds(final, reasoning, field):
    with pytest.raises(InputValidationError) as exc:
        complete(_problem(), final, reasoning, T0)
    assert exc.value.field == field


@pytest.mark.parametrize("status", ["completed", "abandoned"])
def test_complete_from_terminal_rejected(status):
    with pytest.raises(InvalidStateError) as exc:
        complete(_problem(status), FINAL, REASONING, T0)
    assert exc.value.current_status == status


def test_complete_from_terminal_allowed_by_policy():
    policy = LifecyclePolicy(allow_complete_from_any_status=True)
    changes = complete(_problem("abandoned"), FINAL, REASONING, T0, policy)
    assert changes["status"] == "completed"


def test_complete_does_not_mutate_problem():
    problem = _problem()
    complete(problem, FINAL, REASONING, T0 + timedelta(minutes=3))
    assert problem.status == "in-progress"


def test_abandon_records_reason():
    changes = abandon(_problem(), T0 + timedelta(minutes=4), "ran out of time")
    assert changes["status"] == "abandoned"
    assert changes["duration_minutes"] == 4
    assert changes["abandon_reason"] == "ran out of time"


def test_abandon_completed_problem_rejected():
    problem = _problem("completed")
    with pytest.raises(InvalidStateError):
        abandon(problem, T0)
    assert problem.status == "completed"


def test_update_draft_in_progress():
    assert update_draft(_problem(), "New draft") == {"current_statement": "New draft"}


@pytest.mark.parametrize("status", ["completed", "abandoned"])
def test_update_draft_ignored_when_terminal(status):
    assert update_draft(_problem(status), "New draft") is None


def test_update_draft_too_long():
    with pytest.raises(InputValidationError):
        update_draft(_problem(), "x" * 2001)


def test_check_can_append():
    check_can_append(ProblemStatus.IN_PROGRESS.value)
    check_can_append("completed")
    with pytest.raises(InvalidStateError):
        check_can_append("completed", LifecyclePolicy(allow_append_after_completion=False))
    with pytest.raises(InvalidStateError):
        check_can_append("abandoned")
