"""Prompt Sequencer — suggests the next AI mode from study group and interaction history.

Invariants:
    - next_mode is PURE and deterministic: same inputs, same output
    - Ties favor the study group's preferred mode (editor-first → editor)
    - Following the suggestion every time keeps |editor − challenger| <= 1
    - Suggestion only: the caller picks the mode actually used

Design Decisions:
    - Counts read from interaction dicts (the stored JSON shape), not ORM objects,
      so the same function serves routes, services and tests
    - Unknown prompt_type values are ignored rather than raising: stored history
      is trusted, it was validated on append
"""

from collections.abc import Iterable, Mapping

from app.core.domain_types import PromptType, StudyGroup


def count_prompt_types(interactions: Iterable[Mapping]) -> dict[PromptType, int]:
    """Count editor/challenger occurrences in an interaction history."""
    counts = {PromptType.EDITOR: 0, PromptType.CHALLENGER: 0}
    for interaction in interactions:
        raw = interaction.get("prompt_type")
        if raw in (PromptType.EDITOR.value, PromptType.CHALLENGER.value):
            counts[PromptType(raw)] += 1
    return counts


def next_mode(
    study_group: StudyGroup, interactions: Iterable[Mapping],
) -> PromptType:
    """Suggest the mode for the participant's next interaction."""
    counts = count_prompt_types(interactions)
    preferred = study_group.preferred_mode
    other = (
        PromptType.CHALLENGER if preferred is PromptType.EDITOR
        else PromptType.EDITOR
    )
    if counts[preferred] <= counts[other]:
        return preferred
    return other


def primary_prompt_type(interactions: Iterable[Mapping]) -> PromptType:
    """Most used mode in the history. Ties (including empty) → editor."""
    counts = count_prompt_types(interactions)
    if counts[PromptType.CHALLENGER] > counts[PromptType.EDITOR]:
        return PromptType.CHALLENGER
    return PromptType.EDITOR
