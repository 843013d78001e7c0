"""Deterministic heuristic scorers for the comfort, empathy and humor axes."""

from .heuristics import (
    clamp_score,
    count_forbidden_tones,
    extract_sentences,
    generate_comfort_replacement,
    generate_empathy_edits,
    generate_humor_alternative,
    score_comfort,
    score_empathy,
    score_humor,
)

__all__ = [
    "clamp_score",
    "count_forbidden_tones",
    "extract_sentences",
    "generate_comfort_replacement",
    "generate_empathy_edits",
    "generate_humor_alternative",
    "score_comfort",
    "score_empathy",
    "score_humor",
]
