"""Per-axis script evaluators."""

from .axes import COMFORT, EMPATHY, HUMOR, AxisDescriptor
from .evaluator import (
    HEURISTIC_MODE,
    REMOTE_MODE,
    ScriptEvaluator,
    comfort_evaluator,
    empathy_evaluator,
    humor_evaluator,
)

__all__ = [
    "COMFORT",
    "EMPATHY",
    "HUMOR",
    "HEURISTIC_MODE",
    "REMOTE_MODE",
    "AxisDescriptor",
    "ScriptEvaluator",
    "comfort_evaluator",
    "empathy_evaluator",
    "humor_evaluator",
]
