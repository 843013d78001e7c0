"""
Type definitions for the script feedback system.
"""

from .evaluation import (
    AXES,
    DEFAULT_FORBIDDEN_TONES,
    DEFAULT_THRESHOLDS,
    NO_CHANGES_NEEDED,
    NO_PROBLEMATIC_HUMOR,
    AggregatedFeedback,
    AxisEvaluations,
    AxisFeedback,
    AxisScores,
    ComfortFeedback,
    EmpathyFeedback,
    EvaluationReport,
    EvaluationRequest,
    HumorFeedback,
    RefinementValidation,
    ReviewStatus,
    RulesConfig,
    Thresholds,
)
from .providers import (
    AnthropicConfig,
    GeminiConfig,
    GenerationOptions,
    LLMProvider,
    OpenAIConfig,
    ProviderType,
)

__all__ = [
    # Evaluation types
    "AXES",
    "DEFAULT_FORBIDDEN_TONES",
    "DEFAULT_THRESHOLDS",
    "NO_CHANGES_NEEDED",
    "NO_PROBLEMATIC_HUMOR",
    "AggregatedFeedback",
    "AxisEvaluations",
    "AxisFeedback",
    "AxisScores",
    "ComfortFeedback",
    "EmpathyFeedback",
    "EvaluationReport",
    "EvaluationRequest",
    "HumorFeedback",
    "RefinementValidation",
    "ReviewStatus",
    "RulesConfig",
    "Thresholds",
    # Provider types
    "AnthropicConfig",
    "GeminiConfig",
    "GenerationOptions",
    "LLMProvider",
    "OpenAIConfig",
    "ProviderType",
]
