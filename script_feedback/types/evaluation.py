"""
Type definitions for script evaluation.

This module defines the request, per-axis feedback and report types
exchanged between the evaluators, the refinement engine and the
feedback system.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


AXES = ("comfort", "empathy", "humor")

DEFAULT_THRESHOLDS: Dict[str, int] = {
    "comfort": 7,
    "empathy": 8,
    "humor": 7,
}

DEFAULT_FORBIDDEN_TONES: List[str] = [
    "dismissive",
    "condescending",
    "insensitive",
]

# Sentinels reported by the humor axis when nothing needs to change
NO_PROBLEMATIC_HUMOR = "none"
NO_CHANGES_NEEDED = "no changes needed"


class ReviewStatus(str, Enum):
    """Overall approval decision for a script."""

    APPROVED = "APPROVED"
    NEEDS_REVISION = "NEEDS_REVISION"


class Thresholds(BaseModel):
    """Caller-supplied minimum passing scores; unset axes use defaults."""

    model_config = ConfigDict(frozen=True)

    comfort: Optional[int] = Field(default=None, ge=1, le=10, description="Minimum comfort score")
    empathy: Optional[int] = Field(default=None, ge=1, le=10, description="Minimum empathy score")
    humor: Optional[int] = Field(default=None, ge=1, le=10, description="Minimum humor score")


class RulesConfig(BaseModel):
    """Rules applied to every axis of an evaluation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    threshold: Thresholds = Field(
        default_factory=Thresholds,
        description="Per-axis minimum passing scores",
    )
    forbidden_tones: List[str] = Field(
        default_factory=list,
        alias="forbiddenTones",
        description="Case-insensitive substrings that penalize every axis",
    )

    @field_validator("threshold", mode="before")
    @classmethod
    def validate_threshold(cls, v: Any) -> Any:
        """Treat a null threshold object as unset."""
        return Thresholds() if v is None else v

    @field_validator("forbidden_tones", mode="before")
    @classmethod
    def validate_forbidden_tones(cls, v: Any) -> Any:
        """Treat a null tone list as unset."""
        return [] if v is None else v


class EvaluationRequest(BaseModel):
    """Immutable input to every evaluator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product: str = Field(..., min_length=1, description="Product name")
    raw_script: str = Field(..., min_length=1, alias="rawScript", description="Script text to evaluate")
    rules: RulesConfig = Field(default_factory=RulesConfig, description="Evaluation rules")
    config: Optional[Dict[str, Any]] = Field(default=None, description="Caller configuration, passed through")

    @field_validator("product", "raw_script")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only product names and scripts."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class AxisFeedback(BaseModel):
    """Feedback shared by every axis."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=1, le=10, description="Axis score (1-10)")
    reasoning: str = Field(default="", description="Explanation of the score")


class ComfortFeedback(AxisFeedback):
    """Comfort axis result (embarrassed consumer perspective)."""

    flagged_line: str = Field(..., description="Most uncomfortable line or phrase")
    replacement: str = Field(..., description="Suggested softer replacement")


class EmpathyFeedback(AxisFeedback):
    """Empathy axis result (empathic friend perspective)."""

    edit_1: str = Field(..., description="First suggested improvement")
    edit_2: str = Field(..., description="Second suggested improvement")


class HumorFeedback(AxisFeedback):
    """Humor axis result (humor critic perspective)."""

    flagged_humor: str = Field(
        default=NO_PROBLEMATIC_HUMOR,
        description="Problematic joke or phrase, or 'none'",
    )
    alternative: str = Field(
        default=NO_CHANGES_NEEDED,
        description="Suggested alternative, or 'no changes needed'",
    )

    @property
    def has_problem(self) -> bool:
        """Whether a problematic joke was flagged."""
        return self.flagged_humor.strip().lower() != NO_PROBLEMATIC_HUMOR


class AxisScores(BaseModel):
    """One integer per axis; used for both scores and resolved thresholds."""

    model_config = ConfigDict(frozen=True)

    comfort: int
    empathy: int
    humor: int


class AxisEvaluations(BaseModel):
    """Per-axis feedback bundle."""

    model_config = ConfigDict(frozen=True)

    comfort: ComfortFeedback
    empathy: EmpathyFeedback
    humor: HumorFeedback


class AggregatedFeedback(AxisEvaluations):
    """All three axis results with the thresholds they were judged against."""

    thresholds: AxisScores = Field(
        default_factory=lambda: AxisScores(**DEFAULT_THRESHOLDS),
        description="Resolved per-axis thresholds",
    )

    @property
    def scores(self) -> AxisScores:
        return AxisScores(
            comfort=self.comfort.score,
            empathy=self.empathy.score,
            humor=self.humor.score,
        )

    @property
    def failing_axes(self) -> List[str]:
        """Axes scoring below their threshold, in canonical order."""
        scores = self.scores
        return [
            axis for axis in AXES
            if getattr(scores, axis) < getattr(self.thresholds, axis)
        ]

    @property
    def approved(self) -> bool:
        return not self.failing_axes


class EvaluationReport(BaseModel):
    """Final result of one evaluation; built once and never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: ReviewStatus = Field(..., description="Approval decision")
    scores: AxisScores = Field(..., description="Per-axis scores")
    thresholds: AxisScores = Field(..., description="Per-axis thresholds applied")
    evaluations: AxisEvaluations = Field(..., description="Per-axis feedback")
    refined_script: str = Field(..., alias="refinedScript", description="Script rewritten from the feedback")
    summary: str = Field(..., description="Human-readable summary")

    @property
    def approved(self) -> bool:
        return self.status is ReviewStatus.APPROVED

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the external output schema."""
        return self.model_dump(mode="json", by_alias=True)


class RefinementValidation(BaseModel):
    """Advisory result of checking a refined script."""

    is_valid: bool = Field(default=True, description="Always true; the check is advisory")
    message: str = Field(..., description="Outcome message")
    thresholds: AxisScores = Field(..., description="Thresholds the script should be re-checked against")
    notes: str = Field(default="", description="Follow-up recommendation")
