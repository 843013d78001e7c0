"""
Quality feedback for pharmaceutical influencer scripts.

Three reviewers (comfort, empathy, humor) score a script concurrently,
their feedback is merged into a refined script, and the result is
approved only when every axis meets its threshold.
"""

from .errors import EvaluationError, MalformedPayloadError, RemoteCallError, ValidationError
from .feedback_system import FeedbackSystem
from .types.evaluation import EvaluationReport, EvaluationRequest, ReviewStatus

__version__ = "1.0.0"

__all__ = [
    "EvaluationError",
    "EvaluationReport",
    "EvaluationRequest",
    "FeedbackSystem",
    "MalformedPayloadError",
    "RemoteCallError",
    "ReviewStatus",
    "ValidationError",
]
