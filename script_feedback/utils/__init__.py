"""Utility modules for the script feedback system."""

from .formatting import (
    classify_score,
    extract_score,
    format_json,
    generate_report,
    merge_feedback,
    normalize_score,
    parse_json,
    passes_threshold,
    remove_duplicates,
    score_to_symbol,
    truncate_text,
)
from .logging import (
    DevelopmentFormatter,
    EvaluationContextFilter,
    JSONFormatter,
    SensitiveDataFilter,
    Timer,
    clear_evaluation_context,
    get_evaluation_id,
    redact_sensitive_data,
    set_evaluation_context,
    setup_logging,
)

__all__ = [
    # Formatting utilities
    "classify_score",
    "extract_score",
    "format_json",
    "generate_report",
    "merge_feedback",
    "normalize_score",
    "parse_json",
    "passes_threshold",
    "remove_duplicates",
    "score_to_symbol",
    "truncate_text",
    # Logging utilities
    "setup_logging",
    "set_evaluation_context",
    "clear_evaluation_context",
    "get_evaluation_id",
    "Timer",
    "JSONFormatter",
    "DevelopmentFormatter",
    "EvaluationContextFilter",
    "SensitiveDataFilter",
    "redact_sensitive_data",
]
