"""
Formatting helpers for reports and CLI output.
"""
import json
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..errors import MalformedPayloadError
from ..types.evaluation import AXES, EvaluationReport

# Score bands used to label axis results
QUALITY_LEVELS: Dict[str, Dict[str, int]] = {
    "low": {"min": 1, "max": 3},
    "medium": {"min": 4, "max": 6},
    "high": {"min": 7, "max": 10},
}

PASS_SYMBOL = "✓"
NEAR_MISS_SYMBOL = "◐"
FAIL_SYMBOL = "✗"


def format_json(obj: Any, indent: int = 2) -> str:
    """Serialize to indented JSON; pydantic models are dumped by alias."""
    if isinstance(obj, EvaluationReport):
        obj = obj.to_dict()
    return json.dumps(obj, indent=indent, ensure_ascii=False, default=str)


def parse_json(text: str) -> Any:
    """
    Parse JSON text.

    Raises:
        MalformedPayloadError: If the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError(f"Invalid JSON: {e}", payload=str(text)[:500]) from e


def extract_score(response: Any) -> Optional[Union[int, float]]:
    """Pull a score from a number or the first integer in a string."""
    if isinstance(response, bool):
        return None
    if isinstance(response, (int, float)):
        return response
    if isinstance(response, str):
        match = re.search(r"\d+", response)
        return int(match.group(0)) if match else None
    return None


def normalize_score(score: Any) -> Optional[int]:
    """Round half-up and clamp into [1, 10]; None if not numeric."""
    try:
        value = float(score)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return max(1, min(10, int(math.floor(value + 0.5))))


def passes_threshold(score: Any, threshold: Any) -> bool:
    normalized = normalize_score(score)
    minimum = normalize_score(threshold)
    if normalized is None or minimum is None:
        return False
    return normalized >= minimum


def score_to_symbol(score: Any, threshold: int) -> str:
    """Pass, near miss (within two points) or fail marker for CLI output."""
    normalized = normalize_score(score)
    if normalized is None:
        return FAIL_SYMBOL
    if normalized >= threshold:
        return PASS_SYMBOL
    if normalized >= threshold - 2:
        return NEAR_MISS_SYMBOL
    return FAIL_SYMBOL


def classify_score(score: Any) -> Optional[str]:
    """Map a score to its quality level name."""
    normalized = normalize_score(score)
    if normalized is None:
        return None
    for level, bounds in QUALITY_LEVELS.items():
        if bounds["min"] <= normalized <= bounds["max"]:
            return level
    return None


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def remove_duplicates(items: Iterable[Any]) -> List[Any]:
    """Drop repeated items, keeping first-seen order."""
    return list(dict.fromkeys(items))


def merge_feedback(first: Mapping[str, Any], second: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge two feedback mappings; later keys win, reasoning is concatenated."""
    merged = {**first, **second}
    merged["reasoning"] = " ".join(
        part for part in (first.get("reasoning"), second.get("reasoning")) if part
    )
    return merged


def generate_report(results: Union[EvaluationReport, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Build a compact score card from an evaluation report.

    Returns:
        A dict with summary, score_card, passed, issues and levels.
    """
    if isinstance(results, EvaluationReport):
        results = results.to_dict()

    status = results["status"]
    scores = results["scores"]
    thresholds = results["thresholds"]

    return {
        "summary": f"Evaluation complete: {status}",
        "score_card": {
            axis: f"{scores[axis]}/10 (threshold: {thresholds[axis]}/10)"
            for axis in AXES
        },
        "passed": status == "APPROVED",
        "issues": [
            f"{axis}: {scores[axis]}/{thresholds[axis]}"
            for axis in AXES
            if scores[axis] < thresholds[axis]
        ],
        "levels": {axis: classify_score(scores[axis]) for axis in AXES},
    }
