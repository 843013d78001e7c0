"""
Command-line entry point: evaluate a script request stored as JSON.

Usage:
    script-feedback examples/sample-script.json [--output PATH] [--provider NAME]
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import get_settings
from .errors import EvaluationError
from .feedback_system import FeedbackSystem
from .types.evaluation import AXES, EvaluationReport
from .utils.formatting import format_json, score_to_symbol
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

RULE = "-" * 70
BANNER_RULE = "=" * 70


def default_output_path(input_path: Path) -> Path:
    """<name>.json -> <name>-output.json, next to the input."""
    return input_path.with_name(f"{input_path.stem}-output.json")


def print_banner() -> None:
    print("\n" + BANNER_RULE)
    print("  PHARMACEUTICAL INFLUENCER SCRIPT FEEDBACK SYSTEM")
    print(BANNER_RULE + "\n")


def print_results(report: EvaluationReport) -> None:
    """Print scores, summary, refined script and per-axis feedback."""
    print("EVALUATION RESULTS")
    print(RULE)

    print(f"\nStatus: {'APPROVED' if report.approved else 'NEEDS REVISION'}")

    print("\nScores vs Thresholds:")
    for axis in AXES:
        score = getattr(report.scores, axis)
        threshold = getattr(report.thresholds, axis)
        label = f"{axis.capitalize()}:"
        print(f"  - {label:<9} {score}/10 (threshold: {threshold}/10) {score_to_symbol(score, threshold)}")

    print(f"\nSummary:\n{report.summary}")

    if report.refined_script:
        print("\nREFINED SCRIPT:")
        print(RULE)
        print(report.refined_script)
        print(RULE)

    print("\nDETAILED FEEDBACK:")
    print(RULE)

    comfort = report.evaluations.comfort
    print("\nCOMFORT EVALUATION:")
    print(f"  Score: {comfort.score}/10")
    print(f'  Issue: "{comfort.flagged_line}"')
    print(f'  Fix: "{comfort.replacement}"')
    print(f"  Why: {comfort.reasoning}")

    empathy = report.evaluations.empathy
    print("\nEMPATHY EVALUATION:")
    print(f"  Score: {empathy.score}/10")
    print(f"  Edit 1: {empathy.edit_1}")
    print(f"  Edit 2: {empathy.edit_2}")
    print(f"  Why: {empathy.reasoning}")

    humor = report.evaluations.humor
    print("\nHUMOR EVALUATION:")
    print(f"  Score: {humor.score}/10")
    print(f"  Issue: {humor.flagged_humor}")
    print(f"  Fix: {humor.alternative}")
    print(f"  Why: {humor.reasoning}")


async def run(
    input_path: Path,
    output_path: Path,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> EvaluationReport:
    """Evaluate one request file and write the report next to it."""
    if not input_path.exists():
        raise FileNotFoundError(f"File not found: {input_path}")

    request = json.loads(input_path.read_text(encoding="utf-8"))
    print(f"Loaded script: {input_path.name}\n")

    system = FeedbackSystem.from_settings(get_settings(), provider_type=provider, model_tier=model)

    print("Running evaluations...\n")
    report = await system.evaluate_script(request)

    print_results(report)

    output_path.write_text(format_json(report), encoding="utf-8")
    print(f"\nResults saved to: {output_path.name}")

    return report


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function for the script feedback CLI.
    """
    parser = argparse.ArgumentParser(
        prog="script-feedback",
        description="Evaluate a pharmaceutical influencer script for comfort, empathy and humor",
    )
    parser.add_argument("input", nargs="?", help="Path to the request JSON file")
    parser.add_argument("--output", help="The output file path (default: <input>-output.json)")
    parser.add_argument(
        "--provider",
        help="The provider to use (default: first configured)",
        choices=["openai", "anthropic", "gemini"],
    )
    parser.add_argument("--model", help="Model tier (default, advanced, fast) or model id")

    args = parser.parse_args(argv)

    if not args.input:
        parser.print_help()
        print("\nExample: script-feedback examples/sample-script.json")
        return 1

    load_dotenv()
    settings = get_settings()
    setup_logging(
        log_level=logging.getLevelName(settings.logging.log_level),
        force_json=settings.logging.log_format_json,
    )

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_output_path(input_path)

    try:
        print_banner()
        asyncio.run(run(input_path, output_path, args.provider, args.model))
        print("\n" + BANNER_RULE + "\n")
    except (EvaluationError, OSError, json.JSONDecodeError) as e:
        logger.debug("Evaluation aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
