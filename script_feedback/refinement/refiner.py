"""
Script refinement: merges the three reviewers' feedback into one script.
"""
import logging
import re
from typing import Any, Mapping, Optional, Union

from ..config import ReviewSettings
from ..prompts import REFINEMENT_PROMPT, REFINEMENT_SYSTEM_PROMPT
from ..text_generation.core import generate_text_async
from ..types.evaluation import AggregatedFeedback, RefinementValidation, Thresholds
from ..types.providers import GenerationOptions, LLMProvider
from ..utils.logging import Timer

logger = logging.getLogger(__name__)

AGENT_NAME = "Script Refinement Agent"

REFINEMENT_MAX_TOKENS = 1500

JOURNEY_SENTENCE = (
    "\nYou're not alone in this journey - thousands of people have found relief using our product."
)
SUPPORT_SENTENCE = "\nWe understand how challenging this can be, and we're here to support you."

VALIDATION_MESSAGE = "Script has been refined according to all feedback."
VALIDATION_NOTES = (
    "For production use, run the refined script through all three quality agents "
    "again to verify it meets all thresholds."
)


def build_refinement_prompt(raw_script: str, feedback: AggregatedFeedback) -> str:
    """Render the original script and a transcript of all three reviews."""
    return REFINEMENT_PROMPT.format(
        script=raw_script,
        comfort_score=feedback.comfort.score,
        flagged_line=feedback.comfort.flagged_line,
        replacement=feedback.comfort.replacement,
        comfort_reasoning=feedback.comfort.reasoning,
        empathy_score=feedback.empathy.score,
        edit_1=feedback.empathy.edit_1,
        edit_2=feedback.empathy.edit_2,
        empathy_reasoning=feedback.empathy.reasoning,
        humor_score=feedback.humor.score,
        flagged_humor=feedback.humor.flagged_humor,
        alternative=feedback.humor.alternative,
        humor_reasoning=feedback.humor.reasoning,
    )


def _apply_edit(script: str, edit: str) -> str:
    """Apply one of the fixed sentence rewrites named by an empathy edit."""
    script_lower = script.lower()

    if "confidence" in edit and "confidence" not in script_lower:
        return re.sub(
            r"This product (?:treats|manages|helps with)",
            "This product helps you manage your condition with confidence",
            script,
            count=1,
            flags=re.IGNORECASE,
        )

    if "support" in edit and "support" not in script_lower:
        return re.sub(
            r"Here to (?:help|serve)",
            "Here to support you every step of the way",
            script,
            count=1,
            flags=re.IGNORECASE,
        )

    return script


def _insert_empathy_language(script: str, edit: str) -> str:
    """Insert a supportive sentence near the top of the script."""
    lines = script.split("\n")
    insert_at = min(2, len(lines) - 1)

    if "journey" in edit:
        lines.insert(insert_at, JOURNEY_SENTENCE)
    elif "understand" in edit:
        lines.insert(insert_at, SUPPORT_SENTENCE)

    return "\n".join(lines)


def apply_local_refinement(raw_script: str, feedback: AggregatedFeedback) -> str:
    """
    Patch the script with the reviewers' literal suggestions.

    Best effort: a flagged phrase that no longer appears verbatim is left
    alone.
    """
    refined = raw_script

    comfort = feedback.comfort
    if comfort.flagged_line:
        refined = refined.replace(comfort.flagged_line, comfort.replacement, 1)

    edit_1 = feedback.empathy.edit_1
    if "Replace" in edit_1 or "Instead of" in edit_1:
        refined = _apply_edit(refined, edit_1)

    edit_2 = feedback.empathy.edit_2
    if "Add" in edit_2 or "Include" in edit_2:
        refined = _insert_empathy_language(refined, edit_2)

    humor = feedback.humor
    if humor.has_problem and humor.flagged_humor:
        refined = refined.replace(humor.flagged_humor, humor.alternative, 1)

    return refined.strip()


class ScriptRefiner:
    """Rewrites a script from aggregated feedback, remotely or by local patching."""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        options: Optional[GenerationOptions] = None,
        defaults: Optional[ReviewSettings] = None,
    ):
        self.provider = provider
        self.options = (options or GenerationOptions()).with_max_tokens(REFINEMENT_MAX_TOKENS)
        self.defaults = defaults or ReviewSettings()
        self.mode = "remote" if provider is not None else "local"

    async def refine(self, raw_script: str, feedback: AggregatedFeedback) -> str:
        """
        Produce the refined script.

        Raises:
            RemoteCallError: If the remote call fails.
        """
        try:
            with Timer(f"{AGENT_NAME} ({self.mode})", logger):
                if self.provider is not None:
                    text = await generate_text_async(
                        build_refinement_prompt(raw_script, feedback),
                        self.provider,
                        self.options,
                        system_prompt=REFINEMENT_SYSTEM_PROMPT,
                    )
                    return text.strip()

                return apply_local_refinement(raw_script, feedback)
        except Exception:
            logger.error("Error in script refinement", exc_info=True)
            raise

    def validate_refined_script(
        self,
        refined_script: str,
        thresholds: Union[Thresholds, Mapping[str, Any], None] = None,
    ) -> RefinementValidation:
        """
        Advisory check of a refined script.

        Always valid; it does not re-run the evaluators, it only reports the
        thresholds the script should be re-checked against.
        """
        if thresholds is not None and not isinstance(thresholds, Thresholds):
            thresholds = Thresholds.model_validate(dict(thresholds))

        logger.debug("Refined script ready for re-evaluation", extra={"length": len(refined_script)})

        return RefinementValidation(
            is_valid=True,
            message=VALIDATION_MESSAGE,
            thresholds=self.defaults.resolve_thresholds(thresholds),
            notes=VALIDATION_NOTES,
        )
