"""
Script evaluator shared by the comfort, empathy and humor axes.
"""
import logging
import math
from typing import Any, Dict, Mapping, Optional, Union

from ..config import ReviewSettings
from ..errors import MalformedPayloadError
from ..prompts import EVALUATOR_SYSTEM_PROMPT
from ..scoring import clamp_score
from ..text_generation.core import generate_text_async, parse_json_payload
from ..types.evaluation import AxisFeedback, RulesConfig
from ..types.providers import GenerationOptions, LLMProvider
from ..utils.logging import Timer
from .axes import COMFORT, EMPATHY, HUMOR, AxisDescriptor

logger = logging.getLogger(__name__)

REMOTE_MODE = "remote"
HEURISTIC_MODE = "heuristic"


def _coerce_rules(rules: Union[RulesConfig, Mapping[str, Any], None]) -> RulesConfig:
    if isinstance(rules, RulesConfig):
        return rules
    return RulesConfig.model_validate(dict(rules or {}))


class ScriptEvaluator:
    """
    Scores one axis of a script.

    The mode is fixed at construction: remote when a provider is given,
    heuristic otherwise. A remote failure is never retried and never falls
    back to the heuristic.
    """

    def __init__(
        self,
        axis: AxisDescriptor,
        provider: Optional[LLMProvider] = None,
        options: Optional[GenerationOptions] = None,
        defaults: Optional[ReviewSettings] = None,
    ):
        self.axis = axis
        self.provider = provider
        self.options = (options or GenerationOptions()).with_max_tokens(axis.max_tokens)
        self.defaults = defaults or ReviewSettings()
        self.mode = REMOTE_MODE if provider is not None else HEURISTIC_MODE

    def __repr__(self) -> str:
        return f"ScriptEvaluator(axis={self.axis.name!r}, mode={self.mode!r})"

    def build_prompt(
        self,
        product: str,
        raw_script: str,
        rules: Union[RulesConfig, Mapping[str, Any], None] = None,
    ) -> str:
        """Render the axis prompt with the resolved threshold and forbidden tones."""
        rules = _coerce_rules(rules)
        thresholds = self.defaults.resolve_thresholds(rules.threshold)
        forbidden_tones = self.defaults.resolve_forbidden_tones(rules.forbidden_tones)

        return self.axis.prompt_template.format(
            product=product,
            script=raw_script,
            threshold=getattr(thresholds, self.axis.name),
            forbidden_tones=", ".join(forbidden_tones),
        )

    async def evaluate(
        self,
        product: str,
        raw_script: str,
        rules: Union[RulesConfig, Mapping[str, Any], None] = None,
    ) -> AxisFeedback:
        """
        Evaluate the script on this evaluator's axis.

        Args:
            product: Product name.
            raw_script: Script text to evaluate.
            rules: Thresholds and forbidden tones; defaults fill unset values.

        Returns:
            The axis feedback, with its score clamped into [1, 10].

        Raises:
            RemoteCallError: If the remote call fails.
            MalformedPayloadError: If the remote payload cannot be parsed or
                lacks a required field.
        """
        rules = _coerce_rules(rules)

        try:
            with Timer(f"{self.axis.agent_name} ({self.mode})", logger):
                if self.mode == REMOTE_MODE:
                    feedback = await self._evaluate_remote(product, raw_script, rules)
                else:
                    forbidden_tones = self.defaults.resolve_forbidden_tones(rules.forbidden_tones)
                    feedback = self.axis.heuristic(raw_script, forbidden_tones)
        except Exception:
            logger.error(f"Error in {self.axis.name} evaluation", exc_info=True)
            raise

        feedback = feedback.model_copy(update={"score": clamp_score(feedback.score)})

        logger.info(
            f"{self.axis.agent_name} scored {feedback.score}/10",
            extra={"axis": self.axis.name, "score": feedback.score, "mode": self.mode},
        )
        return feedback

    async def _evaluate_remote(self, product: str, raw_script: str, rules: RulesConfig) -> AxisFeedback:
        prompt = self.build_prompt(product, raw_script, rules)
        text = await generate_text_async(
            prompt,
            self.provider,
            self.options,
            system_prompt=EVALUATOR_SYSTEM_PROMPT,
        )
        payload = parse_json_payload(text)
        return self.parse_payload(payload)

    def parse_payload(self, payload: Dict[str, Any]) -> AxisFeedback:
        """
        Map a remote payload onto the axis feedback model.

        Raises:
            MalformedPayloadError: On a missing required key or a non-numeric score.
        """
        missing = [key for key in self.axis.required_keys if payload.get(key) is None]
        if missing:
            raise MalformedPayloadError(
                f"{self.axis.name} payload missing required fields: {', '.join(missing)}",
                payload=str(payload)[:500],
            )

        raw_score = payload[self.axis.score_key]
        try:
            if isinstance(raw_score, bool):
                raise TypeError("boolean score")
            score = float(raw_score)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(
                f"{self.axis.name} score is not a number: {raw_score!r}",
                payload=str(payload)[:500],
            ) from e
        if not math.isfinite(score):
            raise MalformedPayloadError(
                f"{self.axis.name} score is not finite: {raw_score!r}",
                payload=str(payload)[:500],
            )

        fields: Dict[str, Any] = {"score": clamp_score(score)}
        for key, field_name in self.axis.payload_fields.items():
            value = payload.get(key)
            if value is not None:
                fields[field_name] = str(value)

        return self.axis.feedback_model(**fields)


def comfort_evaluator(
    provider: Optional[LLMProvider] = None,
    options: Optional[GenerationOptions] = None,
    defaults: Optional[ReviewSettings] = None,
) -> ScriptEvaluator:
    """Create the embarrassed-consumer (comfort) evaluator."""
    return ScriptEvaluator(COMFORT, provider, options, defaults)


def empathy_evaluator(
    provider: Optional[LLMProvider] = None,
    options: Optional[GenerationOptions] = None,
    defaults: Optional[ReviewSettings] = None,
) -> ScriptEvaluator:
    """Create the empathic-friend (empathy) evaluator."""
    return ScriptEvaluator(EMPATHY, provider, options, defaults)


def humor_evaluator(
    provider: Optional[LLMProvider] = None,
    options: Optional[GenerationOptions] = None,
    defaults: Optional[ReviewSettings] = None,
) -> ScriptEvaluator:
    """Create the humor-critic evaluator."""
    return ScriptEvaluator(HUMOR, provider, options, defaults)
