"""
Feedback system: validates a request, runs the three reviewers
concurrently, refines the script and decides whether it is approved.
"""
import asyncio
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .config import ReviewSettings, Settings, get_settings
from .errors import ValidationError
from .evaluators import comfort_evaluator, empathy_evaluator, humor_evaluator
from .refinement import ScriptRefiner
from .text_generation import create_provider_from_settings
from .types.evaluation import (
    AXES,
    AggregatedFeedback,
    AxisEvaluations,
    AxisFeedback,
    AxisScores,
    EvaluationReport,
    EvaluationRequest,
    ReviewStatus,
    RulesConfig,
)
from .types.providers import GenerationOptions, LLMProvider, ProviderType
from .utils.logging import clear_evaluation_context, set_evaluation_context

logger = logging.getLogger(__name__)

REMEDIATION_HINTS: Dict[str, str] = {
    "comfort": "Consider replacing embarrassing language.",
    "empathy": "Add more supportive, understanding language.",
    "humor": "Adjust humor to be more appropriate for pharmaceutical context.",
}

ALL_PASSED_SUMMARY = "All scores meet or exceed thresholds. Script is ready for use."

RequestLike = Union[EvaluationRequest, Mapping[str, Any]]


class FeedbackSystem:
    """
    Orchestrates one script review.

    Usage:
        system = FeedbackSystem.from_settings()
        report = await system.evaluate_script({
            "product": "DermaFlow Pro",
            "rawScript": "...",
            "rules": {"threshold": {"comfort": 7}},
        })
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        options: Optional[GenerationOptions] = None,
        defaults: Optional[ReviewSettings] = None,
    ):
        self.provider = provider
        self.defaults = defaults or ReviewSettings()
        self.comfort_evaluator = comfort_evaluator(provider, options, self.defaults)
        self.empathy_evaluator = empathy_evaluator(provider, options, self.defaults)
        self.humor_evaluator = humor_evaluator(provider, options, self.defaults)
        self.refiner = ScriptRefiner(provider, options, self.defaults)

    @property
    def mode(self) -> str:
        return self.comfort_evaluator.mode

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        provider_type: Optional[ProviderType] = None,
        model_tier: Optional[str] = None,
    ) -> "FeedbackSystem":
        """
        Build a feedback system from configuration.

        With no API key configured the system runs in heuristic mode.

        Args:
            settings: Settings to use; defaults to the cached application settings.
            provider_type: Force a provider instead of the configured default.
            model_tier: Named model tier ("default", "advanced", "fast") or a model id.

        Raises:
            TextGenerationError: If a forced provider has no API key.
        """
        settings = settings or get_settings()
        provider = create_provider_from_settings(settings.llm, provider_type)

        if provider is not None and model_tier:
            provider.config.model = settings.models.resolve(model_tier)

        options = GenerationOptions(
            temperature=settings.llm.llm_temperature,
            timeout=settings.llm.llm_api_timeout,
        )

        system = cls(provider, options, settings.review)
        logger.info(
            f"Feedback system initialized in {system.mode} mode",
            extra={"config": settings.get_config_summary()},
        )
        return system

    def validate_request(self, request: RequestLike) -> EvaluationRequest:
        """
        Check a request before any evaluator runs.

        Accepts an EvaluationRequest or a mapping in the external schema
        (product, rawScript, rules, optional config).

        Raises:
            ValidationError: If product or rawScript is not a non-empty string,
                or rules is not an object.
        """
        if isinstance(request, EvaluationRequest):
            try:
                return EvaluationRequest.model_validate(request.model_dump())
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid request: {e}") from e

        if not isinstance(request, Mapping):
            raise ValidationError("Input must be an object")

        product = request.get("product")
        if not isinstance(product, str) or not product.strip():
            raise ValidationError('Input must include "product" (string)')

        raw_script = request.get("rawScript", request.get("raw_script"))
        if not isinstance(raw_script, str) or not raw_script.strip():
            raise ValidationError('Input must include "rawScript" (string)')

        rules = request.get("rules")
        if not isinstance(rules, (Mapping, RulesConfig)):
            raise ValidationError('Input must include "rules" (object)')

        try:
            return EvaluationRequest(
                product=product,
                raw_script=raw_script,
                rules=rules,
                config=request.get("config"),
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid request: {e}") from e

    async def evaluate_script(self, request: RequestLike) -> EvaluationReport:
        """
        Run the full review pipeline.

        Returns:
            The evaluation report.

        Raises:
            ValidationError: If the request is invalid; no evaluator runs.
            RemoteCallError: If any remote call fails.
            MalformedPayloadError: If any reviewer returns an unusable payload.
        """
        request = self.validate_request(request)

        set_evaluation_context(evaluation_id=str(uuid.uuid4()), product=request.product)
        try:
            logger.info(
                "Evaluating script",
                extra={"mode": self.mode, "script_length": len(request.raw_script)},
            )

            comfort, empathy, humor = await self._run_evaluators(request)

            thresholds = self.defaults.resolve_thresholds(request.rules.threshold)
            feedback = AggregatedFeedback(
                comfort=comfort,
                empathy=empathy,
                humor=humor,
                thresholds=thresholds,
            )

            refined_script = await self.refiner.refine(request.raw_script, feedback)

            scores = feedback.scores
            approved = self.check_thresholds(scores, thresholds)

            report = EvaluationReport(
                status=ReviewStatus.APPROVED if approved else ReviewStatus.NEEDS_REVISION,
                scores=scores,
                thresholds=thresholds,
                evaluations=AxisEvaluations(comfort=comfort, empathy=empathy, humor=humor),
                refined_script=refined_script,
                summary=self.generate_summary(scores, thresholds),
            )

            logger.info(
                f"Evaluation complete: {report.status.value}",
                extra={"scores": scores.model_dump(), "failing_axes": feedback.failing_axes},
            )
            return report
        finally:
            clear_evaluation_context()

    async def _run_evaluators(self, request: EvaluationRequest) -> List[AxisFeedback]:
        """
        Run the three reviewers concurrently.

        The first failure propagates; reviewers still in flight are
        cancelled and awaited before it is re-raised.
        """
        tasks = [
            asyncio.ensure_future(evaluator.evaluate(request.product, request.raw_script, request.rules))
            for evaluator in (self.comfort_evaluator, self.empathy_evaluator, self.humor_evaluator)
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    @staticmethod
    def check_thresholds(scores: AxisScores, thresholds: AxisScores) -> bool:
        """True iff every axis meets its threshold."""
        return all(getattr(scores, axis) >= getattr(thresholds, axis) for axis in AXES)

    @staticmethod
    def generate_summary(scores: AxisScores, thresholds: AxisScores) -> str:
        """One sentence per failing axis, or a single affirmative sentence."""
        results = []
        for axis in AXES:
            score = getattr(scores, axis)
            threshold = getattr(thresholds, axis)
            if score < threshold:
                results.append(
                    f"{axis.capitalize()} score ({score}/10) below threshold ({threshold}/10). "
                    f"{REMEDIATION_HINTS[axis]}"
                )

        if not results:
            results.append(ALL_PASSED_SUMMARY)

        return " ".join(results)

    async def get_comfort_evaluation(
        self, product: str, raw_script: str, rules: Union[RulesConfig, Mapping[str, Any], None] = None
    ) -> AxisFeedback:
        """Run only the comfort reviewer (for testing/debugging)."""
        return await self.comfort_evaluator.evaluate(product, raw_script, rules)

    async def get_empathy_evaluation(
        self, product: str, raw_script: str, rules: Union[RulesConfig, Mapping[str, Any], None] = None
    ) -> AxisFeedback:
        """Run only the empathy reviewer (for testing/debugging)."""
        return await self.empathy_evaluator.evaluate(product, raw_script, rules)

    async def get_humor_evaluation(
        self, product: str, raw_script: str, rules: Union[RulesConfig, Mapping[str, Any], None] = None
    ) -> AxisFeedback:
        """Run only the humor reviewer (for testing/debugging)."""
        return await self.humor_evaluator.evaluate(product, raw_script, rules)
