"""
Tests for the refinement engine.
"""

import unittest
from unittest.mock import AsyncMock, patch

import pytest

from script_feedback.prompts import REFINEMENT_SYSTEM_PROMPT
from script_feedback.refinement import ScriptRefiner, apply_local_refinement, build_refinement_prompt
from script_feedback.refinement.refiner import JOURNEY_SENTENCE, SUPPORT_SENTENCE
from script_feedback.scoring.heuristics import EDIT_ACKNOWLEDGE_STRUGGLE, EDIT_REFRAME_STATEMENT
from script_feedback.text_generation import TextGenerationError
from script_feedback.types.evaluation import (
    AggregatedFeedback,
    ComfortFeedback,
    EmpathyFeedback,
    HumorFeedback,
)


def make_feedback(
    flagged_line="gross",
    replacement="challenging",
    edit_1=EDIT_ACKNOWLEDGE_STRUGGLE,
    edit_2="Keep it short.",
    flagged_humor="none",
    alternative="no changes needed",
):
    return AggregatedFeedback(
        comfort=ComfortFeedback(score=5, flagged_line=flagged_line, replacement=replacement, reasoning="c"),
        empathy=EmpathyFeedback(score=6, edit_1=edit_1, edit_2=edit_2, reasoning="e"),
        humor=HumorFeedback(score=4, flagged_humor=flagged_humor, alternative=alternative, reasoning="h"),
    )


class TestLocalRefinement(unittest.TestCase):
    """Test cases for the rule-based refinement path."""

    def test_replaces_comfort_flagged_line_in_place(self):
        refined = apply_local_refinement("That gross, itchy feeling.", make_feedback())

        self.assertNotIn("gross", refined)
        self.assertEqual(refined, "That challenging, itchy feeling.")

    def test_replaces_only_first_occurrence(self):
        refined = apply_local_refinement("gross and gross", make_feedback())
        self.assertEqual(refined, "challenging and gross")

    def test_mismatch_is_a_no_op(self):
        refined = apply_local_refinement("  Nothing to change here.  ", make_feedback())
        self.assertEqual(refined, "Nothing to change here.")

    def test_confidence_rewrite(self):
        feedback = make_feedback(edit_1=EDIT_REFRAME_STATEMENT)
        refined = apply_local_refinement("This product treats eczema fast.", feedback)

        self.assertEqual(
            refined,
            "This product helps you manage your condition with confidence eczema fast.",
        )

    def test_confidence_rewrite_skipped_when_concept_present(self):
        feedback = make_feedback(edit_1=EDIT_REFRAME_STATEMENT)
        script = "This product treats eczema. Regain your confidence."
        self.assertEqual(apply_local_refinement(script, feedback), script)

    def test_support_rewrite(self):
        feedback = make_feedback(edit_1="Instead of a sales pitch, offer support.")
        refined = apply_local_refinement("We are here to help.", feedback)

        self.assertEqual(refined, "We are Here to support you every step of the way.")

    def test_inserts_journey_sentence(self):
        feedback = make_feedback(edit_2="Include community language about the journey.")
        refined = apply_local_refinement("Line one\nLine two\nLine three\nLine four", feedback)

        lines = refined.split("\n")
        self.assertEqual(lines[:2], ["Line one", "Line two"])
        self.assertIn(JOURNEY_SENTENCE.strip(), refined)
        self.assertTrue(refined.endswith("Line three\nLine four"))

    def test_inserts_support_sentence_in_short_script(self):
        feedback = make_feedback(edit_2="Add a line showing you understand.")
        refined = apply_local_refinement("Only line", feedback)

        self.assertEqual(refined, SUPPORT_SENTENCE.strip() + "\nOnly line")

    def test_humor_replacement(self):
        feedback = make_feedback(flagged_humor="Don't be a loser", alternative="Be the friend who found relief")
        refined = apply_local_refinement("Try it. Don't be a loser!", feedback)

        self.assertEqual(refined, "Try it. Be the friend who found relief!")

    def test_humor_sentinel_is_not_replaced(self):
        refined = apply_local_refinement("Say none of this.", make_feedback(flagged_line=""))
        self.assertEqual(refined, "Say none of this.")


class TestRefinementPrompt(unittest.TestCase):
    """Test cases for the remote refinement prompt."""

    def test_prompt_contains_transcript(self):
        prompt = build_refinement_prompt("Original text.", make_feedback())

        self.assertIn("Original Script:\nOriginal text.", prompt)
        self.assertIn("--- QUALITY FEEDBACK ---", prompt)
        self.assertIn("Comfort Reviewer (Score: 5/10):", prompt)
        self.assertIn("- Most uncomfortable: gross", prompt)
        self.assertIn("Empathy Reviewer (Score: 6/10):", prompt)
        self.assertIn("Humor Reviewer (Score: 4/10):", prompt)
        self.assertTrue(prompt.endswith("Do not include explanations or metadata."))


class TestScriptRefiner:
    """Tests for the refiner class."""

    @pytest.mark.asyncio
    async def test_local_refine(self):
        refined = await ScriptRefiner().refine("That gross feeling.", make_feedback())
        assert refined == "That challenging feeling."

    @pytest.mark.asyncio
    async def test_remote_refine_returns_trimmed_text(self, mock_llm_provider):
        with patch(
            "script_feedback.refinement.refiner.generate_text_async",
            new_callable=AsyncMock,
            return_value="\n  A kinder script.  \n",
        ) as mock_gen:
            refined = await ScriptRefiner(mock_llm_provider).refine("That gross feeling.", make_feedback())

        assert refined == "A kinder script."
        prompt, provider, options = mock_gen.call_args.args
        assert "That gross feeling." in prompt
        assert options.max_tokens == 1500
        assert mock_gen.call_args.kwargs["system_prompt"] == REFINEMENT_SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self, mock_llm_provider):
        with patch(
            "script_feedback.refinement.refiner.generate_text_async",
            new_callable=AsyncMock,
            side_effect=TextGenerationError("OpenAI connection error"),
        ):
            with pytest.raises(TextGenerationError):
                await ScriptRefiner(mock_llm_provider).refine("Script.", make_feedback())

    def test_validation_is_advisory_with_defaults(self):
        result = ScriptRefiner().validate_refined_script("Anything at all.")

        assert result.is_valid is True
        assert result.message == "Script has been refined according to all feedback."
        assert result.thresholds.model_dump() == {"comfort": 7, "empathy": 8, "humor": 7}
        assert "run the refined script through all three quality agents again" in result.notes

    def test_validation_merges_thresholds(self):
        result = ScriptRefiner().validate_refined_script("Anything.", {"empathy": 9})
        assert result.thresholds.model_dump() == {"comfort": 7, "empathy": 9, "humor": 7}
