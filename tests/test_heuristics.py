"""
Tests for the heuristic scorers.

Unit tests covering:
- Score rounding and clamping
- Comfort triggers, flagged line fallback and replacements
- Empathy indicators and edit selection
- Humor patterns, sentinels and alternatives
"""

import pytest

from script_feedback.scoring import (
    clamp_score,
    count_forbidden_tones,
    extract_sentences,
    generate_comfort_replacement,
    generate_empathy_edits,
    generate_humor_alternative,
    score_comfort,
    score_empathy,
    score_humor,
)
from script_feedback.scoring.heuristics import (
    EDIT_ACKNOWLEDGE_STRUGGLE,
    EDIT_COMMUNITY_LANGUAGE,
    EDIT_REFRAME_STATEMENT,
    EDIT_VALIDATION,
    SELF_AWARE_REFRAME,
)
from script_feedback.types.evaluation import NO_CHANGES_NEEDED, NO_PROBLEMATIC_HUMOR


# =============================================================================
# Shared helpers
# =============================================================================


class TestClampScore:
    """Tests for rounding and clamping."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (6.5, 7),
            (7.49, 7),
            (8.5, 9),
            (0.4, 1),
            (-3.0, 1),
            (10.6, 10),
            (42, 10),
        ],
    )
    def test_rounds_half_up_and_clamps(self, value, expected):
        assert clamp_score(value) == expected

    def test_extract_sentences_drops_empty_fragments(self):
        assert extract_sentences("One. Two!! Three?") == ["One", " Two", " Three"]
        assert extract_sentences("...") == []

    def test_count_forbidden_tones_is_case_insensitive(self):
        assert count_forbidden_tones("A DISMISSIVE and Condescending take") == 2

    def test_count_forbidden_tones_falls_back_to_defaults(self):
        assert count_forbidden_tones("so insensitive", []) == 1
        assert count_forbidden_tones("so insensitive", ["cheesy"]) == 0


# =============================================================================
# Comfort
# =============================================================================


class TestComfortHeuristic:
    """Tests for the comfort scorer."""

    def test_embarrassing_script_scores_low(self, uncomfortable_script):
        feedback = score_comfort(uncomfortable_script)

        assert feedback.score < 7
        assert feedback.score == 5
        assert feedback.flagged_line == "gross"
        assert feedback.replacement == "challenging"
        assert '"gross"' in feedback.reasoning

    def test_clean_script_scores_ten_and_flags_middle_sentence(self, supportive_script):
        feedback = score_comfort(supportive_script)

        assert feedback.score == 10
        assert feedback.flagged_line == "Our team is here to support you on your journey to calmer skin"

    def test_no_sentences_uses_leading_text(self):
        feedback = score_comfort("...")
        assert feedback.flagged_line == "..."

    def test_forbidden_tone_penalty_rounds_half_up(self):
        feedback = score_comfort("Nothing dismissive here.")
        assert feedback.score == 9

    def test_custom_forbidden_tones_replace_defaults(self):
        assert score_comfort("A cheesy line.", ["cheesy"]).score == 9
        assert score_comfort("A dismissive line.", ["cheesy"]).score == 10

    def test_score_never_drops_below_one(self):
        script = (
            "Gross! We ridicule your shame. Transformation from suffering. "
            "Dismissive, condescending and insensitive."
        )
        assert score_comfort(script).score == 1

    def test_replacement_applies_whole_words_in_order(self):
        assert generate_comfort_replacement("Don't laugh at this Gross shame") == (
            "Don't understand this challenging confidence"
        )
        assert generate_comfort_replacement("grossly underrated") == "grossly underrated"


# =============================================================================
# Empathy
# =============================================================================


class TestEmpathyHeuristic:
    """Tests for the empathy scorer."""

    def test_supportive_script_clamps_to_ten(self, supportive_script):
        assert score_empathy(supportive_script).score == 10

    def test_cold_language_is_penalized(self):
        feedback = score_empathy("Just try harder. It is easy. Your skin is broken.")
        # 10 - 1.5 (just) - 2 (try harder) - 1.5 (easy) - 0.8 (broken)
        assert feedback.score == 4

    def test_forbidden_tone_subtracts_two(self):
        assert score_empathy("This is dismissive.").score == 8

    def test_targeted_edits_when_keywords_missing(self):
        edit_1, edit_2 = generate_empathy_edits("Buy it now.")
        assert edit_1 == EDIT_REFRAME_STATEMENT
        assert edit_2 == EDIT_VALIDATION

    def test_default_edits_when_keywords_present(self, supportive_script):
        edit_1, edit_2 = generate_empathy_edits(supportive_script)
        assert edit_1 == EDIT_ACKNOWLEDGE_STRUGGLE
        assert edit_2 == EDIT_COMMUNITY_LANGUAGE

    def test_always_two_edits(self, uncomfortable_script):
        feedback = score_empathy(uncomfortable_script)
        assert feedback.edit_1
        assert feedback.edit_2
        assert feedback.reasoning


# =============================================================================
# Humor
# =============================================================================


class TestHumorHeuristic:
    """Tests for the humor scorer."""

    def test_problematic_script(self, uncomfortable_script):
        feedback = score_humor(uncomfortable_script)

        # 10 - 2 (belittling) - 2.5 (condition mockery) - 2 (disparaging) = 3.5
        assert feedback.score == 4
        assert feedback.flagged_humor == "jokes on you"
        assert feedback.alternative == "plot twist: we have solutions"
        assert feedback.has_problem

    def test_clean_script_reports_sentinels(self, supportive_script):
        feedback = score_humor(supportive_script)

        assert feedback.score == 10
        assert feedback.flagged_humor == NO_PROBLEMATIC_HUMOR
        assert feedback.alternative == NO_CHANGES_NEEDED
        assert not feedback.has_problem

    def test_appropriate_humor_adds_a_point(self):
        assert score_humor("That's what you get.").score == 8
        assert score_humor("That's what you get for a relatable struggle.").score == 9

    def test_alternative_preserves_surrounding_text(self):
        assert generate_humor_alternative("That's what you get") == "that's when you need support"
        assert generate_humor_alternative("such a Sucker move") == "such a friend move"

    def test_alternative_falls_back_to_reframe(self):
        assert generate_humor_alternative("kill you") == SELF_AWARE_REFRAME

    def test_heuristics_are_deterministic(self, uncomfortable_script):
        assert score_humor(uncomfortable_script) == score_humor(uncomfortable_script)
        assert score_comfort(uncomfortable_script) == score_comfort(uncomfortable_script)
        assert score_empathy(uncomfortable_script) == score_empathy(uncomfortable_script)
