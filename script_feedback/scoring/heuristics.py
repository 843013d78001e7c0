"""
Heuristic scoring for the three review axes.

Deterministic, pattern-weighted lexical scorers used when no remote
text-generation provider is configured:
- Comfort (embarrassment triggers, flagged line, softer replacement)
- Empathy (supportive vs. cold language, two edit suggestions)
- Humor (problematic vs. self-aware humor, flagged joke, alternative)

Every scorer starts at 10, applies its rule table, rounds half-up and
clamps into [1, 10].
"""

import math
import re
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..types.evaluation import (
    DEFAULT_FORBIDDEN_TONES,
    NO_CHANGES_NEEDED,
    NO_PROBLEMATIC_HUMOR,
    ComfortFeedback,
    EmpathyFeedback,
    HumorFeedback,
)


MIN_SCORE = 1
MAX_SCORE = 10


class ScoringRule(NamedTuple):
    """A weighted pattern; negative weights penalize where the scorer adds."""

    pattern: re.Pattern
    weight: float
    label: str


def _rule(pattern: str, weight: float, label: str) -> ScoringRule:
    return ScoringRule(re.compile(pattern, re.IGNORECASE), weight, label)


# =============================================================================
# Comfort
# =============================================================================

COMFORT_TONE_PENALTY = 1.5

EMBARRASSMENT_TRIGGERS: Tuple[ScoringRule, ...] = (
    _rule(r"\b(gross|disgusting|nasty|yucky|icky)\b", 2.0, "graphic/disgusting language"),
    _rule(r"\b(laugh at|make fun of|ridicule|loser|joke['’]?s on you)\b", 2.0, "mockery of condition"),
    _rule(r"\b(shame|embarrassment|humiliated)\b", 1.5, "shame language"),
    _rule(r"\b(before/after|transformation)\b", 1.0, "potentially revealing comparisons"),
    _rule(r"\b(extreme symptoms|suffering|suffer from)\b", 1.0, "graphic symptom description"),
)

# Applied in order, whole-word and case-insensitive
COMFORT_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    (r"gross", "challenging"),
    (r"disgusting", "difficult"),
    (r"nasty", "uncomfortable"),
    (r"yucky", "bothersome"),
    (r"icky", "annoying"),
    (r"laugh at", "understand"),
    (r"make fun of", "acknowledge"),
    (r"ridicule", "relate to"),
    (r"loser", "someone figuring it out"),
    (r"joke['’]?s on you", "good news"),
    (r"shame", "confidence"),
    (r"embarrassment", "comfort"),
    (r"humiliated", "empowered"),
    (r"suffer from", "live with"),
    (r"suffering", "struggling"),
)


# =============================================================================
# Empathy
# =============================================================================

EMPATHY_TONE_PENALTY = 2.0

EMPATHY_INDICATORS: Tuple[ScoringRule, ...] = (
    _rule(r"\b(understand|know|feel|support|we're here|you're not alone|together|I've been there)\b", 1.0, "support and understanding"),
    _rule(r"\b(challenging|difficult|tough|hard|struggle)\b", 0.8, "struggle acknowledgment"),
    _rule(r"\b(deserve|deserve better|worthy|valuable|important)\b", 1.2, "affirmation"),
    _rule(r"\b(journey|path|progress|improve|better)\b", 0.7, "growth and journey"),
)

COLD_LANGUAGE_PATTERNS: Tuple[ScoringRule, ...] = (
    _rule(r"\b(just|simply|easy|obvious|just stop)\b", -1.5, "minimizing language"),
    _rule(r"\b(problem|defect|broken|wrong|fail)\b", -0.8, "defect framing"),
    _rule(r"\b(try harder|get over it|be positive|think happy)\b", -2.0, "dismissive encouragement"),
    _rule(r"\b(suffer from|victim of|afflicted)\b", -1.0, "victim framing"),
)

EDIT_ACKNOWLEDGE_STRUGGLE = (
    'Add a line like: "We understand how challenging this can be, '
    'and we\'re here to support you every step of the way."'
)
EDIT_REFRAME_STATEMENT = (
    "Replace a technical statement with empathetic framing. For example, change "
    '"This product treats the condition" to "This product helps you manage your '
    'condition with confidence and comfort."'
)
EDIT_COMMUNITY_LANGUAGE = (
    'Include community language: "You\'re not alone in this journey - thousands '
    'of people have found relief using our product."'
)
EDIT_VALIDATION = (
    "Add validation: Instead of focusing only on product features, include "
    '"Your experience matters, and we\'ve designed this with your real-world needs in mind."'
)

EMPATHY_REASONING = (
    "These edits transform the script from transactional to relational. By "
    "acknowledging the user's emotional experience and emphasizing community and "
    "support, we create a deeper connection. Users feel understood rather than "
    "lectured to, which builds trust and loyalty."
)


# =============================================================================
# Humor
# =============================================================================

HUMOR_TONE_PENALTY = 1.5

PROBLEMATIC_HUMOR_PATTERNS: Tuple[ScoringRule, ...] = (
    _rule(r"\b(that's what you get|serves you right|your fault)\b", 2.5, "Implies blame for condition"),
    _rule(r"\b(joke['’]?s on you|sucker)\b", 2.0, "Belittling tone toward users"),
    _rule(r"\b(gross|disgusting|ugly|nasty)\b.*?(?:condition|symptom|skin|body)", 2.5, "Mocks the medical condition"),
    _rule(r"\b(death|dying|fatal|kill you)\b", 2.5, "Inappropriate dark humor about health"),
    _rule(r"\b(crazy|insane|mental|nuts)\b", 1.5, "Uses mental health as punchline"),
    _rule(r"\b(loser|pathetic|sad|pitiful)\b", 2.0, "Disparages users"),
)

APPROPRIATE_HUMOR_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"relatable.*?(?:struggle|challenge)", re.IGNORECASE),
    re.compile(r"lighthearted.*?(?:journey|experience)", re.IGNORECASE),
    re.compile(r"funny.*?(?:because we all know|because it's true)", re.IGNORECASE),
    re.compile(r"humor.*?(?:breaks the ice|makes it easier)", re.IGNORECASE),
)

# First entry contained in the flagged phrase wins
HUMOR_ALTERNATIVES: Tuple[Tuple[str, str], ...] = (
    ("gross", "let's be real about it"),
    ("disgusting", "honest truth is"),
    ("ugly", "less than ideal"),
    ("nasty", "uncomfortable"),
    ("that's what you get", "that's when you need support"),
    ("serves you right", "here's what actually helps"),
    ("joke's on you", "plot twist: we have solutions"),
    ("jokes on you", "plot twist: we have solutions"),
    ("sucker", "friend"),
    ("loser", "someone figuring it out"),
    ("pathetic", "struggling"),
    ("sad", "challenging"),
    ("pitiful", "tough"),
)

SELF_AWARE_REFRAME = (
    'Reframe this as self-aware humor: "We all know how frustrating this can be - '
    "here's the part where we actually help.\""
)


# =============================================================================
# Shared helpers
# =============================================================================


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up to an integer and clamp into [1, 10]."""
    return max(MIN_SCORE, min(MAX_SCORE, _round_half_up(value)))


def _resolve_tones(forbidden_tones: Optional[Sequence[str]]) -> List[str]:
    tones = [tone for tone in (forbidden_tones or []) if tone and tone.strip()]
    return tones or list(DEFAULT_FORBIDDEN_TONES)


def count_forbidden_tones(text: str, forbidden_tones: Optional[Sequence[str]] = None) -> int:
    """Count forbidden tones present as case-insensitive substrings."""
    text_lower = text.lower()
    return sum(1 for tone in _resolve_tones(forbidden_tones) if tone.lower() in text_lower)


def extract_sentences(text: str) -> List[str]:
    """Split on sentence-ending punctuation, dropping empty fragments."""
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]


# =============================================================================
# Comfort
# =============================================================================


def generate_comfort_replacement(line: str) -> str:
    """Swap embarrassment words in a line for softer synonyms."""
    replacement = line
    for pattern, softer in COMFORT_REPLACEMENTS:
        replacement = re.sub(rf"\b{pattern}\b", softer, replacement, flags=re.IGNORECASE)
    return replacement.strip()


def score_comfort(
    raw_script: str,
    forbidden_tones: Optional[Sequence[str]] = None,
) -> ComfortFeedback:
    """
    Score how comfortable a user would feel watching or sharing the script.

    Args:
        raw_script: Script text to evaluate.
        forbidden_tones: Tones to penalize; defaults are used when empty.

    Returns:
        ComfortFeedback with the most uncomfortable line and a replacement.
    """
    score = 10.0
    score -= COMFORT_TONE_PENALTY * count_forbidden_tones(raw_script, forbidden_tones)

    flagged: Optional[str] = None
    for trigger in EMBARRASSMENT_TRIGGERS:
        match = trigger.pattern.search(raw_script)
        if match:
            score -= trigger.weight
            if flagged is None:
                flagged = match.group(0)

    if flagged is None:
        sentences = extract_sentences(raw_script)
        flagged = sentences[len(sentences) // 2] if sentences else raw_script[:100]

    flagged = flagged.strip()

    return ComfortFeedback(
        score=clamp_score(score),
        flagged_line=flagged,
        replacement=generate_comfort_replacement(flagged),
        reasoning=(
            "Reduced comfort due to potentially embarrassing language or tone. "
            f'The phrase "{flagged}" may make users self-conscious about their condition. '
            "A gentler, more affirming approach maintains the message while respecting user dignity."
        ),
    )


# =============================================================================
# Empathy
# =============================================================================


def generate_empathy_edits(raw_script: str) -> Tuple[str, str]:
    """Suggest exactly two edits that add warmth and validation."""
    text_lower = raw_script.lower()

    edit_1 = EDIT_ACKNOWLEDGE_STRUGGLE
    if "understand" not in text_lower and "support" not in text_lower:
        edit_1 = EDIT_REFRAME_STATEMENT

    edit_2 = EDIT_COMMUNITY_LANGUAGE
    if "journey" not in text_lower and "alone" not in text_lower:
        edit_2 = EDIT_VALIDATION

    return edit_1, edit_2


def score_empathy(
    raw_script: str,
    forbidden_tones: Optional[Sequence[str]] = None,
) -> EmpathyFeedback:
    """
    Score how warm and supportive the script is toward product users.

    Positive indicators add weight x match count, cold language subtracts
    weight x match count.
    """
    score = 10.0
    score -= EMPATHY_TONE_PENALTY * count_forbidden_tones(raw_script, forbidden_tones)

    for rule in EMPATHY_INDICATORS + COLD_LANGUAGE_PATTERNS:
        matches = rule.pattern.findall(raw_script)
        score += rule.weight * len(matches)

    edit_1, edit_2 = generate_empathy_edits(raw_script)

    return EmpathyFeedback(
        score=clamp_score(score),
        edit_1=edit_1,
        edit_2=edit_2,
        reasoning=EMPATHY_REASONING,
    )


# =============================================================================
# Humor
# =============================================================================


def generate_humor_alternative(problematic_humor: str) -> str:
    """Soften a flagged joke using the lookup table, or suggest a reframe."""
    lowered = problematic_humor.lower()
    for problematic, replacement in HUMOR_ALTERNATIVES:
        if problematic in lowered:
            return re.sub(re.escape(problematic), replacement, problematic_humor, flags=re.IGNORECASE)

    return SELF_AWARE_REFRAME


def score_humor(
    raw_script: str,
    forbidden_tones: Optional[Sequence[str]] = None,
) -> HumorFeedback:
    """
    Score whether the humor is appropriate for a health context.

    Returns the sentinels "none" / "no changes needed" when no problematic
    humor is found.
    """
    score = 10.0
    score -= HUMOR_TONE_PENALTY * count_forbidden_tones(raw_script, forbidden_tones)

    flagged: Optional[str] = None
    for rule in PROBLEMATIC_HUMOR_PATTERNS:
        match = rule.pattern.search(raw_script)
        if match:
            score -= rule.weight
            if flagged is None:
                flagged = match.group(0)

    for pattern in APPROPRIATE_HUMOR_PATTERNS:
        if pattern.search(raw_script):
            score += 1

    if flagged is None:
        return HumorFeedback(
            score=clamp_score(score),
            flagged_humor=NO_PROBLEMATIC_HUMOR,
            alternative=NO_CHANGES_NEEDED,
            reasoning=(
                "The humor in this script is well-balanced and appropriate for the "
                "pharmaceutical context. It connects with users without being dismissive."
            ),
        )

    return HumorFeedback(
        score=clamp_score(score),
        flagged_humor=flagged,
        alternative=generate_humor_alternative(flagged),
        reasoning=(
            f'The phrase "{flagged}" uses humor that may offend or demean users. '
            "In pharmaceutical contexts, humor should unite rather than divide, "
            "comfort rather than mock."
        ),
    )
