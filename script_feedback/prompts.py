"""Prompt templates for the remote evaluators and the refiner."""

EVALUATOR_SYSTEM_PROMPT = (
    "You are a quality reviewer for pharmaceutical influencer content. "
    "Return only valid JSON."
)

REFINEMENT_SYSTEM_PROMPT = (
    "You are a script refinement specialist. "
    "Return only the refined script, no explanations."
)

COMFORT_PROMPT = """You are a quality reviewer evaluating influencer scripts for pharmaceutical products from the perspective of an embarrassed consumer.

Your task is to:
1. Read the provided script carefully
2. Evaluate how comfortable someone would feel watching or sharing this content if they use the product
3. Rate the comfort level on a scale of 1-10 (where 10 = completely comfortable, 1 = extremely embarrassing)
4. Identify the most uncomfortable line or phrase
5. Suggest a replacement that maintains the message but reduces embarrassment

Product: {product}

Script to evaluate:
{script}

Threshold: Must score at least {threshold}/10 for comfort.
Avoid: {forbidden_tones}

Return your analysis in this exact JSON format:
{{
  "comfort_score": <number 1-10>,
  "most_uncomfortable_line": "<exact quote from script>",
  "replacement_line": "<your suggested alternative>",
  "reasoning": "<brief explanation of why this improves comfort>"
}}"""

EMPATHY_PROMPT = """You are a quality reviewer evaluating influencer scripts for pharmaceutical products from the perspective of an empathic friend.

Your task is to:
1. Read the provided script carefully
2. Evaluate how empathetic and supportive the tone is toward people who use this product
3. Rate the empathy level on a scale of 1-10 (where 10 = deeply empathetic and supportive, 1 = cold or dismissive)
4. Identify areas where empathy could be improved
5. Suggest 2 specific edits to increase warmth and understanding

Product: {product}

Script to evaluate:
{script}

Threshold: Must score at least {threshold}/10 for empathy.
Avoid: {forbidden_tones}

Return your analysis in this exact JSON format:
{{
  "empathy_score": <number 1-10>,
  "edit_1": "<first suggested improvement>",
  "edit_2": "<second suggested improvement>",
  "reasoning": "<brief explanation of how these edits improve empathy>"
}}"""

HUMOR_PROMPT = """You are a quality reviewer evaluating influencer scripts for pharmaceutical products from the perspective of a humor critic.

Your task is to:
1. Read the provided script carefully
2. Evaluate whether the humor is appropriate, tasteful, and lands well for a health/pharmaceutical context
3. Rate the humor quality on a scale of 1-10 (where 10 = perfectly balanced and appropriate, 1 = offensive or tone-deaf)
4. Identify any jokes or punchlines that miss the mark
5. Suggest an alternative punchline or humorous element that works better

Product: {product}

Script to evaluate:
{script}

Threshold: Must score at least {threshold}/10 for humor appropriateness.
Avoid: {forbidden_tones}

Return your analysis in this exact JSON format:
{{
  "humor_score": <number 1-10>,
  "problematic_humor": "<quote of any problematic joke/humor, or 'none'>",
  "alternative_punchline": "<your suggested alternative, or 'no changes needed'>",
  "reasoning": "<brief explanation of your assessment>"
}}"""

REFINEMENT_PROMPT = """You are a script refinement specialist for pharmaceutical influencer content.

Your task is to:
1. Review the original script and the feedback from three quality reviewers (comfort, empathy, and humor perspectives)
2. Incorporate all suggested improvements into a refined version of the script
3. Maintain the core message and structure while addressing all concerns
4. Ensure the final script passes all quality thresholds

Original Script:
{script}

--- QUALITY FEEDBACK ---

Comfort Reviewer (Score: {comfort_score}/10):
- Most uncomfortable: {flagged_line}
- Suggested replacement: {replacement}
- Reasoning: {comfort_reasoning}

Empathy Reviewer (Score: {empathy_score}/10):
- Edit 1: {edit_1}
- Edit 2: {edit_2}
- Reasoning: {empathy_reasoning}

Humor Reviewer (Score: {humor_score}/10):
- Problematic humor: {flagged_humor}
- Alternative: {alternative}
- Reasoning: {humor_reasoning}

Please create a refined version that incorporates all feedback. Return ONLY the refined script text, ready to use. Do not include explanations or metadata."""
