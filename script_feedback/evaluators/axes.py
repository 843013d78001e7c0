"""
Axis descriptors.

One descriptor per review axis carries everything the shared evaluator
needs: the agent identity, the prompt, the remote payload schema and the
heuristic used when no provider is configured.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Type

from ..prompts import COMFORT_PROMPT, EMPATHY_PROMPT, HUMOR_PROMPT
from ..scoring import score_comfort, score_empathy, score_humor
from ..types.evaluation import (
    AxisFeedback,
    ComfortFeedback,
    EmpathyFeedback,
    HumorFeedback,
)

HeuristicScorer = Callable[[str, Optional[Sequence[str]]], AxisFeedback]


@dataclass(frozen=True)
class AxisDescriptor:
    """Static configuration for one review axis."""

    name: str
    agent_name: str
    description: str
    prompt_template: str
    feedback_model: Type[AxisFeedback]
    score_key: str
    # remote payload key -> feedback field; all keys except "reasoning" are required
    payload_fields: Dict[str, str] = field(default_factory=dict)
    heuristic: Optional[HeuristicScorer] = None
    max_tokens: int = 600

    @property
    def required_keys(self) -> Sequence[str]:
        return [self.score_key] + [key for key in self.payload_fields if key != "reasoning"]


COMFORT = AxisDescriptor(
    name="comfort",
    agent_name="Agent_EmbarrassedConsumer",
    description="Evaluates script comfort level for users",
    prompt_template=COMFORT_PROMPT,
    feedback_model=ComfortFeedback,
    score_key="comfort_score",
    payload_fields={
        "most_uncomfortable_line": "flagged_line",
        "replacement_line": "replacement",
        "reasoning": "reasoning",
    },
    heuristic=score_comfort,
    max_tokens=500,
)

EMPATHY = AxisDescriptor(
    name="empathy",
    agent_name="Agent_EmpathicFriend",
    description="Evaluates script empathy and supportiveness",
    prompt_template=EMPATHY_PROMPT,
    feedback_model=EmpathyFeedback,
    score_key="empathy_score",
    payload_fields={
        "edit_1": "edit_1",
        "edit_2": "edit_2",
        "reasoning": "reasoning",
    },
    heuristic=score_empathy,
)

HUMOR = AxisDescriptor(
    name="humor",
    agent_name="Agent_HumorCritic",
    description="Evaluates humor appropriateness for pharmaceutical context",
    prompt_template=HUMOR_PROMPT,
    feedback_model=HumorFeedback,
    score_key="humor_score",
    payload_fields={
        "problematic_humor": "flagged_humor",
        "alternative_punchline": "alternative",
        "reasoning": "reasoning",
    },
    heuristic=score_humor,
)
