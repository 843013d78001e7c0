"""Script refinement from aggregated reviewer feedback."""

from .refiner import (
    AGENT_NAME,
    ScriptRefiner,
    apply_local_refinement,
    build_refinement_prompt,
)

__all__ = [
    "AGENT_NAME",
    "ScriptRefiner",
    "apply_local_refinement",
    "build_refinement_prompt",
]
