"""
Text generation module: the optional remote capability behind evaluators
and refinement.
"""

from ..types.providers import GenerationOptions, LLMProvider
from .core import (
    TextGenerationError,
    create_provider_from_settings,
    generate_text_async,
    parse_json_payload,
)

__all__ = [
    "TextGenerationError",
    "generate_text_async",
    "create_provider_from_settings",
    "parse_json_payload",
    # Types
    "GenerationOptions",
    "LLMProvider",
]
