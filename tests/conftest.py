"""
Pytest configuration and shared fixtures for script feedback tests.

This module provides common fixtures used across all test files:
- Environment isolation (no API keys, so evaluation is heuristic by default)
- Sample scripts and requests
- A remote provider and canned remote payloads
"""

import json
import os

import pytest

# Environment setup before any imports
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"
for _key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "LLM_PROVIDER"):
    os.environ.pop(_key, None)

from script_feedback.config import get_settings  # noqa: E402
from script_feedback.types.providers import LLMProvider, OpenAIConfig  # noqa: E402
from script_feedback.utils.logging import clear_evaluation_context  # noqa: E402


UNCOMFORTABLE_SCRIPT = (
    "Hey everyone! Do you suffer from that gross, itchy condition... "
    "jokes on you... Don't be a loser..."
)

SUPPORTIVE_SCRIPT = (
    "We understand how challenging eczema can be. "
    "Our team is here to support you on your journey to calmer skin. "
    "You deserve to feel comfortable in your own body."
)


@pytest.fixture
def uncomfortable_script():
    return UNCOMFORTABLE_SCRIPT


@pytest.fixture
def supportive_script():
    return SUPPORTIVE_SCRIPT


@pytest.fixture
def sample_request():
    """Request in the external (camelCase) schema."""
    return {
        "product": "DermaFlow Pro",
        "rawScript": UNCOMFORTABLE_SCRIPT,
        "rules": {
            "threshold": {"comfort": 7, "empathy": 8, "humor": 7},
            "forbiddenTones": ["dismissive", "condescending", "insensitive"],
        },
    }


@pytest.fixture
def supportive_request():
    return {
        "product": "DermaFlow Pro",
        "rawScript": SUPPORTIVE_SCRIPT,
        "rules": {},
    }


@pytest.fixture
def mock_llm_provider():
    """A real provider object; tests patch the network call itself."""
    return LLMProvider(
        type="openai",
        config=OpenAIConfig(api_key="sk-test-mock-key-for-unit-tests-only"),
    )


@pytest.fixture
def comfort_payload():
    return json.dumps({
        "comfort_score": 6,
        "most_uncomfortable_line": "that gross, itchy condition",
        "replacement_line": "that frustrating, itchy condition",
        "reasoning": "Graphic wording makes viewers self-conscious.",
    })


@pytest.fixture
def empathy_payload():
    return json.dumps({
        "empathy_score": 5,
        "edit_1": "Acknowledge how draining constant itching is.",
        "edit_2": "Remind viewers they are not alone.",
        "reasoning": "The script talks at users rather than with them.",
    })


@pytest.fixture
def humor_payload():
    return json.dumps({
        "humor_score": 3,
        "problematic_humor": "Don't be a loser",
        "alternative_punchline": "Be the friend who finally found relief",
        "reasoning": "Name-calling alienates the audience.",
    })


# Test environment cleanup
@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables and cached settings after each test."""
    original_env = os.environ.copy()
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()
    clear_evaluation_context()
