"""
Core text generation functionality.

Every call is a single chat-style request: a system instruction plus a user
prompt, with temperature and output length bounded by GenerationOptions.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

import anthropic
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from ..errors import MalformedPayloadError, RemoteCallError
from ..types.providers import (
    AnthropicConfig,
    GeminiConfig,
    GenerationOptions,
    LLMProvider,
    OpenAIConfig,
    ProviderType,
)

logger = logging.getLogger(__name__)


class TextGenerationError(RemoteCallError):
    """Exception raised for errors in the text generation process."""
    pass


async def generate_text_async(
    prompt: str,
    provider: LLMProvider,
    options: Optional[GenerationOptions] = None,
    system_prompt: Optional[str] = None,
) -> str:
    """
    Generate text using the specified LLM provider.

    Args:
        prompt: The user prompt.
        provider: The LLM provider to use.
        options: Options for text generation.
        system_prompt: Fixed instruction sent as the system message.

    Returns:
        The generated text.

    Raises:
        TextGenerationError: If the provider call fails or returns no content.
    """
    options = options or GenerationOptions()
    logger.debug(
        f"Requesting completion from {provider.type}",
        extra={"model": provider.config.model, "max_tokens": options.max_tokens},
    )

    try:
        if provider.type == "openai":
            text = await _generate_with_openai(prompt, provider.config, options, system_prompt)
        elif provider.type == "anthropic":
            text = await _generate_with_anthropic(prompt, provider.config, options, system_prompt)
        elif provider.type == "gemini":
            text = await _generate_with_gemini(prompt, provider.config, options, system_prompt)
        else:
            raise TextGenerationError(f"Unsupported provider: {provider.type}")
    except TextGenerationError:
        raise
    except Exception as e:
        raise TextGenerationError(f"Error generating text: {str(e)}") from e

    if not text:
        raise TextGenerationError(f"Empty response from {provider.type} ({provider.config.model})")

    return text


async def _generate_with_openai(
    prompt: str,
    config: OpenAIConfig,
    options: GenerationOptions,
    system_prompt: Optional[str],
) -> str:
    """Generate text using the OpenAI chat completions API."""
    client_kwargs: Dict[str, Any] = {"api_key": config.api_key}
    if options.timeout is not None:
        client_kwargs["timeout"] = options.timeout
    client = AsyncOpenAI(**client_kwargs)

    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    try:
        response = await client.chat.completions.create(
            model=config.model,
            messages=messages,
            temperature=options.temperature,
            max_tokens=options.max_tokens,
            top_p=options.top_p,
        )
    except openai.OpenAIError as e:
        raise TextGenerationError(_categorize_openai_error(e)) from e

    return response.choices[0].message.content or ""


def _categorize_openai_error(e: Exception) -> str:
    """Categorize OpenAI errors into readable messages."""
    if isinstance(e, openai.AuthenticationError):
        return "OpenAI authentication failed"
    elif isinstance(e, openai.RateLimitError):
        return "OpenAI rate limit exceeded"
    elif isinstance(e, openai.APITimeoutError):
        return "OpenAI request timed out"
    elif isinstance(e, openai.APIConnectionError):
        return "OpenAI connection error"
    elif isinstance(e, openai.APIStatusError):
        return f"OpenAI API error (status {e.status_code})"
    else:
        return f"OpenAI error: {str(e)}"


async def _generate_with_anthropic(
    prompt: str,
    config: AnthropicConfig,
    options: GenerationOptions,
    system_prompt: Optional[str],
) -> str:
    """Generate text using the Anthropic messages API."""
    client_kwargs: Dict[str, Any] = {"api_key": config.api_key}
    if options.timeout is not None:
        client_kwargs["timeout"] = options.timeout
    client = AsyncAnthropic(**client_kwargs)

    request: Dict[str, Any] = {
        "model": config.model,
        "max_tokens": options.max_tokens,
        "temperature": options.temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    if system_prompt:
        request["system"] = system_prompt

    try:
        response = await client.messages.create(**request)
    except anthropic.AnthropicError as e:
        raise TextGenerationError(_categorize_anthropic_error(e)) from e

    return "".join(
        block.text for block in response.content
        if getattr(block, "type", "text") == "text"
    )


def _categorize_anthropic_error(e: Exception) -> str:
    """Categorize Anthropic errors into readable messages."""
    if isinstance(e, anthropic.AuthenticationError):
        return "Anthropic authentication failed"
    elif isinstance(e, anthropic.RateLimitError):
        return "Anthropic rate limit exceeded"
    elif isinstance(e, anthropic.APITimeoutError):
        return "Anthropic request timed out"
    elif isinstance(e, anthropic.APIConnectionError):
        return "Anthropic connection error"
    elif isinstance(e, anthropic.APIStatusError):
        return f"Anthropic API error (status {e.status_code})"
    else:
        return f"Anthropic error: {str(e)}"


async def _generate_with_gemini(
    prompt: str,
    config: GeminiConfig,
    options: GenerationOptions,
    system_prompt: Optional[str],
) -> str:
    """Generate text using Google's Gemini."""
    try:
        import google.generativeai as genai
    except ImportError:
        raise TextGenerationError(
            "Google Generative AI package not installed. Install it with 'pip install google-generativeai'."
        )

    genai.configure(api_key=config.api_key)

    generation_config = {
        "temperature": options.temperature,
        "top_p": options.top_p,
        "max_output_tokens": options.max_tokens,
    }

    model = genai.GenerativeModel(
        config.model,
        generation_config=generation_config,
        system_instruction=system_prompt,
    )

    response = await model.generate_content_async(prompt)

    return response.text


def parse_json_payload(text: str) -> Dict[str, Any]:
    """
    Parse a structured-data payload returned by a provider.

    Tolerates a surrounding markdown code block or leading prose, but the
    payload itself must be a single JSON object.

    Raises:
        MalformedPayloadError: If no JSON object can be parsed.
    """
    candidate = (text or "").strip()

    block = re.search(r"```(?:json)?\s*([\s\S]*?)```", candidate)
    if block:
        candidate = block.group(1).strip()

    obj = re.search(r"\{[\s\S]*\}", candidate)
    if obj:
        candidate = obj.group(0)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(
            f"Failed to parse JSON response: {e}", payload=(text or "")[:500]
        ) from e

    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"Expected a JSON object, got {type(payload).__name__}", payload=(text or "")[:500]
        )

    return payload


def create_provider_from_settings(
    settings,
    provider_type: Optional[ProviderType] = None,
) -> Optional[LLMProvider]:
    """
    Create the configured provider, or None when no API key is configured.

    A None result is not an error: it selects heuristic evaluation.

    Args:
        settings: An LLMSettings instance.
        provider_type: Force a provider instead of the configured default.

    Raises:
        TextGenerationError: If a forced provider has no API key.
    """
    provider_type = provider_type or settings.default_provider
    if provider_type is None:
        return None

    api_key = settings.get_api_key(provider_type)
    if not api_key:
        raise TextGenerationError(f"No API key configured for provider: {provider_type}")

    config_cls = {
        "openai": OpenAIConfig,
        "anthropic": AnthropicConfig,
        "gemini": GeminiConfig,
    }[provider_type]

    return LLMProvider(
        type=provider_type,
        config=config_cls(api_key=api_key, model=settings.get_model(provider_type)),
    )
