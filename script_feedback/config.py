"""
Centralized configuration management for the script feedback system.

This module provides a Pydantic Settings-based configuration system that:
- Validates environment variables at startup
- Groups related settings (LLM providers, review defaults, logging)
- Exposes the review defaults as an immutable value injected into
  evaluators and the feedback system
- Supports .env file loading

Usage:
    from script_feedback.config import get_settings

    settings = get_settings()
    if settings.has_llm_provider:
        # Remote evaluation is available
        ...
"""

from functools import lru_cache
from typing import Dict, List, Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types.evaluation import DEFAULT_FORBIDDEN_TONES, DEFAULT_THRESHOLDS, AxisScores, Thresholds


# =============================================================================
# LLM Provider Settings
# =============================================================================


class LLMSettings(BaseSettings):
    """Configuration for LLM providers (OpenAI, Anthropic, Gemini)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys (all optional; none configured selects heuristic evaluation)
    openai_api_key: Optional[SecretStr] = Field(
        default=None,
        description="OpenAI API key for GPT models",
    )
    anthropic_api_key: Optional[SecretStr] = Field(
        default=None,
        description="Anthropic API key for Claude models",
    )
    gemini_api_key: Optional[SecretStr] = Field(
        default=None,
        description="Google Gemini API key",
    )

    # Model selection
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        description="OpenAI model to use",
    )
    anthropic_model: str = Field(
        default="claude-3-5-haiku-latest",
        description="Anthropic model to use",
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash-latest",
        description="Gemini model to use",
    )

    llm_provider: Optional[Literal["openai", "anthropic", "gemini"]] = Field(
        default=None,
        description="Preferred provider when more than one key is configured",
    )

    # Request configuration
    llm_api_timeout: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Timeout in seconds for LLM API requests",
    )
    llm_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for evaluator and refinement calls",
    )

    @property
    def has_any_provider(self) -> bool:
        """Check if at least one LLM provider is configured."""
        return any([
            self.openai_api_key,
            self.anthropic_api_key,
            self.gemini_api_key,
        ])

    @property
    def available_providers(self) -> List[str]:
        """Get list of configured provider names."""
        providers = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.gemini_api_key:
            providers.append("gemini")
        return providers

    @property
    def default_provider(self) -> Optional[str]:
        """Get the preferred provider if configured, else the first available."""
        providers = self.available_providers
        if self.llm_provider in providers:
            return self.llm_provider
        return providers[0] if providers else None

    def get_api_key(self, provider_type: str) -> Optional[str]:
        """Get the plain API key for a provider, if configured."""
        secret = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "gemini": self.gemini_api_key,
        }.get(provider_type)
        return secret.get_secret_value() if secret else None

    def get_model(self, provider_type: str) -> str:
        """Get the configured model for a provider."""
        return {
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
            "gemini": self.gemini_model,
        }[provider_type]


# =============================================================================
# Model Tiers
# =============================================================================


class ModelSettings(BaseSettings):
    """Named OpenAI model tiers."""

    model_config = SettingsConfigDict(
        env_prefix="MODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default: str = Field(default="gpt-3.5-turbo", description="Model used unless overridden")
    advanced: str = Field(default="gpt-4", description="Higher quality model")
    fast: str = Field(default="gpt-3.5-turbo", description="Lower latency model")

    def resolve(self, tier: str) -> str:
        """Map a tier name to a model, passing unknown names through as model ids."""
        return {
            "default": self.default,
            "advanced": self.advanced,
            "fast": self.fast,
        }.get(tier, tier)


# =============================================================================
# Review Defaults
# =============================================================================


class ReviewSettings(BaseSettings):
    """
    Default thresholds and forbidden tones.

    Frozen; one instance is shared by every evaluator of a feedback system.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    comfort_threshold: int = Field(
        default=DEFAULT_THRESHOLDS["comfort"],
        ge=1,
        le=10,
        description="Minimum comfort score when the request sets none",
    )
    empathy_threshold: int = Field(
        default=DEFAULT_THRESHOLDS["empathy"],
        ge=1,
        le=10,
        description="Minimum empathy score when the request sets none",
    )
    humor_threshold: int = Field(
        default=DEFAULT_THRESHOLDS["humor"],
        ge=1,
        le=10,
        description="Minimum humor score when the request sets none",
    )
    forbidden_tones: str = Field(
        default=",".join(DEFAULT_FORBIDDEN_TONES),
        description="Comma-separated tones used when the request lists none",
    )

    @property
    def forbidden_tones_list(self) -> List[str]:
        """Get parsed list of default forbidden tones."""
        return [
            tone.strip()
            for tone in self.forbidden_tones.split(",")
            if tone.strip()
        ]

    def default_threshold(self, axis: str) -> int:
        """Get the default threshold for one axis."""
        return getattr(self, f"{axis}_threshold")

    def resolve_thresholds(self, thresholds: Optional[Thresholds] = None) -> AxisScores:
        """Fill unset axes of a request's thresholds with the defaults."""
        thresholds = thresholds or Thresholds()
        values: Dict[str, int] = {}
        for axis in ("comfort", "empathy", "humor"):
            value = getattr(thresholds, axis)
            values[axis] = value if value else self.default_threshold(axis)
        return AxisScores(**values)

    def resolve_forbidden_tones(self, tones: Optional[List[str]] = None) -> List[str]:
        """Use the request's tones, or the defaults when it supplies none."""
        cleaned = [tone for tone in (tones or []) if tone and tone.strip()]
        return cleaned or self.forbidden_tones_list


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingSettings(BaseSettings):
    """Configuration for logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format_json: bool = Field(
        default=False,
        description="Force JSON log format",
    )


# =============================================================================
# Main Settings
# =============================================================================


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration groups.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    models: ModelSettings = Field(default_factory=ModelSettings)
    review: ReviewSettings = Field(default_factory=ReviewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def has_llm_provider(self) -> bool:
        """Check if remote evaluation is available."""
        return self.llm.has_any_provider

    def get_config_summary(self) -> dict:
        """
        Get a summary of configuration status for logging.

        Never includes API keys.
        """
        return {
            "llm_providers": self.llm.available_providers,
            "default_llm_provider": self.llm.default_provider,
            "evaluation_mode": "remote" if self.has_llm_provider else "heuristic",
            "default_thresholds": self.review.resolve_thresholds().model_dump(),
            "default_forbidden_tones": self.review.forbidden_tones_list,
            "log_level": self.logging.log_level,
        }


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings from environment.

    This clears the cache and returns fresh settings.
    """
    get_settings.cache_clear()
    return get_settings()
