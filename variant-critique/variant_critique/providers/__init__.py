"""
Analysis Provider Implementations

Pluggable model providers following a common interface.
Supports multiple backends: Anthropic Claude, OpenAI, Local LLMs.
"""

from ..errors import ConfigurationError
from .base import AnalysisProvider
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .local import LocalProvider

__all__ = [
    "AnalysisProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "LocalProvider",
    "get_provider",
]


def get_provider(provider_name: str, config) -> AnalysisProvider:
    """
    Factory function to get configured analysis provider.

    Args:
        provider_name: One of "anthropic", "openai", or "local"
        config: Configuration object with API keys and model names

    Returns:
        Configured analysis provider instance

    Raises:
        ConfigurationError: If provider name is unknown or not configured

    Example:
        provider = get_provider("anthropic", config)
        body = await provider.analyze(request)
    """
    if provider_name == "anthropic":
        if not config.has_anthropic():
            raise ConfigurationError(
                "Anthropic API key not configured. "
                "Set ANTHROPIC_API_KEY in .env file"
            )
        return AnthropicProvider(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model
        )

    elif provider_name == "openai":
        if not config.has_openai():
            raise ConfigurationError(
                "OpenAI API key not configured. "
                "Set OPENAI_API_KEY in .env file"
            )
        return OpenAIProvider(
            api_key=config.openai_api_key,
            model=config.openai_model
        )

    elif provider_name == "local":
        return LocalProvider(
            host=config.ollama_host,
            model=config.ollama_model
        )

    else:
        raise ConfigurationError(
            f"Unknown provider: {provider_name}. "
            f"Choose from: anthropic, openai, local"
        )
