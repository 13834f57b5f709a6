"""
Anthropic Claude Analysis Provider

Sends the analysis request to Claude's Messages API. The request body
is already in Messages shape, so it is passed through unchanged apart
from the model name.
"""

import logging

import anthropic

from ..errors import ProviderError
from .base import AnalysisProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(AnalysisProvider):
    """
    Analysis provider using Anthropic's Claude models.

    Example:
        provider = AnthropicProvider(api_key="sk-ant-...")
        body = await provider.analyze(request)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514"
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key (get from https://console.anthropic.com/)
            model: Claude model to use; must accept image input when
                   screenshot variants are analyzed
        """
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self._api_key = api_key

    @property
    def name(self) -> str:
        """Provider name for identification"""
        return "anthropic"

    def is_available(self) -> bool:
        """
        Check if Anthropic provider is configured.

        Returns:
            True if API key is set, False otherwise
        """
        return self._api_key is not None and len(self._api_key) > 0

    async def analyze(self, request: dict) -> dict:
        """
        Call Claude with the analysis request.

        Returns:
            The message as a plain dict ({"content": [...], "stop_reason": ...})

        Raises:
            ProviderError: If the API call fails
        """
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=request["max_tokens"],
                messages=request["messages"],
            )
        except anthropic.APIError as e:
            raise ProviderError(f"Anthropic API error: {str(e)}") from e

        if message.stop_reason == "max_tokens":
            logger.warning("Claude stopped at max_tokens; the JSON may be cut off")

        return message.model_dump()
