"""
OpenAI Analysis Provider

Runs the analysis on OpenAI chat models with vision input.
Image blocks are converted to data-URL image parts.
"""

import logging

import openai

from ..errors import ProviderError
from .base import AnalysisProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(AnalysisProvider):
    """
    Analysis provider using OpenAI's gpt-4o family.

    Example:
        provider = OpenAIProvider(api_key="sk-...")
        body = await provider.analyze(request)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o"
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (get from https://platform.openai.com/api-keys)
            model: OpenAI model to use (default: gpt-4o)
        """
        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model
        self._api_key = api_key

    @property
    def name(self) -> str:
        """Provider name for identification"""
        return "openai"

    def is_available(self) -> bool:
        """
        Check if OpenAI provider is configured.

        Returns:
            True if API key is set, False otherwise
        """
        return self._api_key is not None and len(self._api_key) > 0

    def _to_chat_content(self, request: dict) -> list[dict]:
        images, text = self.split_content(request)
        parts: list[dict] = []
        for block in images:
            source = block["source"]
            parts.append({
                "type": "image_url",
                "image_url": {
                    "url": f"data:{source['media_type']};base64,{source['data']}",
                    "detail": "high",
                },
            })
        parts.append({"type": "text", "text": text})
        return parts

    async def analyze(self, request: dict) -> dict:
        """
        Call the chat completions API with the analysis request.

        Returns:
            Normalized body {"content": [{"type": "text", "text": ...}]}

        Raises:
            ProviderError: If the API call fails
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=request["max_tokens"],
                messages=[{
                    "role": "user",
                    "content": self._to_chat_content(request),
                }],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI API error: {str(e)}") from e

        choice = response.choices[0]
        if choice.finish_reason == "length":
            logger.warning("OpenAI stopped at max_tokens; the JSON may be cut off")

        return self.text_body(choice.message.content or "", model=response.model)
