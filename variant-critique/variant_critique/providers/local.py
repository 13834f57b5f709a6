"""
Local LLM Analysis Provider

Runs the analysis on local models via Ollama.
Supports LLaVA and other vision-capable local models.
"""

import asyncio
import logging

import requests

from ..errors import ProviderError
from .base import AnalysisProvider

logger = logging.getLogger(__name__)


class LocalProvider(AnalysisProvider):
    """
    Analysis provider using local LLMs through Ollama.

    Requirements:
    - Ollama installed (https://ollama.ai/)
    - Vision model pulled (e.g., `ollama pull llava`)

    Note:
        Long code variants can exceed a local model's context window.
        Prefer fewer, smaller variants with this provider.

    Example:
        provider = LocalProvider(host="http://localhost:11434", model="llava")
        body = await provider.analyze(request)
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llava"
    ):
        """
        Initialize local LLM provider.

        Args:
            host: Ollama server URL (default: http://localhost:11434)
            model: Model name (default: llava)
                   Run `ollama list` to see available models
        """
        self.host = host.rstrip("/")
        self.model = model

    @property
    def name(self) -> str:
        """Provider name for identification"""
        return "local"

    def is_available(self) -> bool:
        """
        Check if Ollama server is running.

        Returns:
            True if server is reachable, False otherwise
        """
        try:
            response = requests.get(f"{self.host}/api/tags", timeout=2)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _generate(self, request: dict) -> dict:
        images, prompt = self.split_content(request)
        response = requests.post(
            f"{self.host}/api/generate",
            json={
                "model": self.model,
                "prompt": prompt,
                "images": [block["source"]["data"] for block in images],
                "format": "json",
                "stream": False,
                "options": {
                    "temperature": 0.3,
                    "num_predict": request["max_tokens"],
                },
            },
        )
        if response.status_code != 200:
            raise ProviderError(f"Ollama API error: {response.text}")
        return response.json()

    async def analyze(self, request: dict) -> dict:
        """
        Send the analysis to Ollama's generate endpoint.

        Returns:
            Normalized body {"content": [{"type": "text", "text": ...}]}

        Raises:
            ProviderError: If Ollama is not reachable or the request fails
        """
        try:
            data = await asyncio.to_thread(self._generate, request)
        except requests.RequestException as e:
            raise ProviderError(f"Failed to connect to Ollama at {self.host}: {str(e)}") from e

        logger.debug("Ollama eval_count=%s", data.get("eval_count"))
        return self.text_body(data.get("response", ""), model=self.model)
