"""
Base Analysis Provider Interface

Abstract base class defining the contract for analysis model providers.
All providers must implement this interface for consistent behavior.
"""

from abc import ABC, abstractmethod


class AnalysisProvider(ABC):
    """
    Abstract base class for analysis model providers.

    All providers (Anthropic, OpenAI, Local) take the same request body,
    built by payload.build_analysis_request in the Anthropic Messages
    shape, and return a response body normalized to that shape:

        {"content": [{"type": "text", "text": "..."}], ...}

    so the response interpreter never needs to know which backend ran.

    Subclasses must implement:
    - analyze(): Send the request and return the normalized body
    - is_available(): Check if provider is configured and ready
    - name: Property returning provider name
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Provider name for logging and identification.

        Returns:
            Provider name (e.g., "anthropic", "openai", "local")
        """
        pass

    @abstractmethod
    async def analyze(self, request: dict) -> dict:
        """
        Run one analysis request against the model.

        Args:
            request: {"model", "max_tokens", "messages": [...]} where the
                single user message holds image blocks followed by one
                text block

        Returns:
            Response body with a "content" list of typed blocks

        Raises:
            ProviderError: If the API call fails
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if provider is configured and ready to use.

        Returns:
            True if provider can be used, False otherwise
        """
        pass

    @staticmethod
    def split_content(request: dict) -> tuple[list[dict], str]:
        """
        Separate the image blocks from the text of the user message.

        Returns:
            (image blocks, concatenated text)
        """
        images: list[dict] = []
        texts: list[str] = []
        for message in request.get("messages", []):
            for block in message.get("content", []):
                if block.get("type") == "image":
                    images.append(block)
                elif block.get("type") == "text":
                    texts.append(block.get("text", ""))
        return images, "\n\n".join(texts)

    @staticmethod
    def text_body(text: str, **extra) -> dict:
        """Wrap plain model text in the normalized response shape"""
        return {"content": [{"type": "text", "text": text}], **extra}
