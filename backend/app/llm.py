"""Completion service client.

One instance is built at startup and shared through ``get_completion_client``.
"""
import logging
from typing import Any, Dict, List, Optional

import anthropic
from anthropic import Anthropic

from .errors import UpstreamError

logger = logging.getLogger(__name__)


def image_block(image: Dict[str, Any]) -> Dict[str, Any]:
    """Messages API content block for a rasterized page (``imageData``/``mimeType``)."""
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": image.get("mimeType", "image/png"),
            "data": image["imageData"],
        },
    }


class CompletionClient:
    """Thin wrapper around the Anthropic Messages API returning plain text."""

    def __init__(self, api_key: Optional[str], model: str):
        self.model = model
        self._client = Anthropic(api_key=api_key) if api_key else None

    @property
    def configured(self) -> bool:
        return self._client is not None

    def complete(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.3,
        images: Optional[List[Dict[str, Any]]] = None,
        error_message: str = "Failed to score answer",
    ) -> str:
        """Send a single user turn and return the first text block of the reply.

        ``images`` are sent ahead of the prompt, in order, as base64 image blocks.
        """
        if self._client is None:
            raise UpstreamError("Completion service is not configured (ANTHROPIC_API_KEY)")

        content: Any = prompt
        if images:
            content = [image_block(image) for image in images]
            content.append({"type": "text", "text": prompt})

        try:
            message = self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error(f"Completion request failed: {e}", exc_info=True)
            raise UpstreamError(error_message) from e

        for block in message.content:
            if block.type == "text":
                return block.text
        raise UpstreamError("Unexpected response type from completion service")
