"""Claude API vision provider."""

from __future__ import annotations

import base64
from typing import Any

from ..models import DetectedProduct, ImageInput
from . import ProviderAdapter
from .llm import PROMPT, parse_llm_response


class ClaudeVisionProvider(ProviderAdapter):
    """Detect grocery products using Claude's vision capability."""

    name = "claude"

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        min_confidence: float = 0.5,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._min_confidence = min_confidence

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, image: ImageInput) -> Any:
        if not self._api_key:
            raise ValueError(
                "Не задан ключ Anthropic API. "
                "Проверьте файл настроек или переменную ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.content_type,
                    "data": base64.standard_b64encode(image.data).decode(),
                },
            },
            {"type": "text", "text": PROMPT},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=4096,
            messages=[{"role": "user", "content": content}],
        )
        return response.content[0].text

    def parse(self, raw: Any) -> list[DetectedProduct]:
        return parse_llm_response(raw, min_confidence=self._min_confidence)
