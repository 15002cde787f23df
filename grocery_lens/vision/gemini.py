"""Gemini API vision provider."""

from __future__ import annotations

from typing import Any

from ..models import DetectedProduct, ImageInput
from . import ProviderAdapter
from .llm import PROMPT, parse_llm_response


class GeminiVisionProvider(ProviderAdapter):
    """Detect grocery products using Google Gemini's vision capability."""

    name = "gemini"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.0-flash",
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
                "Не задан ключ Gemini API. "
                "Проверьте файл настроек или переменную GEMINI_API_KEY."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        parts: list = [
            {"mime_type": image.content_type, "data": image.data},
            PROMPT,
        ]
        response = await model.generate_content_async(parts)
        return response.text

    def parse(self, raw: Any) -> list[DetectedProduct]:
        return parse_llm_response(raw, min_confidence=self._min_confidence)
