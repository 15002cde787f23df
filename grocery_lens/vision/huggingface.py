"""Hugging Face Inference API provider (image classification model)."""

from __future__ import annotations

import base64
from typing import Any

import httpx

from ..config import HuggingFaceConfig, ThresholdConfig
from ..errors import ProviderError
from ..models import DetectedProduct, ImageInput
from ..normalize import (
    DEFAULT_RESULT_CAP,
    dedupe_and_rank,
    is_food_related,
    is_generic_category,
    make_product,
    translate_label,
)
from .http import HTTPProviderAdapter


class HuggingFaceProvider(HTTPProviderAdapter):
    """Classify the photo with a hosted image-classification model.

    ImageNet-style classifiers return comma-separated synonym lists as
    labels ("Granny Smith, apple"); each part is tried in turn.
    """

    name = "huggingface"

    def __init__(
        self,
        config: HuggingFaceConfig,
        thresholds: ThresholdConfig | None = None,
        cap: int = DEFAULT_RESULT_CAP,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client)
        self._config = config
        self._thresholds = thresholds or ThresholdConfig()
        self._cap = cap

    @property
    def is_configured(self) -> bool:
        return bool(self._config.token and self._config.url)

    async def send(self, image: ImageInput) -> Any:
        data = await self._post_json(
            self._config.url,
            headers={"Authorization": f"Bearer {self._config.token}"},
            json={
                "inputs": base64.b64encode(image.data).decode(),
                "parameters": {"top_k": self._config.top_k},
            },
        )
        if isinstance(data, dict) and data.get("error"):
            # e.g. {"error": "Model ... is currently loading", "estimated_time": 20}
            raise ProviderError(self.name, str(data["error"]))
        return data

    def parse(self, raw: Any) -> list[DetectedProduct]:
        if not isinstance(raw, list):
            raise ProviderError(
                self.name, f"неожиданный ответ: {type(raw).__name__}"
            )

        products: list[DetectedProduct] = []
        for item in raw:
            score = item.get("score", 0.0)
            if not item.get("label") or score <= self._thresholds.classification:
                continue
            for part in item["label"].split(","):
                part = part.strip()
                name = translate_label(part)
                if is_food_related(name) and not is_generic_category(name):
                    products.append(make_product(part, score))
                    break
        return dedupe_and_rank(products, cap=self._cap)

    def describe(self, raw: Any) -> str | None:
        return "Распознанные продукты через нейросеть"
