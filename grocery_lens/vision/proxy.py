"""Self-hosted detection proxies used as the last remote tier."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import httpx

from ..config import ThresholdConfig
from ..errors import ProviderError
from ..models import BoundingBox, DetectedProduct, ImageInput
from ..normalize import (
    DEFAULT_RESULT_CAP,
    dedupe_and_rank,
    is_food_related,
    is_generic_category,
    make_product,
    translate_label,
)
from .http import HTTPProviderAdapter


class ProxyProvider(HTTPProviderAdapter):
    """POST the image as multipart form data to a detection proxy.

    Two reply shapes are understood::

        {"detections": [{"label": ..., "confidence": ..., "bbox": {...}}],
         "description": ...}
        {"predictions": [{"label": ..., "confidence": ...}]}
    """

    def __init__(
        self,
        url: str,
        thresholds: ThresholdConfig | None = None,
        cap: int = DEFAULT_RESULT_CAP,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client)
        self._url = url
        self._thresholds = thresholds or ThresholdConfig()
        self._cap = cap
        self.name = f"proxy:{urlparse(url).netloc or url}"

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    async def send(self, image: ImageInput) -> Any:
        files = {
            "image": (image.filename or "image", image.data, image.content_type)
        }
        return await self._post_json(self._url, files=files)

    def parse(self, raw: Any) -> list[DetectedProduct]:
        if not isinstance(raw, dict):
            raise ProviderError(
                self.name, f"неожиданный ответ: {type(raw).__name__}"
            )

        items = raw.get("detections")
        if items is None:
            items = raw.get("predictions", [])
        if not isinstance(items, list):
            raise ProviderError(self.name, "поле detections не является списком")

        products: list[DetectedProduct] = []
        for det in items:
            label = det.get("label")
            confidence = det.get("confidence", 0.0)
            if not label or confidence <= self._thresholds.detection:
                continue
            name = translate_label(label)
            if not is_food_related(name) or is_generic_category(name):
                continue
            products.append(
                make_product(label, confidence, bounding_box=_bbox(det.get("bbox")))
            )
        return dedupe_and_rank(products, cap=self._cap)

    def describe(self, raw: Any) -> str | None:
        return raw.get("description") if isinstance(raw, dict) else None


def _bbox(data: Any) -> BoundingBox | None:
    if not isinstance(data, dict):
        return None
    try:
        return BoundingBox(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
