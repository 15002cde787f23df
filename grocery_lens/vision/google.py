"""Google Cloud Vision provider (labels, objects, web entities, text)."""

from __future__ import annotations

import base64
from typing import Any

import httpx

from ..config import GoogleVisionConfig, ThresholdConfig
from ..errors import ProviderError
from ..models import BoundingBox, DetectedProduct, ImageInput
from ..normalize import (
    DEFAULT_RESULT_CAP,
    dedupe_and_rank,
    is_food_related,
    is_generic_category,
    is_potential_food,
    is_specific_food,
    make_product,
    translate_label,
)
from .http import HTTPProviderAdapter

_FEATURES = [
    {"type": "LABEL_DETECTION", "maxResults": 25},
    {"type": "OBJECT_LOCALIZATION", "maxResults": 20},
    {"type": "TEXT_DETECTION", "maxResults": 15},
    {"type": "WEB_DETECTION", "maxResults": 15},
]

# Only the first few text blocks are worth checking; the rest is noise.
_MAX_TEXT_BLOCKS = 10


class GoogleVisionProvider(HTTPProviderAdapter):
    """Detect products with the Cloud Vision ``images:annotate`` endpoint."""

    name = "google-vision"

    def __init__(
        self,
        config: GoogleVisionConfig,
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
        return bool(self._config.api_key)

    async def send(self, image: ImageInput) -> Any:
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image.data).decode()},
                    "features": _FEATURES,
                    "imageContext": {
                        "cropHintsParams": {
                            "aspectRatios": [0.8, 1, 1.2, 1.5, 1.8, 2.0, 2.5, 3.0]
                        }
                    },
                }
            ]
        }
        data = await self._post_json(
            self._config.url, params={"key": self._config.api_key}, json=body
        )
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise ProviderError(self.name, str(message or "ошибка API"))
        return data

    def parse(self, raw: Any) -> list[DetectedProduct]:
        response = _first_response(raw)
        if response.get("error"):
            raise ProviderError(
                self.name, response["error"].get("message", "ошибка API")
            )

        candidates: list[DetectedProduct] = []
        candidates += self._from_objects(response.get("localizedObjectAnnotations", []))
        candidates += self._from_labels(response.get("labelAnnotations", []))
        web = response.get("webDetection") or {}
        candidates += self._from_web(web.get("webEntities", []))
        candidates += self._from_text(response.get("textAnnotations", []))
        return dedupe_and_rank(candidates, cap=self._cap)

    def describe(self, raw: Any) -> str | None:
        texts = _first_response(raw).get("textAnnotations") or []
        if texts and texts[0].get("description"):
            return texts[0]["description"]
        return None

    def _from_objects(self, objects: list[dict]) -> list[DetectedProduct]:
        products = []
        for obj in objects:
            label = obj.get("name")
            score = obj.get("score", 0.0)
            if not label or score <= self._thresholds.object:
                continue
            if not is_food_related(label):
                continue
            if is_generic_category(translate_label(label)):
                continue
            products.append(
                make_product(
                    label, score, bounding_box=_bounding_box(obj.get("boundingPoly"))
                )
            )
        return products

    def _from_labels(self, labels: list[dict]) -> list[DetectedProduct]:
        return self._scored(labels, self._thresholds.label, weight=1.0)

    def _from_web(self, entities: list[dict]) -> list[DetectedProduct]:
        return self._scored(
            entities, self._thresholds.web, weight=self._thresholds.web_weight
        )

    def _scored(
        self, items: list[dict], threshold: float, weight: float
    ) -> list[DetectedProduct]:
        products = []
        for item in items:
            label = item.get("description")
            score = item.get("score", 0.0)
            if not label or score <= threshold or not is_food_related(label):
                continue
            name = translate_label(label)
            if is_generic_category(name) or not is_specific_food(name):
                continue
            products.append(make_product(label, score * weight))
        return products

    def _from_text(self, texts: list[dict]) -> list[DetectedProduct]:
        products = []
        for text in texts[:_MAX_TEXT_BLOCKS]:
            label = text.get("description")
            if not label or not is_potential_food(label):
                continue
            name = translate_label(label)
            if not is_specific_food(name) or is_generic_category(name):
                continue
            products.append(make_product(label, self._thresholds.text_confidence))
        return products


def _first_response(raw: Any) -> dict:
    responses = raw.get("responses") if isinstance(raw, dict) else None
    if not responses:
        raise ProviderError(GoogleVisionProvider.name, "пустой ответ")
    return responses[0]


def _bounding_box(poly: dict | None) -> BoundingBox | None:
    vertices = (poly or {}).get("normalizedVertices") or []
    if len(vertices) < 3:
        return None
    # Cloud Vision omits coordinates that are zero.
    x0 = vertices[0].get("x", 0.0)
    y0 = vertices[0].get("y", 0.0)
    return BoundingBox(
        x=x0 * 100,
        y=y0 * 100,
        width=(vertices[1].get("x", 0.0) - x0) * 100,
        height=(vertices[2].get("y", 0.0) - y0) * 100,
    )
