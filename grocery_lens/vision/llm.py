"""Prompt and reply parsing shared by the LLM vision providers."""

from __future__ import annotations

import json

from ..labels import CATEGORY_KEYWORDS
from ..models import DEFAULT_CATEGORY, DetectedProduct
from ..normalize import (
    DEFAULT_RESULT_CAP,
    categorize,
    dedupe_and_rank,
    is_food_related,
    is_generic_category,
    is_non_food,
    make_product,
    translate_label,
)

PROMPT = """\
На этом фото продукты питания (витрина, холодильник или покупки).
Перечислите все продукты, которые видны на фото, по-русски.

Ответ верните в формате JSON (без другого текста):
[
  {"name": "название продукта", "confidence": 0.0-1.0, "category": "категория"}
]

Категорию выберите из списка:
fruits, vegetables, dairy, meat, fish, bakery, sweets, beverages, frozen,
canned, groceries, other

confidence: 0.8-1.0 если продукт хорошо виден,
0.5-0.8 если есть сомнения, меньше 0.5 если почти не виден.
"""

_KNOWN_CATEGORIES = {*CATEGORY_KEYWORDS, "other"}


def _is_food(name: str) -> bool:
    # Model replies use inflected Russian names ("Помидоры"), so a taxonomy
    # hit counts as food as well as the label vocabulary
    if is_non_food(name) or is_generic_category(name):
        return False
    return is_food_related(name) or categorize(name) != DEFAULT_CATEGORY


def parse_llm_response(
    text: str, min_confidence: float = 0.5, cap: int = DEFAULT_RESULT_CAP
) -> list[DetectedProduct]:
    """Parse the JSON array from a model reply.

    Raises:
        ValueError: If the reply is not a JSON array.
    """
    # Strip markdown fences if present
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)

    items = json.loads(cleaned)
    if not isinstance(items, list):
        raise ValueError("expected a JSON array of products")

    products: list[DetectedProduct] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        label = str(item.get("name") or "").strip()
        name = translate_label(label)
        try:
            confidence = float(item.get("confidence") or 0.0)
        except (TypeError, ValueError):
            continue
        if not name or confidence < min_confidence or not _is_food(name):
            continue
        product = make_product(label, confidence)
        category = item.get("category")
        if category in _KNOWN_CATEGORIES and category != "other":
            product.category = category
        products.append(product)
    return dedupe_and_rank(products, cap=cap)
