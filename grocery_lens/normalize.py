"""Label normalization, categorization and de-duplication of detections."""

from __future__ import annotations

import re
from dataclasses import replace
from functools import lru_cache

from .labels import (
    CATEGORY_DISPLAY_NAMES,
    CATEGORY_KEYWORDS,
    FOOD_INDICATORS,
    FOOD_KEYWORDS,
    FOOD_WORDS,
    GENERIC_TERMS,
    NON_FOOD_TERMS,
    SPECIFIC_FOODS,
    SYNONYM_PAIRS,
    TRANSLATIONS,
)
from .models import DEFAULT_CATEGORY, DetectedProduct

DEFAULT_RESULT_CAP = 12
MIN_NAME_LENGTH = 4

_CYRILLIC_RE = re.compile(r"[а-яё]", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^\d+$")

# Short names like "сыр" or "tea" are real products, not noise
_KNOWN_FOOD_WORDS = frozenset(FOOD_WORDS)

# Each synonym maps to the first (Russian) member of its pair
_SYNONYMS: dict[str, str] = {}
for _canonical, _alias in SYNONYM_PAIRS:
    _root = _SYNONYMS.get(_canonical, _canonical)
    _SYNONYMS.setdefault(_canonical, _root)
    _SYNONYMS[_alias] = _root


@lru_cache(maxsize=None)
def _word_pattern(term: str) -> re.Pattern[str]:
    # Whole word, tolerating an English plural ("bottles", "apples")
    return re.compile(rf"(?<!\w){re.escape(term)}(?:e?s)?(?!\w)")


def _contains_word(text: str, terms: list[str]) -> bool:
    return any(_word_pattern(t).search(text) for t in terms)


def translate_label(label: str) -> str:
    """Map a provider label to its canonical Russian name.

    Unknown Russian labels are re-capitalized; anything else is returned as
    given.
    """
    cleaned = label.strip()
    translated = TRANSLATIONS.get(cleaned.lower())
    if translated:
        return translated
    if _CYRILLIC_RE.search(cleaned):
        return cleaned[:1].upper() + cleaned[1:].lower()
    return cleaned


def categorize(name: str) -> str:
    """Return the taxonomy category of a canonical product name.

    A keyword equal to the whole name wins first (so "лимонад" is not filed
    under "лимон"); otherwise the first category with a keyword contained
    in the name is used.
    """
    lower = name.lower().strip()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if lower in keywords:
            return category
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(kw in lower for kw in keywords):
            return category
    return DEFAULT_CATEGORY


def category_display_name(category: str) -> str:
    return CATEGORY_DISPLAY_NAMES.get(category, CATEGORY_DISPLAY_NAMES["other"])


def is_non_food(label: str) -> bool:
    return _contains_word(label.lower(), NON_FOOD_TERMS)


def is_food_related(label: str) -> bool:
    if is_non_food(label):
        return False
    lower = label.lower()
    if any(kw in lower for kw in FOOD_KEYWORDS):
        return True
    return _contains_word(lower, FOOD_WORDS)


def is_generic_category(name: str) -> bool:
    """True for names too vague to be a product ("food", "bottle", "12")."""
    lower = name.lower().strip()
    if len(lower) < MIN_NAME_LENGTH and lower not in _KNOWN_FOOD_WORDS:
        return True
    if _NUMERIC_RE.match(lower):
        return True
    return _contains_word(lower, GENERIC_TERMS)


def is_specific_food(name: str) -> bool:
    lower = name.lower()
    return any(food in lower for food in SPECIFIC_FOODS)


def is_potential_food(text: str) -> bool:
    """Gate for on-package text: descriptive words suggest a product name."""
    if is_generic_category(text):
        return False
    lower = text.lower()
    return any(ind in lower for ind in FOOD_INDICATORS)


def dedupe_key(name: str) -> str:
    key = name.lower().strip()
    return _SYNONYMS.get(key, key)


def make_product(
    label: str, confidence: float, **kwargs
) -> DetectedProduct:
    """Build a categorized product from a raw provider label."""
    name = translate_label(label)
    return DetectedProduct(
        name=name,
        confidence=float(confidence),
        category=categorize(name),
        **kwargs,
    )


def dedupe_and_rank(
    products: list[DetectedProduct], cap: int = DEFAULT_RESULT_CAP
) -> list[DetectedProduct]:
    """Merge duplicate detections and return the top ``cap`` by confidence.

    Duplicates share a lower-cased name or are synonyms; the more confident
    detection wins and inherits a bounding box from the other if it has none.
    """
    merged: dict[str, DetectedProduct] = {}
    for product in products:
        key = dedupe_key(product.name)
        existing = merged.get(key)
        if existing is None:
            merged[key] = product
            continue
        if product.confidence > existing.confidence:
            winner, loser = product, existing
        else:
            winner, loser = existing, product
        if winner.bounding_box is None and loser.bounding_box is not None:
            winner = replace(winner, bounding_box=loser.bounding_box)
        merged[key] = winner

    ranked = sorted(merged.values(), key=lambda p: p.confidence, reverse=True)
    return ranked[:cap]


def average_confidence(products: list[DetectedProduct]) -> float:
    if not products:
        return 0.0
    return sum(p.confidence for p in products) / len(products)


def filter_by_confidence(
    products: list[DetectedProduct], min_confidence: float = 0.6
) -> list[DetectedProduct]:
    return [p for p in products if p.confidence >= min_confidence]


def top_products(
    products: list[DetectedProduct], limit: int = 5
) -> list[DetectedProduct]:
    return sorted(products, key=lambda p: p.confidence, reverse=True)[:limit]


def contains_product(products: list[DetectedProduct], name: str) -> bool:
    lower = name.lower()
    return any(lower in p.name.lower() for p in products)


def group_by_category(
    products: list[DetectedProduct],
) -> dict[str, list[DetectedProduct]]:
    """Group products under their Russian category display names."""
    grouped: dict[str, list[DetectedProduct]] = {}
    for product in products:
        label = category_display_name(product.category)
        grouped.setdefault(label, []).append(product)
    return grouped
