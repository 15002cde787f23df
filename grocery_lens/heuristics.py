"""Local fallback: guess products from pixel statistics.

This is not computer vision. The analyzer decodes the image, measures
average brightness and the most common coarse colours, and maps a handful
of colour signatures and filename hints to plausible products with
modest confidence. It is used only when every remote provider failed.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .models import ColorAnalysis, DetectedProduct, ImageAnalysis
from .normalize import categorize

logger = logging.getLogger(__name__)

NEUTRAL_BRIGHTNESS = 128
BIN_SIZE = 32
TOP_COLORS = 5
MAX_PRODUCTS = 4

# Luma weights (ITU-R BT.601) in RGB order
_LUMA = np.array([0.299, 0.587, 0.114])


@dataclass(frozen=True)
class _Signature:
    product: str
    base_confidence: float
    spread: float
    hints: tuple[str, ...]
    test: Callable[[int, int, int], bool]

    def matches(self, color: tuple[int, int, int]) -> bool:
        return self.test(*color)


_SIGNATURES = [
    _Signature(
        "апельсин", 0.85, 0.10, ("orange", "апельсин"),
        lambda r, g, b: r > 180 and 100 < g < 200 and b < 100,
    ),
    _Signature(
        "яблоко", 0.80, 0.15, ("apple", "яблоко"),
        lambda r, g, b: r > 150 and g < 100 and b < 100,
    ),
    _Signature(
        "огурец", 0.75, 0.15, ("cucumber", "огурец"),
        lambda r, g, b: g > 120 and r < 150 and b < 150,
    ),
    _Signature(
        "банан", 0.80, 0.10, ("banana", "банан"),
        lambda r, g, b: r > 180 and g > 180 and b < 120,
    ),
]

# Used only when no colour signature or filename hint fired
_BRIGHT_GUESSES = [("яйцо", 0.6), ("сыр", 0.55)]
_DARK_GUESSES = [("шоколад", 0.65), ("кофе", 0.6)]


class ImageHeuristicAnalyzer:
    """Synthesize a low-confidence product list from an image.

    Randomness is drawn from ``rng``; pass a seeded ``random.Random`` to get
    reproducible output for the same pixels.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def analyze(self, data: bytes, file_name: str = "") -> ImageAnalysis:
        """Decode the image and measure it; never raises.

        Undecodable input yields a neutral analysis so filename hints can
        still fire.
        """
        hint = (file_name or "").lower()
        try:
            pixels = _decode_rgb(data)
        except Exception as e:
            logger.warning(
                "Не удалось декодировать изображение %r: %s", file_name, e
            )
            return _neutral_analysis(hint)

        height, width = pixels.shape[:2]
        colors = analyze_colors(pixels)
        return ImageAnalysis(
            width=width,
            height=height,
            aspect_ratio=width / height if height else 1.0,
            color_analysis=colors,
            is_dark_background=colors.average_brightness < NEUTRAL_BRIGHTNESS,
            file_name_hint=hint,
        )

    def infer_products(self, analysis: ImageAnalysis) -> list[DetectedProduct]:
        dominant = analysis.color_analysis.dominant_colors
        hint = analysis.file_name_hint
        guesses: list[tuple[str, float]] = []

        for sig in _SIGNATURES:
            by_color = any(sig.matches(c) for c in dominant)
            by_name = any(h in hint for h in sig.hints)
            if by_color or by_name:
                confidence = sig.base_confidence + self._rng.random() * sig.spread
                guesses.append((sig.product, round(confidence, 4)))

        if not guesses:
            brightness = analysis.color_analysis.average_brightness
            if brightness > 160:
                guesses = list(_BRIGHT_GUESSES)
            elif brightness < 100:
                guesses = list(_DARK_GUESSES)

        guesses.sort(key=lambda g: g[1], reverse=True)
        return [
            DetectedProduct(name=name, confidence=conf, category=categorize(name))
            for name, conf in guesses[:MAX_PRODUCTS]
        ]

    def detect(self, data: bytes, file_name: str = "") -> list[DetectedProduct]:
        return self.infer_products(self.analyze(data, file_name))


def analyze_colors(pixels: np.ndarray) -> ColorAnalysis:
    """Average luma brightness and the top coarse colours of an RGB array."""
    flat = pixels.reshape(-1, 3).astype(np.float64)
    if flat.size == 0:
        return ColorAnalysis(average_brightness=NEUTRAL_BRIGHTNESS)

    brightness = float(np.rint((flat @ _LUMA).mean()))

    # Round half up to the nearest multiple of BIN_SIZE
    binned = (np.floor(flat / BIN_SIZE + 0.5) * BIN_SIZE).astype(np.int64)
    bins, counts = np.unique(binned, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")[:TOP_COLORS]
    dominant = [tuple(int(v) for v in bins[i]) for i in order]

    return ColorAnalysis(average_brightness=brightness, dominant_colors=dominant)


def _decode_rgb(data: bytes) -> np.ndarray:
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("unsupported or corrupt image data")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def _neutral_analysis(hint: str) -> ImageAnalysis:
    return ImageAnalysis(
        width=0,
        height=0,
        aspect_ratio=1.0,
        color_analysis=ColorAnalysis(average_brightness=NEUTRAL_BRIGHTNESS),
        is_dark_background=False,
        file_name_hint=hint,
    )
