"""Recognition orchestrator: cache, provider cascade, local fallbacks."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Callable

from .cache import ResultCache
from .config import PipelineConfig
from .hashing import ContentHasher
from .heuristics import ImageHeuristicAnalyzer
from .models import DetectedProduct, ImageInput, RecognitionResult
from .normalize import average_confidence, dedupe_and_rank
from .vision import ProviderAdapter, create_providers

logger = logging.getLogger(__name__)

HEURISTIC_TAG = "heuristic"
DEMO_TAG = "demo"

ProgressCallback = Callable[[str], None]


def demo_products() -> list[DetectedProduct]:
    """Fixed result returned when nothing else could recognize the image."""
    return [
        DetectedProduct(name="фрукты", confidence=0.7, category="fruits"),
        DetectedProduct(name="овощи", confidence=0.6, category="vegetables"),
    ]


class RecognitionOrchestrator:
    """Turns an uploaded photo into a list of grocery products.

    Providers are tried one after another in configured order until one
    returns at least one product. If all of them fail, the image is analyzed
    locally, and if that yields nothing a fixed demo result is returned, so
    ``recognize`` always produces a non-empty result for a valid image.

    Only provider results are cached; heuristic and demo results are not, so
    a provider that recovers is used on the next call for the same image.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        providers: list[ProviderAdapter] | None = None,
        cache: ResultCache[RecognitionResult] | None = None,
        hasher: ContentHasher | None = None,
        analyzer: ImageHeuristicAnalyzer | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._providers = (
            providers if providers is not None else create_providers(self._config)
        )
        self._cache = cache or ResultCache(
            max_size=self._config.cache.max_size,
            ttl=self._config.cache.ttl_seconds,
        )
        self._hasher = hasher or ContentHasher()
        self._analyzer = analyzer or ImageHeuristicAnalyzer(
            rng=random.Random(self._config.heuristics.seed)
        )

    @property
    def providers(self) -> list[ProviderAdapter]:
        return list(self._providers)

    async def recognize(
        self,
        image: ImageInput,
        on_progress: ProgressCallback | None = None,
    ) -> RecognitionResult:
        """Recognize products in ``image``.

        Raises:
            ImageValidationError: If the file is not an image or is too large.
                No other exception escapes.
        """
        image.validate(self._config.max_upload_bytes)
        started = time.perf_counter()
        progress = on_progress or (lambda _stage: None)

        key = self._cache_key(image)
        if key is not None:
            cached = self._cache_get(key)
            if cached is not None:
                logger.info("Результат найден в кэше: %s", key[:12])
                return cached

        progress("Анализируем изображение...")
        result = await self._try_providers(image, started, progress)
        if result is not None:
            if key is not None:
                self._cache_set(key, result)
            return result

        logger.info("Все провайдеры недоступны, используется локальный анализ")
        progress("Используем локальный анализ изображения...")
        return await self._fallback(image, started)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict:
        return self._cache.stats()

    async def _try_providers(
        self,
        image: ImageInput,
        started: float,
        progress: ProgressCallback,
    ) -> RecognitionResult | None:
        chain = self._providers
        if self._config.max_attempts > 0:
            chain = chain[: self._config.max_attempts]

        for provider in chain:
            progress(f"Распознаём продукты ({provider.name})...")
            outcome = await provider.attempt(image, self._config.timeout)
            if not outcome.ok:
                continue

            products = dedupe_and_rank(outcome.products, cap=self._config.result_cap)
            logger.info(
                "%s: распознано %d продуктов", outcome.provider, len(products)
            )
            progress("Обрабатываем результаты...")
            return self._build_result(
                products,
                started,
                outcome.provider,
                outcome.description or f"Распознано {len(products)} продуктов",
            )
        return None

    async def _fallback(self, image: ImageInput, started: float) -> RecognitionResult:
        try:
            products = await asyncio.to_thread(
                self._analyzer.detect, image.data, image.filename
            )
        except Exception:
            logger.exception("Ошибка локального анализа изображения")
            products = []

        if products:
            return self._build_result(
                products,
                started,
                HEURISTIC_TAG,
                f"Распознано {len(products)} продуктов",
            )

        logger.info("Локальный анализ ничего не нашёл, возвращаем демо-результат")
        return self._build_result(
            demo_products(), started, DEMO_TAG, "Обнаружены продукты питания"
        )

    def _cache_key(self, image: ImageInput) -> str | None:
        try:
            return self._hasher.hash(image.data, image.filename)
        except Exception as e:
            logger.warning("Не удалось вычислить ключ кэша: %s", e)
            return None

    def _cache_get(self, key: str) -> RecognitionResult | None:
        try:
            return self._cache.get(key)
        except Exception as e:
            logger.warning("Ошибка чтения кэша: %s", e)
            return None

    def _cache_set(self, key: str, result: RecognitionResult) -> None:
        try:
            self._cache.set(key, result)
        except Exception as e:
            logger.warning("Ошибка записи в кэш: %s", e)

    @staticmethod
    def _build_result(
        products: list[DetectedProduct],
        started: float,
        provider: str,
        description: str | None,
    ) -> RecognitionResult:
        return RecognitionResult(
            products=products,
            confidence=average_confidence(products),
            processing_time_ms=(time.perf_counter() - started) * 1000,
            provider_used=provider,
            image_description=description,
        )
