"""Tests for receipt OCR and parsing (mocked OCR.space)."""

import random
from datetime import date
from unittest.mock import MagicMock

import httpx
import pytest

from grocery_lens.config import PipelineConfig
from grocery_lens.errors import ImageValidationError
from grocery_lens.models import ImageInput, ReceiptParseResult
from grocery_lens.receipt import (
    DEMO_RECEIPTS,
    ReceiptReader,
    parse_receipt_text,
    receipt_products,
)

OCR_TEXT = "МАГНИТ\nЧек №42\n2024-02-01 10:00\nСыр - 120,00\nИТОГ: 120,00"

IMAGE = ImageInput(data=b"\xff\xd8receipt", filename="receipt.jpg")


def _ok(text: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "ParsedResults": [{"ParsedText": text}],
            "IsErroredOnProcessing": False,
        },
    )


def _reader(handler, api_key="K-test", **kwargs) -> ReceiptReader:
    config = PipelineConfig()
    config.ocr.api_key = api_key
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ReceiptReader(config, client=client, rng=random.Random(0), **kwargs)


class TestParseReceiptText:
    def test_basic_receipt(self):
        result = parse_receipt_text(
            "ПЯТЕРОЧКА\n2024-01-15\nМолоко - 85.50\nХлеб - 45.00\nИТОГ: 130.50"
        )
        assert result.store == "Пятерочка"
        assert result.date == date(2024, 1, 15)
        assert result.total == 130.50
        assert result.products == ["Молоко", "Хлеб"]

    def test_demo_receipt(self):
        result = parse_receipt_text(DEMO_RECEIPTS[1])
        assert result.store == "Магнит"
        assert result.date == date(2024, 1, 15)
        assert result.total == 525.00
        assert result.products == [
            "Курица охлажденная 1кг",
            "Картофель 2кг",
            "Морковь 1кг",
            "Лук репчатый 1кг",
            "Помидоры 1кг",
        ]

    def test_comma_decimal_total(self):
        assert parse_receipt_text("итог 99,90").total == 99.90

    def test_itogo(self):
        assert parse_receipt_text("ИТОГО: 1500.00").total == 1500.0

    def test_store_case_insensitive_with_yo(self):
        assert parse_receipt_text("Супермаркет Перекрёсток").store == "Перекресток"
        assert parse_receipt_text("ашан гипер").store == "Ашан"

    def test_first_store_wins(self):
        result = parse_receipt_text("ЛЕНТА\nдоставка из Магнит")
        assert result.store == "Лента"

    def test_ordinals_stripped(self):
        result = parse_receipt_text("1. Кефир - 70.00\n2 Творог - 110\n10.Сметана - 65")
        assert result.products == ["Кефир", "Творог", "Сметана"]

    def test_header_and_total_lines_not_products(self):
        result = parse_receipt_text("Чек - 123456\nИТОГ - 500.00\nЧай - 200")
        assert result.products == ["Чай"]

    def test_date_lines_not_products(self):
        result = parse_receipt_text("2024-01-15\nЧай - 200")
        assert result.products == ["Чай"]

    def test_invalid_date_skipped(self):
        result = parse_receipt_text("2024-13-45\n2024-02-29")
        assert result.date == date(2024, 2, 29)

    def test_empty_text(self):
        assert parse_receipt_text("") == ReceiptParseResult()

    def test_no_match(self):
        result = parse_receipt_text("просто текст\nбез цен")
        assert result.products == []
        assert result.store is None
        assert result.total is None
        assert result.date is None


class TestReceiptProducts:
    def test_categorized(self):
        result = parse_receipt_text(DEMO_RECEIPTS[0])
        products = receipt_products(result)
        assert [p.category for p in products] == ["dairy", "bakery", "dairy", "dairy"]
        assert all(p.confidence == 1.0 for p in products)
        assert products[0].name == "Молоко Простоквашино 2.5% 1л"


class TestExtractText:
    @pytest.mark.asyncio
    async def test_ocr_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content
            return _ok(OCR_TEXT)

        reader = _reader(handler)
        text = await reader.extract_text(IMAGE)

        assert text == OCR_TEXT
        body = seen["body"]
        assert b"K-test" in body
        assert b"rus" in body
        assert b'name="OCREngine"' in body
        assert b'name="isTable"' in body
        assert b'name="file"' in body

    @pytest.mark.asyncio
    async def test_fallback_key_after_error(self):
        keys = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = request.content
            if b"helloworld" in body:
                keys.append("fallback")
                return _ok(OCR_TEXT)
            keys.append("primary")
            return httpx.Response(
                200,
                json={"IsErroredOnProcessing": True, "ErrorMessage": ["Limit reached"]},
            )

        text = await _reader(handler).extract_text(IMAGE)
        assert text == OCR_TEXT
        assert keys == ["primary", "fallback"]

    @pytest.mark.asyncio
    async def test_without_key_uses_public_key(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _ok(OCR_TEXT)

        text = await _reader(handler, api_key="").extract_text(IMAGE)
        assert text == OCR_TEXT
        assert len(calls) == 1
        assert b"helloworld" in calls[0].content

    @pytest.mark.asyncio
    async def test_short_text_uses_demo(self):
        text = await _reader(lambda request: _ok("  ab  ")).extract_text(IMAGE)
        assert text in DEMO_RECEIPTS

    @pytest.mark.asyncio
    async def test_http_errors_use_demo(self):
        handler = lambda request: httpx.Response(500, text="down")  # noqa: E731
        text = await _reader(handler).extract_text(IMAGE)
        assert text in DEMO_RECEIPTS

    @pytest.mark.asyncio
    async def test_demo_choice_is_seeded(self):
        handler = lambda request: httpx.Response(500)  # noqa: E731
        first = await _reader(handler).extract_text(IMAGE)
        second = await _reader(handler).extract_text(IMAGE)
        assert first == second

    @pytest.mark.asyncio
    async def test_successful_text_cached(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _ok(OCR_TEXT)

        reader = _reader(handler)
        await reader.extract_text(IMAGE)
        await reader.extract_text(IMAGE)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_demo_text_not_cached(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        reader = _reader(handler, api_key="")
        await reader.extract_text(IMAGE)
        await reader.extract_text(IMAGE)
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_rejects_non_image(self):
        reader = _reader(lambda request: _ok(OCR_TEXT))
        with pytest.raises(ImageValidationError):
            await reader.extract_text(ImageInput(data=b"x", content_type="text/plain"))


class BrokenCache:
    def get(self, key):
        raise RuntimeError("cache backend down")

    def set(self, key, value):
        raise RuntimeError("cache backend down")


class TestCacheFailures:
    @pytest.mark.asyncio
    async def test_ocr_text_returned(self):
        reader = _reader(lambda request: _ok(OCR_TEXT), cache=BrokenCache())
        assert await reader.extract_text(IMAGE) == OCR_TEXT

    @pytest.mark.asyncio
    async def test_demo_text_returned(self):
        handler = lambda request: httpx.Response(500)  # noqa: E731
        reader = _reader(handler, cache=BrokenCache())
        assert await reader.extract_text(IMAGE) in DEMO_RECEIPTS

    @pytest.mark.asyncio
    async def test_hasher_failure_is_a_miss(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _ok(OCR_TEXT)

        hasher = MagicMock()
        hasher.hash.side_effect = RuntimeError("no hash")
        reader = _reader(handler, hasher=hasher)
        assert await reader.extract_text(IMAGE) == OCR_TEXT
        assert await reader.extract_text(IMAGE) == OCR_TEXT
        assert len(calls) == 2


class TestRead:
    @pytest.mark.asyncio
    async def test_read_text(self):
        reader = ReceiptReader(PipelineConfig())
        result = await reader.read(text="ЛЕНТА\nРис - 120.00\nИТОГ: 120.00")
        assert result.store == "Лента"
        assert result.products == ["Рис"]

    @pytest.mark.asyncio
    async def test_read_image(self):
        result = await _reader(lambda request: _ok(OCR_TEXT)).read(image=IMAGE)
        assert result.store == "Магнит"
        assert result.date == date(2024, 2, 1)
        assert result.total == 120.0
        assert result.products == ["Сыр"]

    @pytest.mark.asyncio
    async def test_read_requires_input(self):
        with pytest.raises(ValueError):
            await ReceiptReader().read()
