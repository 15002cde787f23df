"""Tests for shared data types."""

from datetime import date

import pytest

from grocery_lens.errors import INVALID_FILE, ImageValidationError
from grocery_lens.models import (
    BoundingBox,
    DetectedProduct,
    ImageInput,
    ReceiptParseResult,
    RecognitionResult,
    load_image,
    slugify,
)


class TestDetectedProduct:
    def test_defaults(self):
        p = DetectedProduct(name="Молоко", confidence=0.9)
        assert p.category == "other"
        assert p.bounding_box is None
        assert p.id == "молоко"

    def test_id_slug(self):
        assert slugify("Масло сливочное 82%") == "масло-сливочное-82"
        p = DetectedProduct(name="масло сливочное", confidence=0.5)
        assert p.id == "масло-сливочное"

    def test_explicit_id_kept(self):
        p = DetectedProduct(name="сыр", confidence=0.5, id="abc")
        assert p.id == "abc"

    def test_to_dict_drops_empty_fields(self):
        p = DetectedProduct(name="сыр", confidence=0.5, category="dairy")
        data = p.to_dict()
        assert data["name"] == "сыр"
        assert data["attributes"] == {}
        assert "bounding_box" not in data

    def test_to_dict_with_bbox(self):
        p = DetectedProduct(
            name="яблоко",
            confidence=0.8,
            bounding_box=BoundingBox(x=10, y=20, width=30, height=40),
        )
        assert p.to_dict()["bounding_box"] == {
            "x": 10, "y": 20, "width": 30, "height": 40,
        }


class TestRecognitionResult:
    def test_to_dict(self):
        result = RecognitionResult(
            products=[DetectedProduct(name="сыр", confidence=0.5)],
            confidence=0.5,
            processing_time_ms=3.5,
            provider_used="demo",
        )
        data = result.to_dict()
        assert data["provider_used"] == "demo"
        assert data["products"][0]["name"] == "сыр"
        assert data["image_description"] is None


class TestReceiptParseResult:
    def test_to_dict_iso_date(self):
        r = ReceiptParseResult(products=["Хлеб"], date=date(2024, 1, 15))
        assert r.to_dict()["date"] == "2024-01-15"

    def test_to_dict_without_date(self):
        assert ReceiptParseResult().to_dict()["date"] is None


class TestImageInput:
    def test_size(self):
        assert ImageInput(data=b"12345").size == 5

    def test_validate_accepts_image(self):
        ImageInput(data=b"x" * 100, content_type="image/png").validate(1024)

    def test_validate_rejects_non_image(self):
        image = ImageInput(data=b"hello", content_type="text/plain")
        with pytest.raises(ImageValidationError, match="Неподдерживаемый формат") as e:
            image.validate(1024)
        assert e.value.code == INVALID_FILE

    def test_validate_rejects_oversized(self):
        image = ImageInput(data=b"x" * 2048, content_type="image/jpeg")
        with pytest.raises(ImageValidationError, match="Размер файла превышает"):
            image.validate(1024)

    def test_limit_is_inclusive(self):
        ImageInput(data=b"x" * 1024).validate(1024)


class TestLoadImage:
    @pytest.mark.asyncio
    async def test_load_image(self, tmp_path):
        path = tmp_path / "apple.png"
        path.write_bytes(b"\x89PNG fake")
        image = await load_image(path)
        assert image.data == b"\x89PNG fake"
        assert image.filename == "apple.png"
        assert image.content_type == "image/png"

    @pytest.mark.asyncio
    async def test_unknown_extension(self, tmp_path):
        path = tmp_path / "notes.unknownext"
        path.write_bytes(b"data")
        image = await load_image(path)
        assert image.content_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await load_image(tmp_path / "missing.jpg")
