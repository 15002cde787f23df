"""Data types shared by the recognition and receipt pipelines."""

from __future__ import annotations

import asyncio
import mimetypes
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path

from .errors import ImageValidationError

DEFAULT_CATEGORY = "other"

_SLUG_RE = re.compile(r"[^a-zа-яё0-9]+")


def slugify(name: str) -> str:
    """Lower-case a product name and collapse everything else to dashes."""
    return _SLUG_RE.sub("-", name.lower()).strip("-")


@dataclass
class BoundingBox:
    """Detection box in percent of the image width/height."""

    x: float
    y: float
    width: float
    height: float


@dataclass
class ProductAttributes:
    freshness: float | None = None
    quantity: float | None = None
    unit: str | None = None
    brand: str | None = None


@dataclass
class DetectedProduct:
    name: str  # canonical (Russian) product name
    confidence: float  # 0.0-1.0
    category: str = DEFAULT_CATEGORY
    bounding_box: BoundingBox | None = None
    attributes: ProductAttributes = field(default_factory=ProductAttributes)
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            self.id = slugify(self.name)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["attributes"] = {
            k: v for k, v in data["attributes"].items() if v is not None
        }
        if data["bounding_box"] is None:
            del data["bounding_box"]
        return data


@dataclass
class RecognitionResult:
    """Outcome of one recognition call.

    ``products`` holds unique canonical names sorted by descending
    confidence. ``provider_used`` tells which tier produced the result
    (a provider tag, ``"heuristic"`` or ``"demo"``).
    """

    products: list[DetectedProduct]
    confidence: float
    processing_time_ms: float
    provider_used: str
    image_description: str | None = None

    def to_dict(self) -> dict:
        return {
            "products": [p.to_dict() for p in self.products],
            "confidence": self.confidence,
            "processing_time_ms": self.processing_time_ms,
            "provider_used": self.provider_used,
            "image_description": self.image_description,
        }


@dataclass
class ColorAnalysis:
    average_brightness: float
    dominant_colors: list[tuple[int, int, int]] = field(default_factory=list)


@dataclass
class ImageAnalysis:
    width: int
    height: int
    aspect_ratio: float
    color_analysis: ColorAnalysis
    is_dark_background: bool
    file_name_hint: str = ""


@dataclass
class ReceiptParseResult:
    products: list[str] = field(default_factory=list)
    store: str | None = None
    total: float | None = None
    date: date | None = None

    def to_dict(self) -> dict:
        return {
            "products": list(self.products),
            "store": self.store,
            "total": self.total,
            "date": self.date.isoformat() if self.date else None,
        }


@dataclass
class ImageInput:
    """An uploaded image: raw bytes plus what the client declared about it."""

    data: bytes
    filename: str = ""
    content_type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.data)

    def validate(self, max_bytes: int) -> None:
        """Reject non-image content and oversized files.

        Raises:
            ImageValidationError: With a message suitable for the user.
        """
        if not (self.content_type or "").startswith("image/"):
            raise ImageValidationError(
                "Неподдерживаемый формат файла. Загрузите изображение."
            )
        if self.size > max_bytes:
            limit_mb = max_bytes // (1024 * 1024)
            raise ImageValidationError(
                f"Размер файла превышает {limit_mb}MB. "
                "Загрузите изображение меньшего размера."
            )


async def load_image(path: str | Path) -> ImageInput:
    """Read an image file without blocking the event loop."""
    p = Path(path)
    data = await asyncio.to_thread(p.read_bytes)
    content_type = mimetypes.guess_type(str(p))[0] or "application/octet-stream"
    return ImageInput(data=data, filename=p.name, content_type=content_type)
