"""Grocery product recognition from photos and receipts."""

from .cache import ResultCache
from .config import PipelineConfig, load_config
from .errors import ImageValidationError, ProviderError
from .hashing import ContentHasher
from .heuristics import ImageHeuristicAnalyzer
from .models import (
    BoundingBox,
    DetectedProduct,
    ImageInput,
    ProductAttributes,
    ReceiptParseResult,
    RecognitionResult,
    load_image,
)
from .normalize import categorize, dedupe_and_rank, translate_label
from .pipeline import RecognitionOrchestrator
from .receipt import ReceiptReader, parse_receipt_text, receipt_products
from .vision import (
    OutcomeStatus,
    ProviderAdapter,
    ProviderOutcome,
    create_providers,
)

__all__ = [
    "RecognitionOrchestrator",
    "ReceiptReader",
    "parse_receipt_text",
    "receipt_products",
    "ProviderAdapter",
    "ProviderOutcome",
    "OutcomeStatus",
    "create_providers",
    "ImageHeuristicAnalyzer",
    "ResultCache",
    "ContentHasher",
    "DetectedProduct",
    "RecognitionResult",
    "ReceiptParseResult",
    "BoundingBox",
    "ProductAttributes",
    "ImageInput",
    "load_image",
    "translate_label",
    "categorize",
    "dedupe_and_rank",
    "ImageValidationError",
    "ProviderError",
    "PipelineConfig",
    "load_config",
]
