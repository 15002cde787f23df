"""TOML configuration loader for the recognition pipeline."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_ORDER = ["huggingface", "google", "proxy", "claude", "gemini"]


@dataclass
class CacheConfig:
    max_size: int = 100
    ttl_seconds: float = 30 * 60


@dataclass
class ThresholdConfig:
    """Minimum provider scores per response facet."""

    object: float = 0.5  # Google object localization
    label: float = 0.65  # Google label detection
    web: float = 0.7  # Google web entities
    web_weight: float = 0.9  # web entity scores are discounted by this
    text_confidence: float = 0.6  # fixed confidence for on-package text
    classification: float = 0.6  # Hugging Face image classification
    detection: float = 0.5  # proxy detections
    llm: float = 0.5  # Claude / Gemini self-reported confidence


@dataclass
class HuggingFaceConfig:
    token: str = ""
    url: str = (
        "https://api-inference.huggingface.co/models/"
        "microsoft/beit-base-patch16-224-pt22k-ft22k"
    )
    top_k: int = 10


@dataclass
class GoogleVisionConfig:
    api_key: str = ""
    url: str = "https://vision.googleapis.com/v1/images:annotate"


@dataclass
class ProxyConfig:
    urls: list[str] = field(default_factory=list)


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class OCRConfig:
    api_key: str = ""
    fallback_key: str = "helloworld"
    url: str = "https://api.ocr.space/parse/image"
    language: str = "rus"
    timeout: float = 30.0


@dataclass
class HeuristicsConfig:
    seed: int | None = None


@dataclass
class PipelineConfig:
    timeout: float = 15.0  # seconds per provider attempt
    max_attempts: int = 0  # 0 = try every configured provider
    max_upload_mb: int = 10
    result_cap: int = 12
    order: list[str] = field(default_factory=lambda: list(DEFAULT_ORDER))
    cache: CacheConfig = field(default_factory=CacheConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    huggingface: HuggingFaceConfig = field(default_factory=HuggingFaceConfig)
    google: GoogleVisionConfig = field(default_factory=GoogleVisionConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    heuristics: HeuristicsConfig = field(default_factory=HeuristicsConfig)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_config(path: str | Path | None = None) -> PipelineConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    Credentials can be supplied via environment variables; a value in the
    file wins over the environment.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    pip = raw.get("pipeline", {})
    cch = raw.get("cache", {})
    thr = raw.get("thresholds", {})
    hf = raw.get("huggingface", {})
    ggl = raw.get("google", {})
    prx = raw.get("proxy", {})
    cld = raw.get("claude", {})
    gem = raw.get("gemini", {})
    ocr = raw.get("ocr", {})
    heu = raw.get("heuristics", {})

    # Resolve credentials: config file → environment variable
    hf_token = hf.get("token", "") or os.environ.get("HUGGINGFACE_TOKEN", "")
    google_key = ggl.get("api_key", "") or os.environ.get(
        "GOOGLE_VISION_API_KEY", ""
    )
    claude_key = cld.get("api_key", "") or os.environ.get("ANTHROPIC_API_KEY", "")
    gemini_key = gem.get("api_key", "") or os.environ.get("GEMINI_API_KEY", "")
    ocr_key = ocr.get("api_key", "") or os.environ.get("OCR_SPACE_API_KEY", "")

    defaults = ThresholdConfig()
    thresholds = ThresholdConfig(
        **{
            name: float(thr.get(name, getattr(defaults, name)))
            for name in defaults.__dataclass_fields__
        }
    )

    return PipelineConfig(
        timeout=float(pip.get("timeout", 15.0)),
        max_attempts=int(pip.get("max_attempts", 0)),
        max_upload_mb=int(pip.get("max_upload_mb", 10)),
        result_cap=int(pip.get("result_cap", 12)),
        order=list(pip.get("order", DEFAULT_ORDER)),
        cache=CacheConfig(
            max_size=int(cch.get("max_size", 100)),
            ttl_seconds=float(cch.get("ttl_seconds", 30 * 60)),
        ),
        thresholds=thresholds,
        huggingface=HuggingFaceConfig(
            token=hf_token,
            url=hf.get("url", HuggingFaceConfig.url),
            top_k=int(hf.get("top_k", 10)),
        ),
        google=GoogleVisionConfig(
            api_key=google_key,
            url=ggl.get("url", GoogleVisionConfig.url),
        ),
        proxy=ProxyConfig(urls=list(prx.get("urls", []))),
        claude=ClaudeVisionConfig(
            api_key=claude_key,
            model=cld.get("model", "claude-sonnet-4-5-20250929"),
        ),
        gemini=GeminiVisionConfig(
            api_key=gemini_key,
            model=gem.get("model", "gemini-2.0-flash"),
        ),
        ocr=OCRConfig(
            api_key=ocr_key,
            fallback_key=ocr.get("fallback_key", "helloworld"),
            url=ocr.get("url", OCRConfig.url),
            language=ocr.get("language", "rus"),
            timeout=float(ocr.get("timeout", 30.0)),
        ),
        heuristics=HeuristicsConfig(seed=heu.get("seed")),
    )
