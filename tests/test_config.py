"""Tests for pipeline config loading."""

import os
import tempfile

import pytest

from grocery_lens.config import (
    DEFAULT_ORDER,
    PipelineConfig,
    ThresholdConfig,
    load_config,
)

_KEY_VARS = [
    "HUGGINGFACE_TOKEN",
    "GOOGLE_VISION_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "OCR_SPACE_API_KEY",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _KEY_VARS:
        monkeypatch.delenv(var, raising=False)


def _load_toml(content: bytes):
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
        config = load_config(f.name)
    os.unlink(f.name)
    return config


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, PipelineConfig)
    assert config.timeout == 15.0
    assert config.max_attempts == 0
    assert config.max_upload_mb == 10
    assert config.max_upload_bytes == 10 * 1024 * 1024
    assert config.result_cap == 12
    assert config.order == DEFAULT_ORDER
    assert config.cache.max_size == 100
    assert config.cache.ttl_seconds == 1800
    assert config.proxy.urls == []
    assert config.ocr.fallback_key == "helloworld"
    assert config.ocr.language == "rus"
    assert config.heuristics.seed is None
    # No credentials anywhere
    assert config.huggingface.token == ""
    assert config.google.api_key == ""
    assert config.claude.api_key == ""


def test_default_thresholds():
    thresholds = load_config().thresholds
    assert thresholds == ThresholdConfig()
    assert thresholds.object == 0.5
    assert thresholds.label == 0.65
    assert thresholds.web == 0.7
    assert thresholds.web_weight == 0.9
    assert thresholds.classification == 0.6


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.result_cap == 12


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    config = _load_toml(b"""\
[pipeline]
timeout = 5
max_attempts = 2
result_cap = 8
order = ["google", "proxy"]

[cache]
max_size = 10
ttl_seconds = 60

[thresholds]
label = 0.8

[google]
api_key = "g-key"

[proxy]
urls = ["http://localhost:8000/detect"]

[gemini]
api_key = "test-key-123"
model = "gemini-pro"

[heuristics]
seed = 42
""")
    assert config.timeout == 5.0
    assert config.max_attempts == 2
    assert config.result_cap == 8
    assert config.order == ["google", "proxy"]
    assert config.cache.max_size == 10
    assert config.cache.ttl_seconds == 60
    assert config.thresholds.label == 0.8
    # Unset thresholds keep defaults
    assert config.thresholds.object == 0.5
    assert config.google.api_key == "g-key"
    assert config.proxy.urls == ["http://localhost:8000/detect"]
    assert config.gemini.api_key == "test-key-123"
    assert config.gemini.model == "gemini-pro"
    assert config.heuristics.seed == 42


def test_load_config_env_override(monkeypatch):
    """Environment variables fill in empty credentials."""
    monkeypatch.setenv("HUGGINGFACE_TOKEN", "hf-env")
    monkeypatch.setenv("GOOGLE_VISION_API_KEY", "google-env")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("OCR_SPACE_API_KEY", "ocr-env")

    config = load_config()
    assert config.huggingface.token == "hf-env"
    assert config.google.api_key == "google-env"
    assert config.claude.api_key == "env-anthropic-key"
    assert config.gemini.api_key == "env-gemini-key"
    assert config.ocr.api_key == "ocr-env"


def test_load_config_file_key_takes_precedence(monkeypatch):
    """Config file API key takes precedence over env var."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    config = _load_toml(b"""\
[claude]
api_key = "file-key"
""")
    assert config.claude.api_key == "file-key"


def test_load_config_partial_toml():
    """Partial TOML uses defaults for missing sections."""
    config = _load_toml(b"""\
[ocr]
api_key = "K123"
""")
    assert config.ocr.api_key == "K123"
    assert config.ocr.fallback_key == "helloworld"
    assert config.timeout == 15.0
    assert config.order == DEFAULT_ORDER
