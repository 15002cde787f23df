"""Recognition provider base class, tagged outcomes, and factory."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..models import DetectedProduct, ImageInput

if TYPE_CHECKING:
    from ..config import PipelineConfig

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class ProviderOutcome:
    """What one provider attempt produced."""

    provider: str
    status: OutcomeStatus
    products: list[DetectedProduct] = field(default_factory=list)
    description: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


class ProviderAdapter(ABC):
    """A remote recognition service.

    Subclasses know how to talk to one service (``send``) and how to turn
    its reply into canonical products (``parse``). ``attempt`` wraps both so
    that no provider failure ever reaches the orchestrator as an exception.
    """

    name: str = "provider"

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def send(self, image: ImageInput) -> Any:
        """Send the image to the service and return its decoded reply."""
        ...

    @abstractmethod
    def parse(self, raw: Any) -> list[DetectedProduct]:
        """Turn a reply into normalized, de-duplicated products."""
        ...

    def describe(self, raw: Any) -> str | None:
        return None

    async def attempt(self, image: ImageInput, timeout: float) -> ProviderOutcome:
        try:
            raw = await asyncio.wait_for(self.send(image), timeout=timeout)
            products = self.parse(raw)
            description = self.describe(raw)
        except asyncio.TimeoutError:
            logger.warning("%s: нет ответа за %.1f с", self.name, timeout)
            return ProviderOutcome(
                self.name, OutcomeStatus.FAILED, error=f"таймаут {timeout} с"
            )
        except Exception as e:
            logger.warning("%s: ошибка распознавания: %s", self.name, e)
            return ProviderOutcome(self.name, OutcomeStatus.FAILED, error=str(e))

        if not products:
            logger.info("%s: продукты не найдены", self.name)
            return ProviderOutcome(self.name, OutcomeStatus.EMPTY)
        return ProviderOutcome(
            self.name,
            OutcomeStatus.SUCCESS,
            products=products,
            description=description,
        )


def create_providers(config: PipelineConfig) -> list[ProviderAdapter]:
    """Build the configured provider chain in priority order.

    Providers without credentials or endpoints are left out, so an empty
    configuration yields an empty chain.
    """
    providers: list[ProviderAdapter] = []

    for backend_name in config.order:
        match backend_name:
            case "huggingface":
                from .huggingface import HuggingFaceProvider

                providers.append(
                    HuggingFaceProvider(
                        config.huggingface, config.thresholds, cap=config.result_cap
                    )
                )
            case "google":
                from .google import GoogleVisionProvider

                providers.append(
                    GoogleVisionProvider(
                        config.google, config.thresholds, cap=config.result_cap
                    )
                )
            case "proxy":
                from .proxy import ProxyProvider

                for url in config.proxy.urls:
                    providers.append(
                        ProxyProvider(url, config.thresholds, cap=config.result_cap)
                    )
            case "claude":
                from .claude import ClaudeVisionProvider

                providers.append(
                    ClaudeVisionProvider(
                        api_key=config.claude.api_key,
                        model=config.claude.model,
                        min_confidence=config.thresholds.llm,
                    )
                )
            case "gemini":
                from .gemini import GeminiVisionProvider

                providers.append(
                    GeminiVisionProvider(
                        api_key=config.gemini.api_key,
                        model=config.gemini.model,
                        min_confidence=config.thresholds.llm,
                    )
                )
            case _:
                raise ValueError(
                    f"Неизвестный провайдер распознавания: {backend_name!r} "
                    f"(huggingface / google / proxy / claude / gemini)"
                )

    return [p for p in providers if p.is_configured]
