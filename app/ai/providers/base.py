"""
Base AI Provider - the one interface the generation loop talks to.

Every vendor client (OpenAI, Anthropic, Gemini) plugs into the same
contract: take a prompt and a system instruction, return an AIResponse.
Network, auth, quota and SDK errors are captured in the response; the
loop decides what an upstream failure means for the current attempt.

Design Pattern: Template Method
===============================
AIProvider.generate() owns timing, error capture and logging. Subclasses
only implement _build_client() and _complete(), the vendor-specific call.

Example:
    provider = OpenAIProvider(api_key="sk-...", model="gpt-4.1-mini", timeout=90)
    response = await provider.generate(prompt, system_prompt=SYSTEM_PROMPT, max_tokens=8000)
    if response.success:
        html = response.content
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger("obrix.ai")


class ProviderType(str, Enum):
    """Supported generation vendors (values match GENERATION_PROVIDER)."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


@dataclass
class TokenUsage:
    """
    Tokens billed for one call.

    Landing pages are long outputs, so completion tokens dominate cost.
    total_tokens is derived when the vendor does not report it.
    """
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if self.total_tokens == 0:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class AIResponse:
    """
    Outcome of one provider call, successful or not.

    Attributes:
        content: Raw model text (empty on failure)
        provider: Vendor that served the call
        model: Model name sent to the vendor
        usage: Token counts
        latency_ms: Wall time of the call
        success: False for upstream failures only; bad pages still succeed here
        error: Upstream error message when success is False
        raw_response: SDK object, kept for debugging and never logged
        created_at: UTC timestamp
    """
    content: str
    provider: ProviderType
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None
    raw_response: Optional[Any] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Log-safe summary: the page itself is reduced to its length."""
        return {
            "content_length": len(self.content or ""),
            "provider": self.provider.value,
            "model": self.model,
            "tokens": {
                "prompt": self.usage.prompt_tokens,
                "completion": self.usage.completion_tokens,
                "total": self.usage.total_tokens,
            },
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
        }


class AIProvider(ABC):
    """
    Abstract generation provider.

    Constructed once at startup (see build_provider) and shared by all
    requests; it keeps no per-call state.

    Subclasses set provider_type and display_name and implement:
        _build_client()  -> SDK client, only called when an API key is present
        _complete(...)   -> (text, TokenUsage, raw SDK response)
    """

    provider_type: ProviderType
    display_name: str = "AI"

    def __init__(self, api_key: str = "", model: str = "", timeout: Optional[float] = None):
        """
        Args:
            api_key: Vendor API key; without one every call returns an error response
            model: Model name
            timeout: Client-side request timeout in seconds
        """
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

        if api_key:
            self._client = self._build_client()
            logger.info(f"{self.display_name} provider initialized with model: {model}")
        else:
            self._client = None
            logger.warning(f"{self.display_name} API key not configured - provider unavailable")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @abstractmethod
    def _build_client(self) -> Any:
        """Create the vendor SDK client."""

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[str, TokenUsage, Any]:
        """Run one vendor call. May raise; generate() captures the error."""

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        """
        Send one prompt to the model.

        Args:
            prompt: User prompt (primary or revision)
            system_prompt: System instruction
            temperature: Sampling temperature
            max_tokens: Output token limit

        Returns:
            AIResponse; this method never raises for upstream problems
        """
        start_time = time.time()

        if not self.is_configured:
            return self._create_error_response(
                f"{self.display_name} API key not configured",
                latency_ms=self._measure_latency(start_time),
            )

        try:
            content, usage, raw = await self._complete(prompt, system_prompt, temperature, max_tokens)
        except Exception as e:
            return self._create_error_response(str(e), latency_ms=self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)
        logger.info(f"{self.display_name} request completed in {latency_ms:.0f}ms, tokens: {usage.total_tokens}")

        return AIResponse(
            content=content or "",
            provider=self.provider_type,
            model=self.model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=raw,
        )

    def _measure_latency(self, start_time: float) -> float:
        return (time.time() - start_time) * 1000

    def _create_error_response(self, error: str, latency_ms: float = 0.0) -> AIResponse:
        logger.error(f"{self.display_name} generation failed: {error}")
        return AIResponse(
            content="",
            provider=self.provider_type,
            model=self.model,
            latency_ms=latency_ms,
            success=False,
            error=error,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
