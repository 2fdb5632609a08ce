"""
SiteGenerator - one call to the generation provider.

Wraps an AIProvider with the system prompt, the request deadline and
output extraction. It never judges the output; that is the quality
gate's job (see app.ai.site.validation).
"""

import asyncio
import logging
import time
from typing import Optional

from app.ai.monitoring import AILogger, ai_logger
from app.ai.providers.base import AIProvider

from ..assets import strip_code_fences
from .contracts import HTMLGenerationResult
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger("obrix.site.generator")


class SiteGenerator:
    """
    Sends one prompt to the provider and returns the extracted page.

    Usage:
        generator = SiteGenerator(provider, timeout_seconds=90)
        result = await generator.generate(prompt, request_id="site_abc", attempt=1)

        if result.success:
            html = result.html
    """

    def __init__(
        self,
        provider: AIProvider,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        timeout_seconds: Optional[float] = 90.0,
        system_prompt: str = SYSTEM_PROMPT,
        event_logger: Optional[AILogger] = None,
    ):
        """
        Initialize the generator.

        Args:
            provider: Generation provider, constructed once at startup
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            timeout_seconds: Deadline for one provider call (None disables it)
            system_prompt: System instruction sent with every call
            event_logger: Structured event logger
        """
        self._provider = provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout_seconds
        self._system_prompt = system_prompt
        self._events = event_logger or ai_logger

    @property
    def provider(self) -> AIProvider:
        return self._provider

    async def generate(
        self,
        prompt: str,
        request_id: str = "-",
        attempt: int = 1,
        prompt_variant: str = "primary",
    ) -> HTMLGenerationResult:
        """
        Run one generation call.

        Args:
            prompt: User prompt (primary or revision)
            request_id: Correlation id for logs
            attempt: 1-based attempt number, for logs
            prompt_variant: "primary" or "revision", for logs

        Returns:
            HTMLGenerationResult; success=False only for upstream failures
        """
        start_time = time.time()
        provider_name = self._provider.provider_type.value
        model = getattr(self._provider, "model", "")

        self._events.log_request(
            request_id=request_id,
            attempt=attempt,
            prompt_variant=prompt_variant,
            prompt=prompt,
            provider=provider_name,
            model=model,
        )

        try:
            call = self._provider.generate(
                prompt=prompt,
                system_prompt=self._system_prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
            if self._timeout:
                response = await asyncio.wait_for(call, timeout=self._timeout)
            else:
                response = await call
        except asyncio.TimeoutError:
            message = f"Generation timed out after {self._timeout:g}s"
            logger.warning(f"[{request_id}] attempt {attempt}: {message}")
            return HTMLGenerationResult(
                success=False,
                error=message,
                latency_ms=(time.time() - start_time) * 1000,
                model=model,
            )

        self._events.log_response(request_id=request_id, attempt=attempt, response=response)

        if not response.success:
            return HTMLGenerationResult(
                success=False,
                error=response.error or "Generation provider returned an error",
                latency_ms=response.latency_ms,
                model=response.model,
            )

        content = response.content if isinstance(response.content, str) else ""

        return HTMLGenerationResult(
            success=True,
            html=strip_code_fences(content),
            latency_ms=response.latency_ms,
            tokens_used=response.usage.total_tokens if response.usage else 0,
            model=response.model,
        )

    def __repr__(self) -> str:
        return f"SiteGenerator(provider={self._provider!r}, timeout={self._timeout})"
