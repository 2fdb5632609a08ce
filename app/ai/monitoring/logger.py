"""
AI Logger - Structured logging for generation operations.

This module provides structured logging for the site generation loop.
It captures:
- Provider requests (prompt variant, length, preview)
- Provider responses (tokens, latency, success)
- Validation failures and their reasons
- Errors and fallbacks

Log Format:
==========
Each log entry is a JSON document carrying:
- Timestamp
- Request ID (for tracing one /generate-site call across attempts)
- Attempt number
- Event-specific fields

Asset payloads (data URIs) are never logged; they never reach the
prompt in the first place.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from app.ai.providers.base import AIResponse

LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

# Every module logger lives under this namespace
logger = logging.getLogger("obrix")
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)


def configure_logging(level: str = "INFO") -> None:
    """Apply LOG_LEVEL to the obrix logger tree."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logger.setLevel(resolved)


def _preview(text: str, limit: int = 100) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class AILogger:
    """
    Structured logger for generation operations.

    Usage:
        ai_logger.log_request(
            request_id="abc123",
            attempt=1,
            prompt_variant="primary",
            prompt=user_prompt,
            provider="openai",
            model="gpt-4.1-mini",
        )
        ai_logger.log_response(request_id="abc123", attempt=1, response=ai_response)
    """

    def __init__(self, name: str = "obrix.ai.events"):
        self._logger = logging.getLogger(name)

    def _emit(self, level: int, label: str, log_data: Dict[str, Any]) -> None:
        log_data["timestamp"] = datetime.now(timezone.utc).isoformat()
        self._logger.log(level, f"{label}: {json.dumps(log_data, default=str)}")

    def log_request(
        self,
        request_id: str,
        attempt: int,
        prompt_variant: str,
        prompt: str,
        provider: str,
        model: str,
    ) -> None:
        """
        Log an outbound generation request.

        Args:
            request_id: Unique request identifier
            attempt: 1-based attempt number
            prompt_variant: "primary" or "revision"
            prompt: The user prompt (only length and a preview are logged)
            provider: AI provider name
            model: Model name
        """
        self._emit(logging.INFO, "AI Request", {
            "event": "ai_request",
            "request_id": request_id,
            "attempt": attempt,
            "prompt_variant": prompt_variant,
            "provider": provider,
            "model": model,
            "prompt_length": len(prompt),
            "prompt_preview": _preview(prompt),
        })

    def log_response(
        self,
        request_id: str,
        attempt: int,
        response: AIResponse,
    ) -> None:
        """Log a provider response (success or captured failure)."""
        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "attempt": attempt,
        }
        log_data.update(response.to_dict())
        level = logging.INFO if response.success else logging.WARNING
        self._emit(level, "AI Response", log_data)

    def log_validation(
        self,
        request_id: str,
        attempt: int,
        passed: bool,
        rule: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        """Log the verdict of one validation pass."""
        log_data = {
            "event": "validation_passed" if passed else "validation_failed",
            "request_id": request_id,
            "attempt": attempt,
        }
        if not passed:
            log_data["rule"] = rule
            log_data["reason"] = reason
        self._emit(logging.INFO if passed else logging.WARNING, "Validation", log_data)

    def log_error(
        self,
        request_id: str,
        error: str,
        stage: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an error in the generation pipeline.

        Args:
            request_id: Request identifier
            error: Error message
            stage: Where the error occurred (provider, exhausted, assets, publish)
            metadata: Additional context
        """
        log_data = {
            "event": "ai_error",
            "request_id": request_id,
            "error": error,
            "stage": stage,
        }
        if metadata:
            log_data["metadata"] = metadata
        self._emit(logging.ERROR, "AI Error", log_data)

    def log_event(
        self,
        request_id: str,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a generic pipeline event (accepted, fallback_used, ...)."""
        log_data = {
            "event": event_type,
            "request_id": request_id,
        }
        if data:
            log_data.update(data)
        self._emit(logging.INFO, "AI Event", log_data)


# ---------------------------------------------------------------------------
# SHARED INSTANCE
# ---------------------------------------------------------------------------
# Stateless wrapper around a named logger; safe to share across requests.
ai_logger = AILogger()
