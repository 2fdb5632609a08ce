"""
Monitoring Module - Structured logging for generation operations.

Usage:
======
    from app.ai.monitoring import ai_logger

    ai_logger.log_request(request_id, attempt, "primary", prompt, "openai", "gpt-4.1-mini")
    ai_logger.log_validation(request_id, attempt, passed=False, rule="structural", reason="...")
"""

from app.ai.monitoring.logger import AILogger, ai_logger, configure_logging

__all__ = [
    "AILogger",
    "ai_logger",
    "configure_logging",
]
