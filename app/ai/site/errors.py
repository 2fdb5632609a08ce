"""
Terminal error kinds raised by the site generation loop.

Validation failures are recoverable and never leave the loop; only the
classes below cross the component boundary.
"""

from typing import Optional


class SiteGenerationError(Exception):
    """Base class for terminal generation failures."""

    error_code = "generation_failed"

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.message = message
        self.attempts = attempts

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "message": self.message,
            "attempts": self.attempts,
        }


class GenerationExhaustedError(SiteGenerationError):
    """Every attempt came back and failed validation."""

    error_code = "generation_exhausted"

    def __init__(self, reason: str, attempts: int):
        super().__init__(
            f"Generated page failed validation after {attempts} attempt(s): {reason}",
            attempts=attempts,
        )
        self.reason = reason

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["reason"] = self.reason
        return payload


class UpstreamGenerationError(SiteGenerationError):
    """The generation provider itself failed on the final attempt."""

    error_code = "upstream_error"

    def __init__(self, message: str, attempts: int, provider: Optional[str] = None):
        super().__init__(message, attempts=attempts)
        self.provider = provider

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.provider:
            payload["provider"] = self.provider
        return payload


class AssetInjectionError(SiteGenerationError):
    """Placeholder substitution produced a document that no longer validates."""

    error_code = "asset_injection_failed"
