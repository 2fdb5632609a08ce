"""
Contracts for the site generator.

Dataclasses for the brief, single-call generation results, attempt records
and the accepted document.
"""

from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_PRIMARY_COLOR = "#0b0b0b"
DEFAULT_ACCENT_COLOR = "#7c3aed"


@dataclass(frozen=True)
class ColorPair:
    """Primary (background) and accent colors as CSS hex values."""

    primary: str = DEFAULT_PRIMARY_COLOR
    accent: str = DEFAULT_ACCENT_COLOR


@dataclass(frozen=True)
class Brief:
    """
    Project brief that a landing page is generated for.

    Built once per request and never mutated. Asset references are either
    data URIs or paths of files uploaded through /upload; the payloads are
    kept out of every prompt.
    """

    name: Optional[str] = None
    """Project name."""

    ticker: Optional[str] = None
    """Token ticker, without the leading '$'."""

    description: Optional[str] = None
    """Free-form project description."""

    telegram: Optional[str] = None
    """Telegram link or handle."""

    twitter: Optional[str] = None
    """X/Twitter link or handle."""

    colors: ColorPair = field(default_factory=ColorPair)
    """Color pair exposed to the page as CSS variables."""

    logo: Optional[str] = None
    """Logo asset reference (data URI or /uploads/... path)."""

    background: Optional[str] = None
    """Background asset reference (data URI or /uploads/... path)."""

    theme: str = "dark"
    """Color theme, 'dark' or 'light'."""

    def __post_init__(self):
        if not (self.name or "").strip() and not (self.description or "").strip():
            raise ValueError("Missing required fields (name or description).")

    @property
    def has_logo(self) -> bool:
        return bool(self.logo)

    @property
    def has_background(self) -> bool:
        return bool(self.background)

    @property
    def display_name(self) -> str:
        """Name used in titles; falls back to the ticker."""
        return (self.name or "").strip() or (self.ticker or "").strip() or "Untitled Project"

    @property
    def ticker_symbol(self) -> str:
        ticker = (self.ticker or "").strip().lstrip("$")
        return ticker.upper()


@dataclass
class HTMLGenerationResult:
    """Result of a single call to the generation provider."""

    success: bool
    """False when the provider call itself failed (network, auth, quota, timeout)."""

    html: str = ""
    """Extracted document text; may be empty or malformed even on success."""

    error: Optional[str] = None
    """Upstream error message when success is False."""

    tokens_used: int = 0
    """Total tokens consumed (input + output)."""

    latency_ms: float = 0.0
    """Time taken for the call in milliseconds."""

    model: str = ""
    """Model used for generation."""

    def describe(self) -> str:
        """Human-readable description."""
        status = "SUCCESS" if self.success else "FAILED"
        lines = [
            f"HTMLGenerationResult: {status}",
            f"  Model: {self.model}",
            f"  Tokens: {self.tokens_used}",
            f"  Latency: {self.latency_ms:.0f}ms",
        ]
        if self.error:
            lines.append(f"  Error: {self.error}")
        if self.html:
            lines.append(f"  HTML length: {len(self.html)} chars")
        return "\n".join(lines)


@dataclass
class GenerationAttempt:
    """One pass through the loop. Lives only while the loop runs."""

    attempt_number: int
    prompt_variant: str
    raw_output: str = ""
    failure_reason: Optional[str] = None
    upstream_error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure_reason is not None or self.upstream_error is not None


@dataclass(frozen=True)
class GeneratedDocument:
    """Accepted landing page, ready to be stored or published."""

    html: str
    attempts: int
    fallback: bool = False
    tokens_used: int = 0


@dataclass
class AttemptLog:
    """Ordered attempts of one loop run, used for logging and error detail."""

    attempts: List[GenerationAttempt] = field(default_factory=list)

    def add(self, attempt: GenerationAttempt) -> None:
        self.attempts.append(attempt)

    @property
    def last(self) -> Optional[GenerationAttempt]:
        return self.attempts[-1] if self.attempts else None

    def __len__(self) -> int:
        return len(self.attempts)
