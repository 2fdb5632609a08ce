"""
SiteGenerationPipeline - the generation-and-validation loop.

Coordinates:
1. SiteGenerator for one provider call per attempt
2. The quality gate (app.ai.site.validation) on every output
3. Revision prompts restating the most recent failure
4. Asset injection once a page is accepted

States:
    Attempting --(validation failed, attempts left)--> Attempting
    Attempting --(validation passed)-----------------> Accepted
    Attempting --(last attempt failed)---------------> Exhausted

At most max_retries + 1 provider calls are made per brief, strictly one
after another.
"""

import logging
import time
import uuid
from typing import Optional

from app.ai.monitoring import AILogger, ai_logger

from .assets import inject_assets
from .errors import (
    AssetInjectionError,
    GenerationExhaustedError,
    SiteGenerationError,
    UpstreamGenerationError,
)
from .fallback import render_fallback_html
from .generator import (
    PROMPT_VARIANT_PRIMARY,
    PROMPT_VARIANT_REVISION,
    AttemptLog,
    Brief,
    GeneratedDocument,
    GenerationAttempt,
    SiteGenerator,
    build_primary_prompt,
    build_revision_prompt,
)
from .validation import validate_document

logger = logging.getLogger("obrix.site.pipeline")


ON_EXHAUSTION_FAIL = "fail"
ON_EXHAUSTION_FALLBACK = "fallback"


class SiteGenerationPipeline:
    """
    Generate -> Validate -> Revise, bounded by max_retries.

    Usage:
        pipeline = SiteGenerationPipeline(SiteGenerator(provider), max_retries=2)
        document = await pipeline.run(brief)
        html = document.html
    """

    def __init__(
        self,
        generator: SiteGenerator,
        max_retries: int = 2,
        on_exhaustion: str = ON_EXHAUSTION_FAIL,
        event_logger: Optional[AILogger] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            generator: SiteGenerator bound to the startup provider
            max_retries: Revision attempts after the first (R >= 0)
            on_exhaustion: "fail" raises, "fallback" serves render_fallback_html()
            event_logger: Structured event logger
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if on_exhaustion not in (ON_EXHAUSTION_FAIL, ON_EXHAUSTION_FALLBACK):
            raise ValueError(f"Unknown on_exhaustion policy: {on_exhaustion}")

        self._generator = generator
        self._max_retries = max_retries
        self._on_exhaustion = on_exhaustion
        self._events = event_logger or ai_logger

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    async def run(self, brief: Brief, request_id: Optional[str] = None) -> GeneratedDocument:
        """
        Produce an accepted landing page for the brief.

        Args:
            brief: Project brief
            request_id: Correlation id for logs (generated if omitted)

        Returns:
            GeneratedDocument with assets injected

        Raises:
            GenerationExhaustedError: last attempt failed validation (policy "fail")
            UpstreamGenerationError: last attempt failed upstream (policy "fail")
            AssetInjectionError: substitution broke an accepted page
        """
        request_id = request_id or uuid.uuid4().hex[:12]
        start_time = time.time()
        history = AttemptLog()
        tokens_used = 0
        last_failure_reason: Optional[str] = None

        logger.info(f"[{request_id}] Generation started for {brief.display_name!r} "
                    f"(max attempts: {self.max_attempts})")

        attempt = 0
        while attempt <= self._max_retries:
            attempt += 1

            if last_failure_reason is None:
                variant = PROMPT_VARIANT_PRIMARY
                prompt = build_primary_prompt(brief)
            else:
                variant = PROMPT_VARIANT_REVISION
                prompt = build_revision_prompt(brief, last_failure_reason)

            result = await self._generator.generate(
                prompt,
                request_id=request_id,
                attempt=attempt,
                prompt_variant=variant,
            )
            tokens_used += result.tokens_used

            if not result.success:
                # An upstream failure still consumes this attempt
                history.add(GenerationAttempt(attempt, variant, upstream_error=result.error))
                self._events.log_error(request_id, result.error or "unknown", stage="provider",
                                       metadata={"attempt": attempt})
                continue

            verdict = validate_document(result.html)
            if verdict.passed:
                self._events.log_validation(request_id, attempt, passed=True)
                history.add(GenerationAttempt(attempt, variant, raw_output=result.html))
                document = self._finalize(result.html, brief, attempt, tokens_used, request_id)
                logger.info(f"[{request_id}] Accepted on attempt {attempt}/{self.max_attempts} "
                            f"in {(time.time() - start_time) * 1000:.0f}ms")
                return document

            violation = verdict.first
            last_failure_reason = violation.reason
            history.add(GenerationAttempt(attempt, variant, raw_output=result.html,
                                          failure_reason=violation.reason))
            self._events.log_validation(request_id, attempt, passed=False,
                                        rule=violation.rule, reason=violation.reason)

        return self._exhausted(history, brief, tokens_used, request_id)

    def _exhausted(
        self,
        history: AttemptLog,
        brief: Brief,
        tokens_used: int,
        request_id: str,
    ) -> GeneratedDocument:
        last = history.last
        if last is not None and last.upstream_error is not None:
            error: SiteGenerationError = UpstreamGenerationError(
                last.upstream_error,
                attempts=len(history),
                provider=self._generator.provider.provider_type.value,
            )
        else:
            reason = last.failure_reason if last is not None else "no attempts were made"
            error = GenerationExhaustedError(reason, attempts=len(history))

        self._events.log_error(request_id, error.message, stage="exhausted",
                               metadata={"attempts": len(history), "policy": self._on_exhaustion})

        if self._on_exhaustion != ON_EXHAUSTION_FALLBACK:
            raise error

        logger.warning(f"[{request_id}] Serving fallback page after {len(history)} attempt(s)")
        self._events.log_event(request_id, "fallback_used", {"error": error.error_code})
        return self._finalize(
            render_fallback_html(brief),
            brief,
            attempts=len(history),
            tokens_used=tokens_used,
            request_id=request_id,
            fallback=True,
        )

    def _finalize(
        self,
        html: str,
        brief: Brief,
        attempts: int,
        tokens_used: int,
        request_id: str,
        fallback: bool = False,
    ) -> GeneratedDocument:
        """Inject assets and make sure the page still passes the gate."""
        try:
            final_html = inject_assets(html, brief)
        except ValueError as e:
            raise AssetInjectionError(str(e), attempts=attempts) from e

        verdict = validate_document(final_html)
        if not verdict.passed:
            page = "the fallback page" if fallback else "an accepted page"
            message = f"Asset substitution broke {page}: {verdict.first.reason}"
            self._events.log_error(request_id, message, stage="assets")
            raise AssetInjectionError(message, attempts=attempts)

        self._events.log_event(request_id, "accepted", {
            "attempts": attempts,
            "fallback": fallback,
            "tokens": tokens_used,
            "html_length": len(final_html),
        })
        return GeneratedDocument(
            html=final_html,
            attempts=attempts,
            fallback=fallback,
            tokens_used=tokens_used,
        )

    def __repr__(self) -> str:
        return (f"SiteGenerationPipeline(max_attempts={self.max_attempts}, "
                f"on_exhaustion={self._on_exhaustion})")
