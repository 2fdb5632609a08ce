"""
Tests for SiteGenerator and the generation-and-validation loop.

The provider is always mocked; each test scripts the sequence of
outputs the "model" returns and checks what the loop does with them.
"""

import asyncio

import pytest
from unittest.mock import MagicMock

from app.ai.monitoring import AILogger
from app.ai.providers.base import ProviderType
from app.ai.site import (
    AssetInjectionError,
    GenerationExhaustedError,
    SiteGenerationPipeline,
    SiteGenerator,
    UpstreamGenerationError,
)
from app.ai.site.generator import SYSTEM_PROMPT
from app.ai.site.generator.contracts import Brief
from app.ai.site.validation import (
    REASON_BANNED_HEADING,
    REASON_EXTERNAL_RESOURCES,
    REASON_STRUCTURAL,
    validate_document,
)

from tests.conftest import (
    PAGE_WITH_BANNED_HEADING,
    PAGE_WITH_CDN,
    PAGE_WITHOUT_DOCTYPE,
    VALID_PAGE,
    make_provider,
    make_response,
)


def build_pipeline(provider, max_retries=2, on_exhaustion="fail", event_logger=None):
    generator = SiteGenerator(provider, timeout_seconds=5)
    return SiteGenerationPipeline(
        generator,
        max_retries=max_retries,
        on_exhaustion=on_exhaustion,
        event_logger=event_logger,
    )


def prompts_sent(provider) -> list:
    return [call.kwargs["prompt"] for call in provider.generate.call_args_list]


# ---------------------------------------------------------------------------
# SITE GENERATOR
# ---------------------------------------------------------------------------

class TestSiteGenerator:
    """One provider call, no judging."""

    @pytest.mark.asyncio
    async def test_passes_system_prompt_and_sampling_settings(self):
        provider = make_provider(VALID_PAGE)
        generator = SiteGenerator(provider, temperature=0.4, max_tokens=6000)

        result = await generator.generate("Project Name: Moon Cat")

        assert result.success is True
        assert result.html == VALID_PAGE
        assert result.tokens_used == 500
        provider.generate.assert_awaited_once_with(
            prompt="Project Name: Moon Cat",
            system_prompt=SYSTEM_PROMPT,
            temperature=0.4,
            max_tokens=6000,
        )

    @pytest.mark.asyncio
    async def test_strips_code_fences(self):
        generator = SiteGenerator(make_provider(f"```html\n{VALID_PAGE}\n```"))

        result = await generator.generate("prompt")

        assert result.html == VALID_PAGE

    @pytest.mark.asyncio
    async def test_provider_error_is_reported_not_raised(self):
        provider = make_provider(make_response(success=False, error="401 invalid api key"))

        result = await SiteGenerator(provider).generate("prompt")

        assert result.success is False
        assert result.error == "401 invalid api key"

    @pytest.mark.asyncio
    async def test_non_string_content_becomes_empty(self):
        result = await SiteGenerator(make_provider(make_response(content=None))).generate("prompt")

        assert result.success is True
        assert result.html == ""

    @pytest.mark.asyncio
    async def test_timeout_is_an_upstream_failure(self):
        provider = MagicMock()
        provider.provider_type = ProviderType.OPENAI
        provider.model = "gpt-test"

        async def never_finishes(**kwargs):
            await asyncio.sleep(10)

        provider.generate = never_finishes

        result = await SiteGenerator(provider, timeout_seconds=0.01).generate("prompt")

        assert result.success is False
        assert result.error == "Generation timed out after 0.01s"


# ---------------------------------------------------------------------------
# GENERATION LOOP
# ---------------------------------------------------------------------------

class TestAcceptance:

    @pytest.mark.asyncio
    async def test_valid_first_output_is_accepted(self, brief):
        provider = make_provider(VALID_PAGE)

        document = await build_pipeline(provider).run(brief)

        assert document.attempts == 1
        assert document.fallback is False
        assert provider.generate.await_count == 1
        assert prompts_sent(provider)[0].startswith("Project Name: Moon Cat")
        assert validate_document(document.html).passed

    @pytest.mark.asyncio
    async def test_assets_are_injected_after_acceptance(self, brief_with_assets):
        document = await build_pipeline(make_provider(VALID_PAGE)).run(brief_with_assets)

        assert '<img class="obrix-logo" src="/uploads/1718000000000-logo.png"' in document.html
        assert "url('data:image/png;base64,iVBORw0KGgo=')" in document.html

    @pytest.mark.asyncio
    async def test_fenced_output_is_accepted(self, brief):
        document = await build_pipeline(make_provider(f"```html\n{VALID_PAGE}\n```")).run(brief)

        assert document.html.startswith("<!DOCTYPE html>")

    @pytest.mark.asyncio
    async def test_tokens_are_summed_across_attempts(self, brief):
        document = await build_pipeline(make_provider(PAGE_WITH_CDN, VALID_PAGE)).run(brief)

        assert document.tokens_used == 1000


class TestRevision:

    @pytest.mark.asyncio
    async def test_structural_failure_triggers_revision(self, brief):
        provider = make_provider(PAGE_WITHOUT_DOCTYPE, VALID_PAGE)

        document = await build_pipeline(provider).run(brief)

        assert document.attempts == 2
        first, second = prompts_sent(provider)
        assert not first.startswith("Your previous answer")
        assert second.startswith("Your previous answer was rejected by automated checks.")
        assert f"Reason: the page {REASON_STRUCTURAL}" in second

    @pytest.mark.asyncio
    async def test_revision_carries_only_the_latest_reason(self, brief):
        provider = make_provider(PAGE_WITHOUT_DOCTYPE, PAGE_WITH_CDN, VALID_PAGE)

        await build_pipeline(provider).run(brief)

        third = prompts_sent(provider)[2]
        assert REASON_EXTERNAL_RESOURCES in third
        assert REASON_STRUCTURAL not in third

    @pytest.mark.asyncio
    async def test_empty_output_counts_as_structural_failure(self, brief):
        provider = make_provider(make_response(content=""), VALID_PAGE)

        document = await build_pipeline(provider).run(brief)

        assert document.attempts == 2
        assert REASON_STRUCTURAL in prompts_sent(provider)[1]


class TestExhaustion:

    @pytest.mark.asyncio
    async def test_reports_reason_of_last_attempt(self, brief):
        provider = make_provider(PAGE_WITHOUT_DOCTYPE, PAGE_WITH_CDN, PAGE_WITH_BANNED_HEADING)

        with pytest.raises(GenerationExhaustedError) as exc_info:
            await build_pipeline(provider, max_retries=2).run(brief)

        error = exc_info.value
        assert error.attempts == 3
        assert error.reason == REASON_BANNED_HEADING
        assert provider.generate.await_count == 3
        assert error.to_dict() == {
            "error": "generation_exhausted",
            "message": f"Generated page failed validation after 3 attempt(s): {REASON_BANNED_HEADING}",
            "attempts": 3,
            "reason": REASON_BANNED_HEADING,
        }

    @pytest.mark.asyncio
    async def test_zero_retries_means_one_call(self, brief):
        provider = make_provider(PAGE_WITH_CDN)

        with pytest.raises(GenerationExhaustedError) as exc_info:
            await build_pipeline(provider, max_retries=0).run(brief)

        assert exc_info.value.attempts == 1
        assert provider.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_fallback_policy_serves_local_page(self, brief_with_assets):
        provider = make_provider(PAGE_WITH_CDN, PAGE_WITH_CDN, PAGE_WITH_CDN)

        document = await build_pipeline(provider, on_exhaustion="fallback").run(brief_with_assets)

        assert document.fallback is True
        assert document.attempts == 3
        assert validate_document(document.html).passed
        assert "obrix-logo" in document.html

    @pytest.mark.asyncio
    async def test_fallback_for_a_generic_project_name(self):
        brief = Brief(name="Fast", ticker="FST", description="Mirrors cdn.jsdelivr.net, no @import.")

        document = await build_pipeline(
            make_provider(PAGE_WITH_CDN), max_retries=0, on_exhaustion="fallback"
        ).run(brief)

        assert document.fallback is True
        assert "<h1>Fast Official Site</h1>" in document.html
        assert validate_document(document.html).passed


class TestUpstreamFailures:

    @pytest.mark.asyncio
    async def test_upstream_error_consumes_an_attempt(self, brief):
        provider = make_provider(make_response(success=False, error="503 overloaded"), VALID_PAGE)

        document = await build_pipeline(provider).run(brief)

        assert document.attempts == 2
        # no validation failure yet, so the retry is still the primary prompt
        assert prompts_sent(provider)[0] == prompts_sent(provider)[1]

    @pytest.mark.asyncio
    async def test_revision_survives_an_upstream_error(self, brief):
        provider = make_provider(
            PAGE_WITH_CDN,
            make_response(success=False, error="503 overloaded"),
            VALID_PAGE,
        )

        await build_pipeline(provider).run(brief)

        assert REASON_EXTERNAL_RESOURCES in prompts_sent(provider)[2]

    @pytest.mark.asyncio
    async def test_upstream_failure_on_last_attempt(self, brief):
        provider = make_provider(
            PAGE_WITHOUT_DOCTYPE,
            make_response(success=False, error="429 rate limited"),
            make_response(success=False, error="500 server error"),
        )

        with pytest.raises(UpstreamGenerationError) as exc_info:
            await build_pipeline(provider).run(brief)

        payload = exc_info.value.to_dict()
        assert payload["error"] == "upstream_error"
        assert payload["message"] == "500 server error"
        assert payload["attempts"] == 3
        assert payload["provider"] == "openai"


class TestAssetInjectionFailure:

    @pytest.mark.asyncio
    async def test_unsupported_reference_fails_after_acceptance(self):
        brief = Brief(name="Moon Cat", logo="https://cdn.example.com/logo.png")

        with pytest.raises(AssetInjectionError) as exc_info:
            await build_pipeline(make_provider(VALID_PAGE)).run(brief)

        assert exc_info.value.to_dict()["error"] == "asset_injection_failed"
        assert exc_info.value.attempts == 1


class TestPipelineConfiguration:

    def test_max_attempts(self):
        assert build_pipeline(make_provider(), max_retries=3).max_attempts == 4

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            build_pipeline(make_provider(), max_retries=-1)

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            build_pipeline(make_provider(), on_exhaustion="ignore")

    @pytest.mark.asyncio
    async def test_validation_events_are_logged(self, brief):
        events = MagicMock(spec=AILogger)
        provider = make_provider(PAGE_WITH_BANNED_HEADING, VALID_PAGE)

        await build_pipeline(provider, event_logger=events).run(brief, request_id="req-1")

        first_call = events.log_validation.call_args_list[0]
        assert first_call.args == ("req-1", 1)
        assert first_call.kwargs["passed"] is False
        assert first_call.kwargs["reason"] == REASON_BANNED_HEADING
        events.log_event.assert_called_once()
        assert events.log_event.call_args.args[1] == "accepted"


class TestBannedHeadingRevision:

    @pytest.mark.asyncio
    async def test_generic_hero_heading_triggers_revision(self, brief):
        provider = make_provider(
            "<!doctype html><html><body><h1>Fast</h1></body></html>",
            "<!doctype html><html><body><h1>Community-Led Liquidity</h1></body></html>",
        )

        document = await build_pipeline(provider).run(brief)

        assert document.attempts == 2
        assert f"Reason: the page {REASON_BANNED_HEADING}" in prompts_sent(provider)[1]
