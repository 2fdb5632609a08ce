"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Settings pointing at temporary sites/ and uploads/ folders
- A mock generation provider (no network calls, no API keys)
- Test client (FastAPI TestClient) built with create_app()
- Sample briefs and pages
"""

import os
import tempfile

# ---------------------------------------------------------------------------
# ENVIRONMENT
# ---------------------------------------------------------------------------
# Importing app.main builds the module-level app from the environment.
# Keep its folders out of the working tree and its provider offline.
# Must run before any app import.

_SESSION_DIR = tempfile.mkdtemp(prefix="obrix-tests-")
os.environ["SITES_DIR"] = os.path.join(_SESSION_DIR, "sites")
os.environ["UPLOADS_DIR"] = os.path.join(_SESSION_DIR, "uploads")
os.environ["PUBLISH_METHOD"] = "none"
os.environ["GENERATION_PROVIDER"] = "openai"
for _key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY"):
    os.environ[_key] = ""

import pytest
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from app.ai.providers.base import AIProvider, AIResponse, ProviderType, TokenUsage
from app.ai.site.generator.contracts import Brief, ColorPair
from app.core.config import Settings
from app.main import create_app


# ---------------------------------------------------------------------------
# SAMPLE PAGES
# ---------------------------------------------------------------------------
# Minimal documents that pass (or fail exactly one of) the quality gate

VALID_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Moon Cat</title>
<style>body { background-image: url('__OBRIX_BACKGROUND_URL__'); }</style>
</head>
<body>
  <header><!--OBRIX_LOGO_HERE--><h1>Moon Cat</h1></header>
  <section><h2>Why Moon Cat purrs louder</h2><p>Community first.</p></section>
</body>
</html>"""

# Fails the structural rule
PAGE_WITHOUT_DOCTYPE = "<html><body><h1>Moon Cat</h1></body></html>"

# Loads an external stylesheet
PAGE_WITH_CDN = """<!DOCTYPE html>
<html><head><link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bulma.css"></head>
<body><h1>Moon Cat</h1></body></html>"""

# Uses a generic heading
PAGE_WITH_BANNED_HEADING = """<!DOCTYPE html>
<html><body><h1>Moon Cat</h1><h2>Fast</h2><p>Blocks in seconds.</p></body></html>"""


def make_response(content: str = VALID_PAGE, success: bool = True, error: str = None) -> AIResponse:
    """Build a provider response the way a real provider would."""
    return AIResponse(
        content=content if success else "",
        provider=ProviderType.OPENAI,
        model="gpt-test",
        usage=TokenUsage(prompt_tokens=100, completion_tokens=400),
        latency_ms=12.0,
        success=success,
        error=error,
    )


def make_provider(*outputs) -> MagicMock:
    """
    Mock AIProvider returning the given outputs in order.

    Each output is either page text (success) or an AIResponse
    (use make_response(success=False, ...) for upstream failures).
    """
    provider = MagicMock(spec=AIProvider)
    provider.provider_type = ProviderType.OPENAI
    provider.model = "gpt-test"
    responses = [o if isinstance(o, AIResponse) else make_response(o) for o in outputs]
    provider.generate = AsyncMock(side_effect=responses)
    return provider


# ---------------------------------------------------------------------------
# BRIEF FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def brief() -> Brief:
    """Brief without assets."""
    return Brief(
        name="Moon Cat",
        ticker="mcat",
        description="A community-owned meme coin for cat people.",
        telegram="https://t.me/mooncat",
        twitter="@mooncat",
        colors=ColorPair(primary="#101010", accent="#f59e0b"),
    )


@pytest.fixture
def brief_with_assets() -> Brief:
    """Brief with an uploaded logo and an inline background."""
    return Brief(
        name="Moon Cat",
        ticker="MCAT",
        description="A community-owned meme coin for cat people.",
        logo="/uploads/1718000000000-logo.png",
        background="data:image/png;base64,iVBORw0KGgo=",
    )


# ---------------------------------------------------------------------------
# APP FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path) -> Settings:
    """
    Settings isolated from the developer's environment.

    Sites and uploads live under tmp_path; publishing is disabled.
    """
    return Settings(
        _env_file=None,
        BASE_URL="http://testserver",
        SITES_DIR=str(tmp_path / "sites"),
        UPLOADS_DIR=str(tmp_path / "uploads"),
        MAX_RETRIES=2,
        ON_EXHAUSTION="fail",
        PUBLISH_METHOD="none",
        GENERATION_TIMEOUT_SECONDS=5,
    )


@pytest.fixture
def provider() -> MagicMock:
    """Provider that returns one valid page."""
    return make_provider(VALID_PAGE)


@pytest.fixture
def client(settings: Settings, provider: MagicMock) -> Generator[TestClient, None, None]:
    """
    Create a test client around a fresh app.

    Tests that need other provider behavior override the `provider` fixture
    or build their own app with create_app(settings, make_provider(...)).
    """
    app = create_app(settings, provider)
    with TestClient(app) as test_client:
        yield test_client
