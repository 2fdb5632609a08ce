"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Long-lived collaborators (pipeline, store, publisher) are built once in
app.main.create_app and kept on app.state; these helpers hand them to
route handlers so nothing relies on module-level singletons.
"""

from fastapi import Request

from app.ai.site import SiteGenerationPipeline
from app.core.config import Settings
from app.services.publisher import Publisher
from app.services.site_store import SiteStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(request: Request) -> SiteGenerationPipeline:
    return request.app.state.pipeline


def get_site_store(request: Request) -> SiteStore:
    return request.app.state.site_store


def get_publisher(request: Request) -> Publisher:
    return request.app.state.publisher
