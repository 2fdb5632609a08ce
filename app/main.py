"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request  # The FastAPI framework
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware  # Cross-Origin Resource Sharing
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.ai.monitoring import configure_logging
from app.ai.providers import AIProvider, build_provider
from app.ai.site import (
    AssetInjectionError,
    GenerationExhaustedError,
    SiteGenerationError,
    SiteGenerationPipeline,
    SiteGenerator,
    UpstreamGenerationError,
)
from app.core.config import Settings, settings as default_settings
from app.routers import sites, uploads  # Route handlers (endpoints)
from app.services.publisher import PublishDisabledError, PublishError, Publisher, PublishTarget
from app.services.site_store import SiteNotFoundError, SiteStore, UploadRejectedError

logger = logging.getLogger("obrix.main")


def _error(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    content = {"error": error, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _register_exception_handlers(app: FastAPI) -> None:
    """Map terminal error kinds to {error, message} payloads."""

    @app.exception_handler(GenerationExhaustedError)
    async def exhausted_handler(_request: Request, exc: GenerationExhaustedError) -> JSONResponse:
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(UpstreamGenerationError)
    async def upstream_handler(_request: Request, exc: UpstreamGenerationError) -> JSONResponse:
        return JSONResponse(status_code=502, content=exc.to_dict())

    @app.exception_handler(AssetInjectionError)
    async def asset_injection_handler(_request: Request, exc: AssetInjectionError) -> JSONResponse:
        logger.error(f"Asset injection failed: {exc.message}")
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(SiteGenerationError)
    async def generation_handler(_request: Request, exc: SiteGenerationError) -> JSONResponse:
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(SiteNotFoundError)
    async def not_found_handler(_request: Request, exc: SiteNotFoundError) -> JSONResponse:
        return _error(404, "not_found", str(exc))

    @app.exception_handler(UploadRejectedError)
    async def upload_rejected_handler(_request: Request, exc: UploadRejectedError) -> JSONResponse:
        return _error(exc.status_code, "upload_rejected", str(exc))

    @app.exception_handler(PublishDisabledError)
    async def publish_disabled_handler(_request: Request, exc: PublishDisabledError) -> JSONResponse:
        return _error(503, "publish_disabled", str(exc))

    @app.exception_handler(PublishError)
    async def publish_error_handler(_request: Request, exc: PublishError) -> JSONResponse:
        logger.error(f"Publish failed: {exc}")
        return _error(502, "publish_failed", str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"
        return _error(422, "invalid_request", message)


def create_app(
    config: Optional[Settings] = None,
    provider: Optional[AIProvider] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        config: Settings (defaults to the environment-loaded instance)
        provider: Generation provider; built from config when omitted

    The provider, pipeline, store and publisher are constructed exactly once
    here and shared by all requests through app.state.
    """
    config = config or default_settings
    configure_logging(config.LOG_LEVEL)

    provider = provider or build_provider(config)
    generator = SiteGenerator(
        provider,
        temperature=config.GENERATION_TEMPERATURE,
        max_tokens=config.GENERATION_MAX_TOKENS,
        timeout_seconds=config.GENERATION_TIMEOUT_SECONDS,
    )
    pipeline = SiteGenerationPipeline(
        generator,
        max_retries=config.MAX_RETRIES,
        on_exhaustion=config.ON_EXHAUSTION,
    )
    store = SiteStore(config.SITES_DIR, config.UPLOADS_DIR, max_upload_bytes=config.MAX_UPLOAD_BYTES)
    publisher = Publisher(store, PublishTarget.from_settings(config))

    app = FastAPI(
        title=config.APP_NAME,
        debug=config.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = config
    app.state.provider = provider
    app.state.pipeline = pipeline
    app.state.site_store = store
    app.state.publisher = publisher

    # ---------------------------------------------------------------------------
    # CORS MIDDLEWARE
    # ---------------------------------------------------------------------------
    # ALLOWED_ORIGINS="*" accepts any origin; credentials are never needed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # ---------------------------------------------------------------------------
    # REGISTER ROUTERS
    # ---------------------------------------------------------------------------
    # sites.router: /generate-site, /export/{id}, /publish/{id}
    # uploads.router: /upload
    app.include_router(sites.router)
    app.include_router(uploads.router)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe; does not call the generation provider."""
        return {"ok": True}

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root():
        return f"{config.APP_NAME} is running. POST /generate-site"

    # ---------------------------------------------------------------------------
    # STATIC FILES
    # ---------------------------------------------------------------------------
    # Generated sites at /sites/<id>/ and uploaded assets at /uploads/<name>
    app.mount("/sites", StaticFiles(directory=str(store.sites_dir), html=True), name="sites")
    app.mount("/uploads", StaticFiles(directory=str(store.uploads_dir)), name="uploads")

    logger.info(f"{config.APP_NAME} ready: provider={provider!r}, max_retries={config.MAX_RETRIES}, "
                f"on_exhaustion={config.ON_EXHAUSTION}, publish={config.PUBLISH_METHOD}")
    return app


app = create_app()
