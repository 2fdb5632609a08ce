"""
Sites Router - generate, export and publish landing pages.

This router handles HTTP only. Generation lives in
app.ai.site.SiteGenerationPipeline, storage in app.services.site_store and
remote hosting in app.services.publisher. Terminal errors raised by those
collaborators are turned into {error, message} payloads by the exception
handlers registered in app.main.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response

from app.ai.site import SiteGenerationPipeline
from app.core.config import Settings
from app.deps import get_pipeline, get_publisher, get_settings, get_site_store
from app.schemas.site import (
    ErrorResponse,
    GenerateSiteRequest,
    GenerateSiteResponse,
    PublishResponse,
)
from app.services.publisher import Publisher
from app.services.site_store import SiteStore, create_site_id


logger = logging.getLogger("obrix.routers.sites")

router = APIRouter(tags=["sites"])


@router.post(
    "/generate-site",
    response_model=GenerateSiteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing name and description"},
        422: {"model": ErrorResponse, "description": "Validation failed on every attempt"},
        502: {"model": ErrorResponse, "description": "Generation provider failed"},
    },
)
async def generate_site(
    payload: GenerateSiteRequest,
    pipeline: SiteGenerationPipeline = Depends(get_pipeline),
    store: SiteStore = Depends(get_site_store),
    config: Settings = Depends(get_settings),
):
    """
    Generate a landing page for a project brief.

    Flow:
        1. Check the brief has a name or a description
        2. Run the generation-and-validation loop
        3. Persist sites/<id>/index.html
        4. Return the id, public URL and the HTML itself
    """
    if not payload.has_required_fields:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "missing_fields",
                "message": "Missing required fields (name or description).",
            },
        )

    site_id = create_site_id()
    document = await pipeline.run(payload.to_brief(), request_id=site_id)
    store.save_site(site_id, document.html)

    url = f"{config.public_base_url}/sites/{site_id}/"
    logger.info(f"Site {site_id} ready at {url} (attempts={document.attempts}, fallback={document.fallback})")

    return GenerateSiteResponse(
        id=site_id,
        url=url,
        html=document.html,
        attempts=document.attempts,
        fallback=document.fallback,
    )


@router.get(
    "/export/{site_id}",
    response_class=Response,
    responses={
        200: {"content": {"application/zip": {}}},
        404: {"model": ErrorResponse},
    },
)
async def export_site(
    site_id: str,
    store: SiteStore = Depends(get_site_store),
):
    """Download a site as a ZIP with index.html and an assets/ folder."""
    archive = store.build_zip(site_id)
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{site_id}.zip"'},
    )


@router.post(
    "/publish/{site_id}",
    response_model=PublishResponse,
    responses={
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse, "description": "Remote host rejected the upload"},
        503: {"model": ErrorResponse, "description": "Publishing not configured"},
    },
)
async def publish_site(
    site_id: str,
    publisher: Publisher = Depends(get_publisher),
):
    """Upload a generated site to the configured SFTP/cPanel host."""
    url = await publisher.publish(site_id)
    return PublishResponse(id=site_id, url=url)
