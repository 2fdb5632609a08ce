"""
Site generation - brief in, validated single-file landing page out.

Usage:
    from app.ai.site import SiteGenerationPipeline, SiteGenerator, Brief

    pipeline = SiteGenerationPipeline(SiteGenerator(provider), max_retries=2)
    document = await pipeline.run(Brief(name="Moon Cat", ticker="MCAT"))
"""

from .errors import (
    AssetInjectionError,
    GenerationExhaustedError,
    SiteGenerationError,
    UpstreamGenerationError,
)
from .generator import Brief, ColorPair, GeneratedDocument, SiteGenerator
from .pipeline import ON_EXHAUSTION_FAIL, ON_EXHAUSTION_FALLBACK, SiteGenerationPipeline

__all__ = [
    "AssetInjectionError",
    "Brief",
    "ColorPair",
    "GeneratedDocument",
    "GenerationExhaustedError",
    "ON_EXHAUSTION_FAIL",
    "ON_EXHAUSTION_FALLBACK",
    "SiteGenerationError",
    "SiteGenerationPipeline",
    "SiteGenerator",
    "UpstreamGenerationError",
]
