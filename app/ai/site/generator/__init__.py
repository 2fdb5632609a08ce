"""
Site Generator Module.

Turns a Brief into a prompt and a prompt into raw page markup.

Usage:
    from app.ai.site.generator import SiteGenerator, build_primary_prompt

    generator = SiteGenerator(provider)
    result = await generator.generate(build_primary_prompt(brief))
"""

from .contracts import (
    AttemptLog,
    Brief,
    ColorPair,
    GeneratedDocument,
    GenerationAttempt,
    HTMLGenerationResult,
)
from .html_generator import SiteGenerator
from .prompts import (
    NON_NEGOTIABLE_RULES,
    PROMPT_VARIANT_PRIMARY,
    PROMPT_VARIANT_REVISION,
    SYSTEM_PROMPT,
    build_primary_prompt,
    build_revision_prompt,
)

__all__ = [
    # Generator
    "SiteGenerator",
    # Contracts
    "AttemptLog",
    "Brief",
    "ColorPair",
    "GeneratedDocument",
    "GenerationAttempt",
    "HTMLGenerationResult",
    # Prompts
    "NON_NEGOTIABLE_RULES",
    "PROMPT_VARIANT_PRIMARY",
    "PROMPT_VARIANT_REVISION",
    "SYSTEM_PROMPT",
    "build_primary_prompt",
    "build_revision_prompt",
]
