"""
Validation Module - quality gate for generated landing pages.

Usage:
    from app.ai.site.validation import validate_document

    verdict = validate_document(html)
"""

from .rules import (
    BANNED_HEADINGS,
    DENIED_RESOURCE_HOSTS,
    REASON_BANNED_HEADING,
    REASON_EXTERNAL_RESOURCES,
    REASON_STRUCTURAL,
    RULE_BANNED_HEADING,
    RULE_EXTERNAL_RESOURCES,
    RULE_STRUCTURAL,
    RuleViolation,
    ValidationVerdict,
    check_banned_headings,
    check_external_resources,
    check_structural,
    find_external_resources,
    heading_texts,
    is_banned_heading,
    validate_document,
)

__all__ = [
    "BANNED_HEADINGS",
    "DENIED_RESOURCE_HOSTS",
    "REASON_BANNED_HEADING",
    "REASON_EXTERNAL_RESOURCES",
    "REASON_STRUCTURAL",
    "RULE_BANNED_HEADING",
    "RULE_EXTERNAL_RESOURCES",
    "RULE_STRUCTURAL",
    "RuleViolation",
    "ValidationVerdict",
    "check_banned_headings",
    "check_external_resources",
    "check_structural",
    "find_external_resources",
    "heading_texts",
    "is_banned_heading",
    "validate_document",
]
