"""
Quality gate - fixed validation rules for generated landing pages.

Three rules run in a fixed order:

    1. structural          -> output starts with the HTML doctype
    2. external_resources  -> nothing is loaded from the network
    3. banned_heading      -> no generic one-word section headings

validate_document() short-circuits on the first violation so the reason
handed to the next revision prompt stays singular. The rules are pure
functions of the input string; running them twice gives the same verdict.

Usage:
    from app.ai.site.validation import validate_document

    verdict = validate_document(html)
    if not verdict.passed:
        print(verdict.first.reason)
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup


RULE_STRUCTURAL = "structural"
RULE_EXTERNAL_RESOURCES = "external_resources"
RULE_BANNED_HEADING = "banned_heading"

REASON_STRUCTURAL = "not a valid single-file HTML document."
REASON_EXTERNAL_RESOURCES = "contains external resource references."
REASON_BANNED_HEADING = "uses a generic, non-specific section heading."


# =============================================================================
# VERDICT
# =============================================================================

@dataclass(frozen=True)
class RuleViolation:
    """A single failed rule."""

    rule: str
    reason: str
    detail: Optional[str] = None


@dataclass
class ValidationVerdict:
    """Violations found by one validation pass (empty means accepted)."""

    violations: List[RuleViolation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def first(self) -> Optional[RuleViolation]:
        return self.violations[0] if self.violations else None

    @property
    def rules(self) -> List[str]:
        return [v.rule for v in self.violations]


# =============================================================================
# RULE 1: STRUCTURAL VALIDITY
# =============================================================================

_DOCTYPE_RE = re.compile(r"<!doctype\s+html", re.IGNORECASE)


def check_structural(html) -> Optional[RuleViolation]:
    """Empty or non-string output counts as a structural failure."""
    if not isinstance(html, str) or not html.strip():
        return RuleViolation(RULE_STRUCTURAL, REASON_STRUCTURAL, "empty output")
    if not _DOCTYPE_RE.match(html.strip()):
        return RuleViolation(RULE_STRUCTURAL, REASON_STRUCTURAL, "missing <!doctype html> prefix")
    return None


# =============================================================================
# RULE 2: NO EXTERNAL RESOURCES
# =============================================================================

# Domain fragments of common CDNs and font hosts
DENIED_RESOURCE_HOSTS: Tuple[str, ...] = (
    "fonts.googleapis.com",
    "fonts.gstatic.com",
    "ajax.googleapis.com",
    "cdn.jsdelivr.net",
    "unpkg.com",
    "cdnjs.cloudflare.com",
    "cdn.tailwindcss.com",
    "code.jquery.com",
    "stackpath.bootstrapcdn.com",
    "maxcdn.bootstrapcdn.com",
    "use.fontawesome.com",
    "kit.fontawesome.com",
    "use.typekit.net",
    "fonts.bunny.net",
    "rsms.me",
)

_DENIED_HOST_RE = re.compile(
    "|".join(re.escape(host) for host in DENIED_RESOURCE_HOSTS),
    re.IGNORECASE,
)
_LINK_TAG_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_REL_STYLESHEET_RE = re.compile(r"""(?<![\w-])rel\s*=\s*["']?[^"'>]*\bstylesheet\b""", re.IGNORECASE)
_HREF_ATTR_RE = re.compile(r"(?<![\w-])href\s*=", re.IGNORECASE)
_SCRIPT_SRC_RE = re.compile(r"<script\b[^>]*(?<![\w-])src\s*=", re.IGNORECASE)
_CSS_IMPORT_RE = re.compile(r"@import\b", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe\b", re.IGNORECASE)


def find_external_resources(html: str) -> List[str]:
    """Return a short description of every external-resource pattern found."""
    found = []

    host = _DENIED_HOST_RE.search(html)
    if host:
        found.append(f"denied host {host.group(0).lower()}")

    for tag in _LINK_TAG_RE.findall(html):
        if _REL_STYLESHEET_RE.search(tag) and _HREF_ATTR_RE.search(tag):
            found.append("<link rel=stylesheet href=...>")
            break

    if _SCRIPT_SRC_RE.search(html):
        found.append("<script src=...>")
    if _CSS_IMPORT_RE.search(html):
        found.append("@import")
    if _IFRAME_RE.search(html):
        found.append("<iframe>")

    return found


def check_external_resources(html: str) -> Optional[RuleViolation]:
    found = find_external_resources(html)
    if found:
        return RuleViolation(RULE_EXTERNAL_RESOURCES, REASON_EXTERNAL_RESOURCES, ", ".join(found))
    return None


# =============================================================================
# RULE 3: BANNED GENERIC HEADINGS
# =============================================================================

BANNED_HEADINGS = frozenset({"fast", "customizable", "reliable"})

_HEADING_TAG_RE = re.compile(r"^h[1-6]$")
_EDGE_PUNCTUATION = " \t\r\n.!:;"


def heading_texts(html: str) -> List[str]:
    """Concatenated text of every h1..h6 element, whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    texts = []
    for heading in soup.find_all(_HEADING_TAG_RE):
        texts.append(" ".join(heading.get_text("").split()))
    return texts


def is_banned_heading(text: str) -> bool:
    """True when the heading text is nothing but one of the generic words."""
    return " ".join(text.split()).strip(_EDGE_PUNCTUATION).casefold() in BANNED_HEADINGS


def check_banned_headings(html: str) -> Optional[RuleViolation]:
    for text in heading_texts(html):
        if is_banned_heading(text):
            return RuleViolation(RULE_BANNED_HEADING, REASON_BANNED_HEADING, f"heading '{text}'")
    return None


# =============================================================================
# GATE
# =============================================================================

ValidationRule = Callable[[str], Optional[RuleViolation]]

VALIDATION_RULES: Tuple[ValidationRule, ...] = (
    check_structural,
    check_external_resources,
    check_banned_headings,
)


def validate_document(html, short_circuit: bool = True) -> ValidationVerdict:
    """
    Run the quality gate over a generated document.

    Args:
        html: Extracted provider output
        short_circuit: Stop at the first violation (the loop always does)

    Returns:
        ValidationVerdict listing the violated rules in check order
    """
    verdict = ValidationVerdict()
    for rule in VALIDATION_RULES:
        violation = rule(html)
        if violation is None:
            continue
        verdict.violations.append(violation)
        if short_circuit or not isinstance(html, str):
            break
    return verdict
