"""
Asset handling for generated pages.

Logos and backgrounds are never sent to the model. The prompt asks for
placeholder tokens instead, and inject_assets() splices the real
references in after the page has been accepted:

    LOGO_PLACEHOLDER        <!--OBRIX_LOGO_HERE-->   (an HTML comment in the hero)
    BACKGROUND_PLACEHOLDER  __OBRIX_BACKGROUND_URL__ (inside a CSS url(...))

Only data URIs and /uploads/... paths are accepted as references, so the
substitution can never introduce a network-hosted resource.
"""

import html as html_lib
import re
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .generator.contracts import Brief


LOGO_PLACEHOLDER = "<!--OBRIX_LOGO_HERE-->"
BACKGROUND_PLACEHOLDER = "__OBRIX_BACKGROUND_URL__"

UPLOADS_URL_PREFIX = "/uploads/"
EXPORT_ASSETS_DIR = "assets"

_DATA_URI_RE = re.compile(r"^data:image/[a-z0-9.+-]+(;[a-z0-9=.+-]+)*(;base64)?,", re.IGNORECASE)
_UPLOAD_PATH_RE = re.compile(r"^/uploads/[A-Za-z0-9][A-Za-z0-9._-]*$")
_LOGO_PLACEHOLDER_RE = re.compile(r"<!--\s*OBRIX_LOGO_HERE\s*-->")
_BACKGROUND_URL_RE = re.compile(
    r"""url\(\s*(['"]?)\s*""" + re.escape(BACKGROUND_PLACEHOLDER) + r"""\s*\1\s*\)""",
    re.IGNORECASE,
)
_CODE_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_UPLOAD_REF_RE = re.compile(r"(?<![\w/.-])/uploads/([A-Za-z0-9][A-Za-z0-9._-]*)")


def is_asset_reference(value: Optional[str]) -> bool:
    """True for data:image URIs and /uploads/<file> paths."""
    if not value:
        return False
    return bool(_DATA_URI_RE.match(value) or _UPLOAD_PATH_RE.match(value))


def strip_code_fences(text: str) -> str:
    """Drop Markdown code fences (```html ... ```) the model wraps pages in."""
    if not text:
        return ""
    return _CODE_FENCE_RE.sub("", text).strip()


def _logo_markup(brief: "Brief") -> str:
    alt = html_lib.escape(f"{brief.display_name} logo", quote=True)
    src = html_lib.escape(brief.logo, quote=True)
    return f'<img class="obrix-logo" src="{src}" alt="{alt}" width="96" height="96">'


def inject_assets(document: str, brief: "Brief") -> str:
    """
    Replace placeholder tokens with the brief's asset references.

    Missing assets remove the logo token and turn the background url()
    into 'none'. The result contains no tokens, so a second call is a no-op.

    Raises:
        ValueError: if an asset reference is not a data URI or upload path
    """
    for label, ref in (("logo", brief.logo), ("background", brief.background)):
        if ref and not is_asset_reference(ref):
            raise ValueError(f"Unsupported {label} reference; use a data URI or an uploaded file path")

    logo = _logo_markup(brief) if brief.has_logo else ""
    document = _LOGO_PLACEHOLDER_RE.sub(lambda _m: logo, document)

    if brief.has_background:
        background_url = brief.background.replace("'", "%27")
        document = _BACKGROUND_URL_RE.sub(lambda _m: f"url('{background_url}')", document)
        document = document.replace(BACKGROUND_PLACEHOLDER, background_url)
    else:
        document = _BACKGROUND_URL_RE.sub("none", document)
        document = document.replace(BACKGROUND_PLACEHOLDER, "")

    return document


def rewrite_upload_paths(document: str, prefix: str = EXPORT_ASSETS_DIR) -> Tuple[str, List[str]]:
    """
    Point /uploads/<file> references at a relative assets folder.

    Used when exporting a site so the archive works offline.

    Returns:
        (rewritten document, referenced file names in first-seen order)
    """
    names: List[str] = []

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in names:
            names.append(name)
        return f"{prefix}/{name}"

    return _UPLOAD_REF_RE.sub(_replace, document), names
