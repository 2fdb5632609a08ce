"""
Site Store - filesystem persistence for generated sites and uploads.

Layout:
    <SITES_DIR>/<site_id>/index.html      one directory per generated page
    <UPLOADS_DIR>/<unix-ms>-<name>.<ext>  flat, collision-avoiding names

Uploaded files are referenced from pages as /uploads/<name>. ZIP exports
rewrite those references to a relative assets/ folder and bundle the files.
"""

import io
import logging
import re
import secrets
import string
import time
import zipfile
from pathlib import Path
from typing import Optional, Tuple

from app.ai.site.assets import EXPORT_ASSETS_DIR, UPLOADS_URL_PREFIX, rewrite_upload_paths

logger = logging.getLogger("obrix.services.site_store")


SITE_ID_PREFIX = "site_"
SITE_ID_ALPHABET = string.ascii_lowercase + string.digits
SITE_ID_LENGTH = 10

_SITE_ID_RE = re.compile(r"^site_[a-z0-9]{10}$")
_UNSAFE_NAME_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]+")

ALLOWED_UPLOAD_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}


class SiteNotFoundError(Exception):
    """Unknown or malformed site id."""


class UploadRejectedError(Exception):
    """Upload is empty, too large or not an allowed image type."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def create_site_id() -> str:
    """site_ followed by 10 random lowercase alphanumerics."""
    suffix = "".join(secrets.choice(SITE_ID_ALPHABET) for _ in range(SITE_ID_LENGTH))
    return f"{SITE_ID_PREFIX}{suffix}"


def is_valid_site_id(site_id: str) -> bool:
    return bool(_SITE_ID_RE.match(site_id or ""))


class SiteStore:
    """
    Reads and writes generated sites and uploaded assets.

    Usage:
        store = SiteStore(sites_dir="sites", uploads_dir="uploads")
        site_id = create_site_id()
        store.save_site(site_id, html)
        archive = store.build_zip(site_id)
    """

    def __init__(self, sites_dir, uploads_dir, max_upload_bytes: int = 5 * 1024 * 1024):
        self.sites_dir = Path(sites_dir)
        self.uploads_dir = Path(uploads_dir)
        self.max_upload_bytes = max_upload_bytes
        self.sites_dir.mkdir(parents=True, exist_ok=True)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # SITES
    # =========================================================================

    def site_path(self, site_id: str) -> Path:
        if not is_valid_site_id(site_id):
            raise SiteNotFoundError(f"Invalid site id: {site_id}")
        return self.sites_dir / site_id / "index.html"

    def save_site(self, site_id: str, html: str) -> Path:
        """Write index.html for the site and return its path."""
        path = self.site_path(site_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        logger.info(f"Saved {site_id} ({len(html)} chars) to {path}")
        return path

    def load_site(self, site_id: str) -> str:
        path = self.site_path(site_id)
        if not path.is_file():
            raise SiteNotFoundError(f"Site not found: {site_id}")
        return path.read_text(encoding="utf-8")

    # =========================================================================
    # UPLOADS
    # =========================================================================

    def save_upload(self, filename: Optional[str], content: bytes) -> str:
        """
        Store an uploaded image and return its public path (/uploads/<name>).

        Raises:
            UploadRejectedError: empty, oversize or unsupported file
        """
        original = Path(filename or "upload")
        suffix = original.suffix.lower()
        if suffix not in ALLOWED_UPLOAD_TYPES:
            allowed = ", ".join(sorted(ALLOWED_UPLOAD_TYPES))
            raise UploadRejectedError(f"Unsupported file type ({suffix or 'none'}). Allowed: {allowed}.")
        if not content:
            raise UploadRejectedError(f"File {original.name} is empty.")
        if len(content) > self.max_upload_bytes:
            raise UploadRejectedError(
                f"File {original.name} exceeds {self.max_upload_bytes} bytes.",
                status_code=413,
            )

        stem = _UNSAFE_NAME_CHARS_RE.sub("-", original.stem).strip("-")[:40] or "asset"
        name = f"{int(time.time() * 1000)}-{stem}{suffix}"
        target = self.uploads_dir / name
        counter = 1
        while target.exists():
            name = f"{int(time.time() * 1000)}-{stem}-{counter}{suffix}"
            target = self.uploads_dir / name
            counter += 1

        target.write_bytes(content)
        logger.info(f"Stored upload {name} ({len(content)} bytes)")
        return f"{UPLOADS_URL_PREFIX}{name}"

    def upload_file(self, name: str) -> Optional[Path]:
        """Path of a stored upload, or None when it does not exist."""
        path = self.uploads_dir / Path(name).name
        return path if path.is_file() else None

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_bundle(self, site_id: str) -> Tuple[str, dict]:
        """
        Prepare a self-contained copy of a site.

        Returns:
            (index.html with relative asset paths, {archive name: bytes})
        """
        html = self.load_site(site_id)
        html, names = rewrite_upload_paths(html, EXPORT_ASSETS_DIR)

        assets = {}
        for name in names:
            path = self.upload_file(name)
            if path is None:
                logger.warning(f"{site_id} references missing upload {name}")
                continue
            assets[f"{EXPORT_ASSETS_DIR}/{name}"] = path.read_bytes()
        return html, assets

    def build_zip(self, site_id: str) -> bytes:
        """ZIP archive with index.html and an assets/ folder."""
        html, assets = self.export_bundle(site_id)

        mem = io.BytesIO()
        with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("index.html", html)
            # keep the folder present even when the page only uses inline assets
            zf.writestr(f"{EXPORT_ASSETS_DIR}/", b"")
            for arcname, data in assets.items():
                zf.writestr(arcname, data)
        return mem.getvalue()
