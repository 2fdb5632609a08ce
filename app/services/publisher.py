"""
Publisher - copies a generated site to a remote web host.

Two transports are supported, selected with PUBLISH_METHOD:

- sftp:   paramiko SSH/SFTP with password auth
- cpanel: cPanel API over HTTPS (Authorization: cpanel <user>:<token>)

The published copy is the same self-contained bundle the ZIP export
produces: index.html plus an assets/ folder, placed under
<PUBLISH_TARGET_DIR>/<site_id>/ and served from <PUBLISH_BASE_URL>/<site_id>/.
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import Dict

import httpx
import paramiko
from starlette.concurrency import run_in_threadpool

from app.ai.site.assets import EXPORT_ASSETS_DIR
from app.services.site_store import SiteStore

logger = logging.getLogger("obrix.services.publisher")


class PublishError(Exception):
    """Remote publish failed or is not configured."""


class PublishDisabledError(PublishError):
    """PUBLISH_METHOD is 'none'."""


@dataclass(frozen=True)
class PublishTarget:
    """Remote host credentials and layout."""

    method: str = "none"
    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    token: str = ""
    target_dir: str = "public_html/sites"
    base_url: str = ""
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, config) -> "PublishTarget":
        return cls(
            method=config.PUBLISH_METHOD,
            host=config.PUBLISH_HOST,
            port=config.PUBLISH_PORT,
            user=config.PUBLISH_USER,
            password=config.PUBLISH_PASSWORD,
            token=config.PUBLISH_TOKEN,
            target_dir=config.PUBLISH_TARGET_DIR,
            base_url=config.PUBLISH_BASE_URL,
            timeout=config.PUBLISH_TIMEOUT_SECONDS,
        )

    @property
    def enabled(self) -> bool:
        return self.method != "none"

    def public_url(self, site_id: str) -> str:
        base = self.base_url.rstrip("/") or f"https://{self.host}"
        return f"{base}/{site_id}/"


class Publisher:
    """
    Publishes stored sites to the configured remote target.

    Usage:
        publisher = Publisher(store, PublishTarget.from_settings(settings))
        url = await publisher.publish("site_abc123defg")
    """

    def __init__(self, store: SiteStore, target: PublishTarget):
        self._store = store
        self._target = target

    @property
    def enabled(self) -> bool:
        return self._target.enabled

    async def publish(self, site_id: str) -> str:
        """
        Upload a stored site and return its public URL.

        Raises:
            SiteNotFoundError: unknown site id
            PublishDisabledError: publishing is not configured
            PublishError: transport failure
        """
        target = self._target
        if not target.enabled:
            raise PublishDisabledError("Remote publishing is disabled (PUBLISH_METHOD=none)")
        if not target.host or not target.user:
            raise PublishError("PUBLISH_HOST and PUBLISH_USER are required for remote publishing")

        html, assets = self._store.export_bundle(site_id)
        files: Dict[str, bytes] = {"index.html": html.encode("utf-8")}
        files.update(assets)

        logger.info(f"Publishing {site_id} via {target.method} to {target.host} ({len(files)} files)")

        if target.method == "sftp":
            await run_in_threadpool(self._publish_sftp, site_id, files)
        elif target.method == "cpanel":
            await self._publish_cpanel(site_id, files)
        else:
            raise PublishError(f"Unsupported publish method: {target.method}")

        url = target.public_url(site_id)
        logger.info(f"Published {site_id} at {url}")
        return url

    # =========================================================================
    # SFTP
    # =========================================================================

    def _publish_sftp(self, site_id: str, files: Dict[str, bytes]) -> None:
        target = self._target
        remote_root = posixpath.join(target.target_dir, site_id)

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                target.host,
                port=target.port or 22,
                username=target.user,
                password=target.password or None,
                timeout=target.timeout,
            )
            sftp = client.open_sftp()
            try:
                self._sftp_makedirs(sftp, posixpath.join(remote_root, EXPORT_ASSETS_DIR))
                for relative, data in files.items():
                    with sftp.file(posixpath.join(remote_root, relative), "wb") as remote_file:
                        remote_file.write(data)
            finally:
                sftp.close()
        except (paramiko.SSHException, OSError) as e:
            raise PublishError(f"SFTP publish failed: {e}") from e
        finally:
            client.close()

    @staticmethod
    def _sftp_makedirs(sftp, remote_dir: str) -> None:
        current = "/" if remote_dir.startswith("/") else ""
        for part in [p for p in remote_dir.split("/") if p]:
            current = posixpath.join(current, part) if current else part
            try:
                sftp.stat(current)
            except IOError:
                sftp.mkdir(current)

    # =========================================================================
    # CPANEL
    # =========================================================================

    def _cpanel_base(self) -> str:
        return f"https://{self._target.host}:{self._target.port or 2083}"

    async def _publish_cpanel(self, site_id: str, files: Dict[str, bytes]) -> None:
        target = self._target
        remote_root = posixpath.join(target.target_dir, site_id)
        headers = {"Authorization": f"cpanel {target.user}:{target.token}"}

        try:
            async with httpx.AsyncClient(base_url=self._cpanel_base(), headers=headers,
                                         timeout=target.timeout) as client:
                await self._cpanel_mkdir(client, target.target_dir, site_id)
                await self._cpanel_mkdir(client, remote_root, EXPORT_ASSETS_DIR)

                by_dir: Dict[str, Dict[str, bytes]] = {}
                for relative, data in files.items():
                    directory, name = posixpath.split(relative)
                    remote_dir = posixpath.join(remote_root, directory) if directory else remote_root
                    by_dir.setdefault(remote_dir, {})[name] = data

                for directory, batch in by_dir.items():
                    await self._cpanel_upload(client, directory, batch)
        except httpx.HTTPError as e:
            raise PublishError(f"cPanel publish failed: {e}") from e

    async def _cpanel_mkdir(self, client: httpx.AsyncClient, parent: str, name: str) -> None:
        # API2 Fileman::mkdir reports an error for existing folders; that is fine
        response = await client.get(
            "/json-api/cpanel",
            params={
                "cpanel_jsonapi_module": "Fileman",
                "cpanel_jsonapi_func": "mkdir",
                "cpanel_jsonapi_apiversion": "2",
                "path": parent,
                "name": name,
            },
        )
        response.raise_for_status()

    async def _cpanel_upload(self, client: httpx.AsyncClient, directory: str, batch: Dict[str, bytes]) -> None:
        multipart = [
            (f"file-{index}", (name, data, "application/octet-stream"))
            for index, (name, data) in enumerate(batch.items(), start=1)
        ]
        response = await client.post(
            "/execute/Fileman/upload_files",
            data={"dir": directory, "overwrite": "1"},
            files=multipart,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise PublishError(f"cPanel returned a non-JSON response from {directory}") from e
        if not payload.get("status"):
            errors = payload.get("errors") or ["unknown error"]
            raise PublishError(f"cPanel upload to {directory} failed: {'; '.join(map(str, errors))}")
