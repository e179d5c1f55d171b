"""Download of the standalone server jar, skipped when already on disk."""

from __future__ import annotations

from pathlib import Path

import httpx

from seleniumctl.catalog import VersionCatalog
from seleniumctl.constants import DOWNLOAD_CHUNK_SIZE, LATEST, RELEASE_BASE_URL
from seleniumctl.errors import DownloadError
from seleniumctl.http_client import http_session
from seleniumctl.logging import LogComponent, get_logger
from seleniumctl.models import VersionDescriptor

logger = get_logger(LogComponent.FETCHER)


class ArtifactFetcher:
    """Fetches jars from the release bucket into a local directory."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        directory: Path = Path("."),
        base_url: str = RELEASE_BASE_URL,
    ):
        self.client: httpx.Client | None = client
        self.directory: Path = directory
        self.base_url: str = base_url.rstrip("/")

    def download_url(self, descriptor: VersionDescriptor) -> str:
        return f"{self.base_url}/{descriptor.object_key}"

    def ensure_local(self, descriptor: VersionDescriptor) -> Path:
        """Return the local jar for descriptor, downloading it only if missing.

        Args:
            descriptor: Resolved version to fetch

        Returns:
            Path of the jar inside the fetcher directory

        Raises:
            DownloadError: If the server answers with an error or the transfer fails
            OSError: If the jar cannot be written
        """
        target = self.directory / descriptor.local_file_name
        if target.exists():
            logger.debug(f"{target} already present, skipping download")
            return target

        url = self.download_url(descriptor)
        logger.info(f"Downloading {url}")
        with http_session(self.client) as client:
            try:
                with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise DownloadError(
                            f"Download of {url} failed with HTTP {response.status_code}"
                        )
                    self._write(response, target)
            except httpx.HTTPError as exc:
                raise DownloadError(f"Download of {url} failed: {exc}") from exc

        logger.info(f"Saved {target}")
        return target

    def _write(self, response: httpx.Response, target: Path) -> None:
        # Only a complete jar may appear under the cache name.
        partial = target.with_name(f"{target.name}.part")
        try:
            with partial.open("wb") as f:
                for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
            partial.replace(target)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise


def download(
    version: str = LATEST,
    *,
    directory: Path = Path("."),
    client: httpx.Client | None = None,
) -> Path:
    """Resolve version (or "latest") and make sure its jar is in directory."""
    with http_session(client) as session:
        descriptor = VersionCatalog(client=session).resolve(version)
        return ArtifactFetcher(client=session, directory=directory).ensure_local(
            descriptor
        )
