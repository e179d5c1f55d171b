"""Version lookup against the Selenium release bucket listing."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

import httpx

from seleniumctl.constants import ARTIFACT_PREFIX, ARTIFACT_SUFFIX, LATEST, LISTING_URL
from seleniumctl.errors import CatalogError
from seleniumctl.http_client import http_session
from seleniumctl.logging import LogComponent, get_logger
from seleniumctl.models import VersionDescriptor, artifact_file_name

logger = get_logger(LogComponent.CATALOG)

# e.g. "2.42/selenium-server-standalone-2.42.2.jar"
_KEY_PATTERN = re.compile(
    rf"^\d+\.\d+/{re.escape(ARTIFACT_PREFIX)}(\d+(?:\.\d+)*){re.escape(ARTIFACT_SUFFIX)}$"
)


def version_key(version: str) -> tuple[int, ...]:
    """Natural sort key: "2.42.2" sorts after "2.9.0"."""
    return tuple(int(part) for part in version.split("."))


def minor_version(version: str) -> str:
    """Return the first two dot-separated components ("2.42.2" -> "2.42")."""
    return ".".join(version.split(".")[:2])


def object_key(version: str) -> str:
    """Return the bucket key of the standalone jar for a version."""
    return f"{minor_version(version)}/{artifact_file_name(version)}"


def parse_listing(body: str | bytes) -> list[str]:
    """Extract standalone jar versions from an S3-style XML listing.

    Returns:
        Distinct versions in ascending natural order (may be empty)

    Raises:
        CatalogError: If the body is not a bucket listing
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise CatalogError(f"Unparsable version listing: {exc}") from exc

    if not root.tag.endswith("ListBucketResult"):
        raise CatalogError(f"Unexpected listing document <{root.tag}>")

    versions: set[str] = set()
    for element in root.iter():
        # Tags carry the S3 namespace: "{http://doc.s3.amazonaws.com/2006-03-01}Key"
        if not element.tag.endswith("Key") or element.text is None:
            continue
        match = _KEY_PATTERN.match(element.text.strip())
        if match:
            versions.add(match.group(1))
    return sorted(versions, key=version_key)


class VersionCatalog:
    """Resolves versions and object keys from the release bucket.

    Stateless apart from the optional HTTP client, which the caller owns.
    """

    def __init__(self, client: httpx.Client | None = None, url: str = LISTING_URL):
        self.client: httpx.Client | None = client
        self.url: str = url

    def _fetch_listing(self) -> bytes:
        with http_session(self.client) as client:
            try:
                response = client.get(self.url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise CatalogError(
                    f"Version listing returned HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise CatalogError(f"Version listing unreachable: {exc}") from exc
            return response.content

    def available_versions(self) -> list[str]:
        """Return every standalone jar version in the bucket, oldest first."""
        versions = parse_listing(self._fetch_listing())
        logger.debug(f"Found {len(versions)} standalone server versions")
        return versions

    def latest(self) -> str:
        """Return the newest standalone jar version in the bucket.

        Raises:
            CatalogError: If the listing cannot be fetched or parsed, or has no jar
        """
        versions = self.available_versions()
        if not versions:
            raise CatalogError("No standalone server jar found in version listing")
        logger.info(f"Latest standalone server version is {versions[-1]}")
        return versions[-1]

    def resolve(self, version: str = LATEST) -> VersionDescriptor:
        """Resolve a version (or "latest") to its object key and local file name."""
        resolved = self.latest() if version == LATEST else version
        return VersionDescriptor(
            requested=version,
            resolved_version=resolved,
            object_key=object_key(resolved),
            local_file_name=artifact_file_name(resolved),
        )
