"""HTTP client for the launcher metadata and resource services."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from mcasset_tools.core.config import HTTPConfig
from mcasset_tools.core.errors import NetworkError, ParseError
from mcasset_tools.core.types import (
    AssetIndex,
    AssetIndexDocument,
    VersionCatalog,
    VersionMetadata,
)
from mcasset_tools.core.utils import format_size

logger = structlog.get_logger()

VERSION_MANIFEST_URL = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
RESOURCE_BASE_URL = "http://resources.download.minecraft.net"


class MetaClient:
    """Client for the version manifest, version metadata and asset services.

    Every request is made sequentially through one ``httpx.Client``. HTTP
    and transport failures surface as ``NetworkError``, malformed bodies as
    ``ParseError``; nothing is retried.
    """

    def __init__(
        self,
        manifest_url: str = VERSION_MANIFEST_URL,
        resource_base_url: str = RESOURCE_BASE_URL,
        config: HTTPConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize metadata client.

        Args:
            manifest_url: Version manifest location
            resource_base_url: Host serving content-addressed assets
            config: Optional HTTP configuration
            transport: Optional httpx transport (used for testing)
        """
        self.manifest_url = manifest_url
        self.resource_base_url = resource_base_url.rstrip("/")
        self.config = config or HTTPConfig()
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
                transport=self._transport,
            )
        return self._client

    def asset_url(self, hash_str: str) -> str:
        """Build the content-addressed URL for an asset hash.

        Objects are sharded by the first two characters of their hash:
        ``<host>/<hash[:2]>/<hash>``.

        Raises:
            ParseError: If the hash is too short to shard
        """
        if len(hash_str) < 2:
            raise ParseError(f"Invalid asset hash: {hash_str!r}")
        return f"{self.resource_base_url}/{hash_str[:2]}/{hash_str}"

    @staticmethod
    def _network_error(url: str, error: httpx.HTTPError) -> NetworkError:
        """Translate an httpx failure into a NetworkError and log it."""
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            logger.error("http_status_error", url=url, status=status)
            return NetworkError(f"HTTP {status} while fetching {url}", url=url, status_code=status)
        logger.error("http_transport_error", url=url, error=str(error))
        return NetworkError(f"Failed to fetch {url}: {error}", url=url)

    def _get(self, url: str) -> httpx.Response:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._network_error(url, e) from e
        return response

    def fetch_json(self, url: str) -> Any:
        """Fetch and decode a JSON document.

        Raises:
            NetworkError: On transport failure or non-success status
            ParseError: If the body is not valid JSON
        """
        response = self._get(url)
        try:
            return json.loads(response.content)
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}: {e}", url=url) from e

    @contextmanager
    def stream(self, url: str) -> Iterator[Iterator[bytes]]:
        """Stream a response body as chunks.

        The response is closed when the context exits, on success and on
        failure alike.

        Raises:
            NetworkError: On transport failure or non-success status
        """
        try:
            with self.client.stream("GET", url) as response:
                response.raise_for_status()
                yield self._iter_body(response, url)
        except httpx.HTTPError as e:
            raise self._network_error(url, e) from e

    @classmethod
    def _iter_body(cls, response: httpx.Response, url: str) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes()
        except httpx.HTTPError as e:
            raise cls._network_error(url, e) from e

    def resolve_catalog(self) -> VersionCatalog:
        """Fetch the version manifest and parse it into a catalog.

        Returns:
            Catalog with the manifest's versions in manifest order

        Raises:
            NetworkError: If the manifest cannot be fetched
            ParseError: If the manifest is malformed
        """
        logger.info("catalog_fetch", url=self.manifest_url)
        data = self.fetch_json(self.manifest_url)

        if not isinstance(data, dict) or "versions" not in data:
            raise ParseError("Version manifest has no versions list", url=self.manifest_url)

        try:
            catalog = VersionCatalog.model_validate({"versions": data["versions"]})
        except ValidationError as e:
            raise ParseError(f"Invalid version manifest: {e}", url=self.manifest_url) from e

        logger.info("catalog_resolved", versions=len(catalog))
        return catalog

    def fetch_version_meta(self, catalog: VersionCatalog, version_id: str) -> VersionMetadata:
        """Fetch the metadata document of a catalogued version.

        Raises:
            NotFoundError: If version_id is not in the catalog
            NetworkError: If the document cannot be fetched
            ParseError: If the document is malformed
        """
        record = catalog.get(version_id)
        data = self.fetch_json(record.metadata_url)

        try:
            meta = VersionMetadata.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                f"Invalid metadata for version {version_id}: {e}",
                url=record.metadata_url,
            ) from e

        logger.info("version_meta_fetched", version=version_id, assets=meta.assets)
        return meta

    def fetch_asset_index(self, meta: VersionMetadata) -> AssetIndex | None:
        """Fetch and flatten the asset index of a version.

        Returns:
            Mapping of asset path to content hash, or None for versions
            with a legacy or pre-1.6 asset index (nothing is fetched)

        Raises:
            NetworkError: If the index cannot be fetched
            ParseError: If the metadata or index is malformed
        """
        logger.info("asset_index_lookup", version=meta.id)
        if meta.is_legacy:
            logger.warning("asset_index_legacy", version=meta.id, assets=meta.assets)
            return None

        if meta.asset_index is None:
            raise ParseError(f"Version {meta.id} metadata has no asset index")

        logger.info(
            "asset_index_found",
            version=meta.id,
            total_size=format_size(meta.asset_index.total_size),
            total_kib=meta.asset_index.total_size // 1024,
        )

        data = self.fetch_json(meta.asset_index.url)
        try:
            document = AssetIndexDocument.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                f"Invalid asset index for version {meta.id}: {e}",
                url=meta.asset_index.url,
            ) from e

        index = document.flatten()
        logger.info("asset_index_fetched", version=meta.id, assets=len(index))
        return index

    def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> MetaClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
