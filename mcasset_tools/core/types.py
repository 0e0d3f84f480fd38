"""Core type definitions for mcasset_tools."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from mcasset_tools.core.errors import NotFoundError

# Asset index kinds that use the old virtual/resources layout
LEGACY_ASSET_KINDS = frozenset({"pre-1.6", "legacy"})

# Logical asset path -> content hash
AssetIndex = dict[str, str]


class VersionType(StrEnum):
    """Release channels listed in the version manifest."""
    RELEASE = "release"
    SNAPSHOT = "snapshot"
    OLD_BETA = "old_beta"
    OLD_ALPHA = "old_alpha"


class VersionRecord(BaseModel):
    """Single entry of the version manifest."""
    id: str = Field(..., description="Version identifier, e.g. 1.16.3")
    kind: VersionType = Field(..., alias="type", description="Release channel")
    metadata_url: str = Field(..., alias="url", description="Version metadata URL")
    last_modified: datetime = Field(..., alias="time", description="Last modification time")
    release_time: datetime = Field(..., alias="releaseTime", description="Release time")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class VersionCatalog(BaseModel):
    """Ordered list of versions as they appear in the manifest."""
    versions: tuple[VersionRecord, ...] = Field(default=(), description="Version records")

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.versions)

    def __contains__(self, version_id: object) -> bool:
        return isinstance(version_id, str) and self.find(version_id) is not None

    def find(self, version_id: str) -> VersionRecord | None:
        """Return the record with exactly this id, or None."""
        for record in self.versions:
            if record.id == version_id:
                return record
        return None

    def get(self, version_id: str) -> VersionRecord:
        """Return the record with exactly this id.

        Raises:
            NotFoundError: If no record matches
        """
        record = self.find(version_id)
        if record is None:
            raise NotFoundError(f"Version {version_id} not found", version_id=version_id)
        return record


class AssetIndexRef(BaseModel):
    """Pointer from version metadata to its asset index."""
    id: str | None = Field(None, description="Asset index id")
    url: str = Field(..., description="Asset index URL")
    total_size: int = Field(0, alias="totalSize", description="Total size of all assets in bytes")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class DownloadRef(BaseModel):
    """Downloadable artifact referenced by version metadata."""
    url: str = Field(..., description="Download URL")
    sha1: str | None = Field(None, description="SHA-1 of the artifact")
    size: int | None = Field(None, description="Artifact size in bytes")

    model_config = ConfigDict(extra="allow")


class VersionMetadata(BaseModel):
    """Per-version metadata document.

    Only the fields the downloader reads are modeled; everything else is
    kept as extra data.
    """
    id: str = Field(..., description="Version identifier")
    assets: str | None = Field(None, description="Asset index kind tag")
    asset_index: AssetIndexRef | None = Field(None, alias="assetIndex", description="Asset index reference")
    downloads: dict[str, DownloadRef] = Field(default_factory=dict, description="Downloadable artifacts")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def is_legacy(self) -> bool:
        """Whether the version uses an unsupported legacy asset layout."""
        return self.assets in LEGACY_ASSET_KINDS

    @property
    def client_url(self) -> str | None:
        """URL of the client jar, if the metadata lists one."""
        client = self.downloads.get("client")
        return client.url if client else None


class AssetObject(BaseModel):
    """Entry of the asset index ``objects`` mapping."""
    hash: str = Field(..., description="SHA-1 content hash")
    size: int | None = Field(None, description="Size in bytes")

    model_config = ConfigDict(extra="allow")


class AssetIndexDocument(BaseModel):
    """Raw asset index document."""
    objects: dict[str, AssetObject] = Field(..., description="Asset path to object mapping")

    model_config = ConfigDict(extra="allow")

    def flatten(self) -> AssetIndex:
        """Collapse ``objects.<path>.hash`` into a path -> hash mapping."""
        return {path: obj.hash for path, obj in self.objects.items()}
