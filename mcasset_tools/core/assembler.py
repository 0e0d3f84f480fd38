"""Assembly of a version's resources into a single zip archive.

The output archive holds, in this order:

1. every asset index entry under ``assets/<path>`` (``pack.mcmeta`` at the
   root), downloaded by content hash
2. ``pack.png`` copied from the client jar
3. every other ``assets/`` entry of the client jar, copied verbatim
   (the ``assets/.mcassetsroot`` marker is skipped)

All entries carry a fixed timestamp so repeated runs over the same data
produce identical archives.
"""

from __future__ import annotations

import tempfile
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

import structlog
from rich.console import Console
from rich.markup import escape

from mcasset_tools.core.client import MetaClient
from mcasset_tools.core.config import AppConfig
from mcasset_tools.core.errors import ParseError, UnsupportedVersionError
from mcasset_tools.core.integrity import HashVerifier
from mcasset_tools.core.progress import ProgressReporter
from mcasset_tools.core.types import AssetIndex, VersionCatalog, VersionMetadata
from mcasset_tools.core.utils import chunked_read

logger = structlog.get_logger()

ASSETS_PREFIX = "assets/"
ASSETS_ROOT_MARKER = "assets/.mcassetsroot"
PACK_META = "pack.mcmeta"
PACK_ICON = "pack.png"

# Earliest timestamp a zip entry can carry
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)

COMPRESSION_METHODS = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


def archive_path_for(asset_key: str) -> str:
    """Map an asset index key to its path inside the output archive.

    Example:
        >>> archive_path_for("minecraft/sounds/x.ogg")
        'assets/minecraft/sounds/x.ogg'
        >>> archive_path_for("pack.mcmeta")
        'pack.mcmeta'
    """
    if asset_key == PACK_META:
        return asset_key
    return f"{ASSETS_PREFIX}{asset_key}"


def is_packaged_asset(name: str) -> bool:
    """Whether a client jar entry is copied into the output archive."""
    return name.startswith(ASSETS_PREFIX) and name != ASSETS_ROOT_MARKER


def count_units(asset_index: AssetIndex, package_names: Iterable[str]) -> int:
    """Total number of entries the output archive will receive."""
    packaged = sum(1 for name in package_names if is_packaged_asset(name))
    return len(asset_index) + packaged + 1  # pack.png


@dataclass
class AssemblyResult:
    """Outcome of a completed assembly.

    Attributes:
        version_id: Version that was packaged
        output_path: Archive that was written
        total_units: Number of entries announced to the progress reporter
        entries: Archive entry names in write order
    """

    version_id: str
    output_path: Path
    total_units: int
    entries: list[str] = field(default_factory=list)


class ArchiveAssembler:
    """Builds a resource archive for one version.

    Every fetch and every write is sequential. Any failure aborts the run;
    an output archive that was already opened is closed (so its central
    directory is valid) but left incomplete on disk.
    """

    def __init__(
        self,
        client: MetaClient,
        config: AppConfig | None = None,
        console: Console | None = None,
    ):
        self.client = client
        self.config = config or AppConfig()
        self.console = console or Console(highlight=False)
        self.compression = COMPRESSION_METHODS[self.config.compression]

    def resolve(
        self, catalog: VersionCatalog, version_id: str
    ) -> tuple[VersionMetadata, AssetIndex]:
        """Fetch metadata and asset index for a version.

        Raises:
            NotFoundError: If the version is not in the catalog
            UnsupportedVersionError: If the version has a legacy asset index
        """
        meta = self.client.fetch_version_meta(catalog, version_id)
        asset_index = self.client.fetch_asset_index(meta)
        if asset_index is None:
            self.console.print(
                f"[yellow]Legacy or pre-1.6 asset index for version {escape(version_id)} detected.[/yellow]"
            )
            raise UnsupportedVersionError(
                f"Legacy asset formats are not supported (version {version_id})",
                version_id=version_id,
            )

        total_size = meta.asset_index.total_size if meta.asset_index else 0
        self.console.print(f"Found asset index - total assets size: {total_size // 1024} KiB")
        return meta, asset_index

    def assemble(
        self,
        catalog: VersionCatalog,
        version_id: str,
        output_path: Path,
        reporter: ProgressReporter | None = None,
    ) -> AssemblyResult:
        """Download a version's resources and write them to output_path.

        The output archive is only created once the metadata, asset index
        and client jar have been retrieved; an existing file at that path
        is overwritten.

        Args:
            catalog: Resolved version catalog
            version_id: Version to package
            output_path: Archive to create
            reporter: Optional progress reporter, created if omitted

        Returns:
            Summary of the written archive
        """
        meta, asset_index = self.resolve(catalog, version_id)

        client_url = meta.client_url
        if client_url is None:
            raise ParseError(f"Version {version_id} metadata has no client download")

        with tempfile.TemporaryFile() as package_file:
            self.console.print("Retrieving client jar...")
            self._download(client_url, package_file)

            try:
                package = zipfile.ZipFile(package_file)
            except zipfile.BadZipFile as e:
                raise ParseError(f"Client jar is not a valid zip: {e}", url=client_url) from e

            with package:
                names = package.namelist()
                if PACK_ICON not in names:
                    raise ParseError(f"Client jar has no {PACK_ICON}", url=client_url)

                total_units = count_units(asset_index, names)
                if reporter is None:
                    reporter = ProgressReporter(total_units, self.console)
                else:
                    reporter.total_units = total_units

                result = AssemblyResult(version_id, output_path, total_units)
                logger.info(
                    "assembly_started",
                    version=version_id,
                    output=str(output_path),
                    total=total_units,
                )

                with zipfile.ZipFile(output_path, "w", compression=self.compression) as archive:
                    for asset_key, hash_str in asset_index.items():
                        path = archive_path_for(asset_key)
                        reporter.report(path)
                        self._write_asset(archive, path, hash_str)
                        result.entries.append(path)

                    reporter.report(PACK_ICON)
                    self._copy_entry(package, archive, PACK_ICON)
                    result.entries.append(PACK_ICON)

                    for name in names:
                        if not is_packaged_asset(name):
                            continue
                        reporter.report(name)
                        self._copy_entry(package, archive, name)
                        result.entries.append(name)

        logger.info("assembly_finished", version=version_id, entries=len(result.entries))
        return result

    def _entry_info(self, name: str) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=ENTRY_DATE_TIME)
        info.compress_type = self.compression
        info.external_attr = 0o644 << 16
        return info

    def _download(self, url: str, target: IO[bytes]) -> None:
        """Stream a URL into a seekable file and rewind it."""
        size = 0
        with self.client.stream(url) as chunks:
            for chunk in chunks:
                target.write(chunk)
                size += len(chunk)
        target.seek(0)
        logger.info("client_package_fetched", url=url, size=size)

    def _write_asset(self, archive: zipfile.ZipFile, path: str, hash_str: str) -> None:
        url = self.client.asset_url(hash_str)
        verifier = HashVerifier(hash_str, path) if self.config.verify_hashes else None

        with self.client.stream(url) as chunks, archive.open(self._entry_info(path), "w") as entry:
            for chunk in chunks:
                entry.write(chunk)
                if verifier is not None:
                    verifier.update(chunk)

        if verifier is not None:
            verifier.verify()
        logger.debug("asset_fetched", path=path, hash=hash_str)

    def _copy_entry(self, package: zipfile.ZipFile, archive: zipfile.ZipFile, name: str) -> None:
        source_info = package.getinfo(name)
        if source_info.is_dir():
            archive.writestr(self._entry_info(name), b"")
            return

        with package.open(source_info) as source, archive.open(self._entry_info(name), "w") as target:
            for chunk in chunked_read(source):
                target.write(chunk)
