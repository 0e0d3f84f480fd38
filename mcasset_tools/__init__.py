"""mcasset-tools - download a game version's assets into a zip archive.

Resolves a version id through the launcher version manifest, follows its
metadata to the asset index, downloads every indexed object by content
hash and bundles it with the resources shipped inside the client jar.

Key modules:
- core.client: Manifest, metadata and asset index retrieval
- core.assembler: Output archive assembly
- core.progress: Console progress readout
"""

__version__ = "0.1.0"
__author__ = "mcasset-tools contributors"

from mcasset_tools.core.errors import (
    MCAssetError,
    NetworkError,
    NotFoundError,
    ParseError,
    UnsupportedVersionError,
)
from mcasset_tools.core.types import VersionCatalog, VersionMetadata, VersionRecord, VersionType

__all__ = [
    "__version__",
    "__author__",
    "MCAssetError",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "UnsupportedVersionError",
    "VersionCatalog",
    "VersionMetadata",
    "VersionRecord",
    "VersionType",
]
