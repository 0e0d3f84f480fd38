"""Core functionality for mcasset_tools.

This module provides the pieces of the download pipeline:
- Configuration management
- Type definitions and errors
- Metadata client
- Archive assembly and progress reporting
"""

from mcasset_tools.core.assembler import ArchiveAssembler, AssemblyResult
from mcasset_tools.core.client import MetaClient
from mcasset_tools.core.config import AppConfig, HTTPConfig
from mcasset_tools.core.integrity import IntegrityError
from mcasset_tools.core.progress import ProgressReporter, format_status
from mcasset_tools.core.types import (
    AssetIndex,
    VersionCatalog,
    VersionMetadata,
    VersionRecord,
    VersionType,
)
from mcasset_tools.core.utils import chunked_read, format_size

__all__ = [
    # Pipeline
    "MetaClient",
    "ArchiveAssembler",
    "AssemblyResult",
    "ProgressReporter",
    "format_status",
    # Config
    "AppConfig",
    "HTTPConfig",
    # Types
    "AssetIndex",
    "VersionCatalog",
    "VersionMetadata",
    "VersionRecord",
    "VersionType",
    "IntegrityError",
    # Utils
    "chunked_read",
    "format_size",
]
