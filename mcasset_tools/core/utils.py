"""Shared utilities for mcasset-tools."""

from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO


def chunked_read(
    stream: BinaryIO,
    chunk_size: int = 65536
) -> Iterator[bytes]:
    """Read stream in chunks.

    Args:
        stream: Binary stream to read from
        chunk_size: Size of each chunk in bytes

    Yields:
        Data chunks as bytes

    Raises:
        ValueError: If chunk_size is not positive

    Example:
        >>> import io
        >>> stream = io.BytesIO(b"hello world")
        >>> list(chunked_read(stream, chunk_size=5))
        [b'hello', b' worl', b'd']
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def format_size(size: int) -> str:
    """Format byte size as human-readable string.

    Example:
        >>> format_size(1024)
        '1.0 KB'
        >>> format_size(1536)
        '1.5 KB'
    """
    if size < 0:
        return "0 B"

    size_float = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_float < 1024.0:
            if unit == "B":
                return f"{int(size_float)} {unit}"
            return f"{size_float:.1f} {unit}"
        size_float /= 1024.0
    return f"{size_float:.1f} PB"
