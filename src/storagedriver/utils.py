"""Utility functions for storagedriver."""

from typing import BinaryIO, Optional

from .constants import DEFAULT_CHUNK_SIZE
from .context import RequestContext


def copy_stream(
    reader,
    writer: BinaryIO,
    ctx: Optional[RequestContext] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Copy ``reader`` into ``writer`` chunk by chunk.

    The context is checked before every chunk so a cancelled request stops
    the copy between reads.

    Args:
        reader: Any object with a ``read(n)`` method returning bytes
        writer: Binary destination
        ctx: Request context to honour
        chunk_size: Maximum bytes per read

    Returns:
        Number of bytes consumed from ``reader``
    """
    total = 0
    while True:
        if ctx is not None:
            ctx.check()
        chunk = reader.read(chunk_size)
        if not chunk:
            break
        writer.write(chunk)
        total += len(chunk)
    return total


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def humanize_rate(bytes_per_second: float) -> str:
    """Convert a byte rate to human-readable format."""
    return f"{humanize_size(bytes_per_second)}/s"
