"""Utility functions for CLI operations."""

import math


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def page_count(total: int, page_size: int) -> int:
    """
    Number of pages needed to show total items; at least 1.
    """
    return max(1, math.ceil(total / page_size))


def chunk_ranges(file_size: int, chunk_size: int) -> list[tuple[int, int]]:
    """
    Split a file into (offset, length) pairs of at most chunk_size bytes.

    Args:
        file_size: Total file size in bytes
        chunk_size: Maximum chunk length

    Returns:
        List of (offset, length) tuples covering the whole file
    """
    return [
        (offset, min(chunk_size, file_size - offset))
        for offset in range(0, file_size, chunk_size)
    ]
