"""Formatting helpers shared by the server and the CLI."""

import math

SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB', 'TB']


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count as a human-readable string.

    Uses 1024-based steps and at most two decimals, dropping trailing zeros
    (e.g., "0 Bytes", "512 Bytes", "1.5 KB", "500 MB").

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string with size and unit
    """
    if size_bytes <= 0:
        return "0 Bytes"

    index = min(int(math.log(size_bytes, 1024)), len(SIZE_UNITS) - 1)
    value = round(size_bytes / (1024 ** index), 2)
    if value >= 1024 and index < len(SIZE_UNITS) - 1:
        index += 1
        value = round(size_bytes / (1024 ** index), 2)

    return f"{value:g} {SIZE_UNITS[index]}"
