"""Stored-name generation and parsing.

A stored name has the form ``{timestamp_ms}-{token}-{sanitized_name}``.
The gateway builds it on upload and the catalog parses it back to show the
original name, so both sides go through this module.
"""

import re
import time
import uuid

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.\-_]")
NAME_SEPARATOR = "-"
TOKEN_LENGTH = 13


def sanitize_filename(name: str) -> str:
    """
    Replace every character outside [A-Za-z0-9.-_] with an underscore.

    Args:
        name: Client-supplied filename

    Returns:
        Sanitized filename of the same length
    """
    return UNSAFE_CHARS.sub("_", name)


def generate_token() -> str:
    """
    Generate a random lowercase token without separators.

    Returns:
        13 hex characters taken from a UUID4
    """
    return uuid.uuid4().hex[:TOKEN_LENGTH]


def current_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def generate_stored_name(original_name: str) -> str:
    """
    Build a unique on-disk name for an uploaded file.

    Args:
        original_name: Client-supplied filename

    Returns:
        Stored name "{timestamp_ms}-{token}-{sanitized_name}"
    """
    return NAME_SEPARATOR.join(
        (str(current_millis()), generate_token(), sanitize_filename(original_name))
    )


def original_name_from_stored(stored_name: str) -> str:
    """
    Recover the display name from a stored name.

    The first two "-" separated segments are the timestamp and the token;
    everything after them is the sanitized original name. Sanitizing keeps
    "-", so an original name containing dashes comes back intact. A name
    without any "-" was not produced by the gateway and is returned as is.

    Args:
        stored_name: Name of the file on disk

    Returns:
        Display name
    """
    if NAME_SEPARATOR not in stored_name:
        return stored_name
    return NAME_SEPARATOR.join(stored_name.split(NAME_SEPARATOR)[2:])
