#!/usr/bin/env python3

"""URI utility functions."""

from pathlib import Path
from urllib.parse import urlparse, unquote, quote


def uri_to_path(uri: str) -> str:
    """Convert URI to file path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def path_to_uri(path: str) -> str:
    """Convert file path to URI."""
    return f"file://{quote(str(path))}"


def is_within(path: str, root: str) -> bool:
    """Check whether a file path lies under a directory."""
    try:
        Path(path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        return False
    return True
