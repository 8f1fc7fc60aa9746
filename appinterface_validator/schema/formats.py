"""Format checkers installed on every schema registry."""

from urllib.parse import urlsplit

from jsonschema import FormatChecker


def is_lenient_uri(instance) -> bool:
    """Accept any string that splits as a URI with a scheme, host or path.

    Stricter RFC 3986 checks reject relative references that app-interface
    files routinely use.
    """
    if not isinstance(instance, str):
        return True
    try:
        parts = urlsplit(instance)
        # accessing hostname/port validates bracketed hosts and port numbers
        hostname, _port = parts.hostname, parts.port
    except ValueError:
        return False
    return bool(parts.scheme or hostname or parts.netloc or parts.path)


def build_format_checker() -> FormatChecker:
    checker = FormatChecker()
    checker.checks("uri")(is_lenient_uri)
    return checker
