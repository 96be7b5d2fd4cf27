"""Decide which incoming HTTP headers a gateway forwards as gRPC metadata."""

from __future__ import annotations

import string
from collections.abc import Callable, Iterable
from typing import Optional

METADATA_PREFIX = "grpcgateway-"
METADATA_HEADER_PREFIX = "Grpc-Metadata-"

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")

_PERMANENT_HEADERS = frozenset(
    {
        "Accept",
        "Accept-Charset",
        "Accept-Language",
        "Accept-Ranges",
        "Authorization",
        "Cache-Control",
        "Content-Type",
        "Cookie",
        "Date",
        "Expect",
        "From",
        "Host",
        "If-Match",
        "If-Modified-Since",
        "If-None-Match",
        "If-Schedule-Tag-Match",
        "If-Unmodified-Since",
        "Max-Forwards",
        "Origin",
        "Pragma",
        "Referer",
        "User-Agent",
        "Via",
        "Warning",
    }
)

HeaderMatcher = Callable[[str], Optional[str]]


def canonical_mime_header_key(key: str) -> str:
    """Capitalise the first letter and each letter after a hyphen, lower-casing the rest.

    Keys holding characters that are not valid in a header name are returned
    unchanged.
    """
    if any(char not in _TOKEN_CHARS for char in key):
        return key
    parts = []
    upper = True
    for char in key:
        parts.append(char.upper() if upper else char.lower())
        upper = char == "-"
    return "".join(parts)


def default_header_matcher(key: str) -> Optional[str]:
    """Return the metadata key for a standard header, or ``None`` to drop it.

    Permanent HTTP headers get the gateway prefix; ``Grpc-Metadata-`` headers
    lose theirs.
    """
    key = canonical_mime_header_key(key)
    if key in _PERMANENT_HEADERS:
        return METADATA_PREFIX + key
    if key.startswith(METADATA_HEADER_PREFIX):
        return key[len(METADATA_HEADER_PREFIX) :]
    return None


def make_incoming_header_matcher(prefixes: Iterable[str]) -> HeaderMatcher:
    """Build a matcher that keeps headers starting with any of ``prefixes`` as they are.

    ``key`` is expected to be canonical already; other headers go through
    :func:`default_header_matcher`.
    """
    canonical_prefixes = tuple(canonical_mime_header_key(prefix) for prefix in prefixes)

    def matcher(key: str) -> Optional[str]:
        if any(key.startswith(prefix) for prefix in canonical_prefixes):
            return key
        return default_header_matcher(key)

    return matcher