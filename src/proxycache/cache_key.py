"""
Cache Key Derivation
====================

Turns an ordered list of tagged request attributes into a stable 64-character
SHA-256 hex key. The digest is a fingerprint, not a signature: no secret is
involved.
"""

import hashlib
import logging
from typing import Iterable, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

CACHE_KEY_HOST = "$host"
CACHE_KEY_PATH = "$path"
CACHE_KEY_METHOD = "$method"
CACHE_KEY_COOKIE = "$cookie"

CACHE_KEY_TAGS = (CACHE_KEY_HOST, CACHE_KEY_PATH, CACHE_KEY_METHOD, CACHE_KEY_COOKIE)
DEFAULT_CACHE_KEY_TAGS = (CACHE_KEY_HOST, CACHE_KEY_PATH, CACHE_KEY_METHOD)

CACHE_KEY_SEPARATOR = "-"


def derive_cache_key(ordered_attributes: Iterable[str]) -> str:
    """
    Derive a cache key from request attributes.

    Attribute order is significant: the same attributes in a different order
    produce a different key.

    Args:
        ordered_attributes: Attribute strings, conventionally tag-prefixed

    Returns:
        Lowercase hex SHA-256 digest (64 characters)
    """
    joined = CACHE_KEY_SEPARATOR.join(ordered_attributes)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


class RequestAttributes:
    """The parts of an incoming HTTP request that can feed a cache key."""

    def __init__(
        self,
        host: str,
        path: str,
        method: str,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.host = host
        self.path = path
        self.method = method
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}

    def header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def with_method(self, method: str) -> "RequestAttributes":
        return RequestAttributes(self.host, self.path, method, self.headers)

    def __repr__(self) -> str:
        return (
            f"RequestAttributes(host={self.host!r}, path={self.path!r}, "
            f"method={self.method!r})"
        )


def build_cache_key_attributes(
    tags: Sequence[str], request: RequestAttributes
) -> List[str]:
    """
    Expand cache key tags into tag-prefixed request values.

    ``$host`` becomes ``$host<host>`` and so on. The cookie value comes from
    the ``cookie`` header and is empty when the header is missing. Unknown
    tags are logged and kept verbatim.
    """
    attributes = []
    for tag in tags:
        if tag == CACHE_KEY_HOST:
            attributes.append(tag + request.host)
        elif tag == CACHE_KEY_PATH:
            attributes.append(tag + request.path)
        elif tag == CACHE_KEY_METHOD:
            attributes.append(tag + request.method)
        elif tag == CACHE_KEY_COOKIE:
            attributes.append(tag + request.header("cookie"))
        else:
            logger.error(f"Invalid cache key tag: {tag}")
            attributes.append(tag)
    return attributes
