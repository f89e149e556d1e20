"""
Proxy Cache Planner
===================

``ProxyCache`` ties the cache key deriver, the TTL settings and the SigV4
signer together for one incoming request: it decides which cached object
answers the request and returns a presigned URL the proxy can fetch it from.

No network I/O happens here. Fetching the URL, resuming the paused request
and purging objects belong to the proxy runtime.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .cache_key import RequestAttributes, build_cache_key_attributes, derive_cache_key
from .config import ProxyCacheConfig
from .signing import create_url_signer

logger = logging.getLogger(__name__)

METHOD_GET = "GET"
METHOD_PURGE = "PURGE"

CACHEABLE_STATUS = 200


@dataclass(frozen=True)
class CacheLookup:
    """Where the cached response for a request lives and for how long."""

    cache_key: str
    object_key: str
    ttl_seconds: int
    presigned_url: str
    purge: bool = False


def is_cacheable_status(status: int) -> bool:
    """Only 200 responses are stored."""
    return status == CACHEABLE_STATUS


class ProxyCache:
    """
    Plans cache lookups for proxied requests.

    Example:
        cache = ProxyCache(load_config_from_json("proxy-cache.json"))
        lookup = cache.lookup(RequestAttributes("example.com", "/", "GET"))
        lookup.presigned_url  # GET this to read the cached response
    """

    def __init__(self, config: ProxyCacheConfig):
        self.config = config
        self.signer = create_url_signer(config.s3)
        self.tags = config.cache_key.effective_tags
        self.ttl_seconds = config.cache_ttl_seconds
        self.presign_seconds = config.presign_ttl_seconds

        logger.debug(
            f"ProxyCache initialized: bucket={config.s3.bucket}, "
            f"ttl={self.ttl_seconds}s, presign_ttl={self.presign_seconds}s"
        )

    def cache_key_for(self, request: RequestAttributes) -> str:
        attributes = build_cache_key_attributes(self.tags, request)
        return derive_cache_key(attributes)

    def object_key_for(self, cache_key: str) -> str:
        """
        S3 object key for a cache key, with optional Git-style sharding.

        Example (shard_chars=2, prefix="cache/"):
            cache_key = "abc123..."
            returns: "cache/ab/abc123..."
        """
        s3 = self.config.s3
        if s3.shard_chars > 0 and len(cache_key) >= s3.shard_chars:
            return f"{s3.prefix}{cache_key[: s3.shard_chars]}/{cache_key}"
        return f"{s3.prefix}{cache_key}"

    def presign(
        self,
        object_key: str,
        signing_time: Optional[datetime] = None,
        version_id: Optional[str] = None,
    ) -> str:
        return self.signer.presign(
            object_key,
            self.presign_seconds,
            signing_time=signing_time,
            version_id=version_id,
        )

    def lookup(
        self, request: RequestAttributes, signing_time: Optional[datetime] = None
    ) -> CacheLookup:
        """
        Plan the cache lookup for a request.

        A ``PURGE`` request is keyed as the ``GET`` it invalidates and flagged
        with ``purge=True``.

        Args:
            request: Attributes of the incoming request
            signing_time: Signing instant (default: now, read once)

        Returns:
            CacheLookup for the request
        """
        purge = request.method.upper() == METHOD_PURGE
        if purge:
            request = request.with_method(METHOD_GET)
        if signing_time is None:
            signing_time = datetime.now(timezone.utc)

        cache_key = self.cache_key_for(request)
        object_key = self.object_key_for(cache_key)
        url = self.presign(object_key, signing_time=signing_time)

        logger.debug(f"Cache lookup for {request!r}: key={cache_key}, purge={purge}")
        return CacheLookup(
            cache_key=cache_key,
            object_key=object_key,
            ttl_seconds=self.ttl_seconds,
            presigned_url=url,
            purge=purge,
        )
