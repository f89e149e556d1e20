"""
Configuration Management for proxycache
=======================================

Settings are split into focused dataclasses (S3 storage, cache key, upstream
target) combined by ``ProxyCacheConfig``. Each is validated on construction,
so a config object that exists is usable: a bad TTL or a missing S3 setting
is reported at load time rather than on the first request.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from . import json_utils
from .cache_key import CACHE_KEY_COOKIE, CACHE_KEY_TAGS, DEFAULT_CACHE_KEY_TAGS
from .error_handling import (
    InvalidLocatorError,
    ProxyCacheConfigurationError,
    UnrecognizedTTLFormatError,
    log_configuration_validation,
    with_error_handling,
)
from .signing import Credential, ObjectLocator, parse_endpoint
from .ttl import parse_ttl_result

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = "300s"
DEFAULT_UPSTREAM_HOST = "proxy-cache-s3-httpbin-1"
DEFAULT_UPSTREAM_PORT = 80

REDACTED = "***"

# Stand-in object key used to check that endpoint, bucket and prefix form a URL
_PLACEHOLDER_OBJECT_KEY = "object"

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def _compact(value: Any) -> str:
    """Remove every space from a setting value."""
    return str(value).replace(" ", "")


def _flag(name: str, value: Any) -> bool:
    """Read a boolean setting given as a bool or as true/false/1/0 text."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    normalized = _compact(value).lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ProxyCacheConfigurationError(
        f"Invalid {name}: {value!r} is not a boolean", {"setting": name, "value": value}
    )


def _ttl_seconds(name: str, spec: str) -> int:
    try:
        seconds = parse_ttl_result(spec).unwrap()
    except UnrecognizedTTLFormatError as e:
        raise ProxyCacheConfigurationError(
            f"Invalid {name}: {spec!r}", {"setting": name, "value": spec}
        ) from e
    if seconds <= 0:
        raise ProxyCacheConfigurationError(
            f"{name} must be positive", {"setting": name, "value": spec}
        )
    return seconds


@dataclass
class S3StorageConfig:
    """Connection and layout settings for the S3 bucket holding cached objects."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    region: str
    bucket: str
    endpoint: str  # host name, optionally with port
    session_token: Optional[str] = field(default=None, repr=False)
    prefix: str = ""
    shard_chars: int = 0

    @log_configuration_validation("S3StorageConfig")
    def __post_init__(self):
        """Validate S3 storage configuration."""
        missing = [
            name
            for name in ("access_key_id", "secret_access_key", "region", "bucket", "endpoint")
            if not getattr(self, name)
        ]
        if missing:
            raise ProxyCacheConfigurationError("s3 setting is empty", {"missing": missing})

        if self.shard_chars < 0:
            raise ProxyCacheConfigurationError(
                "shard_chars must be non-negative", {"shard_chars": self.shard_chars}
            )

        # Normalize prefix to "" or "<prefix>/"
        stripped = self.prefix.strip("/")
        self.prefix = f"{stripped}/" if stripped else ""

        locator = ObjectLocator(
            self.endpoint, self.bucket, self.prefix + _PLACEHOLDER_OBJECT_KEY, self.region
        )
        try:
            parse_endpoint(locator)
        except InvalidLocatorError as e:
            raise ProxyCacheConfigurationError(
                f"Invalid s3 endpoint settings: {e}",
                {"endpoint": self.endpoint, "bucket": self.bucket, "prefix": self.prefix},
            ) from e

        logger.debug(
            f"S3 storage configured: endpoint={self.endpoint}, bucket={self.bucket}, "
            f"region={self.region}, prefix={self.prefix!r}, shard_chars={self.shard_chars}"
        )

    @property
    def credential(self) -> Credential:
        return Credential(self.access_key_id, self.secret_access_key, self.session_token)


@dataclass
class CacheKeyConfig:
    """Which request attributes make up the cache key, in order."""

    tags: List[str] = field(default_factory=lambda: list(DEFAULT_CACHE_KEY_TAGS))
    include_cookie: bool = False

    def __post_init__(self):
        """Validate cache key tags."""
        invalid = [tag for tag in self.tags if tag not in CACHE_KEY_TAGS]
        if invalid:
            raise ValueError(f"Invalid cache key tags: {invalid}")

    @property
    def effective_tags(self) -> List[str]:
        if self.include_cookie and CACHE_KEY_COOKIE not in self.tags:
            return self.tags + [CACHE_KEY_COOKIE]
        return list(self.tags)


@dataclass
class UpstreamConfig:
    """Origin the proxy falls through to on a cache miss."""

    host: str = DEFAULT_UPSTREAM_HOST
    port: int = DEFAULT_UPSTREAM_PORT

    def __post_init__(self):
        if not self.host:
            raise ValueError("upstream host must not be empty")
        if not (0 < self.port < 65536):
            raise ValueError("upstream port must be between 1 and 65535")


@dataclass
class ProxyCacheConfig:
    """Main configuration combining all sub-configurations."""

    s3: S3StorageConfig
    cache_ttl: str = DEFAULT_CACHE_TTL
    presign_ttl: Optional[str] = None  # defaults to cache_ttl
    cache_key: CacheKeyConfig = field(default_factory=CacheKeyConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)

    @log_configuration_validation("ProxyCacheConfig")
    def __post_init__(self):
        """Validate TTL settings."""
        if not self.cache_ttl or not self.cache_ttl.strip():
            raise ProxyCacheConfigurationError("cache ttl is empty")
        _ttl_seconds("cache_ttl", self.cache_ttl)
        if self.presign_ttl is not None:
            _ttl_seconds("presign_ttl", self.presign_ttl)

        logger.info(
            f"Proxy cache configured: ttl={self.cache_ttl_seconds}s, "
            f"cachekey: {'==='.join(self.cache_key.effective_tags)}"
        )

    @property
    def cache_ttl_seconds(self) -> int:
        return _ttl_seconds("cache_ttl", self.cache_ttl)

    @property
    def presign_ttl_seconds(self) -> int:
        if self.presign_ttl is None:
            return self.cache_ttl_seconds
        return _ttl_seconds("presign_ttl", self.presign_ttl)

    def to_dict(self, redact_secrets: bool = True) -> Dict[str, Any]:
        """Flat settings dict in the format accepted by ``load_config_from_dict``."""
        secret = REDACTED if redact_secrets else self.s3.secret_access_key
        token = self.s3.session_token
        if token and redact_secrets:
            token = REDACTED
        data = {
            "cache_ttl": self.cache_ttl,
            "cache_header": self.cache_key.include_cookie,
            "cache_key": list(self.cache_key.tags),
            "s3_secret_id": self.s3.access_key_id,
            "s3_secret_key": secret,
            "s3_region": self.s3.region,
            "s3_bucket": self.s3.bucket,
            "s3_endpoint": self.s3.endpoint,
            "s3_prefix": self.s3.prefix,
            "s3_shard_chars": self.s3.shard_chars,
            "upstream_host": self.upstream.host,
            "upstream_port": self.upstream.port,
        }
        if token:
            data["s3_session_token"] = token
        if self.presign_ttl is not None:
            data["presign_ttl"] = self.presign_ttl
        return data

    def to_json(self, redact_secrets: bool = True) -> str:
        return json_utils.dumps(self.to_dict(redact_secrets), sort_keys=True, indent=True)


_KNOWN_KEYS = {
    "cache_ttl",
    "presign_ttl",
    "cache_header",
    "cache_key",
    "s3_secret_id",
    "s3_secret_key",
    "s3_session_token",
    "s3_region",
    "s3_bucket",
    "s3_endpoint",
    "s3_prefix",
    "s3_shard_chars",
    "upstream_host",
    "upstream_port",
}


@with_error_handling(ProxyCacheConfigurationError)
def load_config_from_dict(data: Mapping[str, Any]) -> ProxyCacheConfig:
    """
    Build a configuration from a flat settings mapping.

    String settings have all spaces removed. ``cache_ttl`` falls back to
    ``DEFAULT_CACHE_TTL`` and the upstream target to ``DEFAULT_UPSTREAM_HOST``
    / ``DEFAULT_UPSTREAM_PORT`` when omitted.

    Args:
        data: Settings keyed as in the proxy plugin config (``s3_secret_id``...)

    Returns:
        Validated ProxyCacheConfig

    Raises:
        ProxyCacheConfigurationError: If required settings are missing or invalid
    """
    for key in data:
        if key not in _KNOWN_KEYS:
            logger.warning(f"Unknown configuration parameter ignored: {key}")

    def text(key: str, default: str = "") -> str:
        value = data.get(key)
        return default if value is None else _compact(value)

    session_token = text("s3_session_token") or None
    presign_ttl = text("presign_ttl") or None

    s3 = S3StorageConfig(
        access_key_id=text("s3_secret_id"),
        secret_access_key=text("s3_secret_key"),
        region=text("s3_region"),
        bucket=text("s3_bucket"),
        endpoint=text("s3_endpoint"),
        session_token=session_token,
        prefix=text("s3_prefix"),
        shard_chars=int(data.get("s3_shard_chars", 0)),
    )

    tags = data.get("cache_key")
    cache_key = CacheKeyConfig(
        tags=list(tags) if tags is not None else list(DEFAULT_CACHE_KEY_TAGS),
        include_cookie=_flag("cache_header", data.get("cache_header", False)),
    )

    upstream = UpstreamConfig(
        host=text("upstream_host", DEFAULT_UPSTREAM_HOST),
        port=int(data.get("upstream_port", DEFAULT_UPSTREAM_PORT)),
    )

    return ProxyCacheConfig(
        s3=s3,
        cache_ttl=text("cache_ttl", DEFAULT_CACHE_TTL),
        presign_ttl=presign_ttl,
        cache_key=cache_key,
        upstream=upstream,
    )


@with_error_handling(ProxyCacheConfigurationError)
def load_config_from_json(path: Union[str, Path]) -> ProxyCacheConfig:
    """
    Load configuration from a JSON file of flat settings.

    Raises:
        ProxyCacheConfigurationError: If the file cannot be read, is not a
            JSON object, or holds invalid settings
    """
    data = json_utils.loads(Path(path).read_bytes())
    if not isinstance(data, dict):
        raise ProxyCacheConfigurationError(
            "Configuration file must contain a JSON object", {"path": str(path)}
        )
    logger.debug(f"Loaded configuration from {path}")
    return load_config_from_dict(data)


def create_proxy_cache_config(**settings) -> ProxyCacheConfig:
    """
    Factory function for creating configurations from keyword settings.

    Example:
        config = create_proxy_cache_config(
            s3_secret_id="AKID",
            s3_secret_key="secret",
            s3_region="cn-beijing",
            s3_bucket="cache",
            s3_endpoint="s3.example.com",
            cache_ttl="5m",
        )
    """
    return load_config_from_dict(settings)
