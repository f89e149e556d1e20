"""
proxycache - SigV4 presigned URLs, cache keys and TTLs for an S3-backed proxy cache.

A caching proxy stores upstream responses as objects in S3-compatible storage.
This library provides the pieces such a proxy needs on its request path:

Key Features:
- AWS Signature Version 4 presigned GET URLs (unsigned payload)
- Stable SHA-256 cache keys from ordered request attributes
- Duration parsing ("300s", "5m", "2h", "1d") with explicit error reporting
- Validated configuration with documented defaults
- A planner that maps a request to its cached object and presigned URL

Quick Start:
    >>> from proxycache import ProxyCache, RequestAttributes, create_proxy_cache_config
    >>>
    >>> config = create_proxy_cache_config(
    ...     s3_secret_id="AKIDEXAMPLE",
    ...     s3_secret_key="secret",
    ...     s3_region="cn-beijing",
    ...     s3_bucket="proxy-cache",
    ...     s3_endpoint="s3.example.com",
    ...     cache_ttl="5m",
    ... )
    >>> cache = ProxyCache(config)
    >>> lookup = cache.lookup(RequestAttributes("example.com", "/index.html", "GET"))
"""

from .cache_key import (
    CACHE_KEY_COOKIE,
    CACHE_KEY_HOST,
    CACHE_KEY_METHOD,
    CACHE_KEY_PATH,
    RequestAttributes,
    build_cache_key_attributes,
    derive_cache_key,
)
from .config import (
    CacheKeyConfig,
    ProxyCacheConfig,
    S3StorageConfig,
    UpstreamConfig,
    create_proxy_cache_config,
    load_config_from_dict,
    load_config_from_json,
)
from .core import CacheLookup, ProxyCache, is_cacheable_status
from .error_handling import (
    InvalidLocatorError,
    ProxyCacheConfigurationError,
    ProxyCacheError,
    UnrecognizedTTLFormatError,
)
from .signing import (
    Credential,
    ObjectLocator,
    S3UrlSigner,
    SigningRequest,
    create_url_signer,
    sign,
)
from .ttl import TTLParseResult, parse_ttl, parse_ttl_result

__version__ = "0.1.0"

__all__ = [
    # Signing
    "Credential",
    "ObjectLocator",
    "SigningRequest",
    "S3UrlSigner",
    "create_url_signer",
    "sign",
    # Cache keys
    "CACHE_KEY_HOST",
    "CACHE_KEY_PATH",
    "CACHE_KEY_METHOD",
    "CACHE_KEY_COOKIE",
    "RequestAttributes",
    "build_cache_key_attributes",
    "derive_cache_key",
    # TTL
    "TTLParseResult",
    "parse_ttl",
    "parse_ttl_result",
    # Configuration
    "ProxyCacheConfig",
    "S3StorageConfig",
    "CacheKeyConfig",
    "UpstreamConfig",
    "create_proxy_cache_config",
    "load_config_from_dict",
    "load_config_from_json",
    # Planner
    "ProxyCache",
    "CacheLookup",
    "is_cacheable_status",
    # Errors
    "ProxyCacheError",
    "ProxyCacheConfigurationError",
    "InvalidLocatorError",
    "UnrecognizedTTLFormatError",
    # Version info
    "__version__",
]
