"""
SigV4 Presigned URL Signing
===========================

This module produces AWS Signature Version 4 presigned URLs for GET access to
objects in S3-compatible storage. The payload is never hashed: presigned GET
URLs use the ``UNSIGNED-PAYLOAD`` placeholder.

Signing is a pure function of its inputs. The signing time is always supplied
by the caller, so the same inputs produce the same URL byte for byte.

Usage:
    from datetime import datetime, timedelta, timezone
    from proxycache.signing import Credential, ObjectLocator, sign

    url = sign(
        Credential("AKIDEXAMPLE", "secret"),
        ObjectLocator("s3.example.com", "media", "images/logo.png", "cn-beijing"),
        timedelta(hours=1),
        datetime.now(timezone.utc),
    )
"""

import hashlib
import hmac
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from urllib.parse import SplitResult, parse_qsl, quote_plus, urlencode, urlsplit

from .error_handling import InvalidLocatorError, ProxyCacheConfigurationError

logger = logging.getLogger(__name__)

# Check for boto3 availability
try:
    import boto3

    BOTO3_AVAILABLE = True
except ImportError:
    BOTO3_AVAILABLE = False
    boto3 = None


ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"
HTTP_METHOD = "GET"
SIGNED_HEADERS = "host"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"

AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_STAMP_FORMAT = "%Y%m%d"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

ExpiresIn = Union[timedelta, int, float]


@dataclass(frozen=True)
class Credential:
    """Access key pair, optionally with a session token for temporary credentials."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_boto3_session(cls, session=None) -> "Credential":
        """
        Freeze the credentials a boto3 session currently resolves to.

        The result is a snapshot: it is not refreshed when temporary
        credentials expire.

        Args:
            session: boto3.Session to read from (default: a new session)

        Raises:
            ProxyCacheConfigurationError: If no credentials can be resolved
        """
        if session is None:
            if not BOTO3_AVAILABLE:
                raise ImportError(
                    "boto3 is required to resolve AWS credentials. "
                    "Install with: pip install proxycache[s3] or pip install boto3"
                )
            session = boto3.Session()

        credentials = session.get_credentials()
        if credentials is None:
            raise ProxyCacheConfigurationError(
                "No AWS credentials found in boto3 session",
                {"profile": getattr(session, "profile_name", None)},
            )

        frozen = credentials.get_frozen_credentials()
        logger.debug(f"Resolved credentials from boto3 session: {frozen.access_key}")
        return cls(frozen.access_key, frozen.secret_key, frozen.token or None)


@dataclass(frozen=True)
class ObjectLocator:
    """Coordinates of an object in S3-compatible storage."""

    host: str
    bucket: str
    object_key: str
    region: str
    version_id: Optional[str] = None

    @property
    def key(self) -> str:
        """Object key without leading slashes."""
        return self.object_key.lstrip("/")

    @property
    def endpoint(self) -> str:
        return f"https://{self.host}/{self.bucket}/{self.key}"


def parse_endpoint(locator: ObjectLocator) -> SplitResult:
    """
    Parse the endpoint URL of a locator.

    Returns:
        The split endpoint URL

    Raises:
        InvalidLocatorError: If host, bucket or key do not form a valid URL
    """
    endpoint = locator.endpoint
    context = {"host": locator.host, "bucket": locator.bucket, "key": locator.object_key}

    if _CONTROL_CHARS.search(endpoint):
        raise InvalidLocatorError("Control character in object locator", context)
    if _BAD_ESCAPE.search(endpoint):
        raise InvalidLocatorError("Invalid percent-escape in object locator", context)
    if not locator.bucket or any(c in locator.bucket for c in "/?#"):
        raise InvalidLocatorError(f"Invalid bucket name: {locator.bucket!r}", context)
    if not locator.key:
        raise InvalidLocatorError("Object key is empty", context)
    if "#" in locator.key:
        raise InvalidLocatorError("Object key must not contain a fragment", context)

    try:
        parsed = urlsplit(endpoint)
        # Accessing the port validates it
        parsed.port
    except ValueError as e:
        raise InvalidLocatorError(f"Invalid endpoint {endpoint!r}: {e}", context) from e

    if (
        not parsed.hostname
        or parsed.netloc != locator.host
        or "@" in locator.host
        or any(c.isspace() for c in locator.host)
    ):
        raise InvalidLocatorError(f"Invalid host: {locator.host!r}", context)

    return parsed


def hash_sha256(data: str) -> str:
    """Hex SHA-256 digest of a UTF-8 string."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def get_signature_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE) -> bytes:
    """
    Derive the SigV4 signing key.

    The chain is fixed: kSecret -> kDate -> kRegion -> kService -> kSigning.
    """
    k_date = hmac_sha256(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, TERMINATOR)


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_amz_date(signing_time: datetime) -> str:
    return to_utc(signing_time).strftime(AMZ_DATE_FORMAT)


def credential_scope(date_stamp: str, region: str) -> str:
    return f"{date_stamp}/{region}/{SERVICE}/{TERMINATOR}"


def canonical_query_string(query: str) -> str:
    """Key-sorted, form-encoded query parameters of an endpoint."""
    pairs = parse_qsl(query, keep_blank_values=True)
    return urlencode(sorted(pairs, key=lambda pair: pair[0]))


def canonical_request(canonical_uri: str, query_string: str, host: str) -> str:
    canonical_headers = f"host:{host}\n"
    return "\n".join(
        [
            HTTP_METHOD,
            canonical_uri,
            query_string,
            canonical_headers,
            SIGNED_HEADERS,
            UNSIGNED_PAYLOAD,
        ]
    )


def string_to_sign(amz_date: str, scope: str, canonical_request_hash: str) -> str:
    return "\n".join([ALGORITHM, amz_date, scope, canonical_request_hash])


def expires_seconds(expires_in: ExpiresIn) -> int:
    """Whole seconds of an expiry, truncated toward zero."""
    if isinstance(expires_in, timedelta):
        return int(expires_in.total_seconds())
    return int(expires_in)


def sign(
    credential: Credential,
    locator: ObjectLocator,
    expires_in: ExpiresIn,
    signing_time: datetime,
) -> str:
    """
    Create a SigV4 presigned GET URL.

    Empty credential fields are not rejected here; they yield a URL that
    no server will accept.

    Locators are held to a stricter standard than URL syntax alone: an
    empty object key (``""`` or ``"/"``) is rejected even though
    ``https://host/bucket/`` parses, since it names the bucket rather
    than an object. So is a ``#`` in the key.

    Args:
        credential: Credentials to sign with
        locator: Target object
        expires_in: Validity window, as a timedelta or seconds
        signing_time: Signing instant; naive values are taken as UTC

    Returns:
        ``https://`` URL with the SigV4 query parameters appended

    Raises:
        InvalidLocatorError: If the locator does not form a valid URL or
            its object key is empty
    """
    parsed = parse_endpoint(locator)
    signing_time = to_utc(signing_time)
    amz_date = signing_time.strftime(AMZ_DATE_FORMAT)
    date_stamp = signing_time.strftime(DATE_STAMP_FORMAT)
    scope = credential_scope(date_stamp, locator.region)

    request = canonical_request(
        parsed.path, canonical_query_string(parsed.query), locator.host
    )
    to_sign = string_to_sign(amz_date, scope, hash_sha256(request))
    signing_key = get_signature_key(
        credential.secret_access_key, date_stamp, locator.region
    )
    signature = hmac.new(signing_key, to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

    seconds = expires_seconds(expires_in)
    params = [
        ("X-Amz-Algorithm", ALGORITHM),
        (
            "X-Amz-Credential",
            f"{quote_plus(credential.access_key_id)}%2F{date_stamp}"
            f"%2F{locator.region}%2F{SERVICE}%2F{TERMINATOR}",
        ),
        ("X-Amz-Date", amz_date),
        ("X-Amz-Expires", str(seconds)),
        ("X-Amz-SignedHeaders", SIGNED_HEADERS),
        ("X-Amz-Signature", signature),
    ]
    if credential.session_token:
        params.append(("X-Amz-Security-Token", quote_plus(credential.session_token)))
    if locator.version_id:
        params.append(("versionId", quote_plus(locator.version_id)))

    separator = "&" if parsed.query else "?"
    query = "&".join(f"{name}={value}" for name, value in params)

    logger.debug(
        f"Presigned GET /{locator.bucket}/{locator.key} for {credential.access_key_id} "
        f"at {amz_date} (expires={seconds}s)"
    )
    return f"{locator.endpoint}{separator}{query}"


@dataclass(frozen=True)
class SigningRequest:
    """Everything needed to presign one object. ``expires_in`` must be positive."""

    credential: Credential
    locator: ObjectLocator
    expires_in: ExpiresIn
    signing_time: datetime

    def __post_init__(self):
        if expires_seconds(self.expires_in) <= 0:
            raise ValueError("expires_in must be at least one second")

    def sign(self) -> str:
        return sign(self.credential, self.locator, self.expires_in, self.signing_time)


class S3UrlSigner:
    """
    Presigns objects of one bucket with a fixed credential and region.

    Example:
        signer = S3UrlSigner(
            Credential("AKIDEXAMPLE", "secret"),
            host="s3.example.com",
            bucket="media",
            region="cn-beijing",
        )
        url = signer.presign("images/logo.png", expires_in=300)
    """

    def __init__(self, credential: Credential, host: str, bucket: str, region: str):
        self.credential = credential
        self.host = host
        self.bucket = bucket
        self.region = region

        logger.debug(
            f"S3UrlSigner initialized: host={host}, bucket={bucket}, "
            f"region={region}, access_key={credential.access_key_id}"
        )

    def locator(self, object_key: str, version_id: Optional[str] = None) -> ObjectLocator:
        return ObjectLocator(self.host, self.bucket, object_key, self.region, version_id)

    def presign(
        self,
        object_key: str,
        expires_in: ExpiresIn,
        signing_time: Optional[datetime] = None,
        version_id: Optional[str] = None,
    ) -> str:
        """
        Presign a GET for ``object_key``.

        When ``signing_time`` is omitted the clock is read once, before
        signing starts.
        """
        if signing_time is None:
            signing_time = datetime.now(timezone.utc)
        return sign(
            self.credential,
            self.locator(object_key, version_id),
            expires_in,
            signing_time,
        )


def create_url_signer(s3_config) -> S3UrlSigner:
    """
    Factory function to create a URL signer from an ``S3StorageConfig``.

    Args:
        s3_config: S3 storage settings

    Returns:
        Configured S3UrlSigner instance
    """
    return S3UrlSigner(
        s3_config.credential,
        host=s3_config.endpoint,
        bucket=s3_config.bucket,
        region=s3_config.region,
    )
