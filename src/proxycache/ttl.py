"""
TTL Parsing
===========

Converts human-readable durations such as ``"300s"``, ``"5m"``, ``"2h"`` or
``"1d"`` into a number of seconds.

Two entry points are provided:

- ``parse_ttl_result`` returns a ``TTLParseResult`` that carries either the
  parsed seconds or a description of why parsing failed, leaving the fallback
  decision to the caller.
- ``parse_ttl`` keeps the lenient behaviour of the proxy plugin: anything it
  cannot parse becomes ``0``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .error_handling import UnrecognizedTTLFormatError

logger = logging.getLogger(__name__)

TTL_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
}

# Largest value a signed 64-bit integer can hold
MAX_TTL_VALUE = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+", re.ASCII)


@dataclass(frozen=True)
class TTLParseResult:
    """Outcome of parsing a TTL string: seconds on success, an error otherwise."""

    spec: str
    seconds: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the parsed seconds or raise ``UnrecognizedTTLFormatError``."""
        if self.error is not None:
            raise UnrecognizedTTLFormatError(
                f"Unrecognized TTL format: {self.spec!r}",
                {"ttl": self.spec, "reason": self.error},
            )
        return self.seconds

    def or_default(self, default: int) -> int:
        return self.seconds if self.error is None else default


def parse_ttl_result(spec: str) -> TTLParseResult:
    """
    Parse a TTL string into seconds, reporting failures explicitly.

    Whitespace is removed first, then a single trailing unit character
    (``s``, ``m``, ``h`` or ``d``, any case) selects the multiplier. Without
    a recognised unit the whole string is read as seconds.

    Args:
        spec: Duration string, e.g. ``"300s"``, ``" 5 M "`` or ``"42"``

    Returns:
        TTLParseResult with either ``seconds`` or ``error`` set
    """
    compact = "".join(spec.split())
    multiplier = 1
    number = compact
    if compact and compact[-1].lower() in TTL_UNIT_SECONDS:
        multiplier = TTL_UNIT_SECONDS[compact[-1].lower()]
        number = compact[:-1]

    if not number:
        return TTLParseResult(spec, error="missing numeric value")
    if not _DIGITS.fullmatch(number):
        return TTLParseResult(spec, error=f"invalid numeric value {number!r}")

    value = int(number)
    if value > MAX_TTL_VALUE:
        return TTLParseResult(spec, error=f"numeric value {number} out of range")

    seconds = value * multiplier
    logger.debug(f"Parsed TTL {spec!r} as {seconds}s")
    return TTLParseResult(spec, seconds=seconds)


def parse_ttl(spec: str) -> int:
    """
    Parse a TTL string into seconds, returning ``0`` when it is unparsable.

    Use ``parse_ttl_result`` when a bad value must not be mistaken for
    "expire immediately".
    """
    result = parse_ttl_result(spec)
    if not result.ok:
        logger.warning(f"Could not parse TTL {spec!r} ({result.error}), using 0")
    return result.or_default(0)
