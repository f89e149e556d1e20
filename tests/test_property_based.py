"""
Property-Based Tests for proxycache
===================================

Uses Hypothesis to generate random inputs and verify invariants:
1. Cache key determinism, fixed length and order sensitivity
2. TTL parsing: unit multipliers, whitespace insensitivity, never raising
3. Signer determinism and fixed query parameter order
"""

import re
from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlsplit

from hypothesis import assume, given
from hypothesis import strategies as st

from proxycache.cache_key import derive_cache_key
from proxycache.signing import Credential, ObjectLocator, sign
from proxycache.ttl import TTL_UNIT_SECONDS, parse_ttl, parse_ttl_result

HEX64 = re.compile(r"[0-9a-f]{64}")

attribute_lists = st.lists(st.text(max_size=50), max_size=8)

signing_times = st.datetimes(
    min_value=datetime(2000, 1, 1), max_value=datetime(2099, 12, 31), timezones=st.just(timezone.utc)
)

safe_text = st.text(
    alphabet=st.characters(min_codepoint=0x21, max_codepoint=0x7E, blacklist_characters="%#/?&="),
    min_size=1,
    max_size=20,
)


class TestCacheKeyProperties:
    @given(attribute_lists)
    def test_deterministic_and_fixed_length(self, attributes):
        key = derive_cache_key(attributes)
        assert key == derive_cache_key(list(attributes))
        assert HEX64.fullmatch(key)

    @given(attribute_lists)
    def test_reordering_changes_key(self, attributes):
        reordered = list(reversed(attributes))
        assume("-".join(reordered) != "-".join(attributes))
        assert derive_cache_key(reordered) != derive_cache_key(attributes)


class TestTTLProperties:
    @given(st.integers(min_value=0, max_value=10**9), st.sampled_from(sorted(TTL_UNIT_SECONDS)))
    def test_unit_multiplier(self, value, unit):
        expected = value * TTL_UNIT_SECONDS[unit]
        assert parse_ttl(f"{value}{unit}") == expected
        assert parse_ttl(f"{value}{unit.upper()}") == expected

    @given(st.integers(min_value=0, max_value=10**9))
    def test_bare_integer_is_seconds(self, value):
        assert parse_ttl(str(value)) == value

    @given(st.integers(min_value=0, max_value=10**6), st.lists(st.sampled_from([" ", "\t", "\n"]), max_size=4))
    def test_whitespace_is_ignored(self, value, spaces):
        padded = "".join(spaces) + str(value) + "".join(spaces) + "m"
        assert parse_ttl(padded) == value * 60

    @given(st.text(max_size=30))
    def test_never_raises(self, spec):
        result = parse_ttl_result(spec)
        assert result.ok == (result.seconds is not None)
        assert isinstance(parse_ttl(spec), int)


class TestSignerProperties:
    @given(safe_text, safe_text, safe_text, signing_times, st.integers(min_value=0, max_value=604800))
    def test_deterministic_with_fixed_parameter_order(self, access_key, bucket, key, when, expires):
        credential = Credential(access_key, "secret")
        locator = ObjectLocator("s3.example.com", bucket, key, "us-east-1")

        url = sign(credential, locator, expires, when)
        assert url == sign(credential, locator, expires, when)

        names = [name for name, _ in parse_qsl(urlsplit(url).query)]
        assert names == [
            "X-Amz-Algorithm",
            "X-Amz-Credential",
            "X-Amz-Date",
            "X-Amz-Expires",
            "X-Amz-SignedHeaders",
            "X-Amz-Signature",
        ]
        params = dict(parse_qsl(urlsplit(url).query))
        assert params["X-Amz-Expires"] == str(expires)
        assert params["X-Amz-Credential"].startswith(f"{access_key}/")
        assert re.fullmatch(r"[0-9a-f]{64}", params["X-Amz-Signature"])
