"""
Shared test vectors for SigV4 presigning and cache key tests.

The values were computed independently of this library from the documented
SigV4 algorithm (canonical request -> string to sign -> HMAC key chain), using
the example credentials from the AWS documentation.
"""

from datetime import datetime, timezone

EXAMPLE_ACCESS_KEY_ID = "AKIDEXAMPLE"
EXAMPLE_SECRET_ACCESS_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"

GOLDEN_SIGNING_TIME = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
GOLDEN_CANONICAL_REQUEST_HASH = (
    "3b9d8a36f56c7995dd9be9170136866daf097803709bc27e64fe86b8f1b1fa3d"
)
GOLDEN_SIGNING_KEY = "1b4a38297f4d811a64cc99ccc61cfaedf122a51bf7502e63dd37b7e2750bc278"
GOLDEN_SIGNATURE = "0c32586c887b1ae21675f4f29258636f00a9378c5917ef452077ec6db572b86a"
GOLDEN_URL = (
    "https://examplebucket.s3.amazonaws.com/examplebucket/test.txt"
    "?X-Amz-Algorithm=AWS4-HMAC-SHA256"
    "&X-Amz-Credential=AKIDEXAMPLE%2F20240101%2Fus-east-1%2Fs3%2Faws4_request"
    "&X-Amz-Date=20240101T000000Z"
    "&X-Amz-Expires=86400"
    "&X-Amz-SignedHeaders=host"
    f"&X-Amz-Signature={GOLDEN_SIGNATURE}"
)

# Same request with an empty secret key
EMPTY_SECRET_SIGNATURE = "7f55846bf4e11cad15f4bff3ffa846700125f10c1eff2e6f24a6dce2f6eb2600"

# Same request signed one second before midnight on 2023-12-31
PREVIOUS_DAY_SIGNATURE = "6ae25f745095fe95c46b1c9647f6719e89759138ac8cda7c7c5100c5e4881aad"

# Golden request with "?b=2&a=1" carried on the object key
QUERY_KEY_SIGNATURE = "8bcf8b376e3008bac68b31122960a490af21c7925f6389df3b408f4ac02e55a3"

# AWS documentation example: signing key for 20120215/us-east-1/iam
AWS_DOC_SIGNING_KEY = "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"

# s3.example.com / media / images/logo.png / cn-beijing, secret "secret"
PROXY_SIGNING_TIME = datetime(2024, 3, 15, 12, 30, 45, tzinfo=timezone.utc)
LOGO_SIGNATURE = "1de3ec8cad64d8a904da04c0a7badc14ed154d7f3f4888a08a0f5130db09d8ec"

# Cache key for example.com /index.html GET with the default tags
INDEX_CACHE_KEY = "f4ac1d83dfb16f2169f04bf9d1072ecdbc00bcedba75bdb97056556ed91758e2"
INDEX_COOKIE_CACHE_KEY = "c95c5771a99b3ff2b4609c71f95682385113d950800862d327474e54423aeeca"
EMPTY_CACHE_KEY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Presigned URL signature for INDEX_CACHE_KEY in bucket proxy-cache
INDEX_OBJECT_SIGNATURE = "2fc6456a65fed21c4cb97836520ac9038c2f6fa60057adfdd7e54ee407e93779"
