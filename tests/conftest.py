"""
Shared fixtures for signer, cache key and configuration tests.
"""

import os

import pytest

from proxycache.config import ProxyCacheConfig, S3StorageConfig
from proxycache.signing import Credential, ObjectLocator

from vectors import (
    EXAMPLE_ACCESS_KEY_ID,
    EXAMPLE_SECRET_ACCESS_KEY,
    GOLDEN_SIGNING_TIME,
)


# ==================== Signing Fixtures ====================


@pytest.fixture
def credential():
    return Credential(EXAMPLE_ACCESS_KEY_ID, EXAMPLE_SECRET_ACCESS_KEY)


@pytest.fixture
def locator():
    return ObjectLocator(
        host="examplebucket.s3.amazonaws.com",
        bucket="examplebucket",
        object_key="test.txt",
        region="us-east-1",
    )


@pytest.fixture
def signing_time():
    return GOLDEN_SIGNING_TIME


# ==================== Configuration Fixtures ====================


@pytest.fixture
def settings() -> dict:
    """Flat proxy settings in the plugin's key format."""
    return {
        "cache_ttl": "5m",
        "s3_secret_id": "AKIDEXAMPLE",
        "s3_secret_key": "secret",
        "s3_region": "cn-beijing",
        "s3_bucket": "proxy-cache",
        "s3_endpoint": "s3.example.com",
    }


@pytest.fixture
def s3_config() -> S3StorageConfig:
    return S3StorageConfig(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="secret",
        region="cn-beijing",
        bucket="proxy-cache",
        endpoint="s3.example.com",
    )


@pytest.fixture
def proxy_config(s3_config) -> ProxyCacheConfig:
    return ProxyCacheConfig(s3=s3_config, cache_ttl="5m")


# ==================== boto3 Fixtures ====================


@pytest.fixture
def aws_credentials(monkeypatch):
    """Static AWS credentials in the environment for boto3 sessions."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing-secret")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing-token")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    # Keep boto3 away from any credentials file on the test machine
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", os.devnull)
    monkeypatch.setenv("AWS_CONFIG_FILE", os.devnull)
