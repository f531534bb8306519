"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

TEST_BUCKET = "test-bucket"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def job_dir(temp_dir):
    """Create a jobs subdirectory in temp_dir."""
    jobs_dir = temp_dir / "jobs"
    jobs_dir.mkdir()
    return jobs_dir


@pytest.fixture
def staging_dir(temp_dir):
    """Directory used as tmp_path for staging files."""
    path = temp_dir / "staging"
    path.mkdir()
    return path


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials so no test can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """Create a mock S3 bucket using moto."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def out_config(staging_dir):
    """Raw ``out`` section of a job writing to the mock bucket."""
    return {
        "type": "s3",
        "bucket": TEST_BUCKET,
        "path_prefix": "logs/out",
        "file_ext": ".csv",
        "region": "us-east-1",
        "access_key_id": "testing",
        "secret_access_key": "testing",
        "tmp_path": str(staging_dir),
    }


@pytest.fixture
def list_keys(s3_client):
    """Return a function listing every key in the mock bucket."""

    def _list_keys() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=TEST_BUCKET)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _list_keys


@pytest.fixture
def read_object(s3_client):
    """Return a function reading an object body from the mock bucket."""

    def _read_object(key: str) -> bytes:
        return s3_client.get_object(Bucket=TEST_BUCKET, Key=key)["Body"].read()

    return _read_object
