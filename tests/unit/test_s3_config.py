"""Tests for S3 output configuration."""

import logging

import pytest
from pydantic import ValidationError

from s3fileoutput.outputs.s3.config import HttpProxy, S3OutputConfig
from s3fileoutput.outputs.s3.credentials import (
    BasicCredentials,
    DefaultCredentials,
    ProfileCredentials,
    SessionCredentials,
)


@pytest.fixture
def base_config():
    return {
        "bucket": "my-bucket",
        "path_prefix": "logs/out",
        "file_ext": ".csv",
    }


class TestS3OutputConfig:
    """Tests for field defaults and validation."""

    def test_defaults(self, base_config):
        config = S3OutputConfig(**base_config)

        assert config.type == "s3"
        assert config.sequence_format == ".%03d.%02d"
        assert config.tmp_path is None
        assert config.tmp_path_prefix == "s3-file-output-"
        assert config.endpoint is None
        assert config.region is None
        assert config.http_proxy is None
        assert config.canned_acl is None
        assert isinstance(config.credentials, DefaultCredentials)

    @pytest.mark.parametrize("missing", ["bucket", "path_prefix", "file_ext"])
    def test_required_fields(self, base_config, missing):
        del base_config[missing]
        with pytest.raises(ValidationError):
            S3OutputConfig(**base_config)

    def test_unknown_field_rejected(self, base_config):
        with pytest.raises(ValidationError):
            S3OutputConfig(**base_config, path_suffix=".csv")

    def test_config_is_immutable(self, base_config):
        config = S3OutputConfig(**base_config)
        with pytest.raises(ValidationError):
            config.bucket = "other"

    def test_canned_acl_header_value(self, base_config):
        config = S3OutputConfig(**base_config, canned_acl="bucket-owner-full-control")
        assert config.canned_acl == "bucket-owner-full-control"

    def test_canned_acl_enum_name(self, base_config):
        config = S3OutputConfig(**base_config, canned_acl="PublicRead")
        assert config.canned_acl == "public-read"

    def test_canned_acl_invalid(self, base_config):
        with pytest.raises(ValidationError):
            S3OutputConfig(**base_config, canned_acl="everyone")

    def test_task_source_round_trip(self, base_config):
        config = S3OutputConfig(
            **base_config,
            region="eu-west-1",
            canned_acl="private",
            http_proxy={"host": "proxy", "port": 3128},
            access_key_id="AKID",
            secret_access_key="secret",
        )
        task_source = config.to_task_source()

        assert task_source["credentials"]["auth_method"] == "basic"
        assert S3OutputConfig.from_task_source(task_source) == config


class TestCredentialSelection:
    """Tests for folding flat auth keys into a credential strategy."""

    def test_keys_select_basic(self, base_config):
        config = S3OutputConfig(
            **base_config, access_key_id="AKID", secret_access_key="secret"
        )
        assert isinstance(config.credentials, BasicCredentials)
        assert config.credentials.access_key_id == "AKID"

    def test_basic_requires_secret(self, base_config):
        with pytest.raises(ValidationError):
            S3OutputConfig(**base_config, auth_method="basic", access_key_id="AKID")

    def test_session_requires_token(self, base_config):
        with pytest.raises(ValidationError):
            S3OutputConfig(
                **base_config,
                auth_method="session",
                access_key_id="AKID",
                secret_access_key="secret",
            )

        config = S3OutputConfig(
            **base_config,
            auth_method="session",
            access_key_id="AKID",
            secret_access_key="secret",
            session_token="token",
        )
        assert isinstance(config.credentials, SessionCredentials)

    def test_profile(self, base_config):
        config = S3OutputConfig(
            **base_config, auth_method="profile", profile_name="analytics"
        )
        assert isinstance(config.credentials, ProfileCredentials)
        assert config.credentials.profile_name == "analytics"
        assert config.credentials.profile_file is None

    def test_unknown_auth_method(self, base_config):
        with pytest.raises(ValidationError):
            S3OutputConfig(**base_config, auth_method="kerberos")


class TestDeprecatedProxyMigration:
    """Tests for proxy_host / proxy_port normalization."""

    def test_proxy_host_creates_http_proxy(self, base_config, caplog):
        with caplog.at_level(logging.WARNING):
            config = S3OutputConfig(**base_config, proxy_host="proxy.local")

        assert config.http_proxy == HttpProxy(host="proxy.local")
        assert config.http_proxy.https is True
        assert '"proxy_host" is deprecated' in caplog.text

    def test_proxy_host_and_port(self, base_config, caplog):
        with caplog.at_level(logging.WARNING):
            config = S3OutputConfig(
                **base_config, proxy_host="proxy.local", proxy_port=8080
            )

        assert config.http_proxy.host == "proxy.local"
        assert config.http_proxy.port == 8080
        assert '"proxy_port" is deprecated' in caplog.text

    def test_http_proxy_host_wins(self, base_config):
        config = S3OutputConfig(
            **base_config,
            http_proxy={"host": "new.local", "port": 3128},
            proxy_host="old.local",
            proxy_port=8080,
        )
        assert config.http_proxy.host == "new.local"
        assert config.http_proxy.port == 3128

    def test_empty_http_proxy_host_is_filled(self, base_config):
        config = S3OutputConfig(
            **base_config,
            http_proxy={"host": "", "https": False},
            proxy_host="old.local",
            proxy_port=8080,
        )
        assert config.http_proxy.host == "old.local"
        assert config.http_proxy.port == 8080
        assert config.http_proxy.https is False

    def test_proxy_port_without_host(self, base_config):
        with pytest.raises(ValidationError) as exc_info:
            S3OutputConfig(**base_config, proxy_port=8080)
        assert "proxy_port requires" in str(exc_info.value)

    def test_deprecated_keys_are_not_kept(self, base_config):
        config = S3OutputConfig(**base_config, proxy_host="proxy.local")
        task_source = config.to_task_source()

        assert "proxy_host" not in task_source
        assert "proxy_port" not in task_source
        assert task_source["http_proxy"]["host"] == "proxy.local"
