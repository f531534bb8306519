"""S3 output plugin configuration."""

import logging
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from s3fileoutput.outputs.s3.credentials import AwsCredentials, collect_auth_fields
from s3fileoutput.outputs.s3.sequence import DEFAULT_SEQUENCE_FORMAT

logger = logging.getLogger(__name__)

CannedAcl = Literal[
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "aws-exec-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
    "log-delivery-write",
]

# SDK enum names accepted as aliases of the x-amz-acl header values
_CANNED_ACL_NAMES = {
    "Private": "private",
    "PublicRead": "public-read",
    "PublicReadWrite": "public-read-write",
    "AuthenticatedRead": "authenticated-read",
    "AwsExecRead": "aws-exec-read",
    "BucketOwnerRead": "bucket-owner-read",
    "BucketOwnerFullControl": "bucket-owner-full-control",
    "LogDeliveryWrite": "log-delivery-write",
}


class HttpProxy(BaseModel):
    """Outbound proxy used by the S3 client."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(description="Proxy host")
    port: Optional[int] = Field(default=None, description="Proxy port", gt=0)
    https: bool = Field(
        default=True, description="Talk to S3 over HTTPS (false: plain HTTP)"
    )
    user: Optional[str] = Field(default=None, description="Proxy user")
    password: Optional[str] = Field(default=None, description="Proxy password")


class S3OutputConfig(BaseModel):
    """Configuration of the ``s3`` file output.

    Immutable once built. Deprecated ``proxy_host`` / ``proxy_port`` and the
    flat credential keys are normalized before field validation, so the
    resulting value only carries ``http_proxy`` and ``credentials``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["s3"] = "s3"

    bucket: str = Field(description="Target S3 bucket")
    path_prefix: str = Field(description="Key prefix of every uploaded object")
    file_ext: str = Field(description="Key suffix of every uploaded object")
    sequence_format: str = Field(
        default=DEFAULT_SEQUENCE_FORMAT,
        description="printf-style template applied to (task index, file index)",
    )

    endpoint: Optional[str] = Field(
        default=None, description="S3 endpoint (takes precedence over region)"
    )
    region: Optional[str] = Field(default=None, description="AWS region")
    http_proxy: Optional[HttpProxy] = Field(default=None, description="HTTP proxy")

    tmp_path: Optional[str] = Field(
        default=None, description="Directory for staging files (default: system temp)"
    )
    tmp_path_prefix: str = Field(
        default="s3-file-output-", description="Staging file name prefix"
    )
    canned_acl: Optional[CannedAcl] = Field(
        default=None, description="Canned ACL applied to uploaded objects"
    )

    credentials: AwsCredentials = Field(description="Credential strategy")

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        """Fold deprecated proxy keys and flat auth keys into their models."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        _migrate_proxy(data)
        if "credentials" not in data:
            data["credentials"] = collect_auth_fields(data)
        return data

    @field_validator("canned_acl", mode="before")
    @classmethod
    def resolve_canned_acl_name(cls, v):
        """Accept SDK enum names such as ``BucketOwnerFullControl``."""
        if isinstance(v, str):
            return _CANNED_ACL_NAMES.get(v, v)
        return v

    def to_task_source(self) -> dict[str, Any]:
        """Serialize into a JSON-safe mapping handed to every task."""
        return self.model_dump(mode="json")

    @classmethod
    def from_task_source(cls, task_source: dict[str, Any]) -> "S3OutputConfig":
        return cls.model_validate(task_source)


def _migrate_proxy(data: dict[str, Any]) -> None:
    proxy_host = data.pop("proxy_host", None)
    proxy_port = data.pop("proxy_port", None)
    if proxy_host is None and proxy_port is None:
        return

    http_proxy = data.get("http_proxy")
    if isinstance(http_proxy, HttpProxy):
        http_proxy = http_proxy.model_dump()
    http_proxy = dict(http_proxy) if http_proxy else None

    if proxy_host is not None:
        logger.warning(
            'Configuration with "proxy_host" is deprecated. Use "http_proxy.host" instead.'
        )
        if http_proxy is None:
            http_proxy = {"host": proxy_host}
        elif not http_proxy.get("host"):
            http_proxy["host"] = proxy_host

    if proxy_port is not None:
        logger.warning(
            'Configuration with "proxy_port" is deprecated. Use "http_proxy.port" instead.'
        )
        if http_proxy is None:
            raise ValueError("proxy_port requires proxy_host or http_proxy.host")
        if http_proxy.get("port") is None:
            http_proxy["port"] = proxy_port

    data["http_proxy"] = http_proxy
