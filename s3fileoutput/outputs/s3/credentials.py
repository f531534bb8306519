"""AWS credential strategies selected by ``auth_method``.

Each strategy carries only the fields it needs and knows how to build the
``boto3.Session`` used for the S3 client:

- basic: static ``access_key_id`` / ``secret_access_key``
- session: static keys plus ``session_token``
- env: ``AWS_ACCESS_KEY_ID`` / ``AWS_SECRET_ACCESS_KEY`` environment variables
- instance: EC2/ECS instance metadata role
- profile: shared credentials file (``profile_file`` / ``profile_name``)
- anonymous: unsigned requests
- default: the SDK default provider chain
"""

import os
from typing import Annotated, Any, Literal, Optional, Union

import boto3
import botocore.session
from botocore import UNSIGNED
from botocore.credentials import (
    CredentialProvider,
    CredentialResolver,
    EnvProvider,
    InstanceMetadataFetcher,
    InstanceMetadataProvider,
    SharedCredentialProvider,
)
from pydantic import BaseModel, ConfigDict, Field

AUTH_KEYS = (
    "auth_method",
    "access_key_id",
    "secret_access_key",
    "session_token",
    "profile_file",
    "profile_name",
)

DEFAULT_CREDENTIALS_FILE = "~/.aws/credentials"


def _session_with_provider(provider: CredentialProvider) -> boto3.Session:
    """Build a session whose only credential source is ``provider``."""
    core_session = botocore.session.Session()
    core_session.register_component(
        "credential_provider", CredentialResolver(providers=[provider])
    )
    return boto3.Session(botocore_session=core_session)


class _Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def signature_version(self) -> Any:
        """Signature override for the client config (None keeps SigV4)."""
        return None

    def create_session(self) -> boto3.Session:
        raise NotImplementedError


class BasicCredentials(_Credentials):
    """Static access key pair."""

    auth_method: Literal["basic"] = "basic"
    access_key_id: str = Field(description="AWS access key id")
    secret_access_key: str = Field(description="AWS secret access key")

    def create_session(self) -> boto3.Session:
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )


class SessionCredentials(_Credentials):
    """Temporary credentials from STS."""

    auth_method: Literal["session"] = "session"
    access_key_id: str = Field(description="AWS access key id")
    secret_access_key: str = Field(description="AWS secret access key")
    session_token: str = Field(description="AWS session token")

    def create_session(self) -> boto3.Session:
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            aws_session_token=self.session_token,
        )


class EnvCredentials(_Credentials):
    auth_method: Literal["env"] = "env"

    def create_session(self) -> boto3.Session:
        return _session_with_provider(EnvProvider())


class InstanceCredentials(_Credentials):
    auth_method: Literal["instance"] = "instance"

    def create_session(self) -> boto3.Session:
        fetcher = InstanceMetadataFetcher(timeout=5, num_attempts=2)
        return _session_with_provider(InstanceMetadataProvider(iam_role_fetcher=fetcher))


class ProfileCredentials(_Credentials):
    """Named profile from a shared credentials file."""

    auth_method: Literal["profile"] = "profile"
    profile_file: Optional[str] = Field(
        default=None, description="Credentials file (default: ~/.aws/credentials)"
    )
    profile_name: Optional[str] = Field(
        default=None, description="Profile name (default: 'default')"
    )

    def create_session(self) -> boto3.Session:
        provider = SharedCredentialProvider(
            creds_filename=os.path.expanduser(
                self.profile_file or DEFAULT_CREDENTIALS_FILE
            ),
            profile_name=self.profile_name or "default",
        )
        return _session_with_provider(provider)


class AnonymousCredentials(_Credentials):
    auth_method: Literal["anonymous"] = "anonymous"

    @property
    def signature_version(self) -> Any:
        return UNSIGNED

    def create_session(self) -> boto3.Session:
        return boto3.Session()


class DefaultCredentials(_Credentials):
    auth_method: Literal["default"] = "default"

    def create_session(self) -> boto3.Session:
        return boto3.Session()


AwsCredentials = Annotated[
    Union[
        BasicCredentials,
        SessionCredentials,
        EnvCredentials,
        InstanceCredentials,
        ProfileCredentials,
        AnonymousCredentials,
        DefaultCredentials,
    ],
    Field(discriminator="auth_method"),
]


def collect_auth_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Pop the flat auth keys out of ``data`` into a credentials mapping.

    ``auth_method`` defaults to ``basic`` when an access key is configured and
    to ``default`` otherwise.
    """
    fields = {key: data.pop(key) for key in AUTH_KEYS if data.get(key) is not None}
    for key in AUTH_KEYS:
        data.pop(key, None)
    if "auth_method" not in fields:
        fields["auth_method"] = "basic" if "access_key_id" in fields else "default"
    return fields
