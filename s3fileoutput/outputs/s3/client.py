"""boto3 S3 client construction for the s3 file output."""

import logging
from typing import Any, Optional
from urllib.parse import quote

from botocore.config import Config
from botocore.exceptions import BotoCoreError

from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.outputs.s3.config import HttpProxy, S3OutputConfig

logger = logging.getLogger(__name__)

MAX_POOL_CONNECTIONS = 50
READ_TIMEOUT_SECONDS = 8 * 60


def create_s3_client(task: S3OutputConfig) -> Any:
    """Create the S3 client used by one output task.

    ``endpoint`` wins over ``region``. With neither, the SDK resolves the
    region itself and follows S3 region redirects. Retries are disabled:
    a failed task is retried by the host as a whole.

    Raises:
        ConfigurationError: If the client cannot be built from the config.
    """
    use_ssl = task.http_proxy.https if task.http_proxy else True
    kwargs: dict[str, Any] = {
        "config": _client_config(task),
        "use_ssl": use_ssl,
    }

    if task.endpoint:
        if task.region:
            logger.warning(
                "Either configure endpoint or region, "
                "if both is specified only the endpoint will be in effect."
            )
        kwargs["endpoint_url"] = _endpoint_url(task.endpoint, use_ssl)
    elif task.region:
        kwargs["region_name"] = task.region

    try:
        session = task.credentials.create_session()
        return session.client("s3", **kwargs)
    except (BotoCoreError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to create S3 client: {e}",
            context={"endpoint": task.endpoint, "region": task.region},
        ) from e


def _client_config(task: S3OutputConfig) -> Config:
    options: dict[str, Any] = {
        "max_pool_connections": MAX_POOL_CONNECTIONS,
        "read_timeout": READ_TIMEOUT_SECONDS,
        "retries": {"total_max_attempts": 1, "mode": "standard"},
    }
    signature_version = task.credentials.signature_version
    if signature_version is not None:
        options["signature_version"] = signature_version
    proxies = proxy_urls(task.http_proxy)
    if proxies:
        options["proxies"] = proxies
    return Config(**options)


def proxy_urls(http_proxy: Optional[HttpProxy]) -> dict[str, str]:
    """Translate ``http_proxy`` into botocore's ``proxies`` mapping."""
    if http_proxy is None or not http_proxy.host:
        return {}

    netloc = http_proxy.host
    if http_proxy.port is not None:
        netloc = f"{netloc}:{http_proxy.port}"
    if http_proxy.user is not None:
        userinfo = quote(http_proxy.user, safe="")
        if http_proxy.password is not None:
            userinfo += ":" + quote(http_proxy.password, safe="")
        netloc = f"{userinfo}@{netloc}"

    url = f"http://{netloc}"
    return {"http": url, "https": url}


def _endpoint_url(endpoint: str, use_ssl: bool) -> str:
    if "://" in endpoint:
        return endpoint
    scheme = "https" if use_ssl else "http"
    return f"{scheme}://{endpoint}"
