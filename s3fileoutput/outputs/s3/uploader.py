"""Single-request upload of a finished staging file."""

import logging
from pathlib import Path
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3fileoutput.core.exceptions import StagingIOError, UploadError

logger = logging.getLogger(__name__)


class ObjectUploader:
    """Puts a local file to S3 as one object.

    No retries are attempted here; the staging file is left for the caller
    to delete.
    """

    def __init__(self, client: Any, bucket: str, canned_acl: Optional[str] = None):
        self._client = client
        self._bucket = bucket
        self._canned_acl = canned_acl

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload(self, local_path: Path, key: str) -> None:
        """Upload ``local_path`` under ``key``.

        Raises:
            StagingIOError: If the staging file cannot be read.
            UploadError: If S3 rejects the request or the transport fails.
        """
        extra: dict[str, Any] = {}
        if self._canned_acl is not None:
            extra["ACL"] = self._canned_acl

        try:
            with open(local_path, "rb") as body:
                self._client.put_object(
                    Bucket=self._bucket, Key=key, Body=body, **extra
                )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise UploadError(
                f"Failed to upload to S3: {e}",
                context={"bucket": self._bucket, "key": key, "error_code": error_code},
            ) from e
        except BotoCoreError as e:
            raise UploadError(
                f"Failed to upload to S3: {e}",
                context={"bucket": self._bucket, "key": key},
            ) from e
        except OSError as e:
            raise StagingIOError(
                f"Failed to read staging file {local_path}: {e}",
                context={"path": str(local_path), "key": key},
            ) from e

        logger.debug("Uploaded s3://%s/%s", self._bucket, key)
