"""Per-task output that stages each unit in a local file and uploads it."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, BinaryIO, Optional

from s3fileoutput.core.exceptions import IllegalStateError, StagingIOError
from s3fileoutput.outputs.base import TaskReport
from s3fileoutput.outputs.s3.client import create_s3_client
from s3fileoutput.outputs.s3.config import S3OutputConfig
from s3fileoutput.outputs.s3.sequence import build_key
from s3fileoutput.outputs.s3.uploader import ObjectUploader

logger = logging.getLogger(__name__)


class S3FileOutput:
    """Transactional file output for one task.

    Lifecycle per unit::

        start_new_unit() -> write()* -> start_new_unit() | finish()

    At most one unit is open at a time. Starting a unit finalizes the
    previous one first, so unit N is uploaded before unit N+1 is staged.
    ``file_index`` only advances after a successful upload, and the staging
    file is removed on every exit path.
    """

    def __init__(self, task: S3OutputConfig, task_index: int, client: Any = None):
        """Initialize the output.

        Args:
            task: Plugin configuration.
            task_index: Index of this task, used in object keys.
            client: S3 client; built from ``task`` when omitted.
        """
        self._task = task
        self._task_index = task_index
        self._file_index = 0
        self._uploader = ObjectUploader(
            client if client is not None else create_s3_client(task),
            task.bucket,
            task.canned_acl,
        )
        self._current: Optional[BinaryIO] = None
        self._temp_file_path: Optional[Path] = None

    @property
    def task_index(self) -> int:
        return self._task_index

    @property
    def file_index(self) -> int:
        """Number of units uploaded so far."""
        return self._file_index

    @property
    def current_key(self) -> str:
        """Object key of the unit being staged (or the next one)."""
        return build_key(
            self._task.path_prefix,
            self._task.sequence_format,
            self._task_index,
            self._file_index,
            self._task.file_ext,
        )

    @property
    def staging_path(self) -> Optional[Path]:
        return self._temp_file_path

    def start_new_unit(self) -> None:
        """Finalize any open unit, then stage a new one.

        Raises:
            StagingIOError: If the staging file cannot be created, or a
                staging file left by an earlier failed delete cannot be
                removed.
            UploadError: If the previous unit fails to upload.
        """
        self._close_current()
        self._delete_temp_file()

        try:
            fd, name = tempfile.mkstemp(
                prefix=self._task.tmp_path_prefix,
                suffix=".tmp",
                dir=self._task.tmp_path,
            )
        except OSError as e:
            raise StagingIOError(
                f"Failed to create staging file: {e}",
                context={"tmp_path": self._task.tmp_path, "task_index": self._task_index},
            ) from e

        self._temp_file_path = Path(name)
        self._current = os.fdopen(fd, "wb")

        logger.info(
            "Writing S3 file '%s'",
            self.current_key,
            extra={"task_index": self._task_index},
        )

    def write(self, data: bytes) -> None:
        """Append ``data`` to the open unit.

        Raises:
            IllegalStateError: If no unit has been started.
            StagingIOError: If the staging file cannot be written. The unit is
                discarded.
        """
        if self._current is None:
            raise IllegalStateError(
                "start_new_unit() must be called before write()",
                context={"task_index": self._task_index},
            )

        try:
            self._current.write(data)
        except OSError as e:
            path = self._temp_file_path
            self._discard_current()
            raise StagingIOError(
                f"Failed to write staging file: {e}",
                context={"path": str(path), "task_index": self._task_index},
            ) from e

    def finish(self) -> None:
        """Upload the open unit, if any."""
        self._close_current()

    def abort(self) -> None:
        """Discard the open unit without uploading. Never raises."""
        self._discard_current()

    def close(self) -> None:
        """Release local resources. An unfinished unit is discarded."""
        if self._current is not None:
            logger.warning(
                "Closing output with an unfinished unit; discarding '%s'",
                self.current_key,
                extra={"task_index": self._task_index},
            )
        self._discard_current()

    def commit(self) -> TaskReport:
        return {}

    def _close_current(self) -> None:
        if self._current is None:
            return

        key = self.current_key
        try:
            self._current.close()
            self._current = None
            self._uploader.upload(self._temp_file_path, key)
            self._file_index += 1
        except OSError as e:
            self._discard_current()
            raise StagingIOError(
                f"Failed to close staging file: {e}",
                context={"key": key, "task_index": self._task_index},
            ) from e
        except BaseException:
            self._discard_current()
            raise

        self._delete_temp_file()

    def _delete_temp_file(self) -> None:
        if self._temp_file_path is None:
            return

        try:
            self._temp_file_path.unlink(missing_ok=True)
        except OSError as e:
            raise StagingIOError(
                f"Failed to delete staging file: {e}",
                context={"path": str(self._temp_file_path), "task_index": self._task_index},
            ) from e
        self._temp_file_path = None

    def _discard_current(self) -> None:
        if self._current is not None:
            try:
                self._current.close()
            except OSError:
                logger.debug("Ignoring error closing staging file", exc_info=True)
            self._current = None

        if self._temp_file_path is not None:
            try:
                self._temp_file_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(
                    "Failed to delete staging file %s",
                    self._temp_file_path,
                    exc_info=True,
                    extra={"task_index": self._task_index},
                )
                return
            self._temp_file_path = None
