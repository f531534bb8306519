"""State backend protocol and implementations for persisting resume state."""

import json
import os
from pathlib import Path
from typing import Any, Protocol

from s3fileoutput.core.exceptions import StateError


class StateBackend(Protocol):
    """Protocol for resume state persistence backends."""

    def load(self, job_name: str) -> dict[str, Any]:
        """Load state for a job.

        Returns:
            Dictionary representation of the state (empty if none saved)

        Raises:
            StateError: If loading fails
        """
        ...

    def save(self, job_name: str, state: dict[str, Any]) -> None:
        """Save state for a job.

        Raises:
            StateError: If saving fails
        """
        ...

    def delete(self, job_name: str) -> None:
        """Remove any saved state for a job.

        Raises:
            StateError: If deletion fails
        """
        ...


class LocalStateBackend:
    """Local file-based state backend.

    Stores state in JSON files under `.state/{job_name}.json`.
    Uses atomic writes (write to temp file, then rename) to prevent corruption.
    State can carry credentials, so files are created readable by the owner
    only (mode 0600).
    """

    def __init__(self, state_dir: str | Path = ".state"):
        """Initialize local state backend.

        Args:
            state_dir: Directory to store state files (default: `.state`)
        """
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _state_file(self, job_name: str) -> Path:
        return self.state_dir / f"{job_name}.json"

    def load(self, job_name: str) -> dict[str, Any]:
        state_file = self._state_file(job_name)

        if not state_file.exists():
            return {}

        try:
            with open(state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
                return data if isinstance(data, dict) else {}
        except json.JSONDecodeError as e:
            raise StateError(
                f"Failed to parse state file {state_file}: {e}",
                context={"job_name": job_name, "state_file": str(state_file)},
            ) from e
        except OSError as e:
            raise StateError(
                f"Failed to read state file {state_file}: {e}",
                context={"job_name": job_name, "state_file": str(state_file)},
            ) from e

    def save(self, job_name: str, state: dict[str, Any]) -> None:
        state_file = self._state_file(job_name)
        temp_file = self.state_dir / f"{job_name}.json.tmp"

        try:
            temp_file.unlink(missing_ok=True)
            fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2, ensure_ascii=False)

            temp_file.replace(state_file)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise StateError(
                f"Failed to save state file {state_file}: {e}",
                context={"job_name": job_name, "state_file": str(state_file)},
            ) from e
        except (TypeError, ValueError) as e:
            temp_file.unlink(missing_ok=True)
            raise StateError(
                f"State is not JSON serializable: {e}",
                context={"job_name": job_name},
            ) from e

    def delete(self, job_name: str) -> None:
        state_file = self._state_file(job_name)
        try:
            state_file.unlink(missing_ok=True)
        except OSError as e:
            raise StateError(
                f"Failed to delete state file {state_file}: {e}",
                context={"job_name": job_name, "state_file": str(state_file)},
            ) from e
