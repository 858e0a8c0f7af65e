"""Local state store implementations."""

from __future__ import annotations

import os
import re
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from queuedeploy.base.exceptions import StateStoreError
from queuedeploy.base.models import PersistedState
from queuedeploy.base.state import StateStore

_SAFE_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class MemoryStateStore(StateStore):
    """In-process store; state lives as long as the instance."""

    def __init__(self) -> None:
        self._states: dict[str, PersistedState] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> PersistedState:
        with self._lock:
            return self._states.get(key, PersistedState()).model_copy()

    def save(self, key: str, state: PersistedState) -> None:
        with self._lock:
            self._states[key] = state.model_copy()


class FileStateStore(StateStore):
    """One JSON document per key under *directory*.

    Writes go to a temporary file that is renamed over the target, so a
    crash never leaves a half-written state file behind.
    """

    def __init__(self, directory: str | os.PathLike[str] = ".queuedeploy") -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StateStoreError(f"Invalid state key '{key}'")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> PersistedState:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return PersistedState()
        except OSError as e:
            raise StateStoreError(f"Failed to read state file '{path}'") from e
        try:
            return PersistedState.model_validate_json(raw)
        except ValidationError as e:
            raise StateStoreError(f"Corrupt state file '{path}'") from e

    def save(self, key: str, state: PersistedState) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(state.model_dump_json(indent=2))
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateStoreError(f"Failed to write state file '{path}'") from e
