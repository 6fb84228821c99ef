"""
Durable storage backends for the starboard list.

Every backend stores the whole list at once: ``save_all`` overwrites, there is
no incremental patching.
"""

import asyncio
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from starboards.exceptions import StorageFormatError
from starboards.logging import get_logger
from starboards.types.starboards import StarboardConfig

DEFAULT_STORAGE_PATH = "./starboards.json"

logger = get_logger("storage")


class StarboardStorage(ABC):
    """Abstract base class for starboard list storage."""

    @abstractmethod
    async def load(self) -> list[StarboardConfig] | None:
        """
        Read the stored starboards.

        Returns:
            The stored list, or None if nothing has been stored yet

        Raises:
            StorageFormatError: If the stored content is malformed
        """
        pass

    @abstractmethod
    async def save_all(self, starboards: list[StarboardConfig]) -> None:
        """Overwrite the stored list with ``starboards``."""
        pass


class MemoryStorage(StarboardStorage):
    """Storage that keeps the list in memory only (persistence disabled)."""

    def __init__(self, starboards: list[StarboardConfig] | None = None) -> None:
        self._starboards = list(starboards) if starboards is not None else None
        self.save_count = 0

    async def load(self) -> list[StarboardConfig] | None:
        if self._starboards is None:
            return None
        return list(self._starboards)

    async def save_all(self, starboards: list[StarboardConfig]) -> None:
        self._starboards = list(starboards)
        self.save_count += 1


class JSONFileStorage(StarboardStorage):
    """
    Storage backed by a UTF-8 JSON file holding an array of starboards.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never observe a half-written file.
    """

    def __init__(self, path: str | Path = DEFAULT_STORAGE_PATH) -> None:
        self.path = Path(path)

    async def load(self) -> list[StarboardConfig] | None:
        return await asyncio.to_thread(self._read)

    async def save_all(self, starboards: list[StarboardConfig]) -> None:
        content = json.dumps([s.to_dict() for s in starboards], ensure_ascii=False)
        await asyncio.to_thread(self._write, content)

    def _read(self) -> list[StarboardConfig] | None:
        if not self.path.exists():
            return None

        try:
            content = self.path.read_text(encoding="utf-8")
            data = json.loads(content)
        except UnicodeDecodeError as e:
            raise StorageFormatError(
                f"The storage file {self.path} is not properly formatted (not UTF-8: {e.reason})"
            ) from e
        except json.JSONDecodeError as e:
            if e.pos >= len(content.rstrip()):
                raise StorageFormatError(
                    f"The storage file {self.path} is not properly formatted (unexpected end of JSON input)"
                ) from e
            raise StorageFormatError(
                f"The storage file {self.path} is not properly formatted ({e.msg})"
            ) from e

        if not isinstance(data, list):
            raise StorageFormatError(
                f"The storage file {self.path} is not properly formatted (starboards is not an array)"
            )

        return [StarboardConfig.from_dict(entry) for entry in data]

    def _write(self, content: str) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d bytes to %s", len(content), self.path)


def resolve_storage(storage: "bool | str | Path | StarboardStorage") -> StarboardStorage:
    """
    Turn the manager's ``storage`` option into a backend.

    ``True`` uses the default file, ``False`` disables persistence, a string
    or path selects the file, and a backend instance is used as is.
    """
    if isinstance(storage, StarboardStorage):
        return storage
    if storage is True:
        return JSONFileStorage(DEFAULT_STORAGE_PATH)
    if storage is False:
        return MemoryStorage()
    return JSONFileStorage(storage)


__all__ = [
    "DEFAULT_STORAGE_PATH",
    "StarboardStorage",
    "MemoryStorage",
    "JSONFileStorage",
    "resolve_storage",
]
