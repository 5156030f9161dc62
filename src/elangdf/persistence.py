"""Flat key-value document persisted as a JSON file.

The document is read lazily on first access and written atomically
(temporary file + rename). File I/O runs in a worker thread so the event
loop never blocks on disk.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from elangdf.exceptions import DfPersistenceError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Structural interface of the settings persistence backend."""

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...

    async def save(self) -> None:
        ...

    async def clear(self) -> None:
        ...


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    if not text.strip():
        return {}
    document = json.loads(text)
    if not isinstance(document, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return document


def _write_document(path: Path, document: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2, ensure_ascii=False)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonKeyValueStore:
    """Lazily loaded JSON key-value document.

    ``set`` and ``clear`` only touch the in-memory document; ``save``
    makes it durable. A failed ``save`` reverts the in-memory document to
    the last durable state so unsaved edits never leak into a later save.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] | None = None
        self._persisted: dict[str, Any] = {}

    @property
    def path(self) -> Path:
        return self._path

    async def _document(self) -> dict[str, Any]:
        if self._data is None:
            try:
                loaded = await asyncio.to_thread(_read_document, self._path)
            except (OSError, ValueError) as exc:
                raise DfPersistenceError(f"Failed to read {self._path}: {exc}") from exc
            self._persisted = loaded
            self._data = copy.deepcopy(loaded)
            _logger.debug("Loaded %d keys from %s", len(loaded), self._path)
        return self._data

    async def get(self, key: str) -> Any | None:
        document = await self._document()
        value = document.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        document = await self._document()
        document[key] = copy.deepcopy(value)

    async def clear(self) -> None:
        await self._document()
        self._data = {}

    async def save(self) -> None:
        document = await self._document()
        snapshot = copy.deepcopy(document)
        try:
            await asyncio.to_thread(_write_document, self._path, snapshot)
        except (OSError, TypeError, ValueError) as exc:
            self._data = copy.deepcopy(self._persisted)
            raise DfPersistenceError(f"Failed to write {self._path}: {exc}") from exc
        self._persisted = snapshot
        _logger.debug("Saved %d keys to %s", len(snapshot), self._path)
