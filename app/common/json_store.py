import asyncio
import json
import logging
import os
import pathlib
import tempfile
from collections.abc import Callable
from typing import Any

from app.common import errors

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """A key-value map persisted as one JSON document.

    Reads never fail: a missing or corrupt document is treated as empty.
    Updates refuse to run over a document that exists but cannot be read.
    Writes replace the document atomically via a temp file in the same
    directory, and the read-merge-write cycle of ``upsert`` is serialised
    within the process. File I/O runs in a worker thread.
    """

    def __init__(self, path: pathlib.Path):
        self.path = pathlib.Path(path)
        self._lock = asyncio.Lock()

    def _ensure(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write({})

    def _read(self, strict: bool = False) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning("Corrupt document at %s, treating as empty", self.path)
            return {}
        except OSError as e:
            if strict:
                self._raise_store_error(e)
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return {}

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Corrupt document at %s, treating as empty", self.path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Unexpected document shape at %s, treating as empty", self.path)
            return {}

        return data

    def _write(self, data: dict[str, Any]) -> None:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_f:
                json.dump(data, tmp_f, ensure_ascii=False, indent=2)
                tmp_f.flush()
                os.fsync(tmp_f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def _load_for_update(self) -> dict[str, Any]:
        try:
            self._ensure()
        except OSError as e:
            self._raise_store_error(e)
        # A document that exists but cannot be read must not be overwritten
        return self._read(strict=True)

    def _persist(self, document: dict[str, Any]) -> None:
        try:
            self._write(document)
        except OSError as e:
            self._raise_store_error(e)

    def _raise_store_error(self, e: OSError):
        logger.error(
            "Failed to access document",
            extra={"path": str(self.path), "error": str(e)},
        )
        raise errors.StoreError() from e

    def _upsert_sync(self, key: str, partial: dict[str, Any]) -> dict[str, Any]:
        document = self._load_for_update()
        existing = document.get(key)
        record = {**(existing if isinstance(existing, dict) else {}), **partial}
        document[key] = record
        self._persist(document)
        return record

    def _insert_if_absent_sync(
        self,
        key: str,
        record: dict[str, Any],
        is_present: Callable[[dict[str, Any]], bool],
    ) -> tuple[dict[str, Any], bool]:
        document = self._load_for_update()
        existing = document.get(key)
        if isinstance(existing, dict) and is_present(existing):
            return existing, False

        document[key] = dict(record)
        self._persist(document)
        return document[key], True

    async def get(self, key: str) -> dict[str, Any] | None:
        document = await asyncio.to_thread(self._read)
        record = document.get(key)
        if not isinstance(record, dict):
            return None

        return record

    async def upsert(self, key: str, partial: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            return await asyncio.to_thread(self._upsert_sync, key, partial)

    async def insert_if_absent(
        self,
        key: str,
        record: dict[str, Any],
        is_present: Callable[[dict[str, Any]], bool] = bool,
    ) -> tuple[dict[str, Any], bool]:
        """Store ``record`` unless ``key`` already holds an entry.

        ``is_present`` decides whether an existing entry counts; entries it
        rejects are replaced. Returns the stored value and whether this call
        inserted it.
        """
        async with self._lock:
            return await asyncio.to_thread(
                self._insert_if_absent_sync, key, record, is_present
            )


_stores: dict[str, JsonDocumentStore] = {}


def get_store(path: pathlib.Path) -> JsonDocumentStore:
    """Return the process-wide store for ``path`` so all callers share one lock."""
    key = str(pathlib.Path(path).resolve())
    if key not in _stores:
        _stores[key] = JsonDocumentStore(path)
    return _stores[key]
