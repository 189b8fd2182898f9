# src/task_tracker/tasks/store_base.py

from __future__ import annotations

"""
Generic entity stores shared by tasks and projects.

Two backends with one contract:
- InMemoryStore: dict id -> entity, lives as long as the process
- JsonFileStore: one JSON array file, re-read on every call and rewritten
  in full on every write

Contract (both backends):
- save() is an upsert and never fails on a duplicate id
- find_by_id() returns None when absent
- update()/delete() on an unknown id do nothing
- entities are copied in and out, so callers only change stored state via save/update

The file backend is single-writer: two processes sharing one file lose updates
(last writer wins).
"""

import copy
import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Durable storage is unreadable or holds malformed content."""


class HasId(Protocol):
    @property
    def id(self) -> str: ...


E = TypeVar("E", bound=HasId)

Record = dict[str, Any]


def require_id(entity_id: Any) -> str:
    if not isinstance(entity_id, str) or not entity_id.strip():
        raise ValueError(f"entity id must be a non-empty string, got {entity_id!r}")
    return entity_id


class InMemoryStore(Generic[E]):
    """Map-backed store. Iteration order of find_all() is not part of the contract."""

    kind = "entity"

    def __init__(self) -> None:
        self._items: dict[str, E] = {}

    def save(self, entity: E) -> None:
        entity_id = require_id(entity.id)
        self._items[entity_id] = copy.deepcopy(entity)
        logger.info("%s saved id=%s", self.kind.capitalize(), entity_id)

    def find_by_id(self, entity_id: str) -> E | None:
        item = self._items.get(require_id(entity_id))
        return copy.deepcopy(item) if item is not None else None

    def find_all(self) -> list[E]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def update(self, entity: E) -> None:
        entity_id = require_id(entity.id)
        if entity_id not in self._items:
            logger.debug("%s update skipped, unknown id=%s", self.kind.capitalize(), entity_id)
            return
        self._items[entity_id] = copy.deepcopy(entity)
        logger.info("%s updated id=%s", self.kind.capitalize(), entity_id)

    def delete(self, entity_id: str) -> None:
        entity_id = require_id(entity_id)
        if self._items.pop(entity_id, None) is not None:
            logger.info("%s deleted id=%s", self.kind.capitalize(), entity_id)

    def count(self) -> int:
        return len(self._items)


class JsonFileStore(Generic[E]):
    """
    JSON-array file store.

    Every read re-parses the whole file; every write reads, mutates the snapshot
    and rewrites the whole file (temp file + os.replace). A missing file is created
    as an empty array. Unreadable or malformed content raises StoreError.
    """

    kind = "entity"

    def __init__(
        self,
        path: str | Path,
        *,
        to_record: Callable[[E], Record],
        from_record: Callable[[Record], E],
    ) -> None:
        self._path = Path(path)
        self._to_record = to_record
        self._from_record = from_record
        self._ensure_file()
        logger.info("%s file store ready path=%s", self.kind.capitalize(), self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _ensure_file(self) -> None:
        if self._path.exists():
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("[]", "utf-8")
        except OSError as e:
            raise StoreError(f"cannot initialize {self._path}: {e}") from e

    def _read(self) -> list[E]:
        self._ensure_file()
        try:
            raw = self._path.read_text("utf-8")
        except OSError as e:
            raise StoreError(f"cannot read {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise StoreError(f"{self._path} must hold a JSON array, got {type(data).__name__}")

        out: list[E] = []
        for i, rec in enumerate(data):
            if not isinstance(rec, dict):
                raise StoreError(f"{self._path}: record #{i} is not an object")
            try:
                out.append(self._from_record(rec))
            except (KeyError, TypeError, ValueError) as e:
                raise StoreError(f"{self._path}: record #{i} is malformed: {e!r}") from e

        logger.debug("%s file read path=%s n=%d", self.kind.capitalize(), self._path, len(out))
        return out

    def _write(self, items: list[E]) -> None:
        payload = json.dumps([self._to_record(x) for x in items], ensure_ascii=False, indent=2)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StoreError(f"cannot write {self._path}: {e}") from e

    # ---- public API ----

    def save(self, entity: E) -> None:
        entity_id = require_id(entity.id)
        items = self._read()
        for i, item in enumerate(items):
            if item.id == entity_id:
                items[i] = entity
                break
        else:
            items.append(entity)
        self._write(items)
        logger.info("%s saved id=%s path=%s", self.kind.capitalize(), entity_id, self._path)

    def find_by_id(self, entity_id: str) -> E | None:
        entity_id = require_id(entity_id)
        for item in self._read():
            if item.id == entity_id:
                return item
        return None

    def find_all(self) -> list[E]:
        return self._read()

    def update(self, entity: E) -> None:
        entity_id = require_id(entity.id)
        items = self._read()
        for i, item in enumerate(items):
            if item.id == entity_id:
                items[i] = entity
                self._write(items)
                logger.info("%s updated id=%s path=%s", self.kind.capitalize(), entity_id, self._path)
                return
        logger.debug("%s update skipped, unknown id=%s", self.kind.capitalize(), entity_id)

    def delete(self, entity_id: str) -> None:
        entity_id = require_id(entity_id)
        items = self._read()
        kept = [item for item in items if item.id != entity_id]
        if len(kept) == len(items):
            return
        self._write(kept)
        logger.info("%s deleted id=%s path=%s", self.kind.capitalize(), entity_id, self._path)

    def count(self) -> int:
        return len(self._read())
