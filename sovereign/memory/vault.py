"""
Record Vault
============

The persistent store boundary. Long-term memory, knowledge-layer
definitions and the vector index all keep their records here.

The vault is a key-addressable record store split into named
collections. Records are plain JSON-serialisable dicts.

Required operations:
- put-by-id / get-by-id
- get-all
- get-all-by-secondary-key (sorted by a record field, e.g. timestamp)
- delete-by-id
- clear-all

Two implementations are provided:
- InMemoryVault: process-local, used by tests and ephemeral sessions
- FileVault: one JSON file per collection under a directory

File Structure (FileVault):
    vault/
    ├── artifacts.vault.json   # Memory fragments and ingested files
    ├── layers.vault.json      # Custom knowledge-layer definitions
    └── vectors.vault.json     # Vector index records

    Only *.vault.json files belong to the vault; clear-all leaves any
    other file in the directory alone.

The core never locks the vault. Writers are expected to be serialised by
the caller.
"""

import asyncio
import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from sovereign.errors import VaultError
from sovereign.utils.logger import Logger

logger = Logger("Vault")

Record = dict[str, Any]

COLLECTION_SUFFIX = ".vault.json"


def _sort_key(value: Any) -> tuple:
    # Records missing the index field sort first, like an unset IDB key
    if value is None:
        return (0, "")
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))


class Vault(ABC):
    """Abstract key-addressable record store."""

    @abstractmethod
    async def put(self, collection: str, record_id: str, record: Record) -> None:
        """Insert or replace a record."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> Record | None:
        """Get a record by id, or None if absent."""

    @abstractmethod
    async def get_all(self, collection: str) -> list[Record]:
        """Get every record of a collection in insertion order."""

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns True if it existed."""

    @abstractmethod
    async def clear(self, collection: str | None = None) -> None:
        """Clear one collection, or every collection when None."""

    async def get_all_by_index(self, collection: str, index_field: str) -> list[Record]:
        """
        Get every record sorted by a secondary key.

        Args:
            collection: Collection name
            index_field: Record field to sort by (e.g. "timestamp")

        Returns:
            Records in ascending index order
        """
        records = await self.get_all(collection)
        return sorted(records, key=lambda r: _sort_key(r.get(index_field)))

    async def find_by(self, collection: str, field_name: str, value: Any) -> list[Record]:
        """Get every record whose `field_name` equals `value`."""
        records = await self.get_all(collection)
        return [r for r in records if r.get(field_name) == value]


class InMemoryVault(Vault):
    """
    Process-local vault.

    Records are deep-copied on the way in and out so callers can never
    mutate stored state by accident.

    Example:
        vault = InMemoryVault()
        await vault.put("artifacts", "a1", {"name": "notes.txt", "timestamp": 1})
        await vault.get("artifacts", "a1")
    """

    def __init__(self):
        self._collections: dict[str, dict[str, Record]] = {}

    async def put(self, collection: str, record_id: str, record: Record) -> None:
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(record)

    async def get(self, collection: str, record_id: str) -> Record | None:
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def get_all(self, collection: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]

    async def delete(self, collection: str, record_id: str) -> bool:
        records = self._collections.get(collection, {})
        if record_id in records:
            del records[record_id]
            return True
        return False

    async def clear(self, collection: str | None = None) -> None:
        if collection is None:
            self._collections.clear()
        else:
            self._collections.pop(collection, None)


class FileVault(Vault):
    """
    JSON-file-backed vault.

    Each collection is a single JSON object mapping record id to record.
    File I/O runs in a thread so the event loop is never blocked.

    Example:
        vault = FileVault(Path("vault"))
        await vault.put("layers", "OPS", {"id": "OPS", "label": "Ops"})
    """

    def __init__(self, directory: Path):
        """
        Initialize the vault.

        Args:
            directory: Directory holding one <collection>.vault.json file per collection
        """
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}{COLLECTION_SUFFIX}"

    def _read_sync(self, collection: str) -> dict[str, Record]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise VaultError(f"Collection '{collection}' is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise VaultError(f"Collection '{collection}' is not a JSON object")
        return data

    def _write_sync(self, collection: str, records: dict[str, Record]) -> None:
        path = self._path(collection)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(records, f, default=str)
            tmp_path.replace(path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def _put_sync(self, collection: str, record_id: str, record: Record) -> None:
        records = self._read_sync(collection)
        records[record_id] = record
        self._write_sync(collection, records)

    def _delete_sync(self, collection: str, record_id: str) -> bool:
        records = self._read_sync(collection)
        if record_id not in records:
            return False
        del records[record_id]
        self._write_sync(collection, records)
        return True

    def _clear_sync(self, collection: str | None) -> None:
        if collection is not None:
            self._path(collection).unlink(missing_ok=True)
            return
        for path in self.directory.glob(f"*{COLLECTION_SUFFIX}"):
            path.unlink()

    async def put(self, collection: str, record_id: str, record: Record) -> None:
        await asyncio.to_thread(self._put_sync, collection, record_id, record)

    async def get(self, collection: str, record_id: str) -> Record | None:
        records = await asyncio.to_thread(self._read_sync, collection)
        return records.get(record_id)

    async def get_all(self, collection: str) -> list[Record]:
        records = await asyncio.to_thread(self._read_sync, collection)
        return list(records.values())

    async def delete(self, collection: str, record_id: str) -> bool:
        return await asyncio.to_thread(self._delete_sync, collection, record_id)

    async def clear(self, collection: str | None = None) -> None:
        await asyncio.to_thread(self._clear_sync, collection)
        logger.info(f"Cleared vault collection: {collection or '*'}")
