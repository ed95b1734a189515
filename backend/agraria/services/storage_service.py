# Overview: Service-layer operations for the key-value storage; whole-collection reads and writes.

"""
Key-Value Storage Service

WHY: The application keeps every collection as one JSON document under a
fixed key, read and written as a whole. KeyValueStore is the only code that
touches the storage table; Collection gives each entity a typed repository
(load-or-seed, save, next id) on top of it.

FAILURE MODEL:
- Malformed stored JSON is logged as a warning and treated as "no data".
- A missing (or malformed) key is seeded with the collection's defaults.
- An empty list is real data and is never re-seeded.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Generic, Iterable, TypeVar

from flask import current_app

from ..extensions import db
from ..models import StorageEntry


# Persisted keys
USERS_KEY = "sistemaAgraria_users"
ENVIRONMENTS_KEY = "sistemaAgraria_environments"
ACTIVITIES_KEY = "sistemaAgraria_activities"
SALES_KEY = "sistemaAgraria_sales"
PRODUCTS_KEY = "inventory_products"
LEGACY_PRODUCTS_KEY = "sistemaAgraria_products"
MOVEMENTS_KEY = "inventory_movements"
LEGACY_SALES_KEY = "sales"

_MISSING = object()


class KeyValueStore:
    """String keys to string values, backed by the storage_entries table."""

    def get_item(self, key: str) -> str | None:
        entry = db.session.get(StorageEntry, key)
        return entry.value if entry is not None else None

    def set_item(self, key: str, value: str) -> None:
        entry = db.session.get(StorageEntry, key)
        if entry is None:
            db.session.add(StorageEntry(key=key, value=value))
        else:
            entry.value = value
        db.session.commit()

    def remove_item(self, key: str) -> None:
        entry = db.session.get(StorageEntry, key)
        if entry is not None:
            db.session.delete(entry)
            db.session.commit()

    def read_json(self, key: str, default: Any = None) -> Any:
        """
        Parsed value under `key`, or `default` when the key is missing or
        its text is not valid JSON.
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            current_app.logger.warning("Malformed JSON under storage key %s; treating as no data", key)
            return default

    def write_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))


T = TypeVar("T")


class Collection(Generic[T]):
    """
    Typed repository for one collection key.

    `record_type` must provide from_dict()/to_dict(). `seed` returns the
    default records (as dicts) written the first time the key is empty.
    `fallback_keys` are read, in order, when the main key holds nothing;
    they are never written.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        record_type: type,
        seed: Callable[[], list[dict]] | None = None,
        fallback_keys: Iterable[str] = (),
    ):
        self.store = store
        self.key = key
        self.record_type = record_type
        self.seed = seed
        self.fallback_keys = tuple(fallback_keys)

    def load_raw(self) -> list[dict] | None:
        """Stored list for this collection, or None when nothing usable is stored."""
        data = self.store.read_json(self.key, _MISSING)
        if data is not _MISSING and not isinstance(data, list):
            current_app.logger.warning("Storage key %s does not hold a list; treating as no data", self.key)
            data = _MISSING
        if data is _MISSING:
            for fallback in self.fallback_keys:
                legacy = self.store.read_json(fallback)
                if isinstance(legacy, list) and legacy:
                    return legacy
            return None
        return data

    def load(self) -> list[T]:
        raw = self.load_raw()
        if raw is None:
            raw = self.seed() if self.seed else []
            if self.seed:
                self.store.write_json(self.key, raw)
        return self._parse(raw)

    def _parse(self, raw: list) -> list[T]:
        records = []
        for item in raw:
            if not isinstance(item, dict):
                current_app.logger.warning("Skipping non-object record under %s", self.key)
                continue
            try:
                records.append(self.record_type.from_dict(item))
            except (KeyError, TypeError, ValueError):
                current_app.logger.warning("Skipping malformed record under %s: %r", self.key, item)
        return records

    def save(self, records: list[T]) -> None:
        self.store.write_json(self.key, [record.to_dict() for record in records])

    def get(self, record_id: int) -> T | None:
        for record in self.load():
            if record.id == record_id:
                return record
        return None

    @staticmethod
    def next_id(records: list[T]) -> int:
        return max((record.id for record in records), default=0) + 1

    def delete(self, record_id: int) -> bool:
        records = self.load()
        kept = [record for record in records if record.id != record_id]
        if len(kept) == len(records):
            return False
        self.save(kept)
        return True
