"""
Client-side state kept next to the feeds: read markers and the saved-items
vault. Both are keyed by item id and live in an injected key-value store;
the fetch pipeline never reads or writes them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol

READ_KEY = "data-tracker-read"
VAULT_KEY = "data-tracker-vault"
MAX_READ_IDS = 500


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...


class MemoryStore:
    def __init__(self, initial: dict | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data


class ReadStates:
    """Ids of items the user opened, oldest dropped past ``max_ids``."""

    def __init__(self, store: KeyValueStore, max_ids: int = MAX_READ_IDS):
        self.store = store
        self.max_ids = max_ids

    @property
    def read_ids(self) -> list[str]:
        return list(self.store.get(READ_KEY, []))

    def mark_as_read(self, item_id: str) -> None:
        ids = self.read_ids
        if item_id in ids:
            return
        ids.append(item_id)
        self.store.set(READ_KEY, ids[-self.max_ids:])

    def is_read(self, item_id: str) -> bool:
        return item_id in self.read_ids


class Vault:
    """Saved items, newest first."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def items(self) -> list[dict]:
        return list(self.store.get(VAULT_KEY, []))

    def is_saved(self, item_id: str) -> bool:
        return any(entry["id"] == item_id for entry in self.items())

    def save(self, item: dict, kind: str) -> dict:
        """Store a serialised item (``to_dict()`` output) as ``news`` or ``reddit``."""
        if kind not in ("news", "reddit"):
            raise ValueError(f"Unknown item type: {kind}")
        existing = next((e for e in self.items() if e["id"] == item["id"]), None)
        if existing:
            return existing

        entry = {
            **item,
            "type": kind,
            "savedAt": datetime.now(timezone.utc).isoformat(),
        }
        self.store.set(VAULT_KEY, [entry] + self.items())
        return entry

    def remove(self, item_id: str) -> None:
        self.store.set(VAULT_KEY, [e for e in self.items() if e["id"] != item_id])
