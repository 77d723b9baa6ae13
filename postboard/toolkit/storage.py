"""
Persistent string key/value storage for clients, the equivalent of a
browser's `localStorage`. Values are always strings; callers encode anything
structured themselves.
"""

import abc
import json
from pathlib import Path


class Storage(abc.ABC):
    @abc.abstractmethod
    def get_item(self, key: str) -> str | None:
        raise NotImplementedError

    @abc.abstractmethod
    def set_item(self, key: str, value: str):
        raise NotImplementedError

    @abc.abstractmethod
    def remove_item(self, key: str):
        raise NotImplementedError

    @abc.abstractmethod
    def clear(self):
        raise NotImplementedError


class MemoryStorage(Storage):
    """
    Storage that lives as long as the object does. Useful for tests and for
    short-lived scripts.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._items = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = str(value)

    def remove_item(self, key: str):
        self._items.pop(key, None)

    def clear(self):
        self._items.clear()


class FileStorage(Storage):
    """
    Storage serialized to a JSON file (by default `~/.config/postboard/storage.json`).
    The file is re-read on every access, so separate instances pointing at the
    same path (or separate processes) see each other's writes. The file is
    readable only by its owner, as it may hold a session token.
    """

    path: Path

    def __init__(self, path: Path | None = None):
        if path is None:
            path = Path.home() / ".config/postboard/storage.json"

        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        with open(self.path, "r") as handle:
            return json.load(handle)

    def _write(self, items: dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.path, "w") as handle:
            json.dump(items, handle)

        self.path.chmod(0o600)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str):
        items = self._read()
        items[key] = str(value)
        self._write(items)

    def remove_item(self, key: str):
        items = self._read()

        if key in items:
            del items[key]
            self._write(items)

    def clear(self):
        self._write({})
