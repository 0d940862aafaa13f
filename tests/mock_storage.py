"""In-memory object store for testing deploy and cleanup."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from storage_deploy.storage.base import ListPage, ObjectStore, StorageEntry
from storage_deploy.utils.errors import TransientRemoteError


@dataclass
class MockObjectStore(ObjectStore):
    """In-memory mock of ObjectStore.

    ``fail_puts`` / ``fail_deletes`` hold paths whose calls always fail;
    ``flaky`` maps a path to the number of calls that fail before succeeding.
    """

    objects: dict[str, dict] = field(default_factory=dict)
    page_size: int = 1000
    fail_puts: set[str] = field(default_factory=set)
    fail_deletes: set[str] = field(default_factory=set)
    fail_listing: bool = False
    flaky: dict[str, int] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def put(self, path: str, body: bytes, content_type: str) -> None:
        self._record("put", path)
        self._maybe_fail(path, path in self.fail_puts)
        with self._lock:
            self.objects[path] = {"body": body, "content_type": content_type}

    def delete(self, path: str) -> None:
        self._record("delete", path)
        self._maybe_fail(path, path in self.fail_deletes)
        with self._lock:
            self.objects.pop(path, None)

    def list_page(self, prefix: str, token: Optional[str] = None) -> ListPage:
        self._record("list_page", prefix, token)
        if self.fail_listing:
            raise TransientRemoteError("listing unavailable")

        names = sorted(name for name in self.objects if name.startswith(prefix))
        start = int(token) if token else 0
        chunk = names[start:start + self.page_size]
        next_start = start + self.page_size
        return ListPage(
            entries=[
                StorageEntry(name=name, content_length=len(self.objects[name]["body"]))
                for name in chunk
            ],
            next_token=str(next_start) if next_start < len(names) else None,
        )

    def seed(self, name: str, size: int = 1) -> None:
        """Test helper to add an object of ``size`` bytes."""
        self.objects[name] = {"body": b"x" * size, "content_type": "application/octet-stream"}

    def calls_for(self, operation: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == operation]

    def _record(self, *call) -> None:
        with self._lock:
            self.calls.append(call)

    def _maybe_fail(self, path: str, always: bool) -> None:
        if always:
            raise TransientRemoteError(f"simulated failure for {path}")
        with self._lock:
            remaining = self.flaky.get(path, 0)
            if remaining:
                self.flaky[path] = remaining - 1
                raise TransientRemoteError(f"simulated flaky failure for {path}")
