"""Object store interface and the values it exchanges."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class StorageEntry:
    """Snapshot of a remote object at listing time."""
    name: str
    content_length: int = 0

    @property
    def version_folder(self) -> str:
        """First ``/`` segment of the name, which encodes the version."""
        return self.name.split('/', 1)[0]


@dataclass(frozen=True)
class ListPage:
    """One page of a continuation-token listing."""
    entries: List[StorageEntry] = field(default_factory=list)
    next_token: Optional[str] = None


class ObjectStore(ABC):
    """Base class for the remote store deploy and cleanup run against."""

    @abstractmethod
    def put(self, path: str, body: bytes, content_type: str) -> None:
        """Upload ``body`` to ``path``, replacing any existing object.

        Args:
            path: Remote object path
            body: Object contents
            content_type: MIME type stored with the object
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the object at ``path``. Deleting a missing object succeeds.

        Args:
            path: Remote object path
        """
        pass

    @abstractmethod
    def list_page(self, prefix: str, token: Optional[str] = None) -> ListPage:
        """Fetch one page of objects whose names start with ``prefix``.

        Args:
            prefix: Name prefix, empty for the whole container
            token: Continuation token from the previous page, None for the first page

        Returns:
            ListPage with the entries and the token for the next page, if any
        """
        pass
