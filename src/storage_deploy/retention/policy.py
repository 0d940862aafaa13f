"""Retention policy deciding which stored objects a new version supersedes."""

from typing import Iterable, List, Tuple

from storage_deploy.retention.version import VersionSpec
from storage_deploy.storage.base import StorageEntry
from storage_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class RetentionPolicy:
    """Selects entries from older versions of the current lineage.

    An entry's version is the first path segment of its name. Only entries
    on the same branch (branch builds) or the same major version (semantic
    versions) that are strictly older than the current version are selected.
    Everything else, including the current version itself, newer versions and
    folders in another shape, is kept.

    Never run this against a staging container holding a newer production
    release of the same lineage: that release's predecessors will be removed.
    """

    def partition(
        self,
        entries: Iterable[StorageEntry],
        current: VersionSpec
    ) -> Tuple[List[StorageEntry], List[StorageEntry]]:
        """Split entries into (to_delete, to_keep), preserving input order.

        Args:
            entries: Complete listing of the container
            current: Version being protected

        Returns:
            Tuple of entries to delete and entries to keep
        """
        to_delete: List[StorageEntry] = []
        to_keep: List[StorageEntry] = []

        for entry in entries:
            if current.is_superseded(entry.version_folder):
                to_delete.append(entry)
            else:
                logger.debug(f"not deleting {entry.name}", extra={'object_key': entry.name})
                to_keep.append(entry)

        return to_delete, to_keep

    def select(self, entries: Iterable[StorageEntry], current: VersionSpec) -> List[StorageEntry]:
        """Entries eligible for deletion under ``current``."""
        to_delete, _ = self.partition(entries, current)
        return to_delete
