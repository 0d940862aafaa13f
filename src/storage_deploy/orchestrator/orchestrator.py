"""Main orchestrator composing deploy and cleanup."""

from pathlib import Path
from typing import Optional, Union
import time

from storage_deploy.config.models import DeploymentSettings
from storage_deploy.orchestrator.executor import (
    BoundedBatchExecutor,
    ItemResult,
    ProgressCallback
)
from storage_deploy.orchestrator.lister import PaginatedLister
from storage_deploy.orchestrator.reports import CleanupReport, DeployReport, FailedUpload
from storage_deploy.retention.policy import RetentionPolicy
from storage_deploy.retention.version import VersionSpec, parse_version
from storage_deploy.storage.base import ObjectStore, StorageEntry
from storage_deploy.storage.local import guess_content_type, list_local_files, remote_path
from storage_deploy.utils.errors import UninitializedError
from storage_deploy.utils.logging import get_logger
from storage_deploy.utils.retry import RetryStrategy

logger = get_logger(__name__)


class DeploymentOrchestrator:
    """Deploys versioned folders to an object store and cleans up old ones.

    ``cleanup`` removes builds from prior versions of the current branch or
    major version: with a current version of 1.5.20 it removes 1.0.0 through
    1.5.19. It should not be used on a staging container that may hold a
    newer production release, since those assets would be removed too.
    """

    def __init__(
        self,
        settings: DeploymentSettings,
        store: Optional[ObjectStore] = None,
        retention_policy: Optional[RetentionPolicy] = None
    ):
        """Initialize deployment orchestrator.

        Args:
            settings: Deployment settings
            store: Object store, may be bound later with ``init``
            retention_policy: Policy selecting objects for cleanup
        """
        self.settings = settings
        self.store = store
        self.retention_policy = retention_policy or RetentionPolicy()

        self.retry_strategy = RetryStrategy(
            max_attempts=settings.retries,
            base_delay=settings.retry_delay
        )
        self.executor = BoundedBatchExecutor(concurrency=settings.chunk_size)
        self.lister = PaginatedLister(
            retry_strategy=self.retry_strategy,
            max_pages=settings.max_pages
        )

        self.logger = get_logger(__name__)

    def init(self, store: ObjectStore) -> 'DeploymentOrchestrator':
        """Bind the object store.

        Args:
            store: Object store to deploy to

        Returns:
            Self for method chaining
        """
        self.store = store
        return self

    @property
    def current_version(self) -> str:
        return self.settings.current_version

    def deploy(
        self,
        local_root: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None
    ) -> DeployReport:
        """Upload a directory to ``<current version>/``.

        Args:
            local_root: Directory being uploaded
            progress_callback: Optional callback for each completed upload

        Returns:
            DeployReport listing any uploads that failed after retries
        """
        store = self._require_store()
        parse_version(self.current_version)

        start = time.monotonic()
        root = Path(local_root)
        self.logger.info(f"starting deployment of {self.current_version} from {root}")

        files = list_local_files(root)
        targets = [remote_path(self.current_version, root, f) for f in files]

        def upload(index: int) -> int:
            location = targets[index]
            contents = files[index].read_bytes()
            self.logger.debug(
                f"uploading {location}",
                extra={'object_key': location, 'operation': 'put'}
            )
            if not self.settings.dry_run:
                self.retry_strategy.execute_with_retry(
                    store.put,
                    location,
                    contents,
                    guess_content_type(location)
                )
            return len(contents)

        result = self.executor.run(list(range(len(files))), upload, progress_callback)

        report = DeployReport(total_files=len(files), dry_run=self.settings.dry_run)
        for item in result:
            if item.is_success():
                report.uploaded_files += 1
                report.uploaded_bytes += item.value
            else:
                self.logger.error(f"upload {item.index} ({targets[item.index]}) failed with {item.error.cause}")
                report.failed_uploads.append(
                    FailedUpload(index=item.index, path=targets[item.index], error=item.error)
                )

        report.duration = time.monotonic() - start
        self.logger.info(
            f"Uploaded {report.uploaded_files}/{report.total_files} files "
            f"in {report.duration:.1f}s"
        )

        return report

    def cleanup(self, progress_callback: Optional[ProgressCallback] = None) -> CleanupReport:
        """Delete objects from versions the current version supersedes.

        Args:
            progress_callback: Optional callback for each completed deletion

        Returns:
            CleanupReport with counts of deleted objects and any failures
        """
        store = self._require_store()
        current: VersionSpec = parse_version(self.current_version)

        start = time.monotonic()
        self.logger.info(f"starting cleanup for {self.current_version}")

        all_entries = self.lister.list_all('', store.list_page)
        self.logger.info(f"Found {len(all_entries)} files")

        to_delete, to_keep = self.retention_policy.partition(all_entries, current)
        self.logger.info(f"{len(to_delete)} files found for cleanup.")

        def delete(entry: StorageEntry) -> StorageEntry:
            self.logger.debug(
                f"deleting {entry.name}",
                extra={'object_key': entry.name, 'operation': 'delete'}
            )
            if not self.settings.dry_run:
                self.retry_strategy.execute_with_retry(store.delete, entry.name)
            return entry

        result = self.executor.run(to_delete, delete, progress_callback)

        report = CleanupReport(
            total_listed=len(all_entries),
            total_retained=len(to_keep),
            dry_run=self.settings.dry_run
        )
        for item in result:
            self._record_deletion(report, item)

        report.duration = time.monotonic() - start
        self.logger.info(
            f"Removed {report.total_deleted_files} files, "
            f"{len(report.failed_files)} failed, in {report.duration:.1f}s"
        )

        return report

    def _record_deletion(self, report: CleanupReport, item: ItemResult) -> None:
        if item.is_success():
            report.total_deleted_files += 1
            report.total_deleted_bytes += item.item.content_length
        else:
            report.failed_files.append(item.item)

    def _require_store(self) -> ObjectStore:
        if self.store is None:
            raise UninitializedError()
        return self.store
