"""Summary reports produced by deploy and cleanup."""

from typing import List
from dataclasses import dataclass, field

from storage_deploy.storage.base import StorageEntry
from storage_deploy.utils.errors import DeploymentError


@dataclass
class FailedUpload:
    """An upload that failed after all attempts."""
    index: int
    path: str
    error: DeploymentError


@dataclass
class DeployReport:
    """Outcome of a deploy run."""

    total_files: int = 0
    uploaded_files: int = 0
    uploaded_bytes: int = 0
    failed_uploads: List[FailedUpload] = field(default_factory=list)
    duration: float = 0.0  # seconds
    dry_run: bool = False

    def is_success(self) -> bool:
        """Check if every upload succeeded."""
        return not self.failed_uploads


@dataclass
class CleanupReport:
    """Outcome of a cleanup run."""

    total_deleted_files: int = 0
    total_deleted_bytes: int = 0
    failed_files: List[StorageEntry] = field(default_factory=list)
    total_listed: int = 0
    total_retained: int = 0
    duration: float = 0.0  # seconds
    dry_run: bool = False

    @property
    def total_deleted_megabytes(self) -> float:
        return self.total_deleted_bytes / 1024 / 1024

    def has_failures(self) -> bool:
        """Check if any deletion failed."""
        return bool(self.failed_files)
