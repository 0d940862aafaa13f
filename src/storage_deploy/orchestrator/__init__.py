"""Orchestrator module for batched deploy and cleanup execution."""

from storage_deploy.orchestrator.executor import (
    BatchResult,
    BoundedBatchExecutor,
    ItemResult,
    ItemStatus,
    ProgressCallback
)
from storage_deploy.orchestrator.lister import PaginatedLister
from storage_deploy.orchestrator.reports import CleanupReport, DeployReport, FailedUpload
from storage_deploy.orchestrator.orchestrator import DeploymentOrchestrator

__all__ = [
    # Execution
    'BatchResult',
    'BoundedBatchExecutor',
    'ItemResult',
    'ItemStatus',
    'ProgressCallback',

    # Listing
    'PaginatedLister',

    # Reports
    'CleanupReport',
    'DeployReport',
    'FailedUpload',

    # Main orchestrator
    'DeploymentOrchestrator',
]
