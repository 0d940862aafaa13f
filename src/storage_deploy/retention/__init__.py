"""Version parsing and retention of superseded deployments."""

from storage_deploy.retention.version import (
    BranchBuild,
    SemanticTriple,
    VersionSpec,
    parse_version,
)
from storage_deploy.retention.policy import RetentionPolicy

__all__ = [
    'BranchBuild',
    'SemanticTriple',
    'VersionSpec',
    'parse_version',
    'RetentionPolicy',
]
