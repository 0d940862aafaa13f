"""Version identifiers used to name deployment folders."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from storage_deploy.utils.errors import InvalidVersionFormatError

_INT_PATTERN = re.compile(r'[+-]?\d+')


def _to_int(raw: str) -> Optional[int]:
    if _INT_PATTERN.fullmatch(raw):
        return int(raw)
    return None


class VersionSpec(ABC):
    """A parsed current version.

    The shape is picked from the number of dot-separated components:
    two gives a BranchBuild, three gives a SemanticTriple.
    """

    @staticmethod
    def parse(raw: str) -> 'VersionSpec':
        return parse_version(raw)

    @abstractmethod
    def is_superseded(self, folder: str) -> bool:
        """Whether ``folder`` names an older version of the same lineage.

        Folders that do not follow this version's shape are never superseded.
        """


@dataclass(frozen=True)
class BranchBuild(VersionSpec):
    """``<branch>.<build>`` version, e.g. ``master.123``."""
    branch: str
    build: int

    def is_superseded(self, folder: str) -> bool:
        chunks = folder.split('.')
        if len(chunks) != 2:
            return False

        file_branch, raw_build = chunks
        file_build = _to_int(raw_build)
        if file_build is None:
            return False

        return file_branch == self.branch and file_build < self.build

    def __str__(self) -> str:
        return f"{self.branch}.{self.build}"


@dataclass(frozen=True)
class SemanticTriple(VersionSpec):
    """``<major>.<minor>.<patch>`` version, e.g. ``1.2.3``."""
    major: int
    minor: int
    patch: int

    def is_superseded(self, folder: str) -> bool:
        chunks = folder.split('.')
        if len(chunks) != 3:
            return False

        numbers = [_to_int(chunk) for chunk in chunks]
        if any(n is None for n in numbers):
            return False

        file_major, file_minor, file_patch = numbers
        if file_major != self.major:
            return False
        if file_minor == self.minor:
            return file_patch < self.patch
        return file_minor < self.minor

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(raw: str) -> VersionSpec:
    """Parse a version string into a BranchBuild or SemanticTriple.

    Raises:
        InvalidVersionFormatError: On any other component count or a
            non-integer numeric component
    """
    chunks: List[str] = raw.split('.')

    if len(chunks) == 2:
        build = _to_int(chunks[1])
        if not chunks[0] or build is None:
            raise InvalidVersionFormatError(raw, InvalidVersionFormatError.BRANCH_BUILD_SHAPE)
        return BranchBuild(branch=chunks[0], build=build)

    if len(chunks) == 3:
        numbers = [_to_int(chunk) for chunk in chunks]
        if any(n is None for n in numbers):
            raise InvalidVersionFormatError(raw, InvalidVersionFormatError.SEMANTIC_SHAPE)
        return SemanticTriple(*numbers)

    raise InvalidVersionFormatError(raw)
