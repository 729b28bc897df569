"""Domain models for mdbx-sourcery.

Package Structure:
-----------------
- exceptions: Exception hierarchy (SourceryError and subclasses)
- version: GitInfo, VersionInfo and Descriptor models

Import Patterns:
---------------
# Direct module imports
from mdbx_sourcery.domain.version import VersionInfo
from mdbx_sourcery.domain.exceptions import VersionMismatch

# Package root imports
from mdbx_sourcery.domain import VersionInfo, VersionMismatch
"""

from mdbx_sourcery.domain.exceptions import AnchorNotFound, GitError, SourceryError, VersionMismatch
from mdbx_sourcery.domain.version import UNSTABLE_MARKER, Descriptor, GitInfo, VersionInfo

__all__ = [
    # Models
    "GitInfo",
    "VersionInfo",
    "Descriptor",
    "UNSTABLE_MARKER",
    # Exceptions
    "SourceryError",
    "VersionMismatch",
    "GitError",
    "AnchorNotFound",
]
