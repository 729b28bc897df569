"""Exception hierarchy for mdbx-sourcery.

Hierarchy:
----------
- SourceryError (base, carries message and context)
  ├── VersionMismatch: declared API version differs from the resolved one
  ├── GitError: source-control metadata could not be read
  └── AnchorNotFound: no sourcery anchor present in an artifact

Example:
--------
>>> from mdbx_sourcery.domain.exceptions import VersionMismatch
>>> error = VersionMismatch(resolved=(0, 14), declared=(0, 15))
>>> error.context["declared"]
'0.15'
"""

from typing import Any, Dict, Optional


class SourceryError(Exception):
    """Base error for the provenance descriptor and its build stage."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class VersionMismatch(SourceryError):
    """API version mismatch between the declared and the resolved version.

    Raised by the build stage only. A stable build must not produce an
    artifact when this is raised.
    """

    def __init__(self, resolved: tuple, declared: tuple):
        self.resolved = tuple(resolved)
        self.declared = tuple(declared)
        super().__init__(
            "API version mismatch! Had `git fetch --tags` done?",
            {
                "resolved": "{}.{}".format(*self.resolved),
                "declared": "{}.{}".format(*self.declared),
            },
        )


class GitError(SourceryError):
    """Error while reading build identity from git."""

    pass


class AnchorNotFound(SourceryError):
    """No sourcery anchor found in the scanned artifact."""

    pass
