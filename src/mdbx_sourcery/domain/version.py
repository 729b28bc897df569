"""Version and build-identity domain models.

This module defines the immutable record that a build embeds into the
package, and the descriptor that pairs it with the flat sourcery anchor.

Model Hierarchy:
---------------
- Descriptor
  ├── VersionInfo (exported as ``mdbx_version``)
  │   └── GitInfo
  └── sourcery_anchor (exported as ``mdbx_sourcery_anchor``)

Key Features:
-------------
- **Immutable**: frozen=True, a record never changes after the build
- **Strict Schema**: extra="forbid" rejects unknown fields
- **Ordered**: field order is part of the exported layout; ``model_dump()``
  keeps it

Usage:
------
>>> from mdbx_sourcery.domain import GitInfo, VersionInfo
>>> info = VersionInfo(
...     major=0, minor=14, release=1, revision=95, pre_release_label="",
...     git_info=GitInfo(
...         timestamp="2025-09-18T09:21:46+03:00",
...         commit_hash="2c4205d50730b9d43090da71b465e9bb126b631c",
...         tree_hash="924581bdc8a1e217139c1d286c1ffb0ef0f9d14d",
...         describe="v0.14.1-95-g924581bd",
...     ),
...     sourcery="...",
... )
>>> info.semver
'0.14.1.95'
"""

from datetime import datetime
import re

from pydantic import BaseModel, Field, field_validator, model_validator

UNSTABLE_MARKER = "UNSTABLE@"

_HEX_RE = re.compile(r"^[0-9a-f]{7,64}$")
_LABEL_RE = re.compile(r"^[0-9A-Za-z.-]*$")


class GitInfo(BaseModel):
    """Source-control identity of the build snapshot.

    Attributes:
        timestamp: Commit time, ISO 8601 with timezone offset
        commit_hash: Full commit hash
        tree_hash: Secondary content (tree) hash
        describe: Nearest tag + commit distance + abbreviated hash
    """

    model_config = {"frozen": True, "extra": "forbid"}

    timestamp: str = Field(..., description="ISO 8601 timestamp with timezone offset")
    commit_hash: str = Field(..., description="Full commit hash (lowercase hex)")
    tree_hash: str = Field(..., description="Tree/content hash (lowercase hex)")
    describe: str = Field(..., min_length=1, description="e.g. 'v0.14.1-95-g924581bd'")

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        """Require an ISO 8601 timestamp that carries a timezone offset."""
        try:
            parsed = datetime.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"timestamp must be ISO 8601, got '{v}'") from e
        if parsed.tzinfo is None:
            raise ValueError(f"timestamp must include a timezone offset, got '{v}'")
        return v

    @field_validator("commit_hash", "tree_hash")
    @classmethod
    def validate_hash(cls, v: str) -> str:
        """Require a lowercase hex object name."""
        if not _HEX_RE.fullmatch(v):
            raise ValueError(f"expected a lowercase hex hash, got '{v}'")
        return v


class VersionInfo(BaseModel):
    """Version record embedded into a build.

    Field order matches the exported layout: major, minor, release, revision,
    pre_release_label, git_info, sourcery.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    major: int = Field(..., ge=0, description="API compatibility major number")
    minor: int = Field(..., ge=0, description="API compatibility minor number")
    release: int = Field(..., ge=0, description="Patch counter within major.minor")
    revision: int = Field(..., ge=0, description="Commits since the release point")
    pre_release_label: str = Field(default="", description="Pre-release tag, empty for a final release")
    git_info: GitInfo
    sourcery: str = Field(..., min_length=1, description="Sourcery anchor of the same build")

    @field_validator("pre_release_label")
    @classmethod
    def validate_pre_release_label(cls, v: str) -> str:
        """Restrict the label to SemVer pre-release characters."""
        if not _LABEL_RE.fullmatch(v):
            raise ValueError(f"pre-release label may only contain [0-9A-Za-z.-], got {v!r}")
        return v

    @property
    def semver(self) -> str:
        """Dotted version with the pre-release label appended, e.g. '0.14.1.95'."""
        text = f"{self.major}.{self.minor}.{self.release}.{self.revision}"
        if self.pre_release_label:
            text += f"-{self.pre_release_label}"
        return text

    @property
    def unstable(self) -> bool:
        """True when the embedded anchor carries the unstable marker."""
        return self.sourcery.startswith(UNSTABLE_MARKER)


class Descriptor(BaseModel):
    """Both exported values of one build, derived from the same snapshot."""

    model_config = {"frozen": True, "extra": "forbid"}

    version_info: VersionInfo
    sourcery_anchor: str = Field(..., min_length=1)
    unstable: bool = False

    @model_validator(mode="after")
    def validate_anchor(self) -> "Descriptor":
        """Anchor must match the record and carry the marker iff unstable."""
        if self.version_info.sourcery != self.sourcery_anchor:
            raise ValueError("version_info.sourcery must equal sourcery_anchor")
        if self.sourcery_anchor.startswith(UNSTABLE_MARKER) != self.unstable:
            raise ValueError(f"sourcery_anchor must start with '{UNSTABLE_MARKER}' if and only if unstable")
        return self
