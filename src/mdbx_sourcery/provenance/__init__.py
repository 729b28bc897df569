"""Build provenance descriptor: consistency guard and construction.

The build stage resolves a version from source control, checks it against
the declared API version and only then constructs the record. Both exported
values (the structured record and the flat sourcery anchor) come out of one
call so they always describe the same snapshot.

Key Functions:
--------------
- check_api_version: Refuse a stable build whose major.minor drifted
- make_sourcery_token: Derive the anchor token from the git identity
- make_sourcery_anchor: Prefix the token for unstable builds
- build_descriptor: Guard, then construct record and anchor
- descriptor_from_settings: Same, fed from loaded configuration (and git)

Example:
--------
>>> from mdbx_sourcery.provenance import build_descriptor
>>> descriptor = build_descriptor(major=0, minor=14, release=1, revision=95, git_info=git_info)
>>> descriptor.sourcery_anchor
'...._v0_14_1_95_g924581bd'
"""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import Optional

from mdbx_sourcery.api import MDBX_VERSION_MAJOR, MDBX_VERSION_MINOR
from mdbx_sourcery.config import Settings
from mdbx_sourcery.domain import UNSTABLE_MARKER, Descriptor, GitInfo, VersionInfo, VersionMismatch
from mdbx_sourcery.provenance.git import parse_describe, read_git_info
from mdbx_sourcery.utils import compute_hash

__all__ = [
    "check_api_version",
    "describe_slug",
    "make_sourcery_token",
    "make_sourcery_anchor",
    "build_descriptor",
    "descriptor_from_settings",
]

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")


# =============================================================================
# Consistency Guard
# =============================================================================


def check_api_version(
    major: int,
    minor: int,
    declared_major: int = MDBX_VERSION_MAJOR,
    declared_minor: int = MDBX_VERSION_MINOR,
    unstable: bool = False,
) -> None:
    """Check the resolved major.minor against the declared API version.

    Args:
        major: Major number about to be embedded
        minor: Minor number about to be embedded
        declared_major: Library's declared API major
        declared_minor: Library's declared API minor
        unstable: Development build; skips the check entirely

    Raises:
        VersionMismatch: If the numbers differ on a stable build
    """
    if unstable:
        logger.debug("Unstable build, API version check skipped (%d.%d)", major, minor)
        return

    if (major, minor) != (declared_major, declared_minor):
        raise VersionMismatch(resolved=(major, minor), declared=(declared_major, declared_minor))


# =============================================================================
# Sourcery Anchor
# =============================================================================


def describe_slug(describe: str) -> str:
    """'v0.14.1-95-g924581bd' -> 'v0_14_1_95_g924581bd'."""
    return _NON_ALNUM_RE.sub("_", describe)


def make_sourcery_token(git_info: GitInfo, source_digest: Optional[str] = None) -> str:
    """Derive the sourcery token '<digest>_<describe slug>'.

    The digest is the source digest supplied by the build, or the canonical
    hash of the git identity when none is given.
    """
    digest = source_digest if source_digest is not None else compute_hash(git_info.model_dump())
    return f"{digest}_{describe_slug(git_info.describe)}"


def make_sourcery_anchor(token: str, unstable: bool = False) -> str:
    """Prefix the token with the unstable marker for development builds."""
    return f"{UNSTABLE_MARKER}{token}" if unstable else token


# =============================================================================
# Descriptor Construction
# =============================================================================


def build_descriptor(
    major: int,
    minor: int,
    release: int,
    revision: int,
    git_info: GitInfo,
    pre_release_label: str = "",
    unstable: bool = False,
    declared_major: int = MDBX_VERSION_MAJOR,
    declared_minor: int = MDBX_VERSION_MINOR,
    source_digest: Optional[str] = None,
) -> Descriptor:
    """Check the API version, then construct the record and its anchor.

    Raises:
        VersionMismatch: If major.minor differ from the declared version on a
            stable build; nothing is constructed in that case
    """
    check_api_version(major, minor, declared_major, declared_minor, unstable)

    anchor = make_sourcery_anchor(make_sourcery_token(git_info, source_digest), unstable)
    version_info = VersionInfo(
        major=major,
        minor=minor,
        release=release,
        revision=revision,
        pre_release_label=pre_release_label,
        git_info=git_info,
        sourcery=anchor,
    )
    logger.info("Built descriptor %s (%s)", version_info.semver, anchor)
    return Descriptor(version_info=version_info, sourcery_anchor=anchor, unstable=unstable)


def descriptor_from_settings(settings: Settings, repo: Optional[Path | str] = None) -> Descriptor:
    """Build the descriptor from settings, reading missing values from git.

    Configured values take precedence; anything left unset comes from the
    repository at ``repo`` (identity strings) and its describe string
    (version numbers).

    Raises:
        VersionMismatch: On a stable build with drifted major.minor
        GitError: If git has to be consulted and cannot be read
        ValueError: If version numbers are unset and describe carries no tag
    """
    git_values = settings.git.model_dump()
    if any(value is None for value in git_values.values()):
        probed = read_git_info(repo).model_dump()
        git_values = {key: probed[key] if value is None else value for key, value in git_values.items()}
    git_info = GitInfo(**git_values)

    version = settings.version.model_dump()
    if any(version[key] is None for key in ("major", "minor", "release", "revision")):
        parts = parse_describe(git_info.describe)
        for key in ("major", "minor", "release", "revision", "pre_release_label"):
            if version[key] is None:
                version[key] = getattr(parts, key)

    return build_descriptor(
        major=version["major"],
        minor=version["minor"],
        release=version["release"],
        revision=version["revision"],
        pre_release_label=version["pre_release_label"] or "",
        git_info=git_info,
        unstable=settings.build.unstable,
        declared_major=settings.api.major,
        declared_minor=settings.api.minor,
        source_digest=settings.build.source_digest,
    )
