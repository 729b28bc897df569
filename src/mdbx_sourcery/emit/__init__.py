"""Emit the descriptor as a generated module or JSON manifest.

The generated module holds nothing but literals: ``mdbx_version`` and
``mdbx_sourcery_anchor`` at module level, both listed in ``__all__``. The
anchor is a plain string constant, so it survives verbatim in the source,
the compiled bytecode and any archive that contains them.

Output is written atomically and only after the descriptor has been built,
so a refused build leaves the previous file (or no file) in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

from mdbx_sourcery.config import Settings
from mdbx_sourcery.domain import Descriptor
from mdbx_sourcery.provenance import descriptor_from_settings
from mdbx_sourcery.utils import write_json, write_text_atomic

__all__ = [
    "render_module",
    "render_manifest",
    "write_descriptor",
    "generate",
]

logger = logging.getLogger(__name__)

OutputFormat = Literal["py", "json"]

_MODULE_TEMPLATE = '''\
"""Build provenance of this package.

Generated by `mdbx-sourcery generate`; do not edit. Builds overwrite it.
"""

from mdbx_sourcery.domain import GitInfo, VersionInfo

__all__ = ["mdbx_version", "mdbx_sourcery_anchor"]

_sourcery = {sourcery!r}

mdbx_version = VersionInfo(
    major={major!r},
    minor={minor!r},
    release={release!r},
    revision={revision!r},
    pre_release_label={pre_release_label!r},  # SemVer {semver}
    git_info=GitInfo(
        timestamp={timestamp!r},
        commit_hash={commit_hash!r},
        tree_hash={tree_hash!r},
        describe={describe!r},
    ),
    sourcery=_sourcery,
)

mdbx_sourcery_anchor = _sourcery
'''


def render_module(descriptor: Descriptor) -> str:
    """Render the descriptor as Python source."""
    info = descriptor.version_info
    git = info.git_info
    return _MODULE_TEMPLATE.format(
        sourcery=descriptor.sourcery_anchor,
        major=info.major,
        minor=info.minor,
        release=info.release,
        revision=info.revision,
        pre_release_label=info.pre_release_label,
        semver=info.semver,
        timestamp=git.timestamp,
        commit_hash=git.commit_hash,
        tree_hash=git.tree_hash,
        describe=git.describe,
    )


def render_manifest(descriptor: Descriptor) -> dict[str, Any]:
    """Render the descriptor as a JSON-ready dictionary."""
    return {
        "mdbx_version": descriptor.version_info.model_dump(),
        "mdbx_sourcery_anchor": descriptor.sourcery_anchor,
        "unstable": descriptor.unstable,
    }


def write_descriptor(descriptor: Descriptor, path: Path | str, fmt: OutputFormat = "py") -> Path:
    """Write the descriptor atomically.

    Raises:
        ValueError: If fmt is not 'py' or 'json'
    """
    if fmt == "py":
        written = write_text_atomic(path, render_module(descriptor))
    elif fmt == "json":
        written = write_json(render_manifest(descriptor), path)
    else:
        raise ValueError(f"Unsupported output format: {fmt}. Must be one of ['py', 'json']")

    logger.info("Wrote %s descriptor to %s", fmt, written)
    return written


def generate(
    settings: Settings,
    output: Optional[Path | str] = None,
    fmt: Optional[OutputFormat] = None,
    repo: Optional[Path | str] = None,
) -> Path:
    """Build the descriptor from settings and write it.

    Args:
        settings: Loaded build-stage settings
        output: Target path (default: settings.build.output)
        fmt: Output format (default: settings.build.format)
        repo: Repository to read missing identity values from

    Returns:
        Path of the written file

    Raises:
        VersionMismatch: Stable build with drifted major.minor; nothing is written
        GitError: Git had to be consulted and could not be read
    """
    descriptor = descriptor_from_settings(settings, repo=repo)
    target = Path(output) if output is not None else settings.build.output
    return write_descriptor(descriptor, target, fmt or settings.build.format)
