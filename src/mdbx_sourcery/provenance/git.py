"""Read build identity from git.

The build stage calls these helpers when the configuration does not carry
the identity strings itself. Every helper shells out to ``git`` with a
timeout; failures surface as :class:`GitError`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
import subprocess
from typing import Iterable

from mdbx_sourcery.domain import GitError, GitInfo
from mdbx_sourcery.utils import compute_hash, file_hash

__all__ = [
    "DescribeParts",
    "parse_describe",
    "read_git_info",
    "digest_sources",
    "DEFAULT_SOURCE_PATTERNS",
]

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 10

DEFAULT_SOURCE_PATTERNS = ("src/**/*.py", "pyproject.toml")

# v0.14.1, v0.14.0-rc1, followed by the --long suffix and an optional -dirty
_DESCRIBE_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<release>\d+)"
    r"(?:-(?P<label>[0-9A-Za-z.]+?))?"
    r"(?:-(?P<distance>\d+)-g(?P<abbrev>[0-9a-f]+))?"
    r"(?P<dirty>-dirty)?$"
)


@dataclass(frozen=True)
class DescribeParts:
    """Components of a ``git describe --long`` string."""

    major: int
    minor: int
    release: int
    revision: int
    pre_release_label: str
    abbrev: str
    dirty: bool = False


def parse_describe(describe: str) -> DescribeParts:
    """Split a describe string into version numbers.

    Examples:
        >>> parse_describe("v0.14.1-95-g924581bd").revision
        95
        >>> parse_describe("v0.14.0-rc1-3-gabc1234").pre_release_label
        'rc1'

    Raises:
        ValueError: If the string does not start with a version tag
    """
    match = _DESCRIBE_RE.match(describe.strip())
    if match is None:
        raise ValueError(f"describe string carries no version tag: '{describe}'")

    return DescribeParts(
        major=int(match["major"]),
        minor=int(match["minor"]),
        release=int(match["release"]),
        revision=int(match["distance"] or 0),
        pre_release_label=match["label"] or "",
        abbrev=match["abbrev"] or "",
        dirty=match["dirty"] is not None,
    )


def _git(args: list[str], repo: Path | None) -> str:
    """Run a git command and return its stripped stdout."""
    command = ["git", *args]
    try:
        result = subprocess.run(
            command,
            cwd=repo,
            capture_output=True,
            text=True,
            check=True,
            timeout=GIT_TIMEOUT_S,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found", {"command": " ".join(command)}) from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git timed out after {GIT_TIMEOUT_S}s", {"command": " ".join(command)}) from e
    except subprocess.CalledProcessError as e:
        stderr_msg = e.stderr.strip() if e.stderr else "No error message"
        raise GitError(f"git failed: {stderr_msg}", {"command": " ".join(command)}) from e

    output = result.stdout.strip()
    if not output:
        raise GitError("git returned empty output", {"command": " ".join(command)})
    return output


def read_git_info(repo: Path | str | None = None) -> GitInfo:
    """Read timestamp, commit, tree and describe of HEAD.

    Args:
        repo: Working tree to query (default: current directory)

    Returns:
        GitInfo for HEAD

    Raises:
        GitError: If git is unavailable or the directory is not a repository
    """
    repo_path = Path(repo) if repo is not None else None

    info = GitInfo(
        timestamp=_git(["show", "-s", "--format=%cI", "HEAD"], repo_path),
        commit_hash=_git(["rev-parse", "HEAD"], repo_path),
        tree_hash=_git(["rev-parse", "HEAD^{tree}"], repo_path),
        describe=_git(["describe", "--tags", "--long", "--dirty", "--always"], repo_path),
    )
    logger.info("Read git identity %s (%s)", info.describe, info.commit_hash)
    return info


def digest_sources(root: Path | str, patterns: Iterable[str] = DEFAULT_SOURCE_PATTERNS) -> str:
    """Deterministic SHA256 over a set of source files.

    Files are keyed by their POSIX path relative to ``root``, so the digest
    does not depend on where the tree is checked out.

    Raises:
        FileNotFoundError: If root does not exist or no file matches
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Source root not found: {root}")

    files = sorted({path for pattern in patterns for path in root.glob(pattern) if path.is_file()})
    if not files:
        raise FileNotFoundError(f"No source files under {root} match {list(patterns)}")

    manifest = {path.relative_to(root).as_posix(): file_hash(path) for path in files}
    logger.debug("Digesting %d source files under %s", len(manifest), root)
    return compute_hash(manifest)
