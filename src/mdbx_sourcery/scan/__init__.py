"""Locate sourcery anchors in built artifacts by raw-byte search.

Nothing is imported or parsed: an anchor is recognized by its shape
(optional ``UNSTABLE@`` marker, 64 hex digest, ``_``, describe slug), so the
scanner works on generated sources, bytecode, wheels and sdists alike.

Example:
--------
>>> from mdbx_sourcery.scan import find_anchor
>>> location, match = find_anchor("dist/mdbx_sourcery-0.14.1-py3-none-any.whl")
>>> match.unstable
False
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Iterator, List, Tuple
import zipfile

from mdbx_sourcery.domain import UNSTABLE_MARKER, AnchorNotFound

__all__ = [
    "AnchorMatch",
    "scan_bytes",
    "scan_path",
    "find_anchor",
]

logger = logging.getLogger(__name__)

ANCHOR_RE = re.compile(rb"(?P<marker>" + re.escape(UNSTABLE_MARKER.encode("ascii")) + rb")?(?P<digest>[0-9a-f]{64})_(?P<slug>[0-9A-Za-z_]+)")

_ARCHIVE_SUFFIXES = {".whl", ".zip"}


@dataclass(frozen=True)
class AnchorMatch:
    """One anchor occurrence in a byte buffer."""

    offset: int
    unstable: bool
    digest: str
    describe_slug: str

    @property
    def token(self) -> str:
        return f"{self.digest}_{self.describe_slug}"

    @property
    def anchor(self) -> str:
        return f"{UNSTABLE_MARKER}{self.token}" if self.unstable else self.token


def scan_bytes(data: bytes) -> List[AnchorMatch]:
    """Return every anchor found in ``data``, in order of appearance."""
    return [
        AnchorMatch(
            offset=m.start(),
            unstable=m["marker"] is not None,
            digest=m["digest"].decode("ascii"),
            describe_slug=m["slug"].decode("ascii"),
        )
        for m in ANCHOR_RE.finditer(data)
    ]


def _iter_blobs(path: Path) -> Iterator[Tuple[str, bytes]]:
    """Yield (location, content) for a file, directory tree or archive."""
    if path.is_dir():
        for child in sorted(p for p in path.rglob("*") if p.is_file()):
            yield from _iter_blobs(child)
        return

    if path.suffix in _ARCHIVE_SUFFIXES and zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as archive:
            for name in sorted(archive.namelist()):
                if not name.endswith("/"):
                    yield f"{path}!{name}", archive.read(name)
        return

    yield str(path), path.read_bytes()


def scan_path(path: Path | str) -> List[Tuple[str, AnchorMatch]]:
    """Scan a file, a directory tree, or the members of a wheel/zip.

    Returns:
        (location, match) pairs; location is the file path, or
        ``archive!member`` for archive members

    Raises:
        FileNotFoundError: If path does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Artifact not found: {path}")

    results = []
    for location, data in _iter_blobs(path):
        for match in scan_bytes(data):
            results.append((location, match))
    logger.debug("Found %d anchor(s) in %s", len(results), path)
    return results


def find_anchor(path: Path | str) -> Tuple[str, AnchorMatch]:
    """Return the first anchor in ``path``.

    Raises:
        AnchorNotFound: If the artifact carries no anchor
    """
    results = scan_path(path)
    if not results:
        raise AnchorNotFound("No sourcery anchor found", {"path": str(path)})
    return results[0]
