"""mdbx-sourcery: build provenance descriptor.

A build binds the exact source snapshot and build identity into the package
as two read-only values:

- ``mdbx_version``: structured VersionInfo record (numbers, pre-release
  label, git identity, anchor)
- ``mdbx_sourcery_anchor``: the same identity as one flat, greppable token,
  prefixed with ``UNSTABLE@`` for development builds

The values live in the generated ``_version`` module, rewritten by
``mdbx-sourcery generate`` before packaging. The build refuses to generate
them when the resolved major.minor disagrees with ``MDBX_VERSION_MAJOR`` /
``MDBX_VERSION_MINOR`` on a stable build.

Example:
--------
>>> import mdbx_sourcery
>>> mdbx_sourcery.mdbx_version.git_info.describe
'v0.14.1-95-g924581bd'
>>> mdbx_sourcery.mdbx_sourcery_anchor.startswith("UNSTABLE@")
False
"""

from mdbx_sourcery._version import mdbx_sourcery_anchor, mdbx_version
from mdbx_sourcery.api import MDBX_VERSION_MAJOR, MDBX_VERSION_MINOR

__version__ = mdbx_version.semver

__all__ = [
    "mdbx_version",
    "mdbx_sourcery_anchor",
    "MDBX_VERSION_MAJOR",
    "MDBX_VERSION_MINOR",
    "__version__",
]
