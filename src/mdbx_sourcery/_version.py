"""Build provenance of this package.

Generated by `mdbx-sourcery generate`; do not edit. Builds overwrite it.
"""

from mdbx_sourcery.domain import GitInfo, VersionInfo

__all__ = ["mdbx_version", "mdbx_sourcery_anchor"]

_sourcery = '8b57f32bb15999a95cf13fec4bc7c17585346ed265885378ec8d4d712fb5a437_v0_14_1_95_g924581bd'

mdbx_version = VersionInfo(
    major=0,
    minor=14,
    release=1,
    revision=95,
    pre_release_label='',  # SemVer 0.14.1.95
    git_info=GitInfo(
        timestamp='2025-09-18T09:21:46+03:00',
        commit_hash='2c4205d50730b9d43090da71b465e9bb126b631c',
        tree_hash='924581bdc8a1e217139c1d286c1ffb0ef0f9d14d',
        describe='v0.14.1-95-g924581bd',
    ),
    sourcery=_sourcery,
)

mdbx_sourcery_anchor = _sourcery
