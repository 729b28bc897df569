"""Declared API version of the library.

These are the public version identifiers a build is checked against: a
stable build whose source-control version resolves to a different
major.minor is refused.
"""

MDBX_VERSION_MAJOR = 0
MDBX_VERSION_MINOR = 14

__all__ = ["MDBX_VERSION_MAJOR", "MDBX_VERSION_MINOR"]
