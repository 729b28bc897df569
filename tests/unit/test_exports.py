"""Unit tests for the package-level exported symbols."""

from pathlib import Path
import py_compile

import pytest

pytestmark = pytest.mark.unit


class TestPackageExports:
    """Test what consumers of the installed package can read."""

    def test_Should_ExportRecordAndAnchor_When_Imported(self):
        import mdbx_sourcery

        for name in ("mdbx_version", "mdbx_sourcery_anchor", "MDBX_VERSION_MAJOR", "MDBX_VERSION_MINOR"):
            assert name in mdbx_sourcery.__all__
            assert hasattr(mdbx_sourcery, name)

    def test_Should_ReachAnchorFromRecord_When_Imported(self):
        import mdbx_sourcery

        assert mdbx_sourcery.mdbx_version.sourcery == mdbx_sourcery.mdbx_sourcery_anchor

    def test_Should_MatchDeclaredApi_When_StableBuildShipped(self):
        """A shipped stable record never disagrees with the declared API version."""
        import mdbx_sourcery

        info = mdbx_sourcery.mdbx_version
        if info.unstable:
            pytest.skip("unstable builds may drift")

        assert (info.major, info.minor) == (mdbx_sourcery.MDBX_VERSION_MAJOR, mdbx_sourcery.MDBX_VERSION_MINOR)

    def test_Should_DeriveAnchorFromRecord_When_Shipped(self):
        """Shipped anchor is the token derived from the shipped git identity."""
        import mdbx_sourcery
        from mdbx_sourcery.provenance import make_sourcery_anchor, make_sourcery_token

        info = mdbx_sourcery.mdbx_version
        digest = mdbx_sourcery.mdbx_sourcery_anchor.removeprefix("UNSTABLE@").split("_", 1)[0]
        expected = make_sourcery_anchor(make_sourcery_token(info.git_info, digest), info.unstable)

        assert mdbx_sourcery.mdbx_sourcery_anchor == expected

    def test_Should_ExposeSemverAsDunderVersion_When_Imported(self):
        import mdbx_sourcery

        assert mdbx_sourcery.__version__ == mdbx_sourcery.mdbx_version.semver

    def test_Should_FindAnchorInShippedBytecode_When_Compiled(self, tmp_path):
        import mdbx_sourcery
        import mdbx_sourcery._version as shipped
        from mdbx_sourcery.scan import scan_path

        compiled = py_compile.compile(shipped.__file__, cfile=str(tmp_path / "_version.pyc"), doraise=True)

        digests = {match.digest for _, match in scan_path(Path(compiled))}
        expected = mdbx_sourcery.mdbx_sourcery_anchor.removeprefix("UNSTABLE@").split("_", 1)[0]

        assert expected in digests
