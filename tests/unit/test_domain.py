"""Unit tests for domain models and exceptions.

Tests immutability, strict schemas, field order of the exported record and
timestamp/hash validation.
"""

from pydantic import ValidationError
import pytest

pytestmark = pytest.mark.unit


class TestGitInfo:
    """Test GitInfo validation."""

    def test_Should_AcceptSnapshotIdentity_When_Valid(self, git_info_data):
        """Should keep every identity string verbatim."""
        from mdbx_sourcery.domain import GitInfo

        info = GitInfo(**git_info_data)

        assert info.timestamp == "2025-09-18T09:21:46+03:00"
        assert info.commit_hash == "2c4205d50730b9d43090da71b465e9bb126b631c"
        assert info.tree_hash == "924581bdc8a1e217139c1d286c1ffb0ef0f9d14d"
        assert info.describe == "v0.14.1-95-g924581bd"

    def test_Should_RejectTimestamp_When_TimezoneMissing(self, git_info_data):
        """Should require a timezone offset on the timestamp."""
        from mdbx_sourcery.domain import GitInfo

        with pytest.raises(ValidationError) as exc_info:
            GitInfo(**{**git_info_data, "timestamp": "2025-09-18T09:21:46"})

        assert "timezone" in str(exc_info.value)

    def test_Should_RejectTimestamp_When_NotISO8601(self, git_info_data):
        from mdbx_sourcery.domain import GitInfo

        with pytest.raises(ValidationError):
            GitInfo(**{**git_info_data, "timestamp": "yesterday"})

    @pytest.mark.parametrize("bad_hash", ["", "XYZ1234", "2C4205D50730", "abc"])
    def test_Should_RejectHash_When_NotLowercaseHex(self, git_info_data, bad_hash):
        """Should reject hashes that are not lowercase hex of plausible length."""
        from mdbx_sourcery.domain import GitInfo

        with pytest.raises(ValidationError):
            GitInfo(**{**git_info_data, "commit_hash": bad_hash})

    def test_Should_RejectExtraField_When_Present(self, git_info_data):
        from mdbx_sourcery.domain import GitInfo

        with pytest.raises(ValidationError) as exc_info:
            GitInfo(**git_info_data, branch="master")

        assert "extra" in str(exc_info.value).lower()


class TestVersionInfo:
    """Test the exported version record."""

    def test_Should_KeepExportedFieldOrder_When_Dumped(self, descriptor):
        """Field order is part of the exported layout."""
        dumped = descriptor.version_info.model_dump()

        assert list(dumped) == ["major", "minor", "release", "revision", "pre_release_label", "git_info", "sourcery"]
        assert list(dumped["git_info"]) == ["timestamp", "commit_hash", "tree_hash", "describe"]

    def test_Should_BeImmutable_When_AssignmentAttempted(self, descriptor):
        """Record must never change after the build."""
        with pytest.raises(ValidationError):
            descriptor.version_info.major = 1

        with pytest.raises(ValidationError):
            descriptor.version_info.git_info.describe = "v9.9.9-0-gdeadbee"

    def test_Should_FormatSemver_When_FinalRelease(self, descriptor):
        assert descriptor.version_info.semver == "0.14.1.95"

    def test_Should_AppendLabel_When_PreRelease(self, git_info):
        from mdbx_sourcery.domain import VersionInfo

        info = VersionInfo(
            major=0, minor=14, release=0, revision=3, pre_release_label="rc1", git_info=git_info, sourcery="x"
        )

        assert info.semver == "0.14.0.3-rc1"

    @pytest.mark.parametrize("label", ["rc\n1", "rc1\n", "rc 1", "rc'1", "rc#1"])
    def test_Should_RejectLabel_When_NotSemverPreReleaseCharacters(self, git_info, label):
        """Label ends up in generated source, so only [0-9A-Za-z.-] is allowed."""
        from mdbx_sourcery.domain import VersionInfo

        with pytest.raises(ValidationError) as exc_info:
            VersionInfo(
                major=0, minor=14, release=1, revision=95, pre_release_label=label, git_info=git_info, sourcery="x"
            )

        assert "pre-release label" in str(exc_info.value)

    @pytest.mark.parametrize("label", ["", "rc1", "beta.2", "alpha-3"])
    def test_Should_AcceptLabel_When_SemverPreRelease(self, git_info, label):
        from mdbx_sourcery.domain import VersionInfo

        info = VersionInfo(
            major=0, minor=14, release=1, revision=95, pre_release_label=label, git_info=git_info, sourcery="x"
        )

        assert info.pre_release_label == label

    def test_Should_RejectHash_When_TrailingNewline(self, git_info_data):
        from mdbx_sourcery.domain import GitInfo

        with pytest.raises(ValidationError):
            GitInfo(**{**git_info_data, "tree_hash": git_info_data["tree_hash"] + "\n"})

    def test_Should_RejectNegativeNumbers_When_Constructed(self, git_info):
        from mdbx_sourcery.domain import VersionInfo

        with pytest.raises(ValidationError):
            VersionInfo(major=-1, minor=14, release=1, revision=95, git_info=git_info, sourcery="x")

    def test_Should_ReportUnstable_When_AnchorMarked(self, descriptor, unstable_descriptor):
        assert descriptor.version_info.unstable is False
        assert unstable_descriptor.version_info.unstable is True


class TestDescriptor:
    """Test the pairing of record and anchor."""

    def test_Should_RejectDescriptor_When_AnchorDiffersFromRecord(self, descriptor):
        from mdbx_sourcery.domain import Descriptor

        with pytest.raises(ValidationError):
            Descriptor(version_info=descriptor.version_info, sourcery_anchor="something_else", unstable=False)

    def test_Should_RejectDescriptor_When_UnstableFlagDisagreesWithMarker(self, descriptor):
        from mdbx_sourcery.domain import Descriptor

        with pytest.raises(ValidationError):
            Descriptor(version_info=descriptor.version_info, sourcery_anchor=descriptor.sourcery_anchor, unstable=True)


class TestExceptions:
    """Test exception hierarchy."""

    def test_Should_CarryBothVersions_When_VersionMismatchRaised(self):
        from mdbx_sourcery.domain import SourceryError, VersionMismatch

        error = VersionMismatch(resolved=(0, 14), declared=(0, 15))

        assert isinstance(error, SourceryError)
        assert error.resolved == (0, 14)
        assert error.declared == (0, 15)
        assert error.context == {"resolved": "0.14", "declared": "0.15"}
        assert "git fetch --tags" in str(error)

    def test_Should_RenderMessageOnly_When_NoContext(self):
        from mdbx_sourcery.domain import GitError

        assert str(GitError("git executable not found")) == "git executable not found"
