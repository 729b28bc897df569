"""Pytest configuration and shared fixtures for mdbx_sourcery tests.

Provides:
- Fixture config paths
- The 0.14.1.95 snapshot identity used across tests
- Environment isolation from MDBX_* overrides
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict

import pytest

# ============================================================================
# Snapshot Identity
# ============================================================================

SNAPSHOT_TIMESTAMP = "2025-09-18T09:21:46+03:00"
SNAPSHOT_COMMIT = "2c4205d50730b9d43090da71b465e9bb126b631c"
SNAPSHOT_TREE = "924581bdc8a1e217139c1d286c1ffb0ef0f9d14d"
SNAPSHOT_DESCRIBE = "v0.14.1-95-g924581bd"

# sha256 of the canonical JSON of the snapshot GitInfo
SNAPSHOT_DIGEST = "8b57f32bb15999a95cf13fec4bc7c17585346ed265885378ec8d4d712fb5a437"
SNAPSHOT_TOKEN = f"{SNAPSHOT_DIGEST}_v0_14_1_95_g924581bd"


# ============================================================================
# Path Configuration
# ============================================================================


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Root directory containing all test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def configs_root(fixtures_root: Path) -> Path:
    return fixtures_root / "configs"


@pytest.fixture(scope="session")
def release_toml(configs_root: Path) -> Path:
    """Stable build, API 0.14 declared, snapshot 0.14."""
    return configs_root / "release.toml"


@pytest.fixture(scope="session")
def mismatch_toml(configs_root: Path) -> Path:
    """Stable build, API 0.15 declared, snapshot 0.14."""
    return configs_root / "mismatch.toml"


@pytest.fixture(scope="session")
def mismatch_unstable_toml(configs_root: Path) -> Path:
    """Unstable build, API 0.15 declared, snapshot 0.14."""
    return configs_root / "mismatch_unstable.toml"


@pytest.fixture(scope="session")
def malformed_toml(configs_root: Path) -> Path:
    """Not parseable as TOML."""
    return configs_root / "malformed.toml"


@pytest.fixture(scope="session")
def bad_label_toml(configs_root: Path) -> Path:
    """Stable build whose pre-release label contains a line break."""
    return configs_root / "bad_label.toml"


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_mdbx_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop MDBX_* variables so host settings never leak into tests."""
    for key in list(os.environ):
        if key.startswith("MDBX_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so they never outlive a test's streams."""
    yield
    logging.getLogger("mdbx_sourcery").handlers.clear()


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def git_info_data() -> Dict[str, Any]:
    return {
        "timestamp": SNAPSHOT_TIMESTAMP,
        "commit_hash": SNAPSHOT_COMMIT,
        "tree_hash": SNAPSHOT_TREE,
        "describe": SNAPSHOT_DESCRIBE,
    }


@pytest.fixture
def git_info(git_info_data: Dict[str, Any]):
    from mdbx_sourcery.domain import GitInfo

    return GitInfo(**git_info_data)


@pytest.fixture
def snapshot_inputs(git_info) -> Dict[str, Any]:
    """Build inputs of the 0.14.1.95 snapshot, stable, declared API 0.14."""
    return {
        "major": 0,
        "minor": 14,
        "release": 1,
        "revision": 95,
        "pre_release_label": "",
        "git_info": git_info,
        "unstable": False,
        "declared_major": 0,
        "declared_minor": 14,
    }


@pytest.fixture
def descriptor(snapshot_inputs: Dict[str, Any]):
    from mdbx_sourcery.provenance import build_descriptor

    return build_descriptor(**snapshot_inputs)


@pytest.fixture
def unstable_descriptor(snapshot_inputs: Dict[str, Any]):
    from mdbx_sourcery.provenance import build_descriptor

    return build_descriptor(**{**snapshot_inputs, "unstable": True})


@pytest.fixture
def snapshot_token() -> str:
    """Anchor token of the stable 0.14.1.95 snapshot."""
    return SNAPSHOT_TOKEN
