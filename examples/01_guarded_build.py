#!/usr/bin/env python3
"""Example 01: Guarded Build.

This example walks through the build stage for the 0.14.1.95 snapshot:
a stable build that passes the API version check, a stable build that is
refused because the declared API moved to 0.15, and the same drift accepted
as an unstable build. Each generated module is then located again by
scanning its bytecode for the sourcery anchor.

Key Concepts:
-------------
- API version check before any output is written
- UNSTABLE@ marker on development builds
- Anchors found by raw-byte search, no import needed

Example Usage:
-------------
    $ python examples/01_guarded_build.py

    # Or with a different output directory
    $ OUTPUT_ROOT=/tmp/sourcery python examples/01_guarded_build.py
"""

from pathlib import Path
import py_compile
import shutil

from pydantic_settings import BaseSettings, SettingsConfigDict

from mdbx_sourcery.config import Settings
from mdbx_sourcery.domain import VersionMismatch
from mdbx_sourcery.emit import generate
from mdbx_sourcery.scan import find_anchor


class ExampleSettings(BaseSettings):
    """Settings for Example 01: Guarded Build."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    output_root: Path = Path("temp/examples/01_guarded_build")
    declared_minor_after_bump: int = 15


SNAPSHOT = {
    "version": {"major": 0, "minor": 14, "release": 1, "revision": 95, "pre_release_label": ""},
    "git": {
        "timestamp": "2025-09-18T09:21:46+03:00",
        "commit_hash": "2c4205d50730b9d43090da71b465e9bb126b631c",
        "tree_hash": "924581bdc8a1e217139c1d286c1ffb0ef0f9d14d",
        "describe": "v0.14.1-95-g924581bd",
    },
}


def run_example(settings: ExampleSettings) -> dict:
    """Run the three builds and scan what they produced.

    Returns:
        Dictionary with the outcome of each build
    """
    output_root = settings.output_root

    print("=" * 80)
    print("mdbx-sourcery Example 01: Guarded Build")
    print("=" * 80)

    if output_root.exists():
        shutil.rmtree(output_root)
    output_root.mkdir(parents=True, exist_ok=True)

    builds = {
        "stable": Settings(**SNAPSHOT, api={"major": 0, "minor": 14}),
        "stable-drifted": Settings(**SNAPSHOT, api={"major": 0, "minor": settings.declared_minor_after_bump}),
        "unstable-drifted": Settings(
            **SNAPSHOT,
            api={"major": 0, "minor": settings.declared_minor_after_bump},
            build={"unstable": True},
        ),
    }

    outcomes = {}
    for name, build_settings in builds.items():
        print(f"\n📦 Build '{name}' (declared API {build_settings.api.major}.{build_settings.api.minor})")
        target = output_root / name / "_version.py"

        try:
            written = generate(build_settings, output=target)
        except VersionMismatch as e:
            print(f"   ✗ refused: {e}")
            print(f"   ✓ no artifact: {not target.exists()}")
            outcomes[name] = None
            continue

        compiled = Path(py_compile.compile(str(written), doraise=True))
        location, match = find_anchor(compiled)
        print(f"   ✓ wrote {written}")
        print(f"   ✓ anchor in bytecode at {location}:{match.offset}")
        print(f"     {match.anchor}")
        outcomes[name] = match.anchor

    print("\n" + "=" * 80)
    print("✅ Example Complete!")
    print("=" * 80)

    return outcomes


if __name__ == "__main__":
    run_example(ExampleSettings())
