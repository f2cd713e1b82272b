import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
FIXTURE = ROOT / "tests" / "fixtures" / "hdk_crate"

pytestmark = pytest.mark.integration


@pytest.fixture
def fixture_crate(tmp_path):
    if shutil.which("cargo") is None or shutil.which("cmake") is None:
        pytest.skip("cargo and cmake are required")
    crate = tmp_path / "hdk_crate"
    shutil.copytree(FIXTURE, crate)
    return crate


def run_cargo_hdk(crate, *args, hfs):
    env = dict(os.environ, HFS=str(hfs), PYTHONPATH=str(ROOT))
    env.pop("CARGO", None)
    return subprocess.run(
        [sys.executable, "-m", "cargo_hdk.cli", "hdk", *args],
        cwd=crate,
        env=env,
        capture_output=True,
        text=True,
    )


def test_basic_debug_build(fixture_crate, tmp_path):
    result = run_cargo_hdk(fixture_crate, "-v", hfs=tmp_path)

    assert result.returncode == 0, result.stderr
    build_dir = fixture_crate / "hdk" / "build_debug"
    out_dir = Path((build_dir / "out_dir_hdk-fixture.txt").read_text())
    assert (out_dir / "fixture_generated.h").exists()
    assert (build_dir / "CMakeCache.txt").exists()


def test_clean_after_build(fixture_crate, tmp_path):
    assert run_cargo_hdk(fixture_crate, hfs=tmp_path).returncode == 0

    result = run_cargo_hdk(fixture_crate, "--clean", hfs=tmp_path)

    assert result.returncode == 0, result.stderr
    assert not (fixture_crate / "hdk" / "build_debug").exists()
    assert not (fixture_crate / "target").exists()
