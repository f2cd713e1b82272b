import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cargo_hdk.project import Project  # noqa: E402

CRATE_MANIFEST = """\
[package]
name = "mycrate"
version = "0.1.0"
edition = "2021"
"""


@dataclass
class Call:
    cmd: List[str]
    cwd: str
    kwargs: Dict[str, Any] = field(default_factory=dict)


class FakeRunner:
    """Stand-in for subprocess.run recording every command.

    Responses are matched on the arguments following the executable, longest
    prefix first; unmatched commands succeed with empty output.
    """

    def __init__(self):
        self.calls: List[Call] = []
        self.responses = {}

    def respond(self, *prefix, returncode=0, stdout="", stderr="", exc=None):
        self.responses[prefix] = (returncode, stdout, stderr, exc)

    def __call__(self, cmd, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(Call(cmd=cmd, cwd=os.getcwd(), kwargs=kwargs))
        for prefix in sorted(self.responses, key=len, reverse=True):
            if tuple(cmd[1:1 + len(prefix)]) == prefix:
                returncode, stdout, stderr, exc = self.responses[prefix]
                if exc is not None:
                    raise exc
                return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands(self, executable=None):
        return [c.cmd for c in self.calls if executable is None or c.cmd[0] == executable]


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner


@pytest.fixture
def crate(tmp_path):
    root = tmp_path / "mycrate"
    (root / "hdk").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "Cargo.toml").write_text(CRATE_MANIFEST, encoding="utf-8")
    return root


@pytest.fixture
def project(crate):
    return Project(
        root=crate,
        manifest_path=crate / "Cargo.toml",
        package_name="mycrate",
        package_id=f"path+file://{crate.as_posix()}#0.1.0",
    )


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("cargo_hdk")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def restore_cwd():
    cwd = os.getcwd()
    yield
    os.chdir(cwd)


def pytest_collection_modifyitems(config, items):
    skip_integration = pytest.mark.skip(reason="set CARGO_HDK_INTEGRATION=1 to run real builds")
    if os.environ.get("CARGO_HDK_INTEGRATION"):
        return
    for item in items:
        if item.get_closest_marker("integration") is not None:
            item.add_marker(skip_integration)
