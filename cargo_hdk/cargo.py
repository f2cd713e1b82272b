"""
Cargo invocation for cargo-hdk

Runs ``cargo build`` / ``cargo clean`` with the forwarded arguments and reads
cargo's JSON message stream to find the ``OUT_DIR`` of every build script that
ran, so the CMake build of the HDK plugin can pick up generated files without
calling cargo again.
"""

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .errors import EventStreamError, ManagedBuildFailed, ManagedCleanFailed, ManifestNotFound, MetadataQueryFailed

if TYPE_CHECKING:
    from .project import Project

logger = logging.getLogger(__name__)

# Name under which cargo passes the subcommand to `cargo-hdk`
SUBCOMMAND = "hdk"
MESSAGE_FORMAT_FLAG = "--message-format=json-render-diagnostics"
BUILD_SCRIPT_EXECUTED = "build-script-executed"


@dataclass(frozen=True)
class DependencyOutputRecord:
    """OUT_DIR of a build script, keyed by the crate name it is stored under"""
    name: str
    out_dir: str


def cargo_executable(environ: Optional[Mapping[str, str]] = None) -> str:
    """Cargo sets $CARGO when it runs a subcommand; fall back to PATH lookup."""
    environ = os.environ if environ is None else environ
    return environ.get("CARGO", "cargo")


def strip_subcommand(build_args: Sequence[str]) -> List[str]:
    args = list(build_args)
    if args and args[0] == SUBCOMMAND:
        return args[1:]
    return args


def log_command(cmd: Sequence[str]):
    logger.debug("$ " + " ".join(str(c) for c in cmd))


# --- project queries ---------------------------------------------------------

def _query_json(cmd: List[str], cwd: Path) -> subprocess.CompletedProcess:
    log_command(cmd)
    try:
        return subprocess.run(cmd, cwd=cwd, capture_output=True, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MetadataQueryFailed(cmd, detail=f"output is not UTF-8 ({e})") from e


def locate_manifest(cwd: Path, cargo: Optional[str] = None) -> Path:
    """Ask cargo for the manifest of the crate containing ``cwd``.

    Raises FileNotFoundError if cargo itself is not installed.
    """
    cmd = [cargo or cargo_executable(), "locate-project", "--message-format", "json"]
    result = _query_json(cmd, cwd)
    if result.returncode != 0:
        raise ManifestNotFound(cwd, result.stderr.strip() or None)
    try:
        return Path(json.loads(result.stdout)["root"])
    except (ValueError, KeyError, TypeError) as e:
        raise MetadataQueryFailed(cmd, detail=f"unexpected output {result.stdout!r}") from e


def read_metadata(cwd: Path, cargo: Optional[str] = None) -> Dict[str, Any]:
    cmd = [cargo or cargo_executable(), "metadata", "--no-deps", "--format-version", "1"]
    result = _query_json(cmd, cwd)
    if result.returncode != 0:
        raise MetadataQueryFailed(cmd, result.returncode, result.stderr.strip() or None)
    try:
        metadata = json.loads(result.stdout)
    except ValueError as e:
        raise MetadataQueryFailed(cmd, detail=str(e)) from e
    if not isinstance(metadata, dict):
        raise MetadataQueryFailed(cmd, detail="expected a JSON object")
    return metadata


# --- build message stream ----------------------------------------------------

def parse_messages(lines: Iterable[str]) -> Iterator[Dict[str, Any]]:
    """Decode cargo's line-delimited JSON messages.

    Any line that is not a JSON object is an error; a partially understood
    stream would silently drop OUT_DIR entries.
    """
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except ValueError as e:
            raise EventStreamError(line, str(e)) from e
        if not isinstance(message, dict):
            raise EventStreamError(line, "expected a JSON object")
        yield message


def package_name_from_id(package_id: str) -> str:
    """Extract the crate name from a cargo package id.

    Handles both the legacy ``name version (source)`` form and the package id
    spec form ``source#name@version`` (or ``source#version`` when the name is
    the last path segment of the source).
    """
    if "#" not in package_id:
        return package_id.split(" ", 1)[0]
    source, fragment = package_id.rsplit("#", 1)
    if "@" in fragment:
        return fragment.split("@", 1)[0]
    return source.rstrip("/").rsplit("/", 1)[-1]


def is_root_package(package_id: str, project: "Project") -> bool:
    if project.package_id is not None:
        return package_id == project.package_id
    if project.package_name is not None:
        return package_name_from_id(package_id) == project.package_name
    return False


def collect_out_dirs(lines: Iterable[str], project: "Project",
                     dependencies: Sequence[str] = ()) -> List[DependencyOutputRecord]:
    """Return the OUT_DIR records found in a cargo message stream, in stream order."""
    records = []
    for message in parse_messages(lines):
        if message.get("reason") != BUILD_SCRIPT_EXECUTED:
            continue

        package_id = message.get("package_id")
        out_dir = message.get("out_dir")
        if not isinstance(package_id, str) or not isinstance(out_dir, str):
            raise EventStreamError(json.dumps(message), "missing package_id or out_dir")

        if is_root_package(package_id, project):
            logger.debug(f"[CARGO] OUT_DIR of {project.package_name}: {out_dir}")
            records.append(DependencyOutputRecord(project.package_name, out_dir))
            continue

        for name in dependencies:
            if name in package_id:
                logger.debug(f"[CARGO] OUT_DIR of {name}: {out_dir}")
                records.append(DependencyOutputRecord(name, out_dir))
    return records


def run_managed_build(project: "Project", build_args: Sequence[str], clean: bool = False,
                      dependencies: Sequence[str] = (), cargo: Optional[str] = None,
                      cwd: Optional[Path] = None) -> List[DependencyOutputRecord]:
    """Run ``cargo build`` (or ``cargo clean``) with the forwarded arguments.

    Standard error is inherited so compiler diagnostics show up as they are
    produced; only standard output (the JSON messages) is captured.
    """
    args = strip_subcommand(build_args)
    cargo = cargo or cargo_executable()

    if clean:
        logger.info("[CARGO] Cleaning rust artifacts using cargo.")
        cmd = [cargo, "clean", *args]
        log_command(cmd)
        try:
            result = subprocess.run(cmd, cwd=cwd)
        except OSError as e:
            raise ManagedCleanFailed(cmd, detail=str(e)) from e
        if result.returncode != 0:
            raise ManagedCleanFailed(cmd, result.returncode)
        return []

    logger.info("[CARGO] Building rust code using cargo.")
    cmd = [cargo, "build", *args, MESSAGE_FORMAT_FLAG]
    log_command(cmd)
    # cargo writes its messages as UTF-8 whatever the locale
    try:
        result = subprocess.run(cmd, cwd=cwd, stdout=subprocess.PIPE, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise EventStreamError(e.object[max(e.start - 40, 0):e.end + 40].decode("utf-8", "replace"),
                               "output is not UTF-8") from e
    except OSError as e:
        raise ManagedBuildFailed(cmd, detail=str(e)) from e
    if result.returncode != 0:
        raise ManagedBuildFailed(cmd, result.returncode)

    records = collect_out_dirs(result.stdout.splitlines(), project, dependencies)
    logger.info(f"[CARGO] Captured {len(records)} OUT_DIR record(s)")
    return records
