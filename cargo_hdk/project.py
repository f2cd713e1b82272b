"""
Crate root discovery

cargo is asked first (``cargo locate-project`` + ``cargo metadata``) since it
knows about workspaces and gives the exact package id used in build messages.
If cargo can't be started at all, the directory tree is searched for
``Cargo.toml`` instead.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .cargo import locate_manifest, read_metadata
from .config import MANIFEST_NAME, read_package_name
from .errors import ManifestNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Project:
    """The crate being built"""
    root: Path
    manifest_path: Path
    package_name: Optional[str] = None
    # Only known when found through cargo metadata
    package_id: Optional[str] = None


def _same_file(a: Union[str, Path], b: Union[str, Path]) -> bool:
    return Path(a).resolve() == Path(b).resolve()


def find_project_root(start_dir: Path) -> Project:
    """Walk up from ``start_dir`` until a directory containing Cargo.toml is found"""
    current = start_dir if start_dir.is_dir() else start_dir.parent
    for path in [current] + list(current.parents):
        manifest = path / MANIFEST_NAME
        if manifest.is_file():
            return Project(root=path, manifest_path=manifest, package_name=read_package_name(manifest))
    raise ManifestNotFound(start_dir)


def project_from_metadata(start_dir: Path, cargo: Optional[str] = None) -> Project:
    manifest = locate_manifest(start_dir, cargo)
    metadata = read_metadata(start_dir, cargo)
    for package in metadata.get("packages", []):
        if _same_file(package.get("manifest_path", ""), manifest):
            return Project(
                root=manifest.parent,
                manifest_path=manifest,
                package_name=package.get("name"),
                package_id=package.get("id"),
            )
    raise ManifestNotFound(start_dir, f"{manifest} does not define a package.")


def locate_project(start_dir: Optional[Union[str, Path]] = None, cargo: Optional[str] = None) -> Project:
    """Find the crate containing ``start_dir`` (default: the current directory)"""
    start_dir = Path(start_dir or Path.cwd()).resolve()
    logger.info("[PROJECT] Looking for a parent directory containing the `Cargo.toml` manifest file.")

    try:
        project = project_from_metadata(start_dir, cargo)
    except FileNotFoundError:
        logger.debug("[PROJECT] cargo is not available, searching the directory tree instead")
        project = find_project_root(start_dir)

    logger.info(f"[PROJECT] Crate root: {project.root}")
    return project
