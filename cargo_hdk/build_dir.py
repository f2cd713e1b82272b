"""
HDK build directory management

The build directory lives inside the plugin directory and is named after the
build profile, e.g. ``<crate>/hdk/build_debug``. Both operations below are
idempotent: ``prepare_build_dir`` guarantees the directory exists afterwards,
``clean_build_dir`` guarantees it is gone.
"""

import logging
import shutil
from pathlib import Path
from typing import Union

from .errors import BuildDirCreateFailed, CleanFailed
from .profile import BuildProfile

logger = logging.getLogger(__name__)


def build_dir_path(root: Path, hdk_path: Union[str, Path], profile: BuildProfile) -> Path:
    return Path(root) / Path(hdk_path) / profile.dir_name


def create_build_dir(build_dir: Path, create_parents: bool = False) -> Path:
    """Create the build directory if it doesn't exist"""
    logger.debug(f"[BUILD] Creating the build directory: {build_dir}")
    try:
        build_dir.mkdir(parents=create_parents, exist_ok=True)
    except OSError as e:
        raise BuildDirCreateFailed(build_dir, e) from e
    return build_dir


def clean_build_dir(build_dir: Path) -> Path:
    """Remove the build directory and everything in it"""
    if not build_dir.exists():
        logger.warning(f"[WARN] HDK build directory {build_dir} does not exist, nothing to clean")
        return build_dir

    logger.info(f"[CLEAN] Removing HDK build artifacts in {build_dir}")
    try:
        shutil.rmtree(build_dir)
    except FileNotFoundError:
        logger.warning(f"[WARN] HDK build directory {build_dir} vanished while cleaning")
    except OSError as e:
        raise CleanFailed(build_dir, e) from e
    return build_dir


def prepare_build_dir(root: Path, hdk_path: Union[str, Path], profile: BuildProfile,
                      clean: bool = False, create_parents: bool = False) -> Path:
    """Compute the build directory for ``profile`` and create or clean it."""
    build_dir = build_dir_path(root, hdk_path, profile)
    if clean:
        return clean_build_dir(build_dir)
    return create_build_dir(build_dir, create_parents=create_parents)
