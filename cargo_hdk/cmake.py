"""
CMake configure and build of the HDK plugin

Both steps run inside the build directory. The process working directory is
switched for the duration of the build and always switched back, including
when a step fails.
"""

import logging
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Sequence, Type

from .errors import (
    CommandFailed, ConfigureFailed, DirectoryChangeFailed, DirectoryRestoreFailed, NativeBuildFailed,
)
from .profile import BuildProfile

logger = logging.getLogger(__name__)


def cmake_executable(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return environ.get("CMAKE", "cmake")


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """Temporarily change the process working directory to ``path``"""
    original = Path.cwd()
    try:
        os.chdir(path)
    except OSError as e:
        raise DirectoryChangeFailed(path, e) from e
    pending = None
    try:
        yield path
    except BaseException as e:
        pending = e
        raise
    finally:
        try:
            os.chdir(original)
        except OSError as e:
            if pending is not None:
                logger.error(f"[ERROR] {pending}")
            raise DirectoryRestoreFailed(original, e) from e


def run_cmake(cmd: List[str], env: Optional[Mapping[str, str]], error: Type[CommandFailed]):
    logger.debug("$ " + " ".join(cmd))
    try:
        result = subprocess.run(cmd, env=env)
    except OSError as e:
        raise error(cmd, detail=str(e)) from e
    if result.returncode != 0:
        raise error(cmd, result.returncode)


def configure_and_build(build_dir: Path, tokens: Sequence[str], profile: BuildProfile,
                        env: Optional[Mapping[str, str]] = None, cmake: Optional[str] = None):
    """Configure the plugin sources in ``build_dir/..`` and build them."""
    cmake = cmake or cmake_executable(env)

    with working_directory(build_dir):
        logger.info("[CMAKE] Configuring CMake.")
        run_cmake([cmake, "..", *tokens, profile.cmake_flag], env, ConfigureFailed)

        logger.info("[CMAKE] Building the C/C++ HDK plugin.")
        run_cmake([cmake, "--build", "."], env, NativeBuildFailed)
