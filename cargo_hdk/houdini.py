"""
Houdini installation discovery

The installation root (HFS) is taken from the ``HFS`` environment variable
when set, otherwise the usual installation paths are probed, newest version
first. Each probe is a callable returning candidate paths, so the list can be
extended without touching the build pipeline.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import HoudiniNotFound

logger = logging.getLogger(__name__)

HOUDINI_VERSIONS = ("20.5", "20.0", "19.5", "19.0", "18.5", "18.0", "17.5", "17.0")

LINUX_HFS = "/opt/hfs{version}"
MACOS_HFS = "/Applications/Houdini/Houdini{version}/Frameworks/Houdini.framework/Versions/Current/Resources"
WINDOWS_HFS = r"C:\Program Files\Side Effects Software\Houdini {version}"

Probe = Callable[[Mapping[str, str]], Iterable[Path]]


def env_probe(environ: Mapping[str, str]) -> List[Path]:
    hfs = environ.get("HFS")
    return [Path(hfs)] if hfs else []


def install_path_probe(template: str, versions: Sequence[str] = HOUDINI_VERSIONS) -> Probe:
    """Probe yielding ``template`` formatted with each version"""
    def probe(environ: Mapping[str, str]) -> List[Path]:
        return [Path(template.format(version=v)) for v in versions]
    return probe


def default_probes(platform: Optional[str] = None) -> List[Probe]:
    platform = platform or sys.platform
    if platform == "darwin":
        template = MACOS_HFS
    elif platform.startswith("win"):
        template = WINDOWS_HFS
    else:
        template = LINUX_HFS
    return [install_path_probe(template)]


def find_houdini(environ: Optional[Mapping[str, str]] = None,
                 probes: Optional[Sequence[Probe]] = None) -> Path:
    """Return the Houdini installation root.

    An explicit HFS is trusted as is; probed paths must exist.
    """
    environ = os.environ if environ is None else environ
    logger.info("[HOUDINI] Looking for a Houdini installation.")

    explicit = env_probe(environ)
    if explicit:
        logger.info(f"[HOUDINI] Using HFS from the environment: {explicit[0]}")
        return explicit[0]

    tried = []
    for probe in default_probes() if probes is None else probes:
        for candidate in probe(environ):
            tried.append(candidate)
            logger.debug(f"[HOUDINI] Trying {candidate}")
            if candidate.exists():
                logger.info(f"[HOUDINI] Using Houdini installation path {candidate}")
                return candidate

    raise HoudiniNotFound(tried)


def houdini_env(hfs: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Environment for the CMake build with HFS set and ``$HFS/bin`` on PATH.

    ``$HFS/bin`` is needed in case hserver has to verify the license during a
    build.
    """
    env = dict(os.environ if environ is None else environ)
    env["HFS"] = str(hfs)
    paths = [p for p in env.get("PATH", "").split(os.pathsep) if p]
    paths.append(str(Path(hfs) / "bin"))
    env["PATH"] = os.pathsep.join(paths)
    return env
