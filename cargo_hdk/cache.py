#!/usr/bin/env python3
"""OUT_DIR marker files shared with the CMake build."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .cargo import DependencyOutputRecord
from .errors import CacheDirCreateFailed, CacheWriteFailed

logger = logging.getLogger(__name__)


def out_dir_file(build_dir: Path, prefix: str, name: str) -> Path:
    """Path of the file holding the OUT_DIR of crate ``name``"""
    return Path(build_dir) / f"{prefix}{name}.txt"


def persist_out_dirs(build_dir: Path, prefix: str, records: Iterable[DependencyOutputRecord]) -> List[Path]:
    """Write every record to its marker file.

    Files are rewritten in record order, so when a crate shows up more than
    once the last OUT_DIR is the one left on disk.
    """
    written = []
    for record in records:
        path = out_dir_file(build_dir, prefix, record.name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheDirCreateFailed(path.parent, e) from e
        try:
            path.write_text(record.out_dir, encoding="utf-8")
        except OSError as e:
            raise CacheWriteFailed(path, e) from e
        logger.debug(f"[CACHE] {path} -> {record.out_dir}")
        if path not in written:
            written.append(path)
    return written


def read_out_dir(build_dir: Path, prefix: str, name: str) -> Optional[str]:
    """Return the recorded OUT_DIR of ``name`` or None if there is none"""
    path = out_dir_file(build_dir, prefix, name)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
