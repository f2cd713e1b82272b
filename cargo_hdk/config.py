#!/usr/bin/env python3
"""
Configuration management for cargo-hdk

Defaults for the command line options can be stored in the crate manifest
under ``[package.metadata.hdk]``:

    [package.metadata.hdk]
    hdk-path = "./hdk"
    cmake = "-G Ninja"
    out-dir-prefix = "out_dir_"
    dependencies = ["hdk-sys"]
    create-parents = false  # create a missing plugin directory

Options given on the command line take precedence over the manifest.
"""

import logging
try:
    import tomllib
except ImportError:
    # For Python < 3.11
    import tomli as tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"
DEFAULT_HDK_PATH = "./hdk"
DEFAULT_CMAKE_ARGS = ""
DEFAULT_OUT_DIR_PREFIX = "out_dir_"


@dataclass
class HdkConfig:
    """Settings of the HDK plugin build"""
    hdk_path: str = DEFAULT_HDK_PATH
    cmake: str = DEFAULT_CMAKE_ARGS
    out_dir_prefix: str = DEFAULT_OUT_DIR_PREFIX
    dependencies: List[str] = field(default_factory=list)
    create_parents: bool = False

    def merged(self, hdk_path: Optional[str] = None, cmake: Optional[str] = None,
               out_dir_prefix: Optional[str] = None,
               dependencies: Optional[List[str]] = None,
               create_parents: Optional[bool] = None) -> "HdkConfig":
        """Return a copy with the given (non-None) overrides applied"""
        return HdkConfig(
            hdk_path=self.hdk_path if hdk_path is None else hdk_path,
            cmake=self.cmake if cmake is None else cmake,
            out_dir_prefix=self.out_dir_prefix if out_dir_prefix is None else out_dir_prefix,
            dependencies=list(self.dependencies if dependencies is None else dependencies),
            create_parents=self.create_parents if create_parents is None else create_parents,
        )


def read_manifest(manifest_path: Union[str, Path]) -> Dict[str, Any]:
    """Parse a Cargo.toml file"""
    manifest_path = Path(manifest_path)
    try:
        with open(manifest_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {manifest_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {manifest_path}: {e}") from e


def _expect_str(table: Dict[str, Any], key: str) -> Optional[str]:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"[package.metadata.hdk] {key} must be a string")
    return value


def parse_config(data: Dict[str, Any]) -> HdkConfig:
    """Build an HdkConfig from parsed manifest data"""
    table = data.get("package", {}).get("metadata", {}).get("hdk", {})
    if not isinstance(table, dict):
        raise ConfigError("[package.metadata.hdk] must be a table")

    known = {"hdk-path", "cmake", "out-dir-prefix", "dependencies", "create-parents"}
    for key in table:
        if key not in known:
            logger.warning(f"[WARN] Unknown key in [package.metadata.hdk]: {key}")

    dependencies = table.get("dependencies", [])
    if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
        raise ConfigError("[package.metadata.hdk] dependencies must be a list of strings")

    create_parents = table.get("create-parents")
    if create_parents is not None and not isinstance(create_parents, bool):
        raise ConfigError("[package.metadata.hdk] create-parents must be a boolean")

    return HdkConfig().merged(
        hdk_path=_expect_str(table, "hdk-path"),
        cmake=_expect_str(table, "cmake"),
        out_dir_prefix=_expect_str(table, "out-dir-prefix"),
        dependencies=dependencies,
        create_parents=create_parents,
    )


def load_config(manifest_path: Union[str, Path]) -> HdkConfig:
    """Load HDK settings from a Cargo.toml file"""
    config = parse_config(read_manifest(manifest_path))
    logger.debug(f"[CONFIG] Loaded configuration from {manifest_path}: {config}")
    return config


def read_package_name(manifest_path: Union[str, Path]) -> Optional[str]:
    """Return ``[package] name``, or None for a virtual workspace manifest"""
    package = read_manifest(manifest_path).get("package", {})
    name = package.get("name") if isinstance(package, dict) else None
    return name if isinstance(name, str) else None
