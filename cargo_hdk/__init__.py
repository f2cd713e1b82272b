"""
cargo-hdk - Build Houdini HDK plugins alongside Rust crates

This package provides the `cargo hdk` subcommand: it runs `cargo build`,
records the OUT_DIR of the crate's build scripts and then builds the C/C++
HDK plugin with CMake.
"""

__version__ = "0.3.0"

from .cargo import DependencyOutputRecord, run_managed_build
from .cache import persist_out_dirs, read_out_dir
from .cmake import configure_and_build, working_directory
from .config import HdkConfig, load_config
from .errors import HdkError
from .profile import BuildProfile, resolve_build_profile
from .project import Project, locate_project
from .tokenizer import tokenize
from .build_dir import prepare_build_dir

__all__ = [
    "BuildProfile",
    "DependencyOutputRecord",
    "HdkConfig",
    "HdkError",
    "Project",
    "configure_and_build",
    "load_config",
    "locate_project",
    "persist_out_dirs",
    "prepare_build_dir",
    "read_out_dir",
    "resolve_build_profile",
    "run_managed_build",
    "tokenize",
    "working_directory",
]
