"""
cargo-hdk CLI

cargo-hdk is a cargo subcommand to compile C++ code defining an HDK interface
for a Houdini plugin. It runs 'cargo build' with the provided arguments
followed by a CMake build of the HDK plugin.

Usage: cargo hdk [--hdk-only] [--clean] [--cmake ARGS] [--hdk-path PATH] [BUILD ARGS...]

This script will:
- locate the crate root (through cargo metadata when cargo is available)
- run 'cargo build' (or 'cargo clean') with the remaining arguments
- write the OUT_DIR of the crate's build script, and of any requested
  dependencies, to <hdk>/build_<profile>/<prefix><crate>.txt
- configure and build the plugin with CMake in <hdk>/build_<profile>
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from . import __version__
from .build_dir import prepare_build_dir
from .cache import persist_out_dirs
from .cargo import cargo_executable, run_managed_build
from .cmake import configure_and_build
from .config import HdkConfig, load_config
from .errors import HdkError
from .houdini import find_houdini, houdini_env
from .log import setup_logging
from .profile import resolve_build_profile
from .project import locate_project
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

ABOUT = (
    "cargo-hdk is a cargo subcommand to compile C++ code defining an HDK interface for a "
    "Houdini plugin. This subcommand runs 'cargo build' with the provided arguments followed "
    "by a CMake build of the HDK plugin. Arguments not listed below are passed to cargo."
)


CMAKE_OPTIONS = ("-c", "--cmake")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cargo-hdk", description=ABOUT, allow_abbrev=False)
    parser.add_argument("-k", "--hdk-only", action="store_true",
                        help="skip the 'cargo build' step and build only the HDK plugin")
    parser.add_argument("--clean", action="store_true",
                        help="remove artifacts created by the build process including the HDK plugin; "
                             "combine with --hdk-only to clean the HDK build only")
    parser.add_argument("-c", "--cmake", default=None,
                        help="arguments for the CMake configuration, e.g. --cmake '-G Ninja' "
                             "(the legacy bracketed form '[-G Ninja]' is also accepted)")
    parser.add_argument("--hdk-path", default=None,
                        help="path to the HDK plugin relative to the root of the crate (default: ./hdk)")
    parser.add_argument("--out-dir-prefix", default=None,
                        help="prefix of the files recording build script OUT_DIRs (default: out_dir_)")
    parser.add_argument("-d", "--dependency", dest="dependencies", action="append", default=None, metavar="NAME",
                        help="also record the OUT_DIR of this dependency (repeatable)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more output (repeatable)")
    parser.add_argument("-q", "--quiet", action="store_true", help="only report errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def attach_cmake_value(argv: Sequence[str]) -> List[str]:
    """Join `--cmake VALUE` into `--cmake=VALUE`.

    argparse refuses a separate option value that starts with `-`, so a single
    define such as `--cmake -DFOO=1` would otherwise be rejected.
    """
    args = []
    rest = iter(argv)
    for arg in rest:
        if arg == "--":
            args.append(arg)
            args.extend(rest)
            break
        if arg in CMAKE_OPTIONS:
            value = next(rest, None)
            args.append(arg if value is None else f"--cmake={value}")
        else:
            args.append(arg)
    return args


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse cargo-hdk options; everything unrecognized becomes a build argument."""
    if argv is None:
        argv = sys.argv[1:]
    options, build_args = build_parser().parse_known_args(attach_cmake_value(argv))
    options.build_args = build_args
    return options


def run(options: argparse.Namespace, cwd: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None) -> Path:
    """Run the whole pipeline and return the HDK build directory"""
    environ = dict(os.environ if environ is None else environ)
    cwd = Path(cwd or Path.cwd())

    cargo = cargo_executable(environ)
    project = locate_project(cwd, cargo)
    config: HdkConfig = load_config(project.manifest_path).merged(
        hdk_path=options.hdk_path,
        cmake=options.cmake,
        out_dir_prefix=options.out_dir_prefix,
        dependencies=options.dependencies,
    )

    logger.debug("[BUILD] Determining build type.")
    profile = resolve_build_profile(options.build_args)
    logger.info(f"[BUILD] Build profile: {profile.value}")

    if options.clean:
        if not options.hdk_only:
            run_managed_build(project, options.build_args, clean=True, cargo=cargo, cwd=cwd)
        return prepare_build_dir(project.root, config.hdk_path, profile, clean=True)

    records = []
    if not options.hdk_only:
        records = run_managed_build(project, options.build_args, dependencies=config.dependencies,
                                    cargo=cargo, cwd=cwd)

    build_dir = prepare_build_dir(project.root, config.hdk_path, profile, create_parents=config.create_parents)
    persist_out_dirs(build_dir, config.out_dir_prefix, records)

    hfs = find_houdini(environ)
    env = houdini_env(hfs, environ)

    logger.debug("[CMAKE] Parsing cmake args.")
    tokens: List[str] = tokenize(config.cmake)
    configure_and_build(build_dir, tokens, profile, env=env)

    logger.info(f"[OK] HDK plugin built in {build_dir}")
    return build_dir


def main(argv: Optional[Sequence[str]] = None):
    """Entry point of the cargo-hdk command"""
    options = parse_args(argv)
    setup_logging(-1 if options.quiet else options.verbose)

    try:
        run(options)
    except KeyboardInterrupt:
        logger.error("\nBuild interrupted by user")
        sys.exit(1)
    except HdkError as e:
        logger.error(f"[ERROR] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
