"""
Error types raised by cargo-hdk

Every fatal condition in the build pipeline is an ``HdkError``. The CLI
catches them at the top level, reports the message and exits with status 1.
"""

from pathlib import Path
from typing import Optional, Sequence


class HdkError(Exception):
    """Base class for all cargo-hdk errors"""


class ConfigError(HdkError):
    """Invalid ``[package.metadata.hdk]`` table"""


class ManifestNotFound(HdkError):
    def __init__(self, start_dir: Path, detail: Optional[str] = None):
        self.start_dir = start_dir
        message = f"Couldn't find `Cargo.toml` in {start_dir} or any parent directory."
        if detail:
            message += f" {detail}"
        super().__init__(message)


class HoudiniNotFound(HdkError):
    def __init__(self, candidates: Sequence[Path] = ()):
        self.candidates = list(candidates)
        super().__init__(
            "Couldn't find HFS. Please source 'houdini_setup' from houdini's installation "
            "directory or set the 'HFS' environment variable to the Houdini installation path."
        )


class CommandFailed(HdkError):
    """An external command exited with a non-zero status or could not be started"""

    what = "Command failed"

    def __init__(self, cmd: Sequence[str], returncode: Optional[int] = None, detail: Optional[str] = None):
        self.cmd = list(cmd)
        self.returncode = returncode
        message = f"{self.what}: {' '.join(self.cmd)}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class ManagedBuildFailed(CommandFailed):
    what = "Cargo build failed"


class MetadataQueryFailed(CommandFailed):
    what = "Cargo metadata query failed"


class ManagedCleanFailed(CommandFailed):
    what = "Cargo clean failed"


class ConfigureFailed(CommandFailed):
    what = "Failed to configure CMake"


class NativeBuildFailed(CommandFailed):
    what = "Failed to build HDK plugin"


class EventStreamError(HdkError):
    """A line of cargo's JSON message stream could not be understood"""

    def __init__(self, line: str, reason: str):
        self.line = line
        super().__init__(f"Malformed cargo message ({reason}): {line!r}")


class FilesystemError(HdkError):
    what = "Filesystem operation failed"

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"{self.what}: {path}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class BuildDirCreateFailed(FilesystemError):
    what = "Failed to create build directory"


class CleanFailed(FilesystemError):
    what = "Failed to remove HDK build artifacts"


class CacheDirCreateFailed(FilesystemError):
    what = "Failed to create directory for OUT_DIR file"


class CacheWriteFailed(FilesystemError):
    what = "Failed to write OUT_DIR file"


class DirectoryChangeFailed(FilesystemError):
    what = "Failed to set current directory"


class DirectoryRestoreFailed(FilesystemError):
    what = "Failed to reset current directory"
