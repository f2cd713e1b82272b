"""Build profile detection"""

from enum import Enum
from typing import Sequence

RELEASE_FLAG = "--release"


class BuildProfile(Enum):
    """CMake build type matching the cargo profile"""
    DEBUG = "Debug"
    RELEASE = "Release"

    @property
    def dir_name(self) -> str:
        return f"build_{self.value.lower()}"

    @property
    def cmake_flag(self) -> str:
        return f"-DCMAKE_BUILD_TYPE={self.value}"


def resolve_build_profile(build_args: Sequence[str]) -> BuildProfile:
    # Only an exact `--release` element counts; `--release-mode` does not.
    if RELEASE_FLAG in build_args:
        return BuildProfile.RELEASE
    return BuildProfile.DEBUG
