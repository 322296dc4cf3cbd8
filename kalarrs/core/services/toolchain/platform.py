"""
Platform resolution: pick the install command for this OS.
"""

from __future__ import annotations

import sys

from kalarrs.core.models.dependency import DependencySpec, Platform
from kalarrs.core.services.toolchain.errors import UnsupportedPlatformError

_PLATFORM_PREFIXES: tuple[tuple[str, Platform], ...] = (
    ("darwin", Platform.MACOS),
    ("win32", Platform.WINDOWS),
    ("cygwin", Platform.WINDOWS),
    ("linux", Platform.LINUX),
)


def detect_platform(sys_platform: str | None = None) -> Platform:
    """Map ``sys.platform`` onto a known ``Platform``.

    Anything else (FreeBSD, SunOS, ...) is ``Platform.OTHER``: checks
    still run with POSIX shell conventions, only installs are refused.
    """
    value = sys_platform if sys_platform is not None else sys.platform
    for prefix, platform in _PLATFORM_PREFIXES:
        if value.startswith(prefix):
            return platform
    return Platform.OTHER


def resolve_install_command(spec: DependencySpec, platform: Platform) -> str | None:
    """The install command ``spec`` declares for ``platform``.

    A plain string applies everywhere. A mapping without an entry for
    ``platform`` fails fast instead of guessing.
    """
    command = spec.install_command
    if command is None or isinstance(command, str):
        return command
    if platform not in command:
        name = sys.platform if platform == Platform.OTHER else platform.value
        raise UnsupportedPlatformError(name, spec.name)
    return command[platform]
