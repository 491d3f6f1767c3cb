"""
Runner version handling.

Pester grew its invocation surface release by release without any way to
ask it what it supports, so every feature is gated on the installed
version. The gates live here as capability flags derived once from a
RunnerVersion; callers branch on the flags instead of comparing versions
inline.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

_VERSION_PATTERN = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.\d+)?(?:[-+].*)?\s*$")


@dataclass(frozen=True, order=True)
class RunnerVersion:
    """
    Three-part ordered version number of an installed runner module.
    """
    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, value: str) -> "RunnerVersion":
        """Parse a version string such as "5.2.0", "4.10.1.0" or "5.0.0-beta1".

        A fourth (revision) part and any prerelease/build suffix are dropped.

        Raises:
            ValueError: If the string does not start with a numeric version.
        """
        match = _VERSION_PATTERN.match(value or "")
        if not match:
            raise ValueError(f"Invalid runner version: {value!r}")
        major, minor, patch = match.groups()
        return cls(int(major), int(minor or 0), int(patch or 0))

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


# Release that introduced each feature
VSCODE_MARKER_SINCE = RunnerVersion(3, 4, 0)
SHOW_OPTION_SINCE = RunnerVersion(3, 4, 5)
LINE_FILTER_SINCE = RunnerVersion(4, 6, 0)
CONFIGURATION_API_SINCE = RunnerVersion(5, 0, 0)


@dataclass(frozen=True)
class RunnerCapabilities:
    """
    Feature flags of an installed runner.

    Attributes:
        vscode_marker: PesterOption accepts IncludeVSCodeMarker
        show_option: Invoke-Pester accepts -Show
        line_filter: tests can be selected by script path and line number
        configuration_api: Invoke-Pester takes a single -Configuration object
            and no longer accepts the legacy per-flag parameters
    """
    vscode_marker: bool = False
    show_option: bool = False
    line_filter: bool = False
    configuration_api: bool = False

    @classmethod
    def for_version(cls, version: RunnerVersion) -> "RunnerCapabilities":
        return cls(
            vscode_marker=version >= VSCODE_MARKER_SINCE,
            show_option=version >= SHOW_OPTION_SINCE,
            line_filter=version >= LINE_FILTER_SINCE,
            configuration_api=version >= CONFIGURATION_API_SINCE,
        )


@dataclass(frozen=True)
class ResolvedRunner:
    """
    A runner module that was found for the current process.

    Attributes:
        module_name: Module name as known to the host (e.g., "Pester")
        version: Installed module version
        path: Module manifest path, when the host reported one
    """
    module_name: str
    version: RunnerVersion
    path: Optional[str] = None

    @property
    def capabilities(self) -> RunnerCapabilities:
        return RunnerCapabilities.for_version(self.version)

    @property
    def is_new_generation(self) -> bool:
        return self.capabilities.configuration_api

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_name": self.module_name,
            "version": str(self.version),
            "path": self.path,
        }
