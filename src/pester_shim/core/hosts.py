"""
PowerShell host discovery.

Locates the executable that runs Pester: PowerShell 7+ (pwsh) first, then
Windows PowerShell (powershell).

Environment Variables:
    PESTER_SHIM_POWERSHELL: Binary name or path to use instead of searching
        the default candidates.

    PESTER_SHIM_TOOL_PATH: PATH-style list of directories searched instead
        of the system PATH.

Example:
    >>> from pester_shim.core.hosts import resolve_host
    >>> resolve_host()
    PowerShellHost(binary='pwsh', executable='/usr/bin/pwsh')
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

_BINARY_ENV = "PESTER_SHIM_POWERSHELL"
_TOOL_PATH_ENV = "PESTER_SHIM_TOOL_PATH"

DEFAULT_CANDIDATES: tuple[str, ...] = ("pwsh", "powershell")


def _resolve_executable(binary: str, search_path: Optional[str] = None) -> Optional[str]:
    """
    Resolve a binary name to its full path.

    Checks search_path (or PESTER_SHIM_TOOL_PATH) first, then falls back
    to the system PATH.
    """
    configured_path = search_path or os.environ.get(_TOOL_PATH_ENV)
    if configured_path:
        return shutil.which(binary, path=configured_path)
    return shutil.which(binary)


@dataclass(frozen=True)
class PowerShellHost:
    """
    A resolved PowerShell executable.

    Attributes:
        binary: Name or path it was looked up by
        executable: Full path to the executable
    """

    binary: str
    executable: str

    def command(self, script: str, *, no_profile: bool = True) -> List[str]:
        """Build the argv that runs a script in this host."""
        cmd = [self.executable]
        if no_profile:
            cmd.append("-NoProfile")
        cmd.extend(["-NonInteractive", "-Command", script])
        return cmd


def host_candidates(preferred: Optional[str] = None) -> List[str]:
    """
    Return binaries to try, in order.

    PESTER_SHIM_POWERSHELL wins over the configured binary, which wins over
    the defaults.
    """
    override = os.environ.get(_BINARY_ENV)
    if override:
        return [override]
    if preferred:
        return [preferred]
    return list(DEFAULT_CANDIDATES)


def resolve_host(
    preferred: Optional[str] = None,
    *,
    search_path: Optional[str] = None,
    candidates: Optional[Sequence[str]] = None,
) -> Optional[PowerShellHost]:
    """
    Find the PowerShell host executable.

    Args:
        preferred: Binary name or path from configuration
        search_path: PATH-style directory list to search instead of PATH
        candidates: Explicit binaries to try (overrides env and preferred)

    Returns:
        PowerShellHost if one is found, None otherwise
    """
    for binary in candidates or host_candidates(preferred):
        executable = _resolve_executable(binary, search_path)
        if executable:
            logger.debug("Resolved PowerShell host '%s' -> %s", binary, executable)
            return PowerShellHost(binary=binary, executable=executable)
        logger.debug("PowerShell host '%s' not found in PATH", binary)
    return None


def get_unavailability_reason(
    preferred: Optional[str] = None,
    *,
    search_path: Optional[str] = None,
) -> Optional[str]:
    """
    Return a human-readable reason why no host is available, or None.
    """
    if resolve_host(preferred, search_path=search_path) is not None:
        return None
    tried = ", ".join(f"'{name}'" for name in host_candidates(preferred))
    return f"No PowerShell host found in PATH (tried {tried})"


__all__ = [
    "DEFAULT_CANDIDATES",
    "PowerShellHost",
    "get_unavailability_reason",
    "host_candidates",
    "resolve_host",
]
