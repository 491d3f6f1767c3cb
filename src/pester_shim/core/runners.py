"""
Runner backends.

A backend knows how to find an installed runner module and how to hand an
invocation to it. The dispatcher only talks to the RunnerBackend interface,
so tests can substitute fakes for either Pester generation.

The runner found for the current process is kept in a module-level handle;
it is resolved once and lives as long as the process.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

from pester_shim.core.hosts import PowerShellHost, get_unavailability_reason, resolve_host
from pester_shim.core.invocation import Invocation, ps_literal, render_script
from pester_shim.core.versions import ResolvedRunner, RunnerVersion

if TYPE_CHECKING:
    from pester_shim.config import PesterSettings


logger = logging.getLogger(__name__)


class RunnerInvocationError(RuntimeError):
    """The runner could not be started."""

    def __init__(self, message: str, command: Optional[List[str]] = None):
        super().__init__(message)
        self.command = command


# Process-wide runner handle

_active_runner: Optional[ResolvedRunner] = None


def get_active_runner() -> Optional[ResolvedRunner]:
    """Return the runner already resolved in this process, if any."""
    return _active_runner


def set_active_runner(runner: Optional[ResolvedRunner]) -> None:
    global _active_runner
    _active_runner = runner


def reset_active_runner() -> None:
    """
    Forget the process-wide runner.

    Primarily used by tests to restore a clean state.
    """
    set_active_runner(None)


# Abstract backend interface


class RunnerBackend(ABC):
    """Abstract base class for runner backends."""

    @abstractmethod
    def load(self, minimum_version: Optional[RunnerVersion] = None) -> Optional[ResolvedRunner]:
        """Find the best installed runner, optionally at or above minimum_version.

        Returns None when nothing suitable is installed.
        """
        pass

    @abstractmethod
    def invoke(self, runner: ResolvedRunner, invocation: Invocation) -> int:
        """Run the invocation and return the runner's exit code."""
        pass

    @abstractmethod
    def list_available(self) -> List[ResolvedRunner]:
        """List every installed version, newest first."""
        pass

    @property
    @abstractmethod
    def install_hint(self) -> str:
        """Command a user runs to install the runner."""
        pass


_SEPARATOR = "|"


def _list_modules_script(module_name: str, minimum_version: Optional[RunnerVersion]) -> str:
    """Script printing "version|path" for each installed module, newest first."""
    lines = [
        f"$modules = Get-Module -ListAvailable -Name {ps_literal(module_name)}",
    ]
    if minimum_version is not None:
        lines.append(
            f"$modules = $modules | Where-Object {{ $_.Version -ge [version]{ps_literal(str(minimum_version))} }}"
        )
    lines.append(
        "$modules | Sort-Object -Property Version -Descending | "
        f"ForEach-Object {{ \"$($_.Version){_SEPARATOR}$($_.Path)\" }}"
    )
    return "\n".join(lines)


class PowerShellPesterBackend(RunnerBackend):
    """Runs Pester through a PowerShell host subprocess."""

    def __init__(
        self,
        module_name: str = "Pester",
        powershell: Optional[str] = None,
        tool_path: Optional[str] = None,
        probe_timeout: int = 15,
        no_profile: bool = True,
    ):
        self.module_name = module_name
        self.powershell = powershell
        self.tool_path = tool_path
        self.probe_timeout = probe_timeout
        self.no_profile = no_profile

    @classmethod
    def from_settings(cls, settings: "PesterSettings") -> "PowerShellPesterBackend":
        """Create a backend from the [pester] configuration section."""
        return cls(
            module_name=settings.module_name,
            powershell=settings.powershell,
            tool_path=settings.tool_path,
            probe_timeout=settings.probe_timeout,
            no_profile=settings.no_profile,
        )

    def resolve_host(self) -> Optional[PowerShellHost]:
        return resolve_host(self.powershell, search_path=self.tool_path)

    def _query_modules(self, minimum_version: Optional[RunnerVersion]) -> List[ResolvedRunner]:
        host = self.resolve_host()
        if host is None:
            logger.debug(
                "Cannot look up %s: %s",
                self.module_name,
                get_unavailability_reason(self.powershell, search_path=self.tool_path),
            )
            return []

        cmd = host.command(
            _list_modules_script(self.module_name, minimum_version),
            no_profile=self.no_profile,
        )
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.probe_timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug(
                "Module lookup for %s timed out after %ss", self.module_name, self.probe_timeout
            )
            return []
        except OSError as exc:
            logger.debug("Module lookup for %s failed via %s: %s", self.module_name, host.executable, exc)
            return []

        if result.returncode != 0:
            logger.debug(
                "Module lookup for %s exited with %s: %s",
                self.module_name,
                result.returncode,
                result.stderr.strip(),
            )
            return []

        return self.parse_module_listing(result.stdout)

    def parse_module_listing(self, stdout: str) -> List[ResolvedRunner]:
        """Parse "version|path" lines printed by the lookup script."""
        runners: List[ResolvedRunner] = []
        for line in stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            raw_version, _, path = line.partition(_SEPARATOR)
            try:
                version = RunnerVersion.parse(raw_version)
            except ValueError:
                logger.debug("Ignoring unparsable module listing line: %r", line)
                continue
            runners.append(
                ResolvedRunner(
                    module_name=self.module_name,
                    version=version,
                    path=path.strip() or None,
                )
            )
        runners.sort(key=lambda runner: runner.version, reverse=True)
        return runners

    def load(self, minimum_version: Optional[RunnerVersion] = None) -> Optional[ResolvedRunner]:
        runners = self._query_modules(minimum_version)
        if not runners:
            return None
        runner = runners[0]
        logger.debug("Loaded %s %s from %s", runner.module_name, runner.version, runner.path)
        return runner

    def list_available(self) -> List[ResolvedRunner]:
        return self._query_modules(None)

    def invoke(self, runner: ResolvedRunner, invocation: Invocation) -> int:
        host = self.resolve_host()
        if host is None:
            raise RunnerInvocationError(
                get_unavailability_reason(self.powershell, search_path=self.tool_path)
                or "No PowerShell host found"
            )

        cmd = host.command(render_script(runner, invocation), no_profile=self.no_profile)
        logger.info("Invoking %s %s via %s", runner.module_name, runner.version, host.executable)
        try:
            # Output streams straight to the caller's terminal
            result = subprocess.run(cmd)
        except OSError as exc:
            raise RunnerInvocationError(
                f"Failed to start {host.executable}: {exc}", command=cmd
            ) from exc
        return result.returncode

    @property
    def install_hint(self) -> str:
        return f"Install-Module {self.module_name} -Scope CurrentUser -Force"


__all__ = [
    "PowerShellPesterBackend",
    "RunnerBackend",
    "RunnerInvocationError",
    "get_active_runner",
    "reset_active_runner",
    "set_active_runner",
]
