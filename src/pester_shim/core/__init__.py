"""Core dispatch logic: runner versions, selection, invocation building and backends."""

from pester_shim.core.dispatcher import DispatchResult, Dispatcher
from pester_shim.core.invocation import (
    ConfigurationInvocation,
    ContractViolationError,
    LegacyInvocation,
    build_invocation,
)
from pester_shim.core.request import (
    InvocationRequest,
    OutputVerbosity,
    SelectionMode,
    ShowLevel,
    select_mode,
    show_level_for,
)
from pester_shim.core.runners import (
    PowerShellPesterBackend,
    RunnerBackend,
    RunnerInvocationError,
)
from pester_shim.core.versions import ResolvedRunner, RunnerCapabilities, RunnerVersion

__all__ = [
    "ConfigurationInvocation",
    "ContractViolationError",
    "DispatchResult",
    "Dispatcher",
    "InvocationRequest",
    "LegacyInvocation",
    "OutputVerbosity",
    "PowerShellPesterBackend",
    "ResolvedRunner",
    "RunnerBackend",
    "RunnerCapabilities",
    "RunnerInvocationError",
    "RunnerVersion",
    "SelectionMode",
    "ShowLevel",
    "build_invocation",
    "select_mode",
    "show_level_for",
]
