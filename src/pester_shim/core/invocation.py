"""
Invocation shapes for both Pester generations.

Pester < 5 takes a script path plus individually gated parameters
(-PesterOption, -Show). Pester >= 5 dropped those parameters in favour of a
single -Configuration object, so the two generations are built separately
rather than by translating flags.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pester_shim.core.request import (
    InvocationRequest,
    OutputVerbosity,
    SelectionMode,
    ShowLevel,
    show_level_for,
)
from pester_shim.core.versions import ResolvedRunner

logger = logging.getLogger(__name__)

# PowerShell closes a single-quoted string on any of these
_SINGLE_QUOTES = re.compile("(['\u2018\u2019\u201a\u201b])")


class ContractViolationError(RuntimeError):
    """A selection mode reached a runner generation that cannot serve it.

    Editors are expected to always send a line number to Pester 5 and later,
    so name-based or unfiltered selection against those versions means the
    caller broke its contract.
    """

    def __init__(self, message: str, mode: Optional[SelectionMode] = None):
        super().__init__(message)
        self.mode = mode


@dataclass
class LegacyInvocation:
    """
    Invoke-Pester call for Pester < 5.0.0.
    """
    script_path: str
    pester_option: Dict[str, Any] = field(default_factory=dict)
    show: Optional[ShowLevel] = None

    @property
    def parameters(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"Script": self.script_path}
        if self.pester_option:
            params["PesterOption"] = self.pester_option
        if self.show is not None:
            params["Show"] = self.show.value
        return params

    def to_dict(self) -> Dict[str, Any]:
        return {"generation": "legacy", "parameters": self.parameters}


@dataclass
class ConfigurationInvocation:
    """
    Invoke-Pester -Configuration call for Pester >= 5.0.0.
    """
    configuration: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def parameters(self) -> Dict[str, Any]:
        return {"Configuration": self.configuration}

    def to_dict(self) -> Dict[str, Any]:
        return {"generation": "configuration", "parameters": self.parameters}


Invocation = Union[LegacyInvocation, ConfigurationInvocation]


def build_invocation(
    mode: SelectionMode,
    runner: ResolvedRunner,
    request: InvocationRequest,
) -> Invocation:
    """
    Build the runner call for a selection mode.

    Raises:
        ContractViolationError: For BY_NAME or UNFILTERED against Pester >= 5.
    """
    if runner.is_new_generation:
        return _build_configuration(mode, runner, request)
    return _build_legacy(mode, runner, request)


def _build_legacy(
    mode: SelectionMode,
    runner: ResolvedRunner,
    request: InvocationRequest,
) -> LegacyInvocation:
    capabilities = runner.capabilities
    invocation = LegacyInvocation(script_path=request.script_path)

    if capabilities.vscode_marker:
        invocation.pester_option["IncludeVSCodeMarker"] = True

    if mode == SelectionMode.BY_LINE:
        invocation.pester_option["ScriptBlockFilter"] = [
            {
                "IncludeVSCodeMarker": True,
                "Line": request.line,
                "Path": request.script_path,
            }
        ]

    if capabilities.show_option:
        invocation.show = show_level_for(request.output)

    logger.debug(
        "Built legacy invocation for Pester %s (mode=%s, show=%s)",
        runner.version,
        mode.value,
        invocation.show.value if invocation.show else None,
    )
    return invocation


def _build_configuration(
    mode: SelectionMode,
    runner: ResolvedRunner,
    request: InvocationRequest,
) -> ConfigurationInvocation:
    if mode in (SelectionMode.BY_NAME, SelectionMode.UNFILTERED):
        raise ContractViolationError(
            f"Pester {runner.version} must be run by line number; "
            f"selection mode '{mode.value}' is not supported for Pester 5.0.0 and later",
            mode=mode,
        )

    configuration: Dict[str, Dict[str, Any]] = {"Run": {"Path": request.script_path}}

    if mode == SelectionMode.BY_LINE:
        configuration["Filter"] = {"Line": f"{request.script_path}:{request.line}"}

    if request.output != OutputVerbosity.FROM_PREFERENCE:
        configuration["Output"] = {"Verbosity": request.output.value}

    if request.output_path:
        configuration["TestResult"] = {
            "Enabled": True,
            "OutputPath": request.output_path,
        }

    logger.debug(
        "Built configuration invocation for Pester %s (mode=%s, sections=%s)",
        runner.version,
        mode.value,
        sorted(configuration),
    )
    return ConfigurationInvocation(configuration=configuration)


# PowerShell rendering


def ps_literal(value: Any) -> str:
    """Render a Python value as a PowerShell literal.

    Strings are single-quoted, with every quote character PowerShell
    accepts (ASCII and the typographic ones) doubled, so nothing in them is
    expanded by the host.
    """
    if value is None:
        return "$null"
    if isinstance(value, bool):
        return "$true" if value else "$false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        entries = "; ".join(
            f"{key} = {ps_literal(item)}" for key, item in value.items()
        )
        return "@{" + entries + "}"
    if isinstance(value, Sequence) and not isinstance(value, str):
        return "@(" + ", ".join(ps_literal(item) for item in value) + ")"
    text = _SINGLE_QUOTES.sub(r"\1\1", str(value))
    return f"'{text}'"


def render_invocation(invocation: Invocation, command: str = "Invoke-Pester") -> str:
    """Render an invocation as a single PowerShell command line."""
    parts: List[str] = [command]
    for name, value in invocation.parameters.items():
        parts.append(f"-{name} {ps_literal(value)}")
    return " ".join(parts)


def render_script(runner: ResolvedRunner, invocation: Invocation) -> str:
    """
    Render the full script run by the host: import exactly the resolved
    module, then call Invoke-Pester.
    """
    if runner.path:
        import_line = f"Import-Module -Name {ps_literal(runner.path)} -Force"
    else:
        import_line = (
            f"Import-Module -Name {ps_literal(runner.module_name)} "
            f"-RequiredVersion {ps_literal(str(runner.version))} -Force"
        )
    lines = [
        "$ErrorActionPreference = 'Stop'",
        import_line,
        render_invocation(invocation),
    ]
    return "\n".join(lines)
