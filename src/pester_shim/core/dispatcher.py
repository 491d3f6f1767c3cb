"""
Dispatching editor requests to the installed Pester.

The dispatcher resolves the runner, picks a selection mode and issues
exactly one invocation, or stops with a warning when no runner can be
loaded at all.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pester_shim.core.invocation import Invocation, build_invocation, render_script
from pester_shim.core.request import InvocationRequest, SelectionMode, select_mode
from pester_shim.core.runners import RunnerBackend, get_active_runner, set_active_runner
from pester_shim.core.versions import CONFIGURATION_API_SINCE, LINE_FILTER_SINCE, ResolvedRunner

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """
    Outcome of a single dispatch.
    """
    request: InvocationRequest
    runner: Optional[ResolvedRunner] = None
    mode: Optional[SelectionMode] = None
    invocation: Optional[Invocation] = None
    warnings: List[str] = field(default_factory=list)
    invoked: bool = False
    exit_code: int = 0

    @property
    def runner_found(self) -> bool:
        return self.runner is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "script_path": self.request.script_path,
            "runner": self.runner.to_dict() if self.runner else None,
            "mode": self.mode.value if self.mode else None,
            "invocation": self.invocation.to_dict() if self.invocation else None,
            "script": (
                render_script(self.runner, self.invocation)
                if self.runner and self.invocation
                else None
            ),
            "invoked": self.invoked,
            "exit_code": self.exit_code,
        }


class Dispatcher:
    """
    Translates an InvocationRequest into one call of the installed runner.
    """

    def __init__(self, backend: RunnerBackend):
        """
        Initialize the dispatcher.

        Args:
            backend: Runner backend used for loading and invoking
        """
        self.backend = backend

    def _warn(self, result: DispatchResult, message: str) -> None:
        result.warnings.append(message)
        logger.warning(message)

    def resolve(
        self,
        request: InvocationRequest,
        result: Optional[DispatchResult] = None,
    ) -> Optional[ResolvedRunner]:
        """
        Resolve the runner for this process.

        An already active runner is reused. Otherwise the backend loads one,
        constrained to 5.0.0 or later when the request prefers it, falling
        back to any installed version.

        Returns:
            The resolved runner, or None when nothing can be loaded (a
            warning naming the install command is emitted).
        """
        result = result if result is not None else DispatchResult(request=request)

        runner = get_active_runner()
        if runner is None:
            if request.minimum_version5:
                runner = self.backend.load(CONFIGURATION_API_SINCE)
                if runner is None:
                    logger.debug(
                        "No runner >= %s installed, loading without a minimum version",
                        CONFIGURATION_API_SINCE,
                    )
            if runner is None:
                runner = self.backend.load(None)
            if runner is not None:
                set_active_runner(runner)

        if runner is None:
            self._warn(
                result,
                "Failed to load Pester. Install it to run or debug Pester tests: "
                f"{self.backend.install_hint}",
            )
            return None

        if request.minimum_version5 and not runner.is_new_generation:
            self._warn(
                result,
                f"Pester {CONFIGURATION_API_SINCE} or later was requested but only "
                f"Pester {runner.version} is available. Running with Pester {runner.version}.",
            )
        return runner

    def _prepare(self, request: InvocationRequest) -> DispatchResult:
        result = DispatchResult(request=request)

        runner = self.resolve(request, result)
        if runner is None:
            return result
        result.runner = runner

        result.mode = select_mode(request, runner)
        if result.mode == SelectionMode.UNFILTERED and not runner.is_new_generation:
            self._warn(
                result,
                "The test name could not be evaluated statically. Running all tests "
                f"in {request.script_path} instead. To avoid this, install Pester "
                f"{LINE_FILTER_SINCE} or later, or remove expressions from the test name.",
            )

        # Raises ContractViolationError for name/unfiltered selection on Pester >= 5
        result.invocation = build_invocation(result.mode, runner, request)
        logger.debug(
            "Selected mode %s for %s with %s %s",
            result.mode.value,
            request.script_path,
            runner.module_name,
            runner.version,
        )
        return result

    def plan(self, request: InvocationRequest) -> DispatchResult:
        """Resolve and build the invocation without running it."""
        return self._prepare(request)

    def dispatch(self, request: InvocationRequest) -> DispatchResult:
        """
        Resolve, select and invoke the runner once.

        Returns:
            DispatchResult; invoked is False when no runner was loadable.

        Raises:
            ContractViolationError: Selection mode incompatible with the
                resolved runner generation. Nothing is invoked.
            RunnerInvocationError: The runner could not be started.
        """
        result = self._prepare(request)
        if result.runner is None or result.invocation is None:
            return result

        result.exit_code = self.backend.invoke(result.runner, result.invocation)
        result.invoked = True
        logger.debug("Runner exited with %s", result.exit_code)
        return result
