"""Pester commands.

- run: dispatch an editor request to the installed Pester
- plan: show what run would do, as JSON
- detect: list the PowerShell host and installed Pester versions
"""

import re
import sys
import time
from functools import wraps
from typing import Any, Callable, Optional

import click

from pester_shim.cli.logging import cli_command, get_cli_logger
from pester_shim.cli.output import emit_error, emit_success
from pester_shim.cli.registry import get_context
from pester_shim.cli.resilience import handle_keyboard_interrupt
from pester_shim.core.dispatcher import Dispatcher
from pester_shim.core.invocation import ContractViolationError
from pester_shim.core.request import InvocationRequest, OutputVerbosity
from pester_shim.core.runners import PowerShellPesterBackend, RunnerInvocationError

logger = get_cli_logger()

_LINE_NUMBER_PATTERN = re.compile(r"^\d*$")

OUTPUT_CHOICES = [member.value for member in OutputVerbosity]

CONTRACT_REMEDIATION = (
    "Pester 5 and later only support line-based selection: "
    "pass --line-number or --all"
)


def _validate_line_number(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[str]:
    if value is None:
        return None
    if not _LINE_NUMBER_PATTERN.match(value):
        raise click.BadParameter(f"'{value}' is not a line number")
    return value or None


def request_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the editor request options shared by run and plan."""
    options = [
        click.option(
            "--script-path",
            required=True,
            help="Path to the test script.",
        ),
        click.option(
            "--test-name",
            default=None,
            help="Name of the test block to run.",
        ),
        click.option(
            "--line-number",
            default=None,
            callback=_validate_line_number,
            help="Line of the test block to run.",
        ),
        click.option(
            "--all",
            "run_all",
            is_flag=True,
            help="Run every test in the script.",
        ),
        click.option(
            "--minimum-version5",
            is_flag=True,
            help="Prefer Pester 5.0.0 or later.",
        ),
        click.option(
            "--output",
            required=True,
            type=click.Choice(OUTPUT_CHOICES, case_sensitive=False),
            help="Output verbosity.",
        ),
        click.option(
            "--output-path",
            default=None,
            help="Export test results to this file (Pester 5 and later).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(
    script_path: str,
    test_name: Optional[str],
    line_number: Optional[str],
    run_all: bool,
    minimum_version5: bool,
    output: str,
    output_path: Optional[str],
) -> InvocationRequest:
    if not script_path.strip():
        raise click.BadParameter("must not be empty", param_hint="'--script-path'")
    return InvocationRequest(
        script_path=script_path,
        test_name=test_name or None,
        line_number=line_number,
        run_all=run_all,
        output=OutputVerbosity.parse(output),
        output_path=output_path or None,
        minimum_version5=minimum_version5,
    )


def _contract_violation(exc: ContractViolationError, request: InvocationRequest) -> None:
    emit_error(
        str(exc),
        code="CONTRACT_VIOLATION",
        error_type="internal",
        remediation=CONTRACT_REMEDIATION,
        details={
            "script_path": request.script_path,
            "mode": exc.mode.value if exc.mode else None,
        },
    )


def _with_request(func: Callable[..., Any]) -> Callable[..., Any]:
    """Collapse the request options into a single InvocationRequest argument."""

    @wraps(func)
    def wrapper(
        ctx: click.Context,
        script_path: str,
        test_name: Optional[str],
        line_number: Optional[str],
        run_all: bool,
        minimum_version5: bool,
        output: str,
        output_path: Optional[str],
    ) -> Any:
        request = _build_request(
            script_path,
            test_name,
            line_number,
            run_all,
            minimum_version5,
            output,
            output_path,
        )
        return func(ctx, request)

    return wrapper


@click.command("run")
@request_options
@click.pass_context
@cli_command("run")
@handle_keyboard_interrupt
@_with_request
def run_cmd(ctx: click.Context, request: InvocationRequest) -> None:
    """Run the requested tests with the installed Pester.

    Exits with Pester's exit code, or 0 when Pester is not installed.
    """
    dispatcher = Dispatcher(get_context(ctx).backend)
    try:
        result = dispatcher.dispatch(request)
    except ContractViolationError as exc:
        _contract_violation(exc, request)
    except RunnerInvocationError as exc:
        emit_error(
            str(exc),
            code="INVOCATION_FAILED",
            error_type="unavailable",
            remediation="Check that PowerShell is installed or set PESTER_SHIM_POWERSHELL",
            details={"command": exc.command[:-1] if exc.command else None},
        )

    logger.debug(
        "Dispatch finished",
        mode=result.mode.value if result.mode else None,
        invoked=result.invoked,
        exit_code=result.exit_code,
    )
    sys.exit(result.exit_code)


@click.command("plan")
@request_options
@click.pass_context
@cli_command("plan")
@handle_keyboard_interrupt
@_with_request
def plan_cmd(ctx: click.Context, request: InvocationRequest) -> None:
    """Show how the request would be passed to Pester, without running it."""
    start_time = time.perf_counter()
    dispatcher = Dispatcher(get_context(ctx).backend)
    try:
        result = dispatcher.plan(request)
    except ContractViolationError as exc:
        _contract_violation(exc, request)

    duration_ms = (time.perf_counter() - start_time) * 1000
    payload = result.to_dict()
    payload["runner_found"] = result.runner_found
    emit_success(
        payload,
        warnings=result.warnings,
        telemetry={"duration_ms": round(duration_ms, 2)},
    )


@click.command("detect")
@click.pass_context
@cli_command("detect")
@handle_keyboard_interrupt
def detect_cmd(ctx: click.Context) -> None:
    """List the PowerShell host and every installed Pester version."""
    cli_ctx = get_context(ctx)
    backend = cli_ctx.backend

    host = None
    if isinstance(backend, PowerShellPesterBackend):
        resolved = backend.resolve_host()
        host = resolved.executable if resolved else None

    runners = backend.list_available()
    warnings = []
    if not runners:
        warnings.append(f"No Pester module found. Install it with: {backend.install_hint}")

    emit_success(
        {
            "host": host,
            "module_name": cli_ctx.config.pester.module_name,
            "installed": [runner.to_dict() for runner in runners],
            "latest": runners[0].to_dict() if runners else None,
        },
        warnings=warnings,
    )
