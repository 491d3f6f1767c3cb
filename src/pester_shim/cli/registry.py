"""Command registry for the pester-shim CLI."""

from typing import Optional

import click

from pester_shim.cli.config import CLIContext

# Module-level storage for CLI context (for testing)
_cli_context: Optional[CLIContext] = None


def set_context(ctx: Optional[CLIContext]) -> None:
    """Set the CLI context at module level.

    When set, it takes the place of the context the CLI group would build,
    which lets tests inject a fake runner backend.
    """
    global _cli_context
    _cli_context = ctx


def get_context(ctx: Optional[click.Context] = None) -> CLIContext:
    """Get CLI context from Click context or module-level storage.

    Raises:
        RuntimeError: If no context is available.
    """
    if ctx is not None:
        return ctx.find_root().obj["cli_context"]

    if _cli_context is not None:
        return _cli_context

    raise RuntimeError("No CLI context available. Call set_context() first.")


def get_module_context() -> Optional[CLIContext]:
    return _cli_context


def register_all_commands(cli: click.Group) -> None:
    """Register all commands with the CLI.

    Args:
        cli: The main Click group to register commands with.
    """
    from pester_shim.cli.commands import detect_cmd, plan_cmd, run_cmd
    from pester_shim.cli.logging import cli_command

    cli.add_command(run_cmd)
    cli.add_command(plan_cmd)
    cli.add_command(detect_cmd)

    @cli.command("version")
    @cli_command("version")
    def version() -> None:
        """Show version information."""
        from pester_shim import __version__
        from pester_shim.cli.output import emit_success

        emit_success({"name": "pester-shim", "version": __version__})
