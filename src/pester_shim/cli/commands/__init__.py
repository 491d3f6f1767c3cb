"""CLI command modules."""

from pester_shim.cli.commands.pester import detect_cmd, plan_cmd, run_cmd

__all__ = [
    "detect_cmd",
    "plan_cmd",
    "run_cmd",
]
