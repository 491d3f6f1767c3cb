"""pester-shim command-line interface.

`run` hands the request to Pester and leaves stdout to it. `plan`,
`detect` and `version` print JSON envelopes for tooling.
"""

from pester_shim.cli.config import CLIContext, create_context
from pester_shim.cli.logging import (
    CLILogContext,
    cli_command,
    get_cli_logger,
    get_request_id,
    set_request_id,
)
from pester_shim.cli.main import cli
from pester_shim.cli.output import emit, emit_error, emit_success
from pester_shim.cli.registry import get_context, set_context
from pester_shim.cli.resilience import handle_keyboard_interrupt

__all__ = [
    # Entry point
    "cli",
    # Context
    "CLIContext",
    "create_context",
    "get_context",
    "set_context",
    # Output
    "emit",
    "emit_error",
    "emit_success",
    # Logging
    "CLILogContext",
    "cli_command",
    "get_cli_logger",
    "get_request_id",
    "set_request_id",
    # Resilience
    "handle_keyboard_interrupt",
]
