"""pester-shim CLI entry point."""

from typing import Optional

import click

from pester_shim.cli.config import create_context
from pester_shim.cli.registry import get_module_context, register_all_commands
from pester_shim.core.logging_config import configure_logging


@click.group()
@click.option(
    "--config",
    "config_file",
    envvar="PESTER_SHIM_CONFIG_FILE",
    type=click.Path(exists=False, dir_okay=False),
    help="Path to a pester-shim.toml config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.option(
    "--log-format",
    type=click.Choice(["human", "structured"]),
    default=None,
    help="Log line format on stderr.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[str],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """Run Pester tests from an editor, whatever Pester version is installed."""
    ctx.ensure_object(dict)
    cli_context = get_module_context() or create_context(config_file)
    ctx.obj["cli_context"] = cli_context

    config = cli_context.config
    if log_format is None:
        log_format = "structured" if config.structured_logging else "human"
    configure_logging(level=log_level or config.log_level, format=log_format)


register_all_commands(cli)


if __name__ == "__main__":
    cli()
