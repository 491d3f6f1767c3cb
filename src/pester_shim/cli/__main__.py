"""CLI module entry point.

Enables running the CLI via: python -m pester_shim.cli
"""

from pester_shim.cli.main import cli

if __name__ == "__main__":
    cli()
