"""CLI configuration.

Holds the effective configuration for a CLI command and builds the runner
backend from it.
"""

from typing import Optional

from pester_shim.config import ShimConfig, get_config
from pester_shim.core.runners import PowerShellPesterBackend, RunnerBackend


class CLIContext:
    """CLI execution context with resolved configuration."""

    def __init__(
        self,
        config: Optional[ShimConfig] = None,
        backend: Optional[RunnerBackend] = None,
    ):
        """Initialize CLI context.

        Args:
            config: Configuration (uses global if not provided).
            backend: Runner backend override, mainly for tests.
        """
        self._config = config or get_config()
        self._backend = backend

    @property
    def config(self) -> ShimConfig:
        return self._config

    @property
    def backend(self) -> RunnerBackend:
        """The runner backend, built from [pester] settings on first use."""
        if self._backend is None:
            self._backend = PowerShellPesterBackend.from_settings(self._config.pester)
        return self._backend


def create_context(
    config_file: Optional[str] = None,
    backend: Optional[RunnerBackend] = None,
) -> CLIContext:
    """Create a CLI context.

    Args:
        config_file: Optional TOML config path from --config.
        backend: Optional runner backend override.
    """
    config = ShimConfig.from_env(config_file) if config_file else None
    return CLIContext(config=config, backend=backend)
