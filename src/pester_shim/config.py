"""
Configuration for pester-shim.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (pester-shim.toml)
3. Default values (lowest priority)

Environment variables:
- PESTER_SHIM_CONFIG_FILE: Path to TOML config file
- PESTER_SHIM_MODULE_NAME: Runner module name (default: Pester)
- PESTER_SHIM_POWERSHELL: PowerShell binary name or path
- PESTER_SHIM_TOOL_PATH: PATH-style directories searched for the host
- PESTER_SHIM_PROBE_TIMEOUT: Seconds allowed for the module lookup
- PESTER_SHIM_NO_PROFILE: Start the host without the user profile (true/false)
- PESTER_SHIM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- PESTER_SHIM_STRUCTURED_LOGGING: Emit JSON log lines (true/false)
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("pester-shim.toml", ".pester-shim.toml")

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _normalize_log_level(value: str, fallback: str) -> str:
    normalized = str(value).strip().upper()
    if normalized not in _VALID_LOG_LEVELS:
        logger.warning(
            "Invalid log level '%s'. Keeping '%s'. Valid options: %s",
            value,
            fallback,
            ", ".join(sorted(_VALID_LOG_LEVELS)),
        )
        return fallback
    return normalized


@dataclass
class PesterSettings:
    """How the runner module and its host are found.

    Attributes:
        module_name: Name of the runner module
        powershell: Preferred host binary (None tries pwsh, then powershell)
        tool_path: PATH-style directory list searched for the host
        probe_timeout: Seconds allowed for the installed-module lookup
        no_profile: Start the host with -NoProfile
    """

    module_name: str = "Pester"
    powershell: Optional[str] = None
    tool_path: Optional[str] = None
    probe_timeout: int = 15
    no_profile: bool = True

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "PesterSettings":
        """Create settings from TOML dict (typically [pester] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            PesterSettings instance
        """
        powershell = data.get("powershell")
        tool_path = data.get("tool_path")
        if isinstance(tool_path, list):
            tool_path = os.pathsep.join(str(p) for p in tool_path)
        return cls(
            module_name=str(data.get("module_name", "Pester")),
            powershell=str(powershell) if powershell else None,
            tool_path=str(tool_path) if tool_path else None,
            probe_timeout=max(1, int(data.get("probe_timeout", 15))),
            no_profile=_parse_bool(data.get("no_profile", True)),
        )


@dataclass
class ShimConfig:
    """Configuration with support for env vars and TOML overrides."""

    # Runner configuration
    pester: PesterSettings = field(default_factory=PesterSettings)

    # Logging configuration
    log_level: str = "WARNING"
    structured_logging: bool = False

    config_file: Optional[Path] = None

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ShimConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("PESTER_SHIM_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config file {path}: {e}")
            return

        self.config_file = path

        if "pester" in data:
            section = data["pester"]
            if not isinstance(section, dict):
                logger.error(f"Invalid [pester] section in {path}: expected a table")
            else:
                try:
                    self.pester = PesterSettings.from_toml_dict(section)
                except (TypeError, ValueError) as e:
                    logger.error(f"Invalid [pester] section in {path}: {e}")

        if "logging" in data:
            log = data["logging"]
            if not isinstance(log, dict):
                logger.error(f"Invalid [logging] section in {path}: expected a table")
                return
            if "level" in log:
                self.log_level = _normalize_log_level(log["level"], self.log_level)
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if module_name := os.environ.get("PESTER_SHIM_MODULE_NAME"):
            self.pester.module_name = module_name

        if powershell := os.environ.get("PESTER_SHIM_POWERSHELL"):
            self.pester.powershell = powershell

        if tool_path := os.environ.get("PESTER_SHIM_TOOL_PATH"):
            self.pester.tool_path = tool_path

        if probe_timeout := os.environ.get("PESTER_SHIM_PROBE_TIMEOUT"):
            try:
                self.pester.probe_timeout = max(1, int(probe_timeout))
            except ValueError:
                logger.warning(
                    f"Invalid PESTER_SHIM_PROBE_TIMEOUT: {probe_timeout}, using default"
                )

        if no_profile := os.environ.get("PESTER_SHIM_NO_PROFILE"):
            self.pester.no_profile = _parse_bool(no_profile)

        if level := os.environ.get("PESTER_SHIM_LOG_LEVEL"):
            self.log_level = _normalize_log_level(level, self.log_level)

        if structured := os.environ.get("PESTER_SHIM_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)


# Global configuration instance
_config: Optional[ShimConfig] = None


def get_config() -> ShimConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ShimConfig.from_env()
    return _config


def set_config(config: Optional[ShimConfig]) -> None:
    """Set (or clear, with None) the global configuration instance."""
    global _config
    _config = config
