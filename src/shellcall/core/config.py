"""Configuration system for shellcall.

Provides configuration loading, merging, and validation with precedence:
1. Environment variables (highest)
2. Project config (.shellcall/config.json)
3. User profile (~/.shellcall/profiles/<name>.json)
4. Defaults (lowest)

``configure`` pushes a loaded config into the process-wide runtime state
(verbose flag, echo, shell and log level). At import time that state starts
from the defaults plus environment overrides.
"""

import json
import os
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from shellcall.core.exceptions import ConfigurationError
from shellcall.core.logger import get_logger

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass
class ShellCallConfig:
    """Runtime settings for command execution.

    Attributes:
        verbose: Print ``=> Executing <command>`` before each run
        echo: Echo child stdout/stderr lines while capturing them
        shell: Shell executable used to run command lines (None = /bin/sh)
        log_level: Level for the shellcall logger
    """

    verbose: bool = False
    echo: bool = True
    shell: str | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.verbose, bool):
            raise ConfigurationError(
                f"verbose must be a boolean, got {self.verbose!r}", key="verbose"
            )
        if not isinstance(self.echo, bool):
            raise ConfigurationError(f"echo must be a boolean, got {self.echo!r}", key="echo")
        if self.shell is not None and not self.shell:
            raise ConfigurationError("shell must be a non-empty path", key="shell")
        if str(self.log_level).upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, got {self.log_level!r}",
                key="log_level",
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShellCallConfig":
        """Create config from dictionary, ignoring unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def _load_json_config(path: Path, label: str) -> ShellCallConfig:
    try:
        with path.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {label}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load {label}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid {label}: expected a JSON object")
    return ShellCallConfig.from_dict(data)


def load_user_config(profile_name: str = "default") -> ShellCallConfig:
    """Load user configuration from ~/.shellcall/profiles/<name>.json.

    Args:
        profile_name: Name of profile to load (default: "default")

    Returns:
        ShellCallConfig loaded from profile, or default config if not found

    Raises:
        ConfigurationError: If profile file is invalid
    """
    profile_path = Path.home() / ".shellcall" / "profiles" / f"{profile_name}.json"

    if not profile_path.exists():
        return ShellCallConfig()

    return _load_json_config(profile_path, f"profile {profile_name}")


def load_project_config(project_root: Path | None = None) -> ShellCallConfig | None:
    """Load project-specific configuration from .shellcall/config.json.

    Args:
        project_root: Directory containing .shellcall/config.json
                     (default: current directory)

    Returns:
        ShellCallConfig if config file exists, None otherwise

    Raises:
        ConfigurationError: If config file is invalid
    """
    if project_root is None:
        project_root = Path.cwd()

    config_path = project_root / ".shellcall" / "config.json"

    if not config_path.exists():
        return None

    return _load_json_config(config_path, "project config")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid {name}: {value}", key=name)


def load_env_overrides() -> dict[str, Any]:
    """Load configuration overrides from environment variables.

    Supported environment variables:
    - SHELLCALL_VERBOSE: Print the trace line before each command
    - SHELLCALL_ECHO: Echo child output while capturing it
    - SHELLCALL_SHELL: Shell executable used to run commands
    - SHELLCALL_LOG_LEVEL: Logger level

    Returns:
        Dictionary of configuration overrides
    """
    overrides: dict[str, Any] = {}

    if (verbose_str := os.getenv("SHELLCALL_VERBOSE")) is not None:
        overrides["verbose"] = _parse_bool("SHELLCALL_VERBOSE", verbose_str)

    if (echo_str := os.getenv("SHELLCALL_ECHO")) is not None:
        overrides["echo"] = _parse_bool("SHELLCALL_ECHO", echo_str)

    if shell := os.getenv("SHELLCALL_SHELL"):
        overrides["shell"] = shell

    if log_level := os.getenv("SHELLCALL_LOG_LEVEL"):
        overrides["log_level"] = log_level

    return overrides


def merge_configs(
    base: ShellCallConfig,
    project: ShellCallConfig | None = None,
    env_overrides: dict[str, Any] | None = None,
) -> ShellCallConfig:
    """Merge configurations with precedence: env > project > base.

    Args:
        base: Base configuration (typically from user profile)
        project: Project-specific configuration (optional)
        env_overrides: Environment variable overrides (optional)

    Returns:
        Merged configuration
    """
    merged = base.to_dict()

    defaults = ShellCallConfig().to_dict()

    # Project values only win where they differ from the defaults
    if project:
        for key, value in project.to_dict().items():
            if value != defaults.get(key):
                merged[key] = value

    if env_overrides:
        for key, value in env_overrides.items():
            merged[key] = value

    return ShellCallConfig.from_dict(merged)


def load_config(
    profile_name: str = "default", project_root: Path | None = None
) -> ShellCallConfig:
    """Load and merge all configuration sources.

    Args:
        profile_name: User profile to load (default: "default")
        project_root: Project root directory (default: current directory)

    Returns:
        Merged configuration

    Raises:
        ConfigurationError: If any config source is invalid
    """
    base_config = load_user_config(profile_name)
    project_config = load_project_config(project_root)
    env_overrides = load_env_overrides()
    return merge_configs(base_config, project_config, env_overrides)


class RuntimeSettings:
    """Process-wide settings read by every command execution."""

    def __init__(self, config: ShellCallConfig) -> None:
        self._lock = threading.Lock()
        self._config = config

    @property
    def config(self) -> ShellCallConfig:
        with self._lock:
            return self._config

    def apply(self, config: ShellCallConfig) -> None:
        with self._lock:
            self._config = config
        get_logger().set_level(config.log_level)

    def update(self, **changes: Any) -> None:
        with self._lock:
            values = self._config.to_dict()
            values.update(changes)
            self._config = ShellCallConfig.from_dict(values)


def _initial_config() -> ShellCallConfig:
    try:
        return ShellCallConfig.from_dict(load_env_overrides())
    except ConfigurationError as e:
        get_logger().warn("Ignoring invalid shellcall environment", error=str(e))
        return ShellCallConfig()


settings = RuntimeSettings(_initial_config())


def configure(config: ShellCallConfig) -> None:
    """Apply a configuration to the process-wide runtime settings."""
    settings.apply(config)


def set_verbose(value: bool) -> None:
    """Set the process-wide verbose flag."""
    settings.update(verbose=bool(value))


def is_verbose() -> bool:
    """Return the process-wide verbose flag."""
    return settings.config.verbose


def set_echo(value: bool) -> None:
    """Enable or disable echoing of child output."""
    settings.update(echo=bool(value))
