"""TUI settings loader.

Reads optional configuration from .mead-tracker.yaml in the project root
(the current directory by default). Every key is optional.

Example .mead-tracker.yaml:
    tui:
      db_path: ~/.local/share/mead_tracker/mead_tracker.db
      log_file: ~/.local/share/mead_tracker/mead_tracker.log
      verbose: false
      json_logs: false
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import yaml

from meadtracker.lib.errors import ConfigurationError

SETTINGS_FILENAME = ".mead-tracker.yaml"
DEFAULT_DATA_DIR = "~/.local/share/mead_tracker"


@dataclass
class TUISettings:
    """TUI configuration settings."""

    # SQLite database file (":memory:" for a throwaway session)
    db_path: str = f"{DEFAULT_DATA_DIR}/mead_tracker.db"

    # Log file; empty string disables logging
    log_file: str = f"{DEFAULT_DATA_DIR}/mead_tracker.log"

    # DEBUG instead of INFO
    verbose: bool = False

    # One JSON object per log line
    json_logs: bool = False

    # Problems met while loading, logged once logging is configured
    load_warnings: List[str] = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def load(cls, project_root: Path | None = None, config_path: Path | None = None) -> "TUISettings":
        """Load settings from .mead-tracker.yaml.

        Args:
            project_root: Directory holding the settings file. Defaults to cwd.
            config_path: Explicit settings file; overrides project_root.

        Returns:
            TUISettings with values from the file, or defaults if the file
            is missing or malformed.
        """
        if config_path is None:
            config_path = (project_root or Path.cwd()) / SETTINGS_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}

            tui_config = config.get("tui") or {}

            def value(key: str, default: Any) -> Any:
                # A key present but left empty (null) means "use the default"
                found = tui_config.get(key)
                return default if found is None else found

            # Flags are kept as read; validate() rejects non-booleans
            return cls(
                db_path=str(value("db_path", cls.db_path)),
                log_file=str(value("log_file", cls.log_file) or ""),
                verbose=value("verbose", cls.verbose),
                json_logs=value("json_logs", cls.json_logs),
            )
        except (OSError, yaml.YAMLError, AttributeError) as e:
            # If config file is malformed, use defaults
            return cls(load_warnings=[f"Ignoring unreadable settings file {config_path}: {e}"])

    def validate(self) -> None:
        """Reject values that cannot be used.

        Raises:
            ConfigurationError: If the database path is empty or a flag is
                not a boolean.
        """
        if not self.db_path.strip():
            raise ConfigurationError(
                "Database path must not be empty",
                field="tui.db_path",
                value=self.db_path,
                suggestion="Remove the db_path key to use the default location",
            )
        for name in ("verbose", "json_logs"):
            flag = getattr(self, name)
            if not isinstance(flag, bool):
                raise ConfigurationError(
                    f"{name} must be true or false",
                    field=f"tui.{name}",
                    value=flag,
                    suggestion=f"Write {name}: true or {name}: false without quotes",
                )

    def get_db_path(self) -> str:
        """Database path with ``~`` expanded."""
        if self.db_path == ":memory:":
            return self.db_path
        return str(Path(self.db_path).expanduser())

    def get_log_file(self) -> Path | None:
        """Log file path with ``~`` expanded, or None if logging is off."""
        if not self.log_file:
            return None
        return Path(self.log_file).expanduser()


# Global settings instance (loaded on first access)
_settings: TUISettings | None = None


def get_settings(reload: bool = False, config_path: Path | None = None) -> TUISettings:
    """Get the global TUI settings.

    Args:
        reload: Force reload from config file.
        config_path: Explicit settings file to load from.

    Returns:
        TUISettings instance.
    """
    global _settings
    if _settings is None or reload:
        _settings = TUISettings.load(config_path=config_path)
    return _settings
