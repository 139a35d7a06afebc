"""
Tracker configuration.

Configuration can be provided directly, via environment variables, or via
the ``tracker:`` section of a YAML settings file:

```yaml
tracker:
  extension_id: processtracker
  state_dir: ~/.process_tracker
  export_filename: process.txt
  allowed_workspace_markers: ["homework"]
  blocked_workspace_markers: ["group"]
  log_level: DEBUG
  log_format: json
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .logging_utils import LOG_FORMATS

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "processEntries"
DEFAULT_EXPORT_FILENAME = "process.txt"
DEFAULT_SHIFT = 5


def _split_markers(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class TrackerConfig:
    """Configuration for the process tracker.

    Environment Variables:
        PROCESS_TRACKER_EXTENSION_ID: Identity scoping durable state
        PROCESS_TRACKER_STATE_DIR: Root directory for durable state
        PROCESS_TRACKER_STATE_KEY: Key holding the entry sequence
        PROCESS_TRACKER_EXPORT_FILENAME: Export artifact file name
        PROCESS_TRACKER_SHIFT: Letter shift used by the export transform
        PROCESS_TRACKER_ALLOWED_MARKERS: Comma-separated workspace markers
        PROCESS_TRACKER_BLOCKED_MARKERS: Comma-separated workspace markers
        PROCESS_TRACKER_LOG_LEVEL: Log level name
        PROCESS_TRACKER_LOG_FORMAT: "text" or "json"

    Attributes:
        extension_id: Identity that scopes durable state
        state_dir: Root directory for durable state
        state_key: Key holding the entry sequence
        export_filename: File name of the export artifact
        shift: Letter shift of the export transform (obfuscation, not encryption)
        allowed_workspace_markers: If non-empty, a workspace path must contain one
        blocked_workspace_markers: Any workspace path containing one disables tracking
        log_level: Log level name for the package logger
        log_format: "text" leaves log handlers to the host, "json" writes JSON lines to stdout
    """

    extension_id: str = "processtracker"
    state_dir: Path = field(default_factory=lambda: Path.home() / ".process_tracker")
    state_key: str = DEFAULT_STATE_KEY
    export_filename: str = DEFAULT_EXPORT_FILENAME
    shift: int = DEFAULT_SHIFT
    allowed_workspace_markers: list[str] = field(default_factory=list)
    blocked_workspace_markers: list[str] = field(default_factory=list)
    log_level: str = "INFO"
    log_format: str = "text"

    def __post_init__(self) -> None:
        self.state_dir = Path(self.state_dir).expanduser()
        if not 0 < self.shift < 26:
            raise ValueError(f"shift must be between 1 and 25, got {self.shift}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}")

    @property
    def state_path(self) -> Path:
        """Path of the JSON file backing durable state."""
        return self.state_dir / self.extension_id / "state.json"

    @classmethod
    def from_environment(cls) -> TrackerConfig:
        """Create configuration from environment variables.

        Returns:
            TrackerConfig populated from environment variables
        """
        kwargs: dict[str, Any] = {}
        env = os.environ

        if "PROCESS_TRACKER_EXTENSION_ID" in env:
            kwargs["extension_id"] = env["PROCESS_TRACKER_EXTENSION_ID"]
        if "PROCESS_TRACKER_STATE_DIR" in env:
            kwargs["state_dir"] = Path(env["PROCESS_TRACKER_STATE_DIR"])
        if "PROCESS_TRACKER_STATE_KEY" in env:
            kwargs["state_key"] = env["PROCESS_TRACKER_STATE_KEY"]
        if "PROCESS_TRACKER_EXPORT_FILENAME" in env:
            kwargs["export_filename"] = env["PROCESS_TRACKER_EXPORT_FILENAME"]
        if "PROCESS_TRACKER_SHIFT" in env:
            kwargs["shift"] = int(env["PROCESS_TRACKER_SHIFT"])
        if "PROCESS_TRACKER_ALLOWED_MARKERS" in env:
            kwargs["allowed_workspace_markers"] = _split_markers(
                env["PROCESS_TRACKER_ALLOWED_MARKERS"]
            )
        if "PROCESS_TRACKER_BLOCKED_MARKERS" in env:
            kwargs["blocked_workspace_markers"] = _split_markers(
                env["PROCESS_TRACKER_BLOCKED_MARKERS"]
            )
        if "PROCESS_TRACKER_LOG_LEVEL" in env:
            kwargs["log_level"] = env["PROCESS_TRACKER_LOG_LEVEL"].upper()
        if "PROCESS_TRACKER_LOG_FORMAT" in env:
            kwargs["log_format"] = env["PROCESS_TRACKER_LOG_FORMAT"].lower()

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, config_path: Path) -> TrackerConfig:
        """Create configuration from the ``tracker`` section of a YAML file.

        Unknown keys are ignored. A missing or unreadable file yields defaults.
        """
        section = _load_config(config_path).get("tracker") or {}
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in section.items() if key in known}
        if "state_dir" in kwargs:
            kwargs["state_dir"] = Path(kwargs["state_dir"])
        return cls(**kwargs)


def _load_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read tracker settings from {config_path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}
