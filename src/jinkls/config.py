"""Configuration of the Jink language server.

Settings come from three places, later ones overriding earlier ones:

1. built-in defaults,
2. an optional ``.jinkls.yml`` in the workspace root,
3. editor settings (``jinkLanguageServer`` section) and initialization options.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from jinkls.constants import CONFIG_FILE_NAME, DEFAULT_LOG_LEVEL, EDITOR_SETTINGS_SECTION
from jinkls.util.general import load_yaml

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults applied when keys are missing from .jinkls.yml
# ---------------------------------------------------------------------------
_CONFIG_DEFAULTS: dict[str, Any] = {
    "max_number_of_problems": 100,
    "source_roots": ["src"],
    "ignored_dirs": [],
    "log_level": DEFAULT_LOG_LEVEL,
}


@dataclass
class JinkLSConfig:
    max_number_of_problems: int = _CONFIG_DEFAULTS["max_number_of_problems"]
    """Upper bound on the diagnostics published per document."""
    source_roots: list[str] = field(default_factory=lambda: list(_CONFIG_DEFAULTS["source_roots"]))
    """Directory names below which dotted module paths start."""
    ignored_dirs: list[str] = field(default_factory=list)
    """Directory names skipped during the workspace scan, in addition to build and VCS directories."""
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JinkLSConfig:
        """Build a config from a mapping, applying defaults for missing keys.

        :raises ValueError: If a value has the wrong type.
        """
        values = dict(_CONFIG_DEFAULTS)
        values.update({key: value for key, value in data.items() if key in _CONFIG_DEFAULTS})

        max_problems = values["max_number_of_problems"]
        if isinstance(max_problems, bool) or not isinstance(max_problems, int) or max_problems < 1:
            raise ValueError(f"max_number_of_problems must be a positive integer, got {max_problems!r}")
        for key in ("source_roots", "ignored_dirs"):
            if not isinstance(values[key], list) or not all(isinstance(v, str) for v in values[key]):
                raise ValueError(f"{key} must be a list of directory names")

        return cls(
            max_number_of_problems=max_problems,
            source_roots=list(values["source_roots"]),
            ignored_dirs=list(values["ignored_dirs"]),
            log_level=str(values["log_level"]).upper(),
        )

    @classmethod
    def load(cls, workspace_root: str | None) -> JinkLSConfig:
        """Load ``.jinkls.yml`` from the workspace root, or return defaults if there is none."""
        if not workspace_root:
            return cls()
        config_path = os.path.join(workspace_root, CONFIG_FILE_NAME)
        if not os.path.isfile(config_path):
            log.debug(f"No {CONFIG_FILE_NAME} in {workspace_root}, using defaults")
            return cls()
        return cls.from_dict(load_config_file(config_path))

    def apply_editor_settings(self, settings: Any) -> None:
        """Apply the ``jinkLanguageServer`` section of editor settings, ignoring malformed values."""
        if not isinstance(settings, dict):
            return
        section = settings.get(EDITOR_SETTINGS_SECTION, settings)
        if not isinstance(section, dict):
            return
        max_problems = section.get("maxNumberOfProblems")
        if isinstance(max_problems, int) and not isinstance(max_problems, bool) and max_problems > 0:
            self.max_number_of_problems = max_problems
        log_level = section.get("logLevel")
        if isinstance(log_level, str) and log_level:
            self.log_level = log_level.upper()


def load_config_file(config_path: str) -> dict[str, Any]:
    """Load and validate a ``.jinkls.yml`` file.

    :param config_path: Absolute path to the YAML file.
    :return: The configuration mapping (empty for an empty file).
    :raises FileNotFoundError: If *config_path* does not exist.
    :raises ValueError: If the file does not contain a YAML mapping.
    """
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Jink LS config not found: {config_path}")

    data = load_yaml(config_path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid Jink LS config (expected YAML mapping): {config_path}")

    unknown = sorted(set(data) - set(_CONFIG_DEFAULTS))
    if unknown:
        log.warning(f"Ignoring unknown keys in {config_path}: {', '.join(map(str, unknown))}")
    return data


def apply_log_level(level_name: str | None) -> None:
    """Set the root logger level from a name like 'debug' or 'WARNING'; unknown names are ignored."""
    if not level_name:
        return
    level = logging.getLevelName(level_name.upper())
    if isinstance(level, int):
        logging.getLogger().setLevel(level)
