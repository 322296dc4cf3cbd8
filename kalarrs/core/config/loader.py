"""
Configuration loader: reads kalarrs.yml into ``Settings``.

The file is optional: without one every default applies. It is
searched for upward from the working directory so commands run from
inside a project still pick up the workspace settings.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from kalarrs.core.models.settings import Settings
from kalarrs.core.services.toolchain.errors import InvalidConstraintError
from kalarrs.core.services.toolchain.version_constraint import parse_constraint

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "kalarrs.yml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when kalarrs.yml is invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for kalarrs.yml starting from the given directory, walking up.

    Returns:
        Path to kalarrs.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, environ: dict[str, str] | None = None) -> Settings:
    """Load settings from ``path`` (or the discovered file) plus env overrides.

    Env overrides:
        KALARRS_SHELL_PROFILE: shell profile sourced before each check.
        KALARRS_AUTO_INSTALL: ``0``/``false`` disables install prompts.

    Raises:
        ConfigError: If an explicit file is missing, any file is invalid,
            or a minimum version is not a usable range.
    """
    env = os.environ if environ is None else environ
    data: dict = {}

    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    if path is None:
        path = find_config_file()

    if path is not None:
        logger.debug("Loading settings from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(loaded).__name__}")
        data = loaded

    if env.get("KALARRS_SHELL_PROFILE"):
        data["shell_profile"] = env["KALARRS_SHELL_PROFILE"]

    auto = env.get("KALARRS_AUTO_INSTALL", "").strip().lower()
    if auto in _TRUTHY:
        data["auto_install"] = True
    elif auto in _FALSY:
        data["auto_install"] = False

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    for key in ("node_min_version", "python_min_version"):
        try:
            parse_constraint(getattr(settings, key))
        except InvalidConstraintError as e:
            raise ConfigError(f"Invalid settings: {key}: {e}") from e

    return settings
