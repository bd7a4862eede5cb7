# Nanny — Application Advisory Gate
# Copyright (C) 2026 Nanny Project Contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""User settings: ~/.config/nanny/config.yaml plus environment overrides.

The file is optional. Example::

    ledger_path: ~/.local/state/nanny.db
    legal_doc_name: End User License Agreement
    text_mode: true

Environment variables take priority over the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV = "NANNY_CONFIG"
LEGAL_DOC_ENV = "LEGAL_DOC_NAME"
LEDGER_FILENAME = "nanny.db"


def config_home(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Per-user configuration directory ($XDG_CONFIG_HOME or ~/.config)."""
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def default_config_file(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV, "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return config_home(env) / "nanny" / "config.yaml"


class Settings(BaseModel):
    """Effective settings for one invocation."""

    ledger_path: Optional[Path] = None
    legal_doc_name: Optional[str] = None
    text_mode: bool = False

    def resolved_ledger_path(self, environ: Optional[Mapping[str, str]] = None) -> Path:
        if self.ledger_path is not None:
            return self.ledger_path.expanduser()
        return config_home(environ) / LEDGER_FILENAME


def _read_config_file(path: Path) -> dict:
    """Load the YAML mapping at *path*; anything unusable reads as empty."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.debug("Could not load config from %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.debug("Ignoring config %s: top level is not a mapping", path)
        return {}
    return data


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge the config file with environment overrides."""
    env = os.environ if environ is None else environ
    config_path = path if path is not None else default_config_file(env)
    data = _read_config_file(config_path)

    try:
        settings = Settings.model_validate(data)
    except ValidationError as exc:
        logger.warning("Invalid settings in %s, using defaults: %s", config_path, exc)
        settings = Settings()

    legal_doc_name = env.get(LEGAL_DOC_ENV)
    if legal_doc_name:
        settings = settings.model_copy(update={"legal_doc_name": legal_doc_name})
    return settings
