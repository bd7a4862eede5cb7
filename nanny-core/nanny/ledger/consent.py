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

"""Append-only consent ledger.

One package name per line in a UTF-8 file under the user's configuration
directory. A name counts as consented when ``name + "\\n"`` occurs anywhere
in the file. The search runs on raw bytes, so a stray byte that is not
UTF-8 leaves the other entries readable. It is a substring search, not a
per-line comparison: a recorded ``foo-bar`` also answers for ``bar``. That
behaviour is kept for compatibility with existing ledgers.

The ledger is never rewritten or pruned; recording the same name twice only
appends a duplicate line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from nanny.config import LEDGER_FILENAME, config_home

logger = logging.getLogger(__name__)


def default_ledger_path() -> Path:
    """~/.config/nanny.db (honouring XDG_CONFIG_HOME)."""
    return config_home() / LEDGER_FILENAME


class ConsentLedger:
    """File-backed record of packages whose advisory was accepted."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path if path is not None else default_ledger_path()

    def _read(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot read consent ledger %s: %s", self.path, exc)
            return None

    def already_consented(self, name: str) -> bool:
        """True if *name* was recorded before. An unreadable ledger means no."""
        data = self._read()
        if data is None:
            return False
        return f"{name}\n".encode("utf-8") in data

    def record_consent(self, name: str) -> bool:
        """Append *name*; return False if the write failed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(f"{name}\n")
        except OSError as exc:
            logger.warning("Cannot record consent for %s in %s: %s", name, self.path, exc)
            return False
        logger.debug("Recorded consent for %s in %s", name, self.path)
        return True

    def __repr__(self) -> str:
        return f"ConsentLedger(path={str(self.path)!r})"
