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

"""/proc/cpuinfo text-scan probe.

Used on architectures that publish extensions only as free text. The key
of the line holding the feature list differs per instruction-set family.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CPUINFO_PATH = Path("/proc/cpuinfo")

LABEL_FLAGS = "flags"  # x86
LABEL_FEATURES = "Features"  # ARM, LoongArch
LABEL_ASES = "ASEs implemented"  # MIPS


def find_feature_line(text: str, label: str) -> Optional[str]:
    """Return the value of the first ``label : value`` line, or None."""
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip() == label:
            return value.strip()
    return None


class CpuinfoProbe:
    """Capability probe that scans one labelled line of /proc/cpuinfo.

    Matching is case-sensitive against whitespace-separated tokens, so
    ``avx512`` does not match a machine that only lists ``avx512f``.
    """

    def __init__(self, label: str = LABEL_FLAGS, cpuinfo_path: Path = CPUINFO_PATH) -> None:
        self.label = label
        self.cpuinfo_path = cpuinfo_path

    def supports(self, feature: str) -> bool:
        try:
            text = self.cpuinfo_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", self.cpuinfo_path, exc)
            return False

        value = find_feature_line(text, self.label)
        if value is None:
            logger.debug("No %r line in %s", self.label, self.cpuinfo_path)
            return False
        return feature in value.split()

    def __repr__(self) -> str:
        return f"CpuinfoProbe(label={self.label!r}, cpuinfo_path={str(self.cpuinfo_path)!r})"
