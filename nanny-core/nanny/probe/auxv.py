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

"""Hardware capability bitmask probe (RISC-V, POWER).

These architectures report instruction-set extensions through the
AT_HWCAP and AT_HWCAP2 words of the process auxiliary vector rather than
through /proc/cpuinfo text.

Mask values follow the kernel headers:
- powerpc: arch/powerpc/include/uapi/asm/cputable.h
- riscv:   arch/riscv/include/asm/hwcap.h
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

AUXV_PATH = Path("/proc/self/auxv")

AT_NULL = 0
AT_HWCAP = 16
AT_HWCAP2 = 26

# Native (type, value) pairs of unsigned long
_AUXV_ENTRY = struct.Struct("@LL")

# Tested against AT_HWCAP
HWCAP_MASKS: Mapping[str, int] = MappingProxyType({
    # ppc64le
    "altivec": 0x10000000,
    "vsx": 0x00000080,
    "spe": 0x00800000,
    # riscv64: single-letter extensions use bit (letter - 'a')
    "v": 1 << (ord("v") - ord("a")),
    "h": 1 << (ord("h") - ord("a")),
    "zicsr": 1 << 40,
    "zifencei": 1 << 41,
})

# Tested against AT_HWCAP2
HWCAP2_MASKS: Mapping[str, int] = MappingProxyType({
    # ppc64le
    "mma": 0x00020000,
    "vec_crypto": 0x02000000,
    # riscv64
    "zfh": 1 << (66 - 64),
    "zvfh": 1 << (69 - 64),
})


def parse_auxv(data: bytes) -> dict[int, int]:
    """Decode a raw auxiliary vector into {a_type: a_val}.

    Stops at AT_NULL or at the first truncated entry.
    """
    entries: dict[int, int] = {}
    usable = len(data) - len(data) % _AUXV_ENTRY.size
    for a_type, a_val in _AUXV_ENTRY.iter_unpack(data[:usable]):
        if a_type == AT_NULL:
            break
        entries[a_type] = a_val
    return entries


def read_hwcaps(auxv_path: Path = AUXV_PATH) -> tuple[int, int]:
    """Return (AT_HWCAP, AT_HWCAP2) for the running process.

    Missing entries or an unreadable auxv read as 0, which reports every
    feature as unsupported.
    """
    try:
        data = auxv_path.read_bytes()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", auxv_path, exc)
        return 0, 0
    entries = parse_auxv(data)
    return entries.get(AT_HWCAP, 0), entries.get(AT_HWCAP2, 0)


class AuxvProbe:
    """Capability probe backed by the kernel's hwcap bitmask words."""

    def __init__(self, hwcaps: Optional[tuple[int, int]] = None) -> None:
        self._hwcaps = hwcaps

    @property
    def hwcaps(self) -> tuple[int, int]:
        if self._hwcaps is None:
            self._hwcaps = read_hwcaps()
        return self._hwcaps

    def supports(self, feature: str) -> bool:
        key = feature.lower()
        hwcap, hwcap2 = self.hwcaps
        if key in HWCAP_MASKS:
            return bool(hwcap & HWCAP_MASKS[key])
        if key in HWCAP2_MASKS:
            return bool(hwcap2 & HWCAP2_MASKS[key])
        logger.debug("Unknown hwcap feature %r", feature)
        return False

    def __repr__(self) -> str:
        return f"AuxvProbe(hwcaps={self._hwcaps!r})"
