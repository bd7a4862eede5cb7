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

"""Processor capability probing.

The strategy is fixed by the machine architecture and chosen once:
RISC-V and POWER expose hwcap bitmask words, every other family is probed
by scanning /proc/cpuinfo for its feature-list line.
"""

from __future__ import annotations

import logging
import platform
from typing import Optional, Protocol

from nanny.probe.auxv import AuxvProbe
from nanny.probe.cpuinfo import LABEL_ASES, LABEL_FEATURES, LABEL_FLAGS, CpuinfoProbe

logger = logging.getLogger(__name__)

_BITMASK_PREFIXES = ("riscv", "ppc64")
_FEATURES_PREFIXES = ("aarch64", "arm", "loongarch")
_ASES_PREFIXES = ("mips",)


class CapabilityProbe(Protocol):
    """Anything that can answer whether the processor has a feature."""

    def supports(self, feature: str) -> bool: ...


def cpuinfo_label(machine: str) -> str:
    """Feature-list key used in /proc/cpuinfo for a machine string."""
    machine = machine.lower()
    if machine.startswith(_FEATURES_PREFIXES):
        return LABEL_FEATURES
    if machine.startswith(_ASES_PREFIXES):
        return LABEL_ASES
    return LABEL_FLAGS


def select_probe(machine: Optional[str] = None) -> CapabilityProbe:
    """Build the probe for *machine* (default: the running machine)."""
    if machine is None:
        machine = platform.machine()
    if machine.lower().startswith(_BITMASK_PREFIXES):
        probe: CapabilityProbe = AuxvProbe()
    else:
        probe = CpuinfoProbe(label=cpuinfo_label(machine))
    logger.debug("Using %r for machine %r", probe, machine)
    return probe
