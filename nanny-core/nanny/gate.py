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

"""Advisory flow: probe -> ledger -> format -> present -> record.

``run_advisory`` never touches the process: it returns an ``ExitCode`` and
raises ``UsageError``/``StreamUnavailableError`` for the caller to map.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from nanny.ledger.consent import ConsentLedger
from nanny.models.advisory import AdvisoryRequest, ExitCode, RichMessage
from nanny.probe.capability import CapabilityProbe
from nanny.reporter.messages import baseline_message, telemetry_message

logger = logging.getLogger(__name__)

PresentFn = Callable[[RichMessage], Optional[bool]]


def run_advisory(
    request: AdvisoryRequest,
    *,
    probe: CapabilityProbe,
    ledger: ConsentLedger,
    present: PresentFn,
) -> ExitCode:
    """Run one advisory and return the exit status for the launcher.

    A missing processor feature ends the run before the consent path is
    considered. Declining and failing the baseline share ``DECLINED``.
    """
    # ── Step 1: processor baseline (always checked when requested) ──
    if request.wants_capability_check:
        feature = request.feature or ""
        if not probe.supports(feature):
            logger.info("Processor lacks %r required by %s", feature, request.name)
            present(baseline_message(feature, request.name))
            return ExitCode.DECLINED
        logger.debug("Processor supports %r", feature)

    if not request.wants_consent:
        return ExitCode.SUCCESS

    # ── Step 2: consent ledger ──
    if ledger.already_consented(request.name):
        logger.debug("Consent for %s already recorded in %s", request.name, ledger.path)
        return ExitCode.SUCCESS

    # ── Step 3: telemetry advisory ──
    request.require_consent_fields()
    accepted = present(telemetry_message(request))
    if not accepted:
        logger.info("Launch of %s declined", request.name)
        return ExitCode.DECLINED

    if not ledger.record_consent(request.name):
        logger.warning("Consent for %s was given but could not be saved", request.name)
    return ExitCode.SUCCESS
