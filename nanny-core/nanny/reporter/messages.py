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

"""Advisory wording.

Produces rich text in the small HTML subset understood by
``nanny.reporter.richtext`` (``<a href>``, ``<b>``, ``<br>``, ``<p>``), so
the same message drives both the dialog and the terminal backend.
"""

from __future__ import annotations

from html import escape
from typing import Optional

from nanny.models.advisory import AdvisoryRequest, RichMessage

WARNING_TITLE = "Warning"
DEFAULT_LEGAL_DOC_NAME = "Licensing Terms"
STYLING_MANUAL_URL = (
    "https://wiki.aosc.io/developer/packaging/package-styling-manual/#package-features"
)
STYLING_MANUAL_NAME = "AOSC OS Packaging Styling Manual"

CONSENT_PROMPT = (
    'By selecting "Yes," you agree to the licensing terms referenced above and '
    "consent launching an application which violates our packaging guidelines."
)

CONTINUE_LABEL = "Continue"
QUIT_LABEL = "Quit"
DISMISS_LABEL = "OK"
PROCEED_QUESTION = "Proceed? [y/N]"
DECLINED_NOTICE = "You have chosen not to proceed. Exiting..."


def _link(href: str, text: str) -> str:
    return f'<a href="{escape(href)}">{escape(text)}</a>'


def format_telemetry_warning(
    name: str,
    description: str,
    eula_url: str,
    alt_software: Optional[str] = None,
    alt_package: Optional[str] = None,
    legal_doc_name: Optional[str] = None,
) -> str:
    """Body of the telemetry advisory, ending with the launch question."""
    text = (
        f"{escape(description)} may collect your usage data on an opt-out basis, per the "
        f"{_link(eula_url, legal_doc_name or DEFAULT_LEGAL_DOC_NAME)}.<br><br>"
        "This default setting does not comply with our guidelines on telemetry in "
        "packaged software, per section 5 of the "
        f"{_link(STYLING_MANUAL_URL, STYLING_MANUAL_NAME)}. "
    )
    if alt_software:
        package = f" (package: {escape(alt_package)})" if alt_package else ""
        text += f"We offer a Telemetry-free alternative, {escape(alt_software)}{package}.<br><br>"
    else:
        text += "<br><br>"
    text += f"Would you like to proceed with launching {escape(name)}?"
    return text


def format_cpu_baseline_error(feature: str, name: str) -> str:
    return (
        f'Your processor does not support the "{escape(feature)}" feature, which is '
        f"required by {escape(name)}. This application will therefore not function "
        "correctly on your device and will now terminate."
    )


def telemetry_message(request: AdvisoryRequest) -> RichMessage:
    """Telemetry advisory with the consent prompt.

    Call ``request.require_consent_fields()`` first.
    """
    body = format_telemetry_warning(
        request.name,
        request.description or "",
        request.eula_url or "",
        alt_software=request.alt_software,
        alt_package=request.alt_package,
        legal_doc_name=request.legal_doc_name,
    )
    return RichMessage(title=WARNING_TITLE, body=body, prompt=CONSENT_PROMPT)


def baseline_message(feature: str, name: str) -> RichMessage:
    """Acknowledgment-only processor baseline error."""
    return RichMessage(title=WARNING_TITLE, body=format_cpu_baseline_error(feature, name))
