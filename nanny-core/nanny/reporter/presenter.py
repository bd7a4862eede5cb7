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

"""Choose between the dialog and the terminal backend.

The dialog is used only when text mode was not forced and a graphical
session is advertised through ``DISPLAY``. Both backends share the same
``present(message)`` contract, so callers never know which one ran.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Protocol, Union

from nanny.models.advisory import RichMessage
from nanny.reporter.dialog import DialogPresenter, DialogUnavailableError
from nanny.reporter.terminal import TerminalPresenter

logger = logging.getLogger(__name__)

GRAPHICAL_SESSION_ENV = "DISPLAY"


class Presenter(Protocol):
    def present(self, message: RichMessage) -> Optional[bool]: ...


def graphical_session(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return GRAPHICAL_SESSION_ENV in env


def select_presenter(
    force_text: bool,
    environ: Optional[Mapping[str, str]] = None,
) -> Union[DialogPresenter, TerminalPresenter]:
    if not force_text and graphical_session(environ):
        return DialogPresenter()
    return TerminalPresenter(environ=environ)


def present(
    message: RichMessage,
    force_text: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[bool]:
    """Show *message*; None for acknowledgments, else whether the user accepted."""
    presenter = select_presenter(force_text, environ)
    if isinstance(presenter, DialogPresenter):
        try:
            return presenter.present(message)
        except DialogUnavailableError as exc:
            logger.warning("%s; falling back to the terminal", exc)
            presenter = TerminalPresenter(environ=environ)
    return presenter.present(message)
