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

"""Terminal advisory backend.

Writes the advisory to standard output and, for a yes/no advisory, reads a
single bounded line from standard input. Streams are resolved at call time
so that callers (and tests) can swap ``sys.stdout``/``sys.stdin``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional, TextIO

from rich.console import Console

from nanny.models.advisory import ExitCode, RichMessage, StreamUnavailableError
from nanny.reporter.messages import DECLINED_NOTICE, PROCEED_QUESTION
from nanny.reporter.richtext import colorize_enabled, to_terminal_text

logger = logging.getLogger(__name__)

MAX_ANSWER_LENGTH = 64


def _usable(stream: Optional[TextIO]) -> bool:
    return stream is not None and not getattr(stream, "closed", False)


def is_affirmative(answer: str) -> bool:
    return answer[:1] in ("y", "Y")


class TerminalPresenter:
    """Plain or ANSI/OSC 8 advisory on the controlling terminal."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stdin: Optional[TextIO] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._stdout = stdout
        self._stdin = stdin
        self._environ = environ

    def _streams(self) -> tuple[TextIO, TextIO]:
        out = self._stdout if self._stdout is not None else sys.stdout
        if not _usable(out):
            raise StreamUnavailableError(ExitCode.STDOUT_UNAVAILABLE, "output")
        inp = self._stdin if self._stdin is not None else sys.stdin
        if not _usable(inp):
            raise StreamUnavailableError(ExitCode.STDIN_UNAVAILABLE, "input")
        return out, inp

    def present(self, message: RichMessage) -> Optional[bool]:
        out, inp = self._streams()
        env = os.environ if self._environ is None else self._environ
        colorize = colorize_enabled(env)

        console = Console(
            file=out,
            soft_wrap=True,
            highlight=False,
            markup=False,
            emoji=False,
            no_color=not colorize,
        )

        # All output goes through out.write below, never through rich.
        with console.capture() as capture:
            console.print(message.title, style="bold yellow" if colorize else None)

        text = capture.get() + "\n" + to_terminal_text(message.body, colorize)
        if not message.is_acknowledgment:
            prompt = to_terminal_text(message.prompt, colorize)
            text += f"\n{prompt}\n{PROCEED_QUESTION} "
        try:
            out.write(text)
            out.flush()
        except OSError as exc:
            logger.debug("Writing the advisory failed: %s", exc)
            raise StreamUnavailableError(ExitCode.STDOUT_UNAVAILABLE, "output") from exc

        if message.is_acknowledgment:
            return None

        try:
            answer = inp.readline(MAX_ANSWER_LENGTH)
        except (OSError, ValueError) as exc:
            logger.debug("Reading the answer failed: %s", exc)
            raise StreamUnavailableError(ExitCode.STDIN_UNAVAILABLE, "input") from exc

        if is_affirmative(answer):
            return True
        try:
            out.write(f"{DECLINED_NOTICE}\n")
            out.flush()
        except OSError as exc:
            logger.debug("Writing the declined notice failed: %s", exc)
            raise StreamUnavailableError(ExitCode.STDOUT_UNAVAILABLE, "output") from exc
        return False
