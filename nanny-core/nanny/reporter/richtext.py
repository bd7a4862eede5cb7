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

"""Rich-text document model and terminal rendering.

Only the tags emitted by ``nanny.reporter.messages`` are understood:
``<a href>``, ``<b>``/``<strong>``, ``<br>`` and ``<p>``. Anything else is
dropped and its text kept. Whitespace collapses the way it does in HTML.

Terminal output with colour enabled uses OSC 8 hyperlinks and repeats the
URL in parentheses for terminals that ignore them::

    ESC ] 8 ; ; <href> ESC \\ <text> ESC ] 8 ; ; ESC \\ (<href>)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Mapping, Optional

LINE_SEPARATOR = "\u2028"
PARAGRAPH_SEPARATOR = "\u2029"

OSC8_OPEN = "\x1b]8;;{href}\x1b\\"
OSC8_CLOSE = "\x1b]8;;\x1b\\"
SGR_BOLD = "\x1b[1m"
SGR_NORMAL = "\x1b[22m"

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Run:
    """A stretch of text with uniform formatting."""

    text: str
    href: Optional[str] = None
    bold: bool = False

    @property
    def is_link(self) -> bool:
        return self.href is not None


@dataclass
class Paragraph:
    runs: list[Run] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass
class RichDocument:
    paragraphs: list[Paragraph] = field(default_factory=list)

    def links(self) -> list[Run]:
        return [run for para in self.paragraphs for run in para.runs if run.is_link]


class _RichTextParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.document = RichDocument()
        self._current = Paragraph()
        self._hrefs: list[Optional[str]] = []
        self._bold = 0

    # ── helpers ──

    def _at_line_start(self) -> bool:
        if not self._current.runs:
            return True
        last = self._current.runs[-1].text
        return not last or last[-1] in (" ", LINE_SEPARATOR)

    def _append(self, text: str, *, plain: bool = False) -> None:
        href = None if plain else (self._hrefs[-1] if self._hrefs else None)
        bold = False if plain else self._bold > 0
        runs = self._current.runs
        if runs and runs[-1].href == href and runs[-1].bold == bold:
            runs[-1] = Run(runs[-1].text + text, href, bold)
        else:
            runs.append(Run(text, href, bold))

    def _trim_trailing_space(self) -> None:
        runs = self._current.runs
        while runs:
            last = runs[-1]
            trimmed = last.text.rstrip(" ")
            if trimmed:
                runs[-1] = Run(trimmed, last.href, last.bold)
                break
            runs.pop()

    def _close_paragraph(self) -> None:
        self._trim_trailing_space()
        if self._current.runs:
            self.document.paragraphs.append(self._current)
        self._current = Paragraph()

    # ── HTMLParser hooks ──

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        if tag == "a":
            self._hrefs.append(dict(attrs).get("href") or None)
        elif tag in ("b", "strong"):
            self._bold += 1
        elif tag == "br":
            self._trim_trailing_space()
            self._append(LINE_SEPARATOR, plain=True)
        elif tag == "p":
            self._close_paragraph()

    def handle_endtag(self, tag: str) -> None:
        if tag == "a" and self._hrefs:
            self._hrefs.pop()
        elif tag in ("b", "strong") and self._bold:
            self._bold -= 1
        elif tag == "p":
            self._close_paragraph()

    def handle_data(self, data: str) -> None:
        text = _WHITESPACE.sub(" ", data)
        if self._at_line_start():
            text = text.lstrip(" ")
        if text:
            self._append(text)

    def close(self) -> None:
        super().close()
        self._close_paragraph()


def parse_rich_text(text: str) -> RichDocument:
    """Parse the supported HTML subset into paragraphs of runs."""
    parser = _RichTextParser()
    parser.feed(text)
    parser.close()
    return parser.document


def hyperlink(href: str, text: str) -> str:
    """OSC 8 hyperlink followed by the URL in parentheses."""
    return f"{OSC8_OPEN.format(href=href)}{text}{OSC8_CLOSE}({href})"


def _render_run(run: Run, colorize: bool) -> str:
    if not colorize:
        return run.text
    text = run.text
    if run.bold:
        text = f"{SGR_BOLD}{text}{SGR_NORMAL}"
    if run.href:
        text = hyperlink(run.href, text)
    return text


def render_document(document: RichDocument, colorize: bool) -> str:
    paragraphs = [
        "".join(_render_run(run, colorize) for run in para.runs)
        for para in document.paragraphs
    ]
    rendered = "\n".join(paragraphs)
    rendered = rendered.replace(LINE_SEPARATOR, "\n").replace(PARAGRAPH_SEPARATOR, "\n")
    return rendered.rstrip("\n") + "\n"


def to_terminal_text(text: str, colorize: bool) -> str:
    """Render rich text for a terminal; always ends with exactly one newline.

    Empty input stays empty so an absent prompt renders as nothing.
    """
    if not text:
        return ""
    return render_document(parse_rich_text(text), colorize)


def colorize_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Colour and hyperlink escapes are off whenever NO_COLOR is set."""
    env = os.environ if environ is None else environ
    return "NO_COLOR" not in env
