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

"""Native advisory dialog (Tk).

A modal, always-on-top warning window. Links in the message are clickable
and open in the user's browser. Acknowledgment-only messages get a single
OK button; yes/no messages get Continue and Quit, with Quit focused.
"""

from __future__ import annotations

import logging
import math
import webbrowser
from typing import Optional

from nanny.models.advisory import RichMessage
from nanny.reporter.messages import CONTINUE_LABEL, DISMISS_LABEL, QUIT_LABEL
from nanny.reporter.richtext import LINE_SEPARATOR, parse_rich_text

logger = logging.getLogger(__name__)

DIALOG_WIDTH_CHARS = 80  # roughly 640 px in the default font
WARNING_ICON = "::tk::icons::warning"


class DialogUnavailableError(RuntimeError):
    """Tk is missing or cannot reach the display."""


def dialog_segments(message: RichMessage) -> list[tuple[str, Optional[str]]]:
    """Flatten body and prompt into (text, href) pieces for a Text widget."""
    source = message.body
    if message.prompt:
        source += "<br>" + message.prompt
    document = parse_rich_text(source)

    segments: list[tuple[str, Optional[str]]] = []
    for idx, para in enumerate(document.paragraphs):
        if idx:
            segments.append(("\n", None))
        for run in para.runs:
            segments.append((run.text.replace(LINE_SEPARATOR, "\n"), run.href))
    return segments


def estimate_height(segments: list[tuple[str, Optional[str]]], width: int = DIALOG_WIDTH_CHARS) -> int:
    """Display lines needed for the segments at *width* characters."""
    text = "".join(part for part, _ in segments)
    return sum(max(1, math.ceil(len(line) / width)) for line in text.split("\n"))


class DialogPresenter:
    """Tk warning dialog returning the user's choice."""

    def present(self, message: RichMessage) -> Optional[bool]:
        try:
            import tkinter as tk
        except ImportError as exc:
            raise DialogUnavailableError(f"tkinter is not available: {exc}") from exc

        try:
            root = tk.Tk()
        except tk.TclError as exc:
            raise DialogUnavailableError(f"cannot open a Tk window: {exc}") from exc

        try:
            return self._run(tk, root, message)
        except tk.TclError as exc:
            raise DialogUnavailableError(f"cannot show the Tk dialog: {exc}") from exc
        finally:
            root.destroy()

    def _run(self, tk, root, message: RichMessage) -> Optional[bool]:
        root.withdraw()
        dialog = tk.Toplevel(root)
        dialog.title(message.title)
        dialog.attributes("-topmost", True)
        dialog.resizable(False, False)

        frame = tk.Frame(dialog, padx=16, pady=16)
        frame.pack(fill="both", expand=True)
        tk.Label(frame, image=WARNING_ICON).grid(row=0, column=0, sticky="n", padx=(0, 12))

        segments = dialog_segments(message)
        text = tk.Text(
            frame,
            wrap="word",
            width=DIALOG_WIDTH_CHARS,
            height=estimate_height(segments),
            borderwidth=0,
            highlightthickness=0,
            background=dialog.cget("background"),
            cursor="arrow",
        )
        for idx, (part, href) in enumerate(segments):
            if href is None:
                text.insert("end", part)
                continue
            tag = f"link{idx}"
            text.insert("end", part, (tag,))
            text.tag_configure(tag, foreground="blue", underline=True)
            text.tag_bind(tag, "<Button-1>", lambda _e, url=href: webbrowser.open(url))
            text.tag_bind(tag, "<Enter>", lambda _e: text.configure(cursor="hand2"))
            text.tag_bind(tag, "<Leave>", lambda _e: text.configure(cursor="arrow"))
        text.configure(state="disabled")
        text.grid(row=0, column=1, sticky="nsew")

        buttons = tk.Frame(frame, pady=12)
        buttons.grid(row=1, column=0, columnspan=2, sticky="e")
        choice = {"accepted": False}

        def finish(accepted: bool) -> None:
            choice["accepted"] = accepted
            dialog.grab_release()
            dialog.destroy()

        if message.is_acknowledgment:
            default = tk.Button(buttons, text=DISMISS_LABEL, width=10, command=lambda: finish(False))
            default.pack(side="right")
        else:
            default = tk.Button(buttons, text=QUIT_LABEL, width=10, command=lambda: finish(False))
            default.pack(side="right")
            tk.Button(buttons, text=CONTINUE_LABEL, width=10, command=lambda: finish(True)).pack(
                side="right", padx=(0, 8)
            )

        dialog.protocol("WM_DELETE_WINDOW", lambda: finish(False))
        dialog.bind("<Escape>", lambda _e: finish(False))

        def activate_focused(_event) -> None:
            widget = dialog.focus_get()
            if isinstance(widget, tk.Button):
                widget.invoke()

        dialog.bind("<Return>", activate_focused)
        default.focus_set()
        dialog.grab_set()
        logger.debug("Showing advisory dialog %r", message.title)
        root.wait_window(dialog)

        if message.is_acknowledgment:
            return None
        return choice["accepted"]
