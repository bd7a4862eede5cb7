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

"""Pydantic models for an advisory invocation and the message it produces."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ExitCode(IntEnum):
    """Process exit statuses understood by the invoking package manager."""

    SUCCESS = 0
    USAGE = 1
    DECLINED = 10  # declined consent or failed processor baseline
    STDOUT_UNAVAILABLE = 209
    STDIN_UNAVAILABLE = 210


class UsageError(ValueError):
    """Required arguments are missing or malformed."""


class StreamUnavailableError(RuntimeError):
    """Standard output or input cannot be used for a terminal advisory."""

    def __init__(self, exit_code: ExitCode, stream: str) -> None:
        super().__init__(f"Cannot open standard {stream}")
        self.exit_code = exit_code
        self.stream = stream


class AdvisoryRequest(BaseModel):
    """One advisory invocation, built once from the command line.

    The feature check and the consent path are independent: a request may
    carry either or both.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    alt_software: Optional[str] = None
    alt_package: Optional[str] = None
    description: Optional[str] = None
    eula_url: Optional[str] = None
    feature: Optional[str] = None
    legal_doc_name: Optional[str] = None
    force_text: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        # The ledger stores one name per line
        if not value or any(ch.isspace() for ch in value):
            raise ValueError("package name must be a non-empty token without whitespace")
        return value

    @field_validator(
        "alt_software",
        "alt_package",
        "description",
        "eula_url",
        "feature",
        "legal_doc_name",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def wants_capability_check(self) -> bool:
        return self.feature is not None

    @property
    def wants_consent(self) -> bool:
        return self.description is not None

    def require_consent_fields(self) -> None:
        """Raise UsageError unless both description and EULA URL are present."""
        if self.description is None or self.eula_url is None:
            raise UsageError("a description (-d) requires a licensing terms URL (-l)")


class RichMessage(BaseModel):
    """Title, rich-text body and optional rich-text prompt.

    An empty prompt means acknowledgment-only: a single dismiss action and
    no decision returned.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    prompt: str = ""

    @property
    def is_acknowledgment(self) -> bool:
        return not self.prompt
