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

"""Nanny CLI — Typer entry point.

Invoked by the package manager before launching an application:

- nanny -n <pkg> -f <feature>                 — refuse to launch on a CPU lacking <feature>
- nanny -n <pkg> -d <pretty name> -l <url>    — one-time telemetry/licensing consent
- add -c to force the terminal advisory even in a graphical session

Exit status: 0 launch, 1 usage error, 10 do not launch, 209/210 standard
output/input unavailable.
"""

from __future__ import annotations

import functools
import logging
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from nanny import __version__
from nanny.config import load_settings
from nanny.gate import run_advisory
from nanny.ledger.consent import ConsentLedger
from nanny.models.advisory import AdvisoryRequest, ExitCode, StreamUnavailableError, UsageError
from nanny.probe.capability import select_probe
from nanny.reporter.presenter import present

app = typer.Typer(
    name="nanny",
    help="Nanny: application advisory system. Warns before launching software that "
    "needs an unsupported processor feature or collects telemetry by default.",
    add_completion=False,
)

logger = logging.getLogger("nanny")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"Nanny v{__version__}")
        raise typer.Exit()


def _usage_error(ctx: typer.Context, message: str) -> NoReturn:
    typer.echo(f"Error: {message}\n", err=True)
    typer.echo(ctx.get_help(), err=True)
    raise typer.Exit(code=int(ExitCode.USAGE))


@app.command()
def main(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(
        None, "-n", "--name", help="Name of the offending package.", metavar="PACKAGE_NAME",
    ),
    alt_software: Optional[str] = typer.Option(
        None, "-a", "--alt-software", help="Name of alternative software (if applicable).",
    ),
    alt_package: Optional[str] = typer.Option(
        None, "-k", "--alt-package",
        help="Name of alternative package (if applicable). Pass -a with -k.",
    ),
    description: Optional[str] = typer.Option(
        None, "-d", "--description",
        help="Description of the offending package (usually its pretty name).",
        metavar="PRETTY_NAME",
    ),
    eula_url: Optional[str] = typer.Option(
        None, "-l", "--eula", help="URL to the licensing terms.", metavar="EULA_URL",
    ),
    feature: Optional[str] = typer.Option(
        None, "-f", "--feature", help="Required processor feature.", metavar="CPU_FEATURE",
    ),
    text_mode: bool = typer.Option(False, "-c", "--text", help="Launch in command line."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug details to stderr."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit.",
    ),
) -> None:
    """Show an advisory if needed and exit with the launch decision."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if not name:
        _usage_error(ctx, "a package name (-n) is required.")

    settings = load_settings()
    try:
        request = AdvisoryRequest(
            name=name,
            alt_software=alt_software,
            alt_package=alt_package,
            description=description,
            eula_url=eula_url,
            feature=feature,
            legal_doc_name=settings.legal_doc_name,
            force_text=text_mode or settings.text_mode,
        )
    except ValidationError as exc:
        _usage_error(ctx, "; ".join(err["msg"] for err in exc.errors()))

    if not (request.wants_consent or request.wants_capability_check):
        _usage_error(ctx, "either a description (-d) or a processor feature (-f) is required.")

    ledger = ConsentLedger(settings.resolved_ledger_path())
    logger.debug("Request %r, ledger %r", request, ledger)

    try:
        code = run_advisory(
            request,
            probe=select_probe(),
            ledger=ledger,
            present=functools.partial(present, force_text=request.force_text),
        )
    except UsageError as exc:
        _usage_error(ctx, f"{exc}.")
    except StreamUnavailableError as exc:
        raise typer.Exit(code=int(exc.exit_code))

    raise typer.Exit(code=int(code))


if __name__ == "__main__":
    app()
