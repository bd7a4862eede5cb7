"""Integration tests for the Nanny CLI.

Runs the Typer app end to end in terminal mode with a stubbed processor
probe and a ledger under a temporary XDG_CONFIG_HOME.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from nanny import __version__
from nanny.cli import app
from nanny.models.advisory import ExitCode, StreamUnavailableError

runner = CliRunner()
EULA = "https://example.com/eula"
CONSENT_ARGS = ["-n", "bar", "-d", "Bar App", "-l", EULA]


class StubProbe:
    def __init__(self, supported: bool) -> None:
        self.supported = supported

    def supports(self, feature: str) -> bool:
        return self.supported


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("NO_COLOR", "1")
    for var in ("DISPLAY", "NANNY_CONFIG", "LEGAL_DOC_NAME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("nanny.cli.select_probe", lambda: StubProbe(True))
    return tmp_path


@pytest.fixture
def ledger_path(isolated_env: Path) -> Path:
    return isolated_env / "nanny.db"


class TestUsage:
    """Argument validation exits 1 without side effects."""

    def test_name_required(self, ledger_path):
        result = runner.invoke(app, ["-d", "Bar App", "-l", EULA])
        assert result.exit_code == ExitCode.USAGE
        assert not ledger_path.exists()

    def test_description_or_feature_required(self):
        result = runner.invoke(app, ["-n", "bar"])
        assert result.exit_code == ExitCode.USAGE

    @pytest.mark.parametrize(
        "args",
        [
            ["-n", "bar", "-d", " ", "-l", EULA, "-c"],
            ["-n", "bar", "-f", " "],
            ["-n", "bar", "-d", "", "-f", "\t"],
        ],
    )
    def test_blank_description_or_feature_is_missing(self, ledger_path, args):
        result = runner.invoke(app, args, input="y\n")
        assert result.exit_code == ExitCode.USAGE
        assert "either a description (-d) or a processor feature (-f)" in result.output
        assert not ledger_path.exists()

    def test_description_needs_eula(self, ledger_path):
        result = runner.invoke(app, ["-n", "bar", "-d", "Bar App"], input="y\n")
        assert result.exit_code == ExitCode.USAGE
        assert not ledger_path.exists()

    def test_invalid_name(self):
        result = runner.invoke(app, ["-n", "two words", "-f", "avx2"])
        assert result.exit_code == ExitCode.USAGE

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCapabilityBaseline:
    def test_unsupported_feature(self, monkeypatch, ledger_path):
        monkeypatch.setattr("nanny.cli.select_probe", lambda: StubProbe(False))
        result = runner.invoke(app, ["-n", "foo", "-f", "avx512", "-c"])
        assert result.exit_code == ExitCode.DECLINED
        assert 'does not support the "avx512" feature, which is required by foo' in result.output
        assert "[y/N]" not in result.output
        assert not ledger_path.exists()

    def test_supported_feature(self):
        result = runner.invoke(app, ["-n", "foo", "-f", "avx2", "-c"])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == ""


class TestConsent:
    def test_accept_records_and_succeeds(self, ledger_path):
        result = runner.invoke(app, CONSENT_ARGS + ["-c"], input="y\n")
        assert result.exit_code == ExitCode.SUCCESS
        assert "Would you like to proceed with launching bar?" in result.output
        assert "Proceed? [y/N]" in result.output
        assert ledger_path.read_text(encoding="utf-8") == "bar\n"

    def test_second_run_is_silent(self, ledger_path):
        runner.invoke(app, CONSENT_ARGS + ["-c"], input="y\n")
        result = runner.invoke(app, CONSENT_ARGS + ["-c"])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == ""
        assert ledger_path.read_text(encoding="utf-8") == "bar\n"

    def test_decline(self, ledger_path):
        result = runner.invoke(app, CONSENT_ARGS + ["-c"], input="n\n")
        assert result.exit_code == ExitCode.DECLINED
        assert "You have chosen not to proceed. Exiting..." in result.output
        assert not ledger_path.exists()

    def test_eof_declines(self, ledger_path):
        result = runner.invoke(app, CONSENT_ARGS + ["-c"], input="")
        assert result.exit_code == ExitCode.DECLINED
        assert not ledger_path.exists()

    def test_terminal_without_display_even_without_flag(self, ledger_path):
        result = runner.invoke(app, CONSENT_ARGS, input="y\n")
        assert result.exit_code == ExitCode.SUCCESS
        assert ledger_path.exists()

    def test_alternative_advertised(self):
        result = runner.invoke(app, CONSENT_ARGS + ["-a", "Baz", "-k", "baz", "-c"], input="n\n")
        assert "Telemetry-free alternative, Baz (package: baz)" in result.output

    def test_legal_doc_name_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEGAL_DOC_NAME", "Privacy Statement")
        result = runner.invoke(app, CONSENT_ARGS + ["-c"], input="n\n")
        assert "per the Privacy Statement." in result.output

    def test_hyperlinks_when_color_allowed(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR")
        result = runner.invoke(app, CONSENT_ARGS + ["-c"], input="n\n")
        assert f"\x1b]8;;{EULA}\x1b\\" in result.output
        assert f"({EULA})" in result.output


class TestSettingsFile:
    def test_ledger_path_and_text_mode_from_config(self, isolated_env, monkeypatch):
        custom = isolated_env / "state" / "consent.db"
        config = isolated_env / "nanny" / "config.yaml"
        config.parent.mkdir(parents=True)
        config.write_text(f"ledger_path: {custom}\ntext_mode: true\n", encoding="utf-8")
        monkeypatch.setenv("DISPLAY", ":0")

        result = runner.invoke(app, CONSENT_ARGS, input="y\n")
        assert result.exit_code == ExitCode.SUCCESS
        assert custom.read_text(encoding="utf-8") == "bar\n"
        assert not (isolated_env / "nanny.db").exists()


class TestStreams:
    @pytest.mark.parametrize("code", [ExitCode.STDOUT_UNAVAILABLE, ExitCode.STDIN_UNAVAILABLE])
    def test_stream_errors_map_to_dedicated_codes(self, monkeypatch, ledger_path, code):
        def unavailable(message, force_text=False, environ=None):
            raise StreamUnavailableError(code, "stream")

        monkeypatch.setattr("nanny.cli.present", unavailable)
        result = runner.invoke(app, CONSENT_ARGS + ["-c"])
        assert result.exit_code == code
        assert not ledger_path.exists()
