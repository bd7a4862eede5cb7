"""Tests for the append-only consent ledger."""

from pathlib import Path

import pytest

from nanny.ledger.consent import ConsentLedger, default_ledger_path


@pytest.fixture
def ledger(tmp_path: Path) -> ConsentLedger:
    return ConsentLedger(tmp_path / "config" / "nanny.db")


class TestConsentLookup:
    """already_consented()."""

    def test_absent_ledger_means_not_consented(self, ledger):
        assert not ledger.path.exists()
        assert ledger.already_consented("pkg-a") is False

    def test_recorded_name_is_consented(self, ledger):
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_text("pkg-a\npkg-b\n", encoding="utf-8")
        assert ledger.already_consented("pkg-a") is True
        assert ledger.already_consented("pkg-b") is True
        assert ledger.already_consented("pkg-c") is False

    def test_name_without_terminator_is_not_consented(self, ledger):
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_text("pkg-a", encoding="utf-8")
        assert ledger.already_consented("pkg-a") is False

    def test_suffix_of_recorded_name_matches(self, ledger):
        """Raw substring search: a recorded 'foo-bar' also answers for 'bar'.

        Kept for compatibility with existing ledgers; see DESIGN.md.
        """
        ledger.record_consent("foo-bar")
        assert ledger.already_consented("bar") is True
        assert ledger.already_consented("foo") is False

    def test_unreadable_ledger_means_not_consented(self, tmp_path):
        directory = tmp_path / "nanny.db"
        directory.mkdir()
        assert ConsentLedger(directory).already_consented("pkg-a") is False

    def test_invalid_utf8_line_leaves_other_entries_readable(self, ledger):
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_bytes(b"caf\xe9\n")
        assert ledger.record_consent("bar") is True
        assert ledger.path.read_bytes() == b"caf\xe9\nbar\n"
        assert ledger.already_consented("bar") is True
        assert ledger.already_consented("baz") is False

    def test_non_ascii_name_matches_its_utf8_bytes(self, ledger):
        assert ledger.record_consent("caf\u00e9") is True
        assert ledger.already_consented("caf\u00e9") is True
        assert ledger.already_consented("caf") is False


class TestConsentRecording:
    """record_consent()."""

    def test_record_creates_file_and_parents(self, ledger):
        assert ledger.record_consent("pkg-a") is True
        assert ledger.path.read_text(encoding="utf-8") == "pkg-a\n"

    def test_record_twice_is_idempotent_in_effect(self, ledger):
        assert ledger.record_consent("pkg-a") is True
        assert ledger.record_consent("pkg-a") is True
        assert ledger.already_consented("pkg-a") is True
        assert ledger.already_consented("pkg-b") is False
        assert ledger.path.read_text(encoding="utf-8") == "pkg-a\npkg-a\n"

    def test_record_appends(self, ledger):
        ledger.record_consent("pkg-a")
        ledger.record_consent("pkg-b")
        assert ledger.path.read_text(encoding="utf-8") == "pkg-a\npkg-b\n"

    def test_utf8_names(self, ledger):
        ledger.record_consent("пакет")
        assert ledger.path.read_bytes() == "пакет\n".encode("utf-8")
        assert ledger.already_consented("пакет") is True

    def test_write_failure_returns_false(self, tmp_path):
        directory = tmp_path / "nanny.db"
        directory.mkdir()
        assert ConsentLedger(directory).record_consent("pkg-a") is False


class TestLedgerLocation:
    """Default per-user path."""

    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_ledger_path() == tmp_path / "nanny.db"
        assert ConsentLedger().path == tmp_path / "nanny.db"

    def test_home_fallback(self, monkeypatch, tmp_path):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_ledger_path() == tmp_path / ".config" / "nanny.db"
