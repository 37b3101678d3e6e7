"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- print_table in all three modes
- Markup escaping of profile names
- Global instance management and convenience functions
"""

from __future__ import annotations

import json

import pytest

from reticule import output as output_module
from reticule.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


HEADERS = ["current", "name", "base url", "feed url", "server"]
ROWS = [
    ["*", "alice", "https://api-public.sandbox.pro.coinbase.com", "wss://feed", "127.0.0.1:80"],
    ["", "bob", "https://api.pro.coinbase.com", "wss://feed", "0.0.0.0:8080"],
]
PLAIN_LISTING = "\t".join(HEADERS) + "\n" + "\n".join("\t".join(row) for row in ROWS) + "\n"


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("reticule.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("reticule.output._is_tty", lambda: True)


@pytest.fixture()
def colour_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """AUTO picks the listing format from the environment."""

    def test_auto_is_plain_when_not_tty(self, capfd, non_tty, colour_env):
        OutputManager(format=OutputFormat.AUTO).print_table(HEADERS, ROWS)
        assert capfd.readouterr().out == PLAIN_LISTING

    def test_auto_is_rich_when_tty(self, capfd, tty, colour_env):
        OutputManager(format=OutputFormat.AUTO).print_table(HEADERS, ROWS, title="Configs")
        out = capfd.readouterr().out
        assert "Configs" in out
        assert "\t" not in out

    def test_auto_is_plain_on_tty_with_no_color_env(self, capfd, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        OutputManager(format=OutputFormat.AUTO).print_table(HEADERS, ROWS)
        assert capfd.readouterr().out == PLAIN_LISTING

    def test_no_color_flag_overrides_tty(self, capfd, tty, colour_env):
        OutputManager(format=OutputFormat.AUTO, no_color=True).print_table(HEADERS, ROWS)
        assert capfd.readouterr().out == PLAIN_LISTING

    def test_explicit_json_on_tty(self, capfd, tty, colour_env):
        OutputManager(format=OutputFormat.JSON).print_table(HEADERS, ROWS)
        assert len(json.loads(capfd.readouterr().out)) == 2


class TestColorDisabling:
    """NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Listings go to stdout, status messages go to stderr."""

    @pytest.mark.parametrize("method", ["success", "warning", "error", "suggest"])
    def test_messages_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("profile 'alice'")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "profile 'alice'" in captured.err

    def test_coloured_messages_go_to_stderr(self, capfd, non_tty, colour_env):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.success("Created config 'alice'")
        mgr.warning("current config 'alice' no longer exists")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Created config 'alice'" in captured.err
        assert "Warning:" in captured.err

    def test_table_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(HEADERS, ROWS)
        captured = capfd.readouterr()
        assert captured.out == PLAIN_LISTING
        assert captured.err == ""


class TestQuietMode:
    """--quiet suppresses success and suggestions but not warnings or errors."""

    @pytest.mark.parametrize("method", ["success", "suggest"])
    def test_suppressed(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("should not appear")
        assert capfd.readouterr().err == ""

    @pytest.mark.parametrize("method", ["warning", "error"])
    def test_not_suppressed(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("important")
        assert "important" in capfd.readouterr().err

    def test_listing_not_suppressed(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.print_table(HEADERS, ROWS)
        assert capfd.readouterr().out == PLAIN_LISTING


# ------------------------------------------------------------------ #
# Tables
# ------------------------------------------------------------------ #


class TestPrintTable:
    """print_table renders the profile listing in each format."""

    def test_json_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(HEADERS, ROWS)
        records = json.loads(capfd.readouterr().out)
        assert records[0] == dict(zip(HEADERS, ROWS[0]))
        assert [r["name"] for r in records] == ["alice", "bob"]

    def test_json_mode_empty(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(HEADERS, [])
        assert json.loads(capfd.readouterr().out) == []

    def test_json_keeps_unicode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["name"], [["ünïcode"]])
        assert "ünïcode" in capfd.readouterr().out

    def test_plain_mode_ignores_title(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(HEADERS, ROWS, title="Configs")
        assert capfd.readouterr().out == PLAIN_LISTING

    def test_plain_mode_empty_has_header(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(HEADERS, [])
        assert capfd.readouterr().out == "\t".join(HEADERS) + "\n"

    def test_rich_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(HEADERS, ROWS, title="Configs")
        captured = capfd.readouterr()
        assert "Configs" in captured.out
        assert "alice" in captured.out
        assert captured.err == ""

    def test_messages_do_not_leak_into_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(HEADERS, ROWS)
        mgr.warning("current config 'gone' no longer exists")
        captured = capfd.readouterr()
        assert len(json.loads(captured.out)) == 2
        assert "no longer exists" in captured.err


# ------------------------------------------------------------------ #
# Formatting of messages
# ------------------------------------------------------------------ #


class TestMessageFormatting:
    def test_warning_prefix(self, capfd, non_tty):
        OutputManager(no_color=True).warning("careful")
        assert capfd.readouterr().err == "Warning: careful\n"

    def test_error_prefix(self, capfd, non_tty):
        OutputManager(no_color=True).error("broken")
        assert capfd.readouterr().err == "Error: broken\n"

    def test_suggest_has_arrow(self, capfd, non_tty):
        OutputManager(no_color=True).suggest("run config list")
        assert capfd.readouterr().err == "→ run config list\n"

    def test_brackets_in_names_survive_markup(self, capfd, non_tty, colour_env):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.error("reticule config '[bold]x' already exists")
        mgr.warning("current config '[red]y' no longer exists")
        mgr.success("Created config '[dim]z'")
        err = capfd.readouterr().err
        assert "[bold]x" in err
        assert "[red]y" in err
        assert "[dim]z" in err


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_get_output_is_cached(self):
        assert get_output() is get_output()

    def test_set_output_overrides(self):
        custom = OutputManager(format=OutputFormat.JSON)
        set_output(custom)
        assert get_output() is custom

    def test_reset_output_clears(self):
        first = get_output()
        reset_output()
        assert get_output() is not first


class TestConvenienceFunctions:
    @pytest.fixture(autouse=True)
    def _plain(self, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))

    @pytest.mark.parametrize("name", ["success", "warning", "error", "suggest"])
    def test_message_helpers(self, capfd, name):
        getattr(output_module, name)("via helper")
        captured = capfd.readouterr()
        assert "via helper" in captured.err
        assert captured.out == ""

    def test_print_table(self, capfd):
        output_module.print_table(["name"], [["alice"]])
        assert capfd.readouterr().out == "name\nalice\n"
