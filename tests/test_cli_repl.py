"""Tests for REPL command routing."""

from unittest.mock import Mock

from cli import repl
from cli.models import ListCommand, UrlCommand


def test_dispatch_routes_by_command_type(monkeypatch):
    handler = Mock(return_value="Page 1/1 (0 file(s) stored):")
    monkeypatch.setitem(repl.HANDLERS, ListCommand, handler)

    assert repl.dispatch_command(ListCommand(page=1)) == "Page 1/1 (0 file(s) stored):"
    handler.assert_called_once_with(ListCommand(page=1))


def test_dispatch_unknown_type():
    assert repl.dispatch_command(object()) == "Unknown command type: object"


def test_every_command_model_has_a_handler():
    assert UrlCommand in repl.HANDLERS
    assert len(repl.HANDLERS) == 6


def test_builtins(capsys, monkeypatch):
    monkeypatch.setattr(repl, "clear_screen", lambda: None)

    assert repl.handle_builtin("help") is True
    assert "Available commands" in capsys.readouterr().out
    assert repl.handle_builtin("exit") is False
    assert repl.handle_builtin("clear") is True
    assert repl.handle_builtin("list") is None
