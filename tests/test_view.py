from __future__ import annotations

import pytest

from initiative_configurator.domain import BaseField, CommonField, FieldType
from initiative_configurator.view import ConsoleView


@pytest.fixture()
def feed(monkeypatch):
    """Ersetzt input() durch eine feste Liste von Antworten."""
    def _feed(*answers):
        it = iter(answers)
        monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))
    return _feed


def test_read_string_repeats_until_not_blank(feed, capsys):
    feed("", "   ", "  Sport ")
    assert ConsoleView(width=80).read_string("Name") == "Sport"
    assert capsys.readouterr().out.count("darf nicht leer sein") == 2


def test_read_int_checks_range(feed, capsys):
    feed("abc", "9", "2")
    assert ConsoleView(width=80).read_int("Auswahl", 0, 3) == 2
    out = capsys.readouterr().out
    assert "ganze Zahl" in out
    assert "zwischen 0 und 3" in out


@pytest.mark.parametrize("answer,expected", [("j", True), ("Ja", True), ("y", True), ("n", False), ("NEIN", False)])
def test_read_confirm(feed, answer, expected):
    feed(answer)
    assert ConsoleView(width=80).read_confirm("Sicher?") is expected


def test_read_confirm_repeats_on_other_input(feed):
    feed("vielleicht", "n")
    assert ConsoleView(width=80).read_confirm("Sicher?") is False


def test_read_field_type_by_index(feed, capsys):
    feed("3")
    assert ConsoleView(width=80).read_field_type() is FieldType.DECIMAL
    out = capsys.readouterr().out
    for ftype in FieldType:
        assert ftype.display_name in out


def test_read_mandatory(feed):
    feed("1", "2")
    view = ConsoleView(width=80)
    assert view.read_mandatory() is True
    assert view.read_mandatory() is False


def test_render_fields_table(capsys):
    ConsoleView(width=80).render_fields(
        [BaseField("Title", FieldType.STRING), CommonField("Note", FieldType.INTEGER, False)]
    )
    out = capsys.readouterr().out
    assert "Name" in out and "Typ" in out
    assert "Title" in out and "Basis" in out
    assert "Note" in out and "Optional" in out


def test_render_fields_empty(capsys):
    ConsoleView(width=80).render_fields([], "(keine Felder)")
    assert "(keine Felder)" in capsys.readouterr().out


def test_render_menu_numbers_options(capsys):
    ConsoleView(width=80).render_menu(["Eins", "Zwei"], back_label="Zurück")
    out = capsys.readouterr().out
    assert "[1] Eins" in out
    assert "[2] Zwei" in out
    assert "[0] Zurück" in out


def test_width_is_clamped():
    assert ConsoleView(width=10)._width == 60
    assert ConsoleView(width=500)._width == 100
