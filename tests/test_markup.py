"""Tests for the plain-text projection of editor markup."""

from lei_auditor.parsers.markup import character_count, strip_markup


def test_strips_tags():
    assert strip_markup("<p>Olá <strong>mundo</strong></p>") == "Olá mundo"


def test_decodes_entities():
    assert strip_markup("<p>P&amp;D &lt;novo&gt;</p>") == "P&D <novo>"


def test_empty():
    assert strip_markup("") == ""
    assert character_count("") == 0


def test_plain_text_unchanged():
    assert strip_markup("texto simples") == "texto simples"


def test_character_count_ignores_markup():
    assert character_count("<h1>abc</h1><p>de</p>") == 5
