"""Tests for recovering the suggestions object from reviewer prose."""

from __future__ import annotations

import pytest

from lei_auditor.utils.json_parser import extract_suggestions_object


def test_embedded_in_prose():
    text = 'Claro! Aqui está: {"suggestions": [{"originalText": "a"}]} Obrigado.'

    assert extract_suggestions_object(text) == {"suggestions": [{"originalText": "a"}]}


def test_fenced_block_after_other_braces():
    text = (
        'Exemplo de formato: {"suggestions": ...}\n\n'
        '```json\n{"suggestions": [{"originalText": "b"}]}\n```'
    )

    assert extract_suggestions_object(text)["suggestions"][0]["originalText"] == "b"


def test_truncated_response_is_closed():
    text = '{"suggestions": [{"originalText": "a", "suggestedText": "b"}, {"originalText": "c"'

    data = extract_suggestions_object(text)

    assert data["suggestions"][0] == {"originalText": "a", "suggestedText": "b"}
    assert data["suggestions"][1] == {"originalText": "c"}


def test_truncated_inside_string_value():
    text = '{"suggestions": [{"originalText": "a", "reason": "motivo cort'

    data = extract_suggestions_object(text)

    assert data["suggestions"][0]["originalText"] == "a"


def test_braces_inside_strings_are_ignored():
    text = '{"suggestions": [{"originalText": "use {x} e [y]", "suggestedText": "z"'

    data = extract_suggestions_object(text)

    assert data["suggestions"][0]["originalText"] == "use {x} e [y]"


def test_braces_in_prose_before_object():
    text = 'Use o formato {campo} abaixo.\n{"suggestions": [{"originalText": "a"}]}'

    assert extract_suggestions_object(text) == {"suggestions": [{"originalText": "a"}]}


def test_object_without_key_is_skipped():
    text = '{"nota": 1} e depois {"suggestions": []} fim {x}'

    assert extract_suggestions_object(text) == {"suggestions": []}


def test_truncated_after_braces_in_prose():
    text = 'Formato {campo}: {"suggestions": [{"originalText": "a", "suggestedText": "b"'

    data = extract_suggestions_object(text)

    assert data["suggestions"] == [{"originalText": "a", "suggestedText": "b"}]


def test_missing_key_raises():
    with pytest.raises(ValueError, match="no \"suggestions\""):
        extract_suggestions_object('{"items": []}')


def test_unrecoverable_raises():
    with pytest.raises(ValueError, match="Could not extract"):
        extract_suggestions_object('"suggestions" foram omitidas')
