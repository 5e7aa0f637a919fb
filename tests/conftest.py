"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from lei_auditor.clients.llm_client import LLMClient
from lei_auditor.models.rules import ForbiddenTermRule
from lei_auditor.models.suggestion import Suggestion, TextRange
from lei_auditor.pipeline.suggestion_store import SuggestionStore
from lei_auditor.rules.loader import DEFAULT_RULES


@pytest.fixture
def rules() -> tuple[ForbiddenTermRule, ...]:
    return DEFAULT_RULES


@pytest.fixture
def sample_text() -> str:
    return "Este projeto trata de pesquisa básica e rotina."


@pytest.fixture
def long_text() -> str:
    return (
        "O projeto desenvolveu um novo algoritmo de otimização para baterias de chumbo-ácido, "
        "com testes em bancada e validação em campo durante seis meses."
    )


@pytest.fixture
def review_payload() -> dict:
    return {
        "suggestions": [
            {
                "originalText": "desenvolveu um novo algoritmo",
                "suggestedText": "desenvolveu um algoritmo inédito de controle",
                "reason": "Maior precisão técnica",
            },
            {
                "originalText": "testes em bancada",
                "suggestedText": "ensaios laboratoriais em bancada",
                "reason": "Linguagem de P&D",
            },
        ]
    }


@pytest.fixture
def review_response(review_payload) -> str:
    return (
        "Segue a análise do capítulo:\n\n"
        f"{json.dumps(review_payload, ensure_ascii=False)}\n\n"
        "Espero que ajude."
    )


@pytest.fixture
def mock_reviewer(review_response) -> LLMClient:
    """Create a mock review service answering with two suggestions."""
    client = AsyncMock(spec=LLMClient)
    client.invoke = AsyncMock(return_value={"response": review_response})
    return client


@pytest.fixture
def store() -> SuggestionStore:
    return SuggestionStore()


def _make_term_alert(term: str, start: int, status: str = "pending") -> Suggestion:
    return Suggestion(
        id=f"term-{term}-{start}",
        kind="term_alert",
        original_span=term,
        replacement_text="atividade de P&D",
        range=TextRange(start=start, end=start + len(term)),
        status=status,
        rationale="Sugere trabalho repetitivo",
        citation="Decreto 5.798/2006",
    )


def _make_improvement(idx: int, original: str = "", status: str = "pending") -> Suggestion:
    return Suggestion(
        id=f"ai-1700000000000-{idx}",
        kind="improvement",
        original_span=original or f"trecho {idx}",
        replacement_text=f"trecho melhorado {idx}",
        range=TextRange(start=0, end=0),
        status=status,
        rationale="Melhoria sugerida pela IA",
    )


@pytest.fixture
def make_term_alert():
    return _make_term_alert


@pytest.fixture
def make_improvement():
    return _make_improvement
