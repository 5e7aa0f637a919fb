"""Forbidden-term rule set: built-in defaults plus optional YAML override."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from lei_auditor.models.rules import ForbiddenTermRule

logger = logging.getLogger(__name__)

DEFAULT_RULES: tuple[ForbiddenTermRule, ...] = (
    ForbiddenTermRule(
        term="pesquisa básica",
        suggestion="pesquisa aplicada",
        reason="Termo não aceito pela RFB",
        reference="Art. 17 da Lei 11.196/2005",
    ),
    ForbiddenTermRule(
        term="inovação incremental",
        suggestion="desenvolvimento tecnológico",
        reason="Termo não recomendado",
        reference="IN RFB 1.187/2011",
    ),
    ForbiddenTermRule(
        term="melhoria de processo",
        suggestion="inovação de processo",
        reason="Termo inadequado para Lei do Bem",
        reference="Manual de Frascati",
    ),
    ForbiddenTermRule(
        term="rotina",
        suggestion="atividade de P&D",
        reason="Sugere trabalho repetitivo",
        reference="Decreto 5.798/2006",
    ),
    ForbiddenTermRule(
        term="manutenção",
        suggestion="aperfeiçoamento tecnológico",
        reason="Não caracteriza inovação",
        reference="Art. 2º IN RFB 1.187/2011",
    ),
)


def load_rules(path: str | Path | None = None) -> tuple[ForbiddenTermRule, ...]:
    """Load the rule set from a YAML file, or return the built-in defaults.

    The file holds either a top-level list of rule records or a mapping with
    a ``rules`` key. Each record has ``term``, ``suggestion``, ``reason`` and
    an optional ``reference``.
    """
    if path is None:
        return DEFAULT_RULES

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Rule file not found: {p}")
    with open(p, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("rules", [])
    if not isinstance(data, list):
        raise ValueError(f"Rule file must contain a list of rules: {p}")

    rules = tuple(ForbiddenTermRule(**item) for item in data)
    logger.info("Loaded %d forbidden-term rules from %s", len(rules), p)
    return rules
