"""Streamlit Web UI for lei-auditor.

Chapter sidebar on the left, chapter editor in the middle, compliance panel
(term alerts, AI suggestions, score) on the right.
"""

from __future__ import annotations

import asyncio
import logging
import os
import uuid

logger = logging.getLogger(__name__)

import nest_asyncio
import streamlit as st
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read them
if "ANTHROPIC_API_KEY" not in os.environ:
    try:
        os.environ["ANTHROPIC_API_KEY"] = st.secrets["ANTHROPIC_API_KEY"]
    except Exception:
        pass

from lei_auditor.clients.llm_client import LLMClient
from lei_auditor.config import load_config
from lei_auditor.logging.models import build_analysis_log
from lei_auditor.logging.usage_store import UsageStore
from lei_auditor.models.suggestion import Suggestion
from lei_auditor.pipeline.analysis_coordinator import InsufficientContent, Notice
from lei_auditor.pipeline.audit_session import AuditSession
from lei_auditor.rules.loader import load_rules

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Auditor Lei do Bem",
    page_icon=":memo:",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def _queue_notice(notice: Notice) -> None:
    st.session_state.setdefault("notices", []).append(notice)


def _get_session() -> AuditSession:
    if "audit_session" not in st.session_state:
        config = load_config()
        try:
            llm = LLMClient(
                timeout=config.llm.timeout,
                model=config.llm.model,
                max_tokens=config.llm.max_tokens,
                temperature=config.llm.temperature,
            )
        except Exception as e:
            raise RuntimeError(f"Falha ao iniciar o cliente LLM. Verifique ANTHROPIC_API_KEY: {e}") from e
        st.session_state.llm = llm
        st.session_state.session_id = str(uuid.uuid4())
        st.session_state.audit_session = AuditSession(
            llm,
            title="Projeto de P&D - Sistema de IA",
            rules=load_rules(config.audit.resolved_rules_path),
            min_content_length=config.audit.min_content_length,
            character_limit=config.audit.character_limit,
            chapter_target_length=config.audit.chapter_target_length,
            on_notice=_queue_notice,
        )
    return st.session_state.audit_session


def _flush_notices() -> None:
    for notice in st.session_state.pop("notices", []):
        if notice.level == "error":
            st.error(notice.message)
        elif notice.level == "success":
            st.success(notice.message)
        else:
            st.info(notice.message)


try:
    session = _get_session()
except RuntimeError as e:
    st.error(str(e))
    st.stop()

# ---------------------------------------------------------------------------
# Sidebar: chapters
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("Capítulos")
    st.caption(session.project.title)

    for chapter in session.chapters:
        progress = session.progress(chapter.id)
        label = ("✅ " if progress >= 100 else f"{chapter.order}. ") + chapter.title
        if st.button(
            label,
            key=f"chapter_{chapter.id}",
            use_container_width=True,
            type="primary" if chapter.id == session.active_chapter_id else "secondary",
        ):
            if chapter.id != session.active_chapter_id:
                session.select_chapter(chapter.id)
                st.rerun()
        st.progress(progress / 100)

    st.divider()
    status = st.selectbox(
        "Status do projeto",
        ["editing", "review", "approved"],
        index=["editing", "review", "approved"].index(session.project.status),
        format_func={"editing": "Em edição", "review": "Em revisão", "approved": "Aprovado"}.get,
    )
    if status != session.project.status:
        session.set_status(status)

# ---------------------------------------------------------------------------
# Editor + compliance panel
# ---------------------------------------------------------------------------

editor_col, panel_col = st.columns([3, 2])
active = session.active_chapter

with editor_col:
    st.header(active.title)
    content = st.text_area(
        "Conteúdo",
        value=active.content,
        height=420,
        key=f"editor_{active.id}_{st.session_state.get('editor_rev', 0)}",
        placeholder=f'Digite o conteúdo de "{active.title}"...',
        label_visibility="collapsed",
    )
    if content != active.content:
        session.update_content(content)

    count = session.character_count()
    limit_status = session.limit_status()
    st.progress(min(count / session.character_limit, 1.0))
    caption = f"{count:,} / {session.character_limit:,} caracteres".replace(",", ".")
    if limit_status == "over":
        st.error(caption + ". Limite excedido. Considere resumir o conteúdo.")
    elif limit_status == "warning":
        st.warning(caption)
    else:
        st.caption(caption)


def _render_suggestion(s: Suggestion) -> None:
    with st.container(border=True):
        if s.original_span:
            st.markdown(f"~~{s.original_span}~~ → **{s.replacement_text}**")
        else:
            st.markdown(f"**{s.replacement_text}**")
        st.caption(s.rationale + (f" · {s.citation}" if s.citation else ""))
        accept_col, reject_col = st.columns(2)
        if accept_col.button("Aceitar", key=f"accept_{s.id}", use_container_width=True):
            if session.accept(s.id):
                st.session_state.editor_rev = st.session_state.get("editor_rev", 0) + 1
            st.rerun()
        if reject_col.button("Ignorar", key=f"reject_{s.id}", use_container_width=True):
            session.reject(s.id)
            st.rerun()


with panel_col:
    st.subheader("Painel de Compliance")

    if st.button(
        "Analisando..." if session.is_analyzing else "Analisar com IA",
        disabled=session.is_analyzing,
        use_container_width=True,
    ):
        with st.spinner("Analisando..."):
            outcome = asyncio.run(session.analyze())
        if not isinstance(outcome.error, InsufficientContent) and not outcome.stale:
            try:
                UsageStore(load_config().usage.resolved_db_path).save_log(
                    build_analysis_log(
                        outcome,
                        chapter_label=active.title,
                        content_length=count,
                        term_alert_count=len(session.store.by_kind("term_alert")),
                        token_summary=st.session_state.llm.get_token_summary(),
                        project_title=session.project.title,
                        session_id=st.session_state.session_id,
                    )
                )
            except Exception:
                logger.warning("Failed to save usage log", exc_info=True)

    _flush_notices()

    suggestions = session.store.all()
    if suggestions:
        resolved = sum(1 for s in suggestions if s.status != "pending")
        st.metric("Score de Compliance", f"{session.score()}%")
        st.caption(f"Itens resolvidos: {resolved}/{len(suggestions)}")

    pending = session.store.pending()
    term_alerts = [s for s in pending if s.kind == "term_alert"]
    improvements = [s for s in pending if s.kind == "improvement"]

    if term_alerts:
        st.markdown(f"**Termos não recomendados ({len(term_alerts)})**")
        for s in term_alerts:
            _render_suggestion(s)

    if improvements:
        st.markdown(f"**Sugestões de melhoria ({len(improvements)})**")
        for s in improvements:
            _render_suggestion(s)

    if not pending and limit_status != "over":
        st.success("Tudo em conformidade! Nenhum alerta ou sugestão pendente.")
