"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lei_auditor.clients.llm_client import LLMClient
from lei_auditor.config import AppConfig, load_config
from lei_auditor.logging.models import build_analysis_log
from lei_auditor.logging.usage_store import UsageStore
from lei_auditor.models.chapter import Chapter
from lei_auditor.models.suggestion import Suggestion
from lei_auditor.models.timesheet import Project, TimeEntry
from lei_auditor.pipeline.analysis_coordinator import (
    AnalysisOutcome,
    InsufficientContent,
    Notice,
    TransportFailure,
)
from lei_auditor.pipeline.audit_session import AuditSession
from lei_auditor.pipeline.hours_validator import validate_entry
from lei_auditor.rules.loader import load_rules

app = typer.Typer(
    name="lei-auditor",
    help="Auditoria de relatórios de P&D (Lei do Bem)",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

NOTICE_STYLE = {"info": "cyan", "success": "green", "error": "red"}
LIMIT_STYLE = {"ok": "dim", "warning": "yellow", "over": "red"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_notice(notice: Notice) -> None:
    style = NOTICE_STYLE[notice.level]
    console.print(f"[{style}]{notice.message}[/{style}]")


def _read_chapter(file: Path) -> str:
    if not file.exists():
        console.print(f"[red]Arquivo não encontrado: {file}[/red]")
        raise typer.Exit(1)
    return file.read_text(encoding="utf-8")


def _build_session(config: AppConfig, reviewer, chapter_label: str) -> AuditSession:
    try:
        rule_set = load_rules(config.audit.resolved_rules_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erro ao carregar regras: {e}[/red]")
        raise typer.Exit(1)
    return AuditSession(
        reviewer,
        chapters=[Chapter(id="1", title=chapter_label, order=1)],
        rules=rule_set,
        min_content_length=config.audit.min_content_length,
        character_limit=config.audit.character_limit,
        chapter_target_length=config.audit.chapter_target_length,
        on_notice=_print_notice,
    )


def _suggestion_table(title: str, suggestions: list[Suggestion]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Posição", justify="right")
    table.add_column("Texto")
    table.add_column("Sugestão")
    table.add_column("Motivo")
    for s in suggestions:
        where = f"{s.range.start}-{s.range.end}" if s.range.end else "-"
        reason = s.rationale + (f" ({s.citation})" if s.citation else "")
        table.add_row(where, s.original_span, s.replacement_text, reason)
    return table


def _fmt_count(n: int) -> str:
    return f"{n:,}".replace(",", ".")


def _print_summary(session: AuditSession) -> None:
    count = session.character_count()
    limit_status = session.limit_status()
    style = LIMIT_STYLE[limit_status]
    console.print(
        Panel(
            f"Score de compliance: [bold]{session.score()}%[/bold]\n"
            f"Caracteres: [{style}]{_fmt_count(count)} / "
            f"{_fmt_count(session.character_limit)}[/{style}]",
            title=session.active_chapter.title,
        )
    )
    if limit_status == "over":
        console.print(
            f"[red]O texto excede o limite de {session.character_limit} caracteres. "
            "Considere resumir o conteúdo.[/red]"
        )


@app.command()
def scan(
    file: Path = typer.Argument(help="Arquivo do capítulo (HTML ou texto)"),
    chapter: str = typer.Option("Capítulo", "--chapter", "-c", help="Nome do capítulo"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Saída detalhada"),
) -> None:
    """Verifica termos não recomendados em um capítulo."""
    _setup_logging(verbose)
    config = load_config()
    content = _read_chapter(file)
    session = _build_session(config, reviewer=None, chapter_label=chapter)
    alerts = session.update_content(content)

    if alerts:
        console.print(_suggestion_table(f"Termos não recomendados ({len(alerts)})", alerts))
    else:
        console.print("[green]Nenhum termo não recomendado encontrado.[/green]")
    _print_summary(session)


@app.command()
def analyze(
    file: Path = typer.Argument(help="Arquivo do capítulo (HTML ou texto)"),
    chapter: str = typer.Option(..., "--chapter", "-c", help="Nome do capítulo"),
    project: str = typer.Option(None, "--project", "-p", help="Título do projeto"),
    no_log: bool = typer.Option(False, "--no-log", help="Não registrar a execução"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Saída detalhada"),
) -> None:
    """Analisa um capítulo com IA e lista as sugestões de melhoria."""
    _setup_logging(verbose)
    config = load_config()
    content = _read_chapter(file)

    llm = LLMClient(
        timeout=config.llm.timeout,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    session = _build_session(config, reviewer=llm, chapter_label=chapter)
    alerts = session.update_content(content)

    with console.status("Analisando..."):
        outcome = asyncio.run(session.analyze())

    if alerts:
        console.print(_suggestion_table(f"Termos não recomendados ({len(alerts)})", alerts))
    if outcome.suggestions:
        console.print(
            _suggestion_table(f"Sugestões de melhoria ({len(outcome.suggestions)})", outcome.suggestions)
        )
    _print_summary(session)

    reviewed = not isinstance(outcome.error, InsufficientContent)
    if reviewed and not no_log:
        _save_log(config, session, outcome, llm, project, len(alerts))
    if isinstance(outcome.error, TransportFailure):
        raise typer.Exit(1)


def _save_log(
    config: AppConfig,
    session: AuditSession,
    outcome: AnalysisOutcome,
    llm: LLMClient,
    project_title: str | None,
    alert_count: int,
) -> None:
    try:
        store = UsageStore(config.usage.resolved_db_path)
        store.save_log(
            build_analysis_log(
                outcome,
                chapter_label=session.active_chapter.title,
                content_length=session.character_count(),
                term_alert_count=alert_count,
                token_summary=llm.get_token_summary(),
                project_title=project_title,
            )
        )
    except Exception:
        logger.warning("Failed to save usage log", exc_info=True)


@app.command()
def rules() -> None:
    """Lista os termos não recomendados configurados."""
    config = load_config()
    try:
        rule_set = load_rules(config.audit.resolved_rules_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erro ao carregar regras: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Termos não recomendados ({len(rule_set)})")
    table.add_column("Termo")
    table.add_column("Sugestão")
    table.add_column("Motivo")
    table.add_column("Referência")
    for rule in rule_set:
        table.add_row(rule.term, rule.replacement, rule.rationale, rule.citation or "")
    console.print(table)


def _parse_date(value: str) -> date:
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise typer.BadParameter(f"Data inválida: {value} (use AAAA-MM-DD ou DD/MM/AAAA)")


@app.command("check-hours")
def check_hours(
    start: str = typer.Option(..., "--start", help="Início da vigência do projeto"),
    end: str = typer.Option(..., "--end", help="Fim da vigência do projeto"),
    work_date: str = typer.Option(..., "--date", help="Data do lançamento"),
    hours: float = typer.Option(..., "--hours", help="Horas a lançar"),
    logged: float = typer.Option(0.0, "--logged", help="Horas já lançadas no dia"),
    hard_lock: bool = typer.Option(False, "--hard-lock", help="Bloquear fora da vigência"),
) -> None:
    """Valida um lançamento de horas contra a vigência do projeto."""
    config = load_config()
    project = Project(
        id="cli",
        name="Projeto",
        start_date=_parse_date(start),
        end_date=_parse_date(end),
        hard_lock_vigency=hard_lock,
    )
    day = _parse_date(work_date)
    existing = [TimeEntry(project_id="cli", work_date=day, hours=logged)] if logged > 0 else []
    result = validate_entry(
        project, day, hours, existing, daily_limit=config.timesheet.daily_hour_limit
    )

    if not result.valid:
        console.print(f"[red]{result.warning}[/red]")
        raise typer.Exit(1)
    if result.warning:
        console.print(f"[yellow]{result.warning}[/yellow]")
    else:
        console.print("[green]Lançamento válido.[/green]")


@app.command()
def usage(
    limit: int = typer.Option(10, "--limit", "-n", help="Número de execuções exibidas"),
) -> None:
    """Mostra as últimas análises e o consumo do mês."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    stats = store.get_monthly_stats()
    console.print(
        Panel(
            f"Execuções: {stats['total_runs']} | Sucesso: {stats['success_rate']:.0f}%\n"
            f"Tokens: {stats['total_input_tokens']} entrada / {stats['total_output_tokens']} saída\n"
            f"Custo estimado: ${stats['total_cost_usd']:.4f}",
            title=f"Uso em {stats['month']}",
        )
    )

    logs = store.get_logs(limit=limit)
    if not logs:
        return
    table = Table()
    table.add_column("Data")
    table.add_column("Capítulo")
    table.add_column("Sugestões", justify="right")
    table.add_column("Status")
    for log in logs:
        status = "[green]ok[/green]" if log.success else f"[red]{log.error_message or 'erro'}[/red]"
        table.add_row(
            log.timestamp.strftime("%d/%m/%Y %H:%M"),
            log.chapter_label,
            str(log.improvement_count),
            status,
        )
    console.print(table)


if __name__ == "__main__":
    app()
