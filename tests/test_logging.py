"""Tests for AnalysisLog model and UsageStore."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from lei_auditor.logging.models import AnalysisLog, build_analysis_log
from lei_auditor.logging.usage_store import UsageStore
from lei_auditor.pipeline.analysis_coordinator import (
    AnalysisOutcome,
    MalformedResponse,
    TransportFailure,
)


class TestAnalysisLog:
    def test_create_minimal(self):
        log = AnalysisLog(chapter_label="Metodologia")

        assert log.session_id == "anonymous"
        assert log.success is True
        assert log.improvement_count == 0
        assert log.id

    def test_unique_ids(self):
        assert AnalysisLog(chapter_label="a").id != AnalysisLog(chapter_label="a").id

    def test_timestamp_auto(self):
        before = datetime.now()
        log = AnalysisLog(chapter_label="a")
        assert before <= log.timestamp <= datetime.now()


class TestBuildAnalysisLog:
    def test_success(self, make_improvement):
        outcome = AnalysisOutcome(
            suggestions=[make_improvement(0), make_improvement(1)], elapsed_seconds=2.5
        )
        log = build_analysis_log(
            outcome,
            chapter_label="Metodologia",
            content_length=1200,
            term_alert_count=3,
            token_summary={
                "input": 1000,
                "output": 200,
                "calls": [("claude-haiku-4-5-20251001", 1000, 200)],
            },
            project_title="Projeto X",
            session_id="s1",
        )

        assert log.improvement_count == 2
        assert log.term_alert_count == 3
        assert log.elapsed_seconds == 2.5
        assert log.total_input_tokens == 1000
        assert log.estimated_cost_usd == pytest.approx(1000 / 1e6 * 1.00 + 200 / 1e6 * 5.00)
        assert log.success is True
        assert log.error_message is None

    def test_malformed_counts_as_success(self):
        outcome = AnalysisOutcome(error=MalformedResponse("no json"))

        log = build_analysis_log(outcome, chapter_label="a", content_length=100)

        assert log.success is True
        assert log.error_message == "no json"
        assert log.estimated_cost_usd == 0.0

    def test_transport_failure(self):
        outcome = AnalysisOutcome(error=TransportFailure("timeout"))

        log = build_analysis_log(outcome, chapter_label="a", content_length=100)

        assert log.success is False
        assert log.error_message == "timeout"


@pytest.fixture
def usage_store(tmp_path: Path) -> UsageStore:
    return UsageStore(db_path=tmp_path / "test_usage.db")


class TestUsageStore:
    def test_save_and_get(self, usage_store: UsageStore):
        log = AnalysisLog(
            session_id="s1",
            chapter_label="Metodologia",
            project_title="Projeto X",
            improvement_count=4,
            estimated_cost_usd=0.01,
        )
        usage_store.save_log(log)

        logs = usage_store.get_logs()
        assert len(logs) == 1
        assert logs[0] == log

    def test_filter_by_session(self, usage_store: UsageStore):
        usage_store.save_log(AnalysisLog(session_id="a", chapter_label="x"))
        usage_store.save_log(AnalysisLog(session_id="b", chapter_label="y"))

        logs = usage_store.get_logs(session_id="a")

        assert [log.chapter_label for log in logs] == ["x"]

    def test_most_recent_first_with_limit(self, usage_store: UsageStore):
        now = datetime.now()
        for i in range(3):
            usage_store.save_log(
                AnalysisLog(chapter_label=f"c{i}", timestamp=now - timedelta(minutes=10 - i))
            )

        logs = usage_store.get_logs(limit=2)

        assert [log.chapter_label for log in logs] == ["c2", "c1"]

    def test_failed_log_roundtrip(self, usage_store: UsageStore):
        usage_store.save_log(AnalysisLog(chapter_label="x", success=False, error_message="boom"))

        log = usage_store.get_logs()[0]

        assert log.success is False
        assert log.error_message == "boom"

    def test_monthly_stats(self, usage_store: UsageStore):
        usage_store.save_log(
            AnalysisLog(
                chapter_label="a",
                total_input_tokens=100,
                total_output_tokens=50,
                estimated_cost_usd=0.5,
                improvement_count=2,
            )
        )
        usage_store.save_log(AnalysisLog(chapter_label="b", success=False, estimated_cost_usd=0.25))

        stats = usage_store.get_monthly_stats()

        assert stats["total_runs"] == 2
        assert stats["total_input_tokens"] == 100
        assert stats["total_cost_usd"] == pytest.approx(0.75)
        assert stats["total_improvements"] == 2
        assert stats["success_rate"] == pytest.approx(50.0)
        assert stats["month"] == datetime.now().strftime("%Y-%m")

    def test_empty_stats(self, usage_store: UsageStore):
        stats = usage_store.get_monthly_stats()

        assert stats["total_runs"] == 0
        assert stats["success_rate"] == 0.0

    def test_creates_parent_dir(self, tmp_path: Path):
        UsageStore(db_path=tmp_path / "nested" / "usage.db")

        assert (tmp_path / "nested" / "usage.db").exists()
