"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    timeout: int = 120
    max_tokens: int = 4096
    temperature: float = 0.0

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")
        if not 1 <= self.max_tokens <= 64000:
            raise ValueError(f"llm.max_tokens must be between 1 and 64000, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be between 0 and 1, got {self.temperature}")


@dataclass(frozen=True)
class AuditConfig:
    min_content_length: int = 50
    character_limit: int = 4000
    chapter_target_length: int = 500
    rules_path: str | None = None

    def __post_init__(self) -> None:
        if self.min_content_length < 0:
            raise ValueError(
                f"audit.min_content_length must be >= 0, got {self.min_content_length}"
            )
        if self.character_limit < 1:
            raise ValueError(f"audit.character_limit must be >= 1, got {self.character_limit}")
        if self.chapter_target_length < 1:
            raise ValueError(
                f"audit.chapter_target_length must be >= 1, got {self.chapter_target_length}"
            )

    @property
    def resolved_rules_path(self) -> Path | None:
        if self.rules_path is None:
            return None
        return Path(self.rules_path).expanduser()


@dataclass(frozen=True)
class TimesheetConfig:
    daily_hour_limit: float = 8.0

    def __post_init__(self) -> None:
        if not 0 < self.daily_hour_limit <= 24:
            raise ValueError(
                f"timesheet.daily_hour_limit must be in (0, 24], got {self.daily_hour_limit}"
            )


@dataclass(frozen=True)
class UsageConfig:
    db_path: str = "~/.lei-auditor/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    timesheet: TimesheetConfig = field(default_factory=TimesheetConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        audit=AuditConfig(**raw.get("audit", {})),
        timesheet=TimesheetConfig(**raw.get("timesheet", {})),
        usage=UsageConfig(**raw.get("usage", {})),
    )
