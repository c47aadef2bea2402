# SPDX-License-Identifier: MIT
"""Загрузчик настроек и схема конфигурации

Модуль загружает config/kb_cleanup.yaml и проверяет значения.
Переменные окружения KB_API_BASE и KB_DATABASE_URL имеют приоритет
над файлом.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "kb_cleanup.yaml"


class ApiConfig(BaseModel):
    """Настройки API хранилища документов"""

    base_url: str = Field(default="http://localhost:3000")
    timeout: float = Field(default=10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class RunnerConfig(BaseModel):
    """Настройки пакетного анализа"""

    delay: float = Field(default=0.1, ge=0)
    concurrency: int = Field(default=1, ge=1)
    report_path: str = Field(default="kb-analysis-report.json")
    fix_report_path: str = Field(default="kb-fix-report.json")


class DatabaseConfig(BaseModel):
    """Подключение к базе данных backend"""

    url: str = Field(default="sqlite:///kb.db")


class ApprovalConfig(BaseModel):
    """Параметры массового одобрения"""

    companies: list[str] = Field(default_factory=lambda: ["RESO", "VSK", "SOGAZ"])
    limit: int = Field(default=50, ge=1)
    approved_by: str = Field(default="admin")


class KBCleanupConfig(BaseModel):
    """Полная конфигурация"""

    api: ApiConfig = Field(default_factory=ApiConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    approval: ApprovalConfig = Field(default_factory=ApprovalConfig)


def load_config(config_path: Path | str | None = None) -> KBCleanupConfig:
    """Загрузить конфигурацию

    Args:
        config_path: путь к YAML. None - $KB_CLEANUP_CONFIG или путь по умолчанию.

    Returns:
        KBCleanupConfig: проверенная конфигурация

    Raises:
        FileNotFoundError: явно указанный файл не найден
        pydantic.ValidationError: неверные значения
    """
    explicit = config_path is not None or "KB_CLEANUP_CONFIG" in os.environ
    if config_path is None:
        config_path = os.environ.get("KB_CLEANUP_CONFIG", DEFAULT_CONFIG_PATH)
    config_path = Path(config_path)

    raw_config: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    elif explicit:
        raise FileNotFoundError(f"Файл настроек не найден: {config_path}")

    if os.environ.get("KB_API_BASE"):
        raw_config.setdefault("api", {})["base_url"] = os.environ["KB_API_BASE"]
    if os.environ.get("KB_DATABASE_URL"):
        raw_config.setdefault("database", {})["url"] = os.environ["KB_DATABASE_URL"]

    return KBCleanupConfig(**raw_config)


_cached_config: KBCleanupConfig | None = None


def get_config(reload: bool = False) -> KBCleanupConfig:
    """Кэшированная конфигурация

    Args:
        reload: перечитать файл

    Returns:
        KBCleanupConfig
    """
    global _cached_config  # noqa: PLW0603

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config
