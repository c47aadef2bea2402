"""KB cleanup CLI.

Обслуживание базы знаний страхового чат-бота.

Usage:
    kb-cleanup analyze [--output kb-analysis-report.json] [--concurrency 4]
    kb-cleanup fix [--report kb-analysis-report.json] [--dry-run]
    kb-cleanup approve [--company RESO --company VSK] [--limit 50]
    kb-cleanup stats
    kb-cleanup smoke
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from loguru import logger

from kb_cleanup.approver import approve_documents, collect_stats
from kb_cleanup.client import KBClient
from kb_cleanup.config import KBCleanupConfig, load_config
from kb_cleanup.db import create_session_factory
from kb_cleanup.fixer import KBFixer
from kb_cleanup.report import AnalysisReport
from kb_cleanup.runner import BatchRunner
from kb_cleanup.smoke import run_smoke_checks


class InterceptHandler(logging.Handler):
    """Перенаправление stdlib logging в loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logger(log_level: str = "INFO") -> None:
    """Configure loguru logger."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    logging.basicConfig(handlers=[InterceptHandler()], level=log_level, force=True)


def _client(config: KBCleanupConfig) -> KBClient:
    return KBClient(config.api.base_url, timeout=config.api.timeout)


def cmd_analyze(args: argparse.Namespace, config: KBCleanupConfig) -> int:
    output = args.output or config.runner.report_path
    concurrency = args.concurrency or config.runner.concurrency

    logger.info(f"Анализ базы знаний: {config.api.base_url}")
    with _client(config) as client:
        runner = BatchRunner(client, delay=config.runner.delay, concurrency=concurrency)
        report = runner.run()

    if report.total_documents == 0:
        logger.warning("Документы не найдены")
        return 0

    print(report.render())
    path = report.write(output)
    logger.info(f"Отчет сохранен в файл: {path}")
    return 0


def cmd_fix(args: argparse.Namespace, config: KBCleanupConfig) -> int:
    report_path = args.report or config.runner.report_path
    try:
        report = AnalysisReport.load(report_path)
    except (OSError, ValueError) as e:
        logger.error(f"Ошибка загрузки отчета анализа: {e}")
        return 1
    logger.info(f"Загружен отчет анализа: {report.timestamp}")

    with _client(config) as client:
        fix_report = KBFixer(client, delay=config.runner.delay, dry_run=args.dry_run).apply(report)

    print(fix_report.render())
    if not args.dry_run:
        path = fix_report.write(args.output or config.runner.fix_report_path)
        logger.info(f"Отчет об исправлениях сохранен в файл: {path}")
    return 0 if fix_report.total_errors == 0 else 1


def cmd_approve(args: argparse.Namespace, config: KBCleanupConfig) -> int:
    companies = args.company or config.approval.companies
    limit = args.limit or config.approval.limit

    session_factory = create_session_factory(config.database.url)
    with session_factory() as session:
        result = approve_documents(session, companies, limit=limit, approved_by=config.approval.approved_by)

    for company in result.companies:
        print(f"{company.company_code}: одобрено {company.approved}")
        if company.sample_titles:
            print(f"  Примеры: {', '.join(company.sample_titles)}")
    print(f"Одобренных документов: {result.total_approved}")
    print(f"Чанков для поиска: {result.searchable_chunks}")
    return 0


def cmd_stats(args: argparse.Namespace, config: KBCleanupConfig) -> int:
    session_factory = create_session_factory(config.database.url)
    with session_factory() as session:
        print(collect_stats(session).render())
    return 0


def cmd_smoke(args: argparse.Namespace, config: KBCleanupConfig) -> int:
    with _client(config) as client:
        checks = run_smoke_checks(client)

    for check in checks:
        mark = "OK" if check.ok else "FAIL"
        print(f"[{mark}] {check.name}")
        print(check.summary)
    return 0 if all(c.ok for c in checks) else 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="kb-cleanup",
        description="Analyze and clean up the insurance knowledge base",
    )
    ap.add_argument("--config", "-c", help="Path to kb_cleanup.yaml")
    ap.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("analyze", help="Classify every KB document and write a report")
    p.add_argument("--output", "-o", help="Report path (default: from config)")
    p.add_argument("--concurrency", type=int, help="Parallel content fetches")
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("fix", help="Apply an analysis report through the API")
    p.add_argument("--report", "-r", help="Analysis report path (default: from config)")
    p.add_argument("--output", "-o", help="Fix report path (default: from config)")
    p.add_argument("--dry-run", action="store_true", help="Log planned changes only")
    p.set_defaults(func=cmd_fix)

    p = sub.add_parser("approve", help="Approve unapproved documents per company")
    p.add_argument("--company", action="append", help="Company code (repeatable)")
    p.add_argument("--limit", type=int, help="Documents per company")
    p.set_defaults(func=cmd_approve)

    p = sub.add_parser("stats", help="Print database statistics")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("smoke", help="Run API smoke checks")
    p.set_defaults(func=cmd_smoke)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logger(args.log_level)
    config = load_config(args.config)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
