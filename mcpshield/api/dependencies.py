"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from mcpshield.audit.logger import AuditLogger
from mcpshield.collectors.npm import NpmRunner
from mcpshield.workers.scan_worker import ScanWorker


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_npm_runner() -> NpmRunner:
    return NpmRunner()


@lru_cache
def get_scan_worker() -> ScanWorker:
    """Shared scan worker singleton."""
    return ScanWorker(npm_runner=get_npm_runner())
