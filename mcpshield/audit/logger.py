"""
Audit Logger — JSON-lines trail of completed scans.

One record per scan: when it ran, what was scanned, how risky it looked,
which modules failed, and whether it passed its threshold.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mcpshield.config import settings
from mcpshield.models.report_models import Report
from mcpshield.models.scan_models import AuditEntry

logger = logging.getLogger("mcpshield.audit")


class AuditLogger:
    """Appends scan records to a JSON-lines file."""

    def __init__(self, log_path: str | None = None, enabled: bool | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self.enabled = settings.audit_log_enabled if enabled is None else enabled

    def record_scan(self, report: Report, passed: bool) -> AuditEntry:
        """Build the audit entry for a report and append it."""
        entry = AuditEntry(
            scan_id=report.scan_id,
            timestamp=report.timestamp.isoformat(),
            target_path=report.target.path,
            files_scanned=report.target.files_scanned,
            findings_found=report.summary.total_findings,
            risk_score=report.summary.risk_score,
            risk_level=report.summary.risk_level,
            module_errors=[e.module for e in report.errors],
            passed=passed,
            duration_ms=report.duration_ms,
        )
        if self.enabled:
            self._append(entry)
        return entry

    def _append(self, entry: AuditEntry) -> None:
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(entry.model_dump_json() + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit log: {e}")

    def read_recent(self, count: int = 50) -> list[AuditEntry]:
        """The last ``count`` readable entries, oldest first."""
        if not self.log_path.exists():
            return []

        entries: list[AuditEntry] = []
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for raw in f:
                    raw = raw.strip()
                    if not raw:
                        continue
                    try:
                        entries.append(AuditEntry.model_validate(json.loads(raw)))
                    except ValueError:
                        logger.debug("Skipping malformed audit line")
        except OSError as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        return entries[-count:] if count > 0 else []
