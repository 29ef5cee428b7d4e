"""
mcpshield — POST /scan endpoint.

Scans an MCP server directory, applies the severity filter, evaluates the
pass/fail threshold, and records the run in the audit log.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from mcpshield.api.dependencies import get_audit_logger, get_scan_worker
from mcpshield.audit.logger import AuditLogger
from mcpshield.collectors.discovery import ScanTargetError
from mcpshield.core.risk_scorer import exceeds_threshold, filter_by_severity
from mcpshield.models.scan_models import AuditEntry, ScanRequest, ScanResponse
from mcpshield.workers.scan_worker import ScanWorker

logger = logging.getLogger("mcpshield.scan")
router = APIRouter()


@router.post("/scan", response_model=ScanResponse)
async def scan_target(
    req: ScanRequest,
    worker: ScanWorker = Depends(get_scan_worker),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Scan a server directory and return the ranked report."""
    try:
        report = await worker.run_scan(req.target_path, modules=req.modules)
    except ScanTargetError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Threshold is judged on every finding; the filter only trims what is returned
    passed = not exceeds_threshold(report.findings, req.threshold)
    audit.record_scan(report, passed)

    visible = filter_by_severity(report.findings, req.min_severity)
    if len(visible) != len(report.findings):
        report = report.model_copy(update={"findings": visible})

    return ScanResponse(
        message="scan_complete",
        scan_id=report.scan_id,
        passed=passed,
        report=report,
    )


@router.get("/scans/recent", response_model=list[AuditEntry])
async def recent_scans(
    count: int = Query(default=20, ge=1, le=500),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Most recent audit records, oldest first."""
    return audit.read_recent(count)
