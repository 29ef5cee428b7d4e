"""
Scan Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by FastAPI endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from mcpshield.models.finding_models import Severity
from mcpshield.models.report_models import Report


ModuleName = Literal["static", "deps", "perms", "meta"]


class ScanRequest(BaseModel):
    """Request body for /scan."""

    target_path: str = Field(..., min_length=1, description="Directory of the MCP server to scan")
    modules: list[ModuleName] | None = Field(
        default=None, description="Modules to run; all when omitted"
    )
    min_severity: Severity = Field(
        default=Severity.INFO, description="Drop findings less important than this"
    )
    threshold: Severity = Field(
        default=Severity.HIGH, description="Fail the scan when any finding is at or above this"
    )


class AuditEntry(BaseModel):
    """Audit metadata for a scan."""

    scan_id: str
    timestamp: str
    target_path: str
    files_scanned: int
    findings_found: int
    risk_score: int
    risk_level: str
    module_errors: list[str] = Field(default_factory=list)
    passed: bool = True
    duration_ms: float = 0.0


class ScanResponse(BaseModel):
    """Top-level response for the scan endpoint."""

    message: str = "scan_complete"
    scan_id: str = ""
    passed: bool = True
    report: Report | None = None
