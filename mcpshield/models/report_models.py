"""
Report Data Models — The single aggregate output of a scan run.

Serialised with ``model_dump(mode="json")``: severities and levels as
lowercase strings, timestamp as ISO-8601, findings in severity order.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from mcpshield.models.finding_models import Finding, Severity


RiskLevel = Literal["none", "low", "medium", "high", "critical"]


class TargetSummary(BaseModel):
    path: str
    server_name: str = "unknown"
    server_version: str = "unknown"
    files_scanned: int = 0


class RiskSummary(BaseModel):
    risk_score: int = Field(..., ge=0, le=100, description="Weighted score, clamped to 100")
    risk_level: RiskLevel
    total_findings: int = 0
    by_severity: dict[Severity, int] = Field(
        default_factory=lambda: {s: 0 for s in Severity}
    )


class ModuleStatus(BaseModel):
    """Whether a module ran, what it found, and how it failed."""

    ran: bool
    findings: int = 0
    error: str | None = None


class ModuleError(BaseModel):
    module: str
    error: str


class Report(BaseModel):
    """Full scan report, assembled once per run."""

    scan_id: str
    timestamp: datetime
    scanner_version: str
    target: TargetSummary
    summary: RiskSummary
    modules: dict[str, ModuleStatus] = Field(default_factory=dict)
    findings: list[Finding] = Field(default_factory=list)
    errors: list[ModuleError] = Field(default_factory=list)
    duration_ms: float = 0.0
