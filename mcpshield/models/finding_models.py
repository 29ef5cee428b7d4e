"""
Finding Data Models — Severities, findings, and per-module results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# Total order used for sorting and threshold checks: lower rank = more important
SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
    Severity.INFO: 4,
}

SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 10,
    Severity.MEDIUM: 3,
    Severity.LOW: 1,
    Severity.INFO: 0,
}


class Finding(BaseModel):
    """A single detected issue. Produced once, never mutated."""

    model_config = ConfigDict(frozen=True)

    module: str = Field(..., description="Tag of the module that produced it")
    rule_id: str = Field(..., description="Rule or check identifier, e.g. 'shell-injection'")
    severity: Severity
    file: str = Field(..., description="Relative file path, manifest path, or '.'")
    line: int | None = Field(
        default=None, ge=1, description="1-based line; None for file-level findings"
    )
    message: str
    remediation: str = ""
    cwe: str | None = Field(default=None, description="Classification tag, e.g. 'CWE-78'")
    cve: str | None = Field(default=None, description="External advisory identifier")
    evidence: str | None = Field(default=None, description="Trimmed source line")
    occurrences: int | None = Field(default=None, ge=1)
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Module-specific extra data"
    )


class ModuleResult(BaseModel):
    """Output of one module run."""

    module: str
    findings: list[Finding] = Field(default_factory=list)
    error: str | None = None
