"""
Risk Scoring Engine — Deterministic weighted score over findings.

Risk Score = min(100, Σ severity_weight)
    critical=25, high=10, medium=3, low=1, info=0

Levels (inclusive lower bounds): 0 none, 1 low, 25 medium, 50 high, 75 critical.
"""

from __future__ import annotations

from collections.abc import Iterable

from mcpshield.models.finding_models import (
    SEVERITY_RANK,
    SEVERITY_WEIGHTS,
    Finding,
    Severity,
)
from mcpshield.models.report_models import RiskLevel, RiskSummary

MAX_SCORE = 100

# (lower bound, level), highest first
LEVEL_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (75, "critical"),
    (50, "high"),
    (25, "medium"),
    (1, "low"),
]


def compute_risk_score(findings: Iterable[Finding]) -> int:
    score = sum(SEVERITY_WEIGHTS[f.severity] for f in findings)
    return min(score, MAX_SCORE)


def risk_level(score: int) -> RiskLevel:
    for lower_bound, level in LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return "none"


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Most important first; ties keep arrival order."""
    return sorted(findings, key=lambda f: SEVERITY_RANK[f.severity])


def at_or_above(severity: Severity, threshold: Severity) -> bool:
    """Whether ``severity`` is at least as important as ``threshold``."""
    return SEVERITY_RANK[severity] <= SEVERITY_RANK[threshold]


def filter_by_severity(findings: Iterable[Finding], min_severity: Severity) -> list[Finding]:
    return [f for f in findings if at_or_above(f.severity, min_severity)]


def exceeds_threshold(findings: Iterable[Finding], threshold: Severity) -> bool:
    """True when any finding is at or above the failure threshold."""
    return any(at_or_above(f.severity, threshold) for f in findings)


def summarize(findings: list[Finding]) -> RiskSummary:
    """Score, level and per-severity counts of a final finding sequence."""
    by_severity = {s: 0 for s in Severity}
    for f in findings:
        by_severity[f.severity] += 1

    score = compute_risk_score(findings)
    return RiskSummary(
        risk_score=score,
        risk_level=risk_level(score),
        total_findings=len(findings),
        by_severity=by_severity,
    )
