"""
Aggregator — Merges module results into one ordered, scored view.

A module that failed contributes zero findings and one error record;
modules that never ran contribute nothing but still appear in the
status map.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mcpshield.core.risk_scorer import sort_findings, summarize
from mcpshield.models.finding_models import Finding, ModuleResult
from mcpshield.models.report_models import ModuleError, ModuleStatus, RiskSummary


@dataclass
class Aggregate:
    findings: list[Finding]
    summary: RiskSummary
    modules: dict[str, ModuleStatus] = field(default_factory=dict)
    errors: list[ModuleError] = field(default_factory=list)


def aggregate(results: list[ModuleResult], known_modules: list[str] | None = None) -> Aggregate:
    """
    Merge module results.

    Args:
        results: Results in module scheduling order.
        known_modules: Every module tag, so skipped ones are reported as not run.

    Returns:
        Aggregate with findings stably sorted by severity.
    """
    merged: list[Finding] = []
    modules: dict[str, ModuleStatus] = {
        tag: ModuleStatus(ran=False) for tag in known_modules or []
    }
    errors: list[ModuleError] = []

    for result in results:
        if result.error:
            errors.append(ModuleError(module=result.module, error=result.error))
            modules[result.module] = ModuleStatus(ran=True, findings=0, error=result.error)
            continue

        merged.extend(result.findings)
        modules[result.module] = ModuleStatus(ran=True, findings=len(result.findings))

    findings = sort_findings(merged)
    return Aggregate(
        findings=findings,
        summary=summarize(findings),
        modules=modules,
        errors=errors,
    )
