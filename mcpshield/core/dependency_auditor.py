"""
Dependency Auditor — Normalizes npm audit / npm outdated JSON into findings.

Missing or malformed payloads are not errors: the module reports whatever
data exists, possibly nothing. An unavailable vulnerability audit is the
exception: it fails the whole module, and `npm outdated` is not attempted,
so outdated-package findings are lost with it.
"""

from __future__ import annotations

import logging
from typing import Any

from mcpshield.collectors.npm import DependencyAuditError, NpmRunner
from mcpshield.config import settings
from mcpshield.models.context_models import ScanContext
from mcpshield.models.finding_models import Finding, ModuleResult, Severity

logger = logging.getLogger("mcpshield.engine.deps")

MODULE = "deps"

# npm vocabulary -> internal severity
SEVERITY_MAP: dict[str, Severity] = {
    "critical": Severity.CRITICAL,
    "high": Severity.HIGH,
    "moderate": Severity.MEDIUM,
    "low": Severity.LOW,
    "info": Severity.INFO,
}


def normalize_severity(vendor_severity: Any) -> Severity:
    """Map a vendor severity; anything unrecognised becomes medium."""
    if isinstance(vendor_severity, str):
        return SEVERITY_MAP.get(vendor_severity.lower(), Severity.MEDIUM)
    return Severity.MEDIUM


def vulnerability_findings(audit_data: dict[str, Any] | None) -> list[Finding]:
    """Findings from an `npm audit --json` payload."""
    if not audit_data:
        return []
    vulnerabilities = audit_data.get("vulnerabilities")
    if not isinstance(vulnerabilities, dict):
        return []

    package_file = settings.package_file
    findings: list[Finding] = []

    for pkg, vuln in vulnerabilities.items():
        if not isinstance(vuln, dict):
            continue
        severity = normalize_severity(vuln.get("severity"))

        cve: str | None = None
        title = f"{pkg} vulnerability"
        via = vuln.get("via")
        if isinstance(via, list):
            # First structured cause wins; string entries only name other packages
            for cause in via:
                if isinstance(cause, dict):
                    cve = cause.get("cve") or None
                    title = cause.get("title") or title
                    break

        fix = vuln.get("fixAvailable")
        if fix:
            fix_target = fix.get("name", pkg) if isinstance(fix, dict) else pkg
            remediation = f"Fix available: update {fix_target}"
        else:
            remediation = "No automated fix available, review manually"

        findings.append(
            Finding(
                module=MODULE,
                rule_id="vulnerable-dependency",
                severity=severity,
                file=package_file,
                message=f"{pkg} has a known {severity.value} vulnerability"
                + (f" ({cve})" if cve else ""),
                remediation=remediation,
                cve=cve,
                metadata={
                    "package": pkg,
                    "version": vuln.get("range") or "unknown",
                    "title": title,
                },
            )
        )

    return findings


def outdated_findings(outdated_data: dict[str, Any] | None) -> list[Finding]:
    """Findings from an `npm outdated --json` payload."""
    if not outdated_data:
        return []

    package_file = settings.package_file
    findings: list[Finding] = []

    for pkg, info in outdated_data.items():
        if not isinstance(info, dict):
            continue
        current = info.get("current")
        wanted = info.get("wanted")
        latest = info.get("latest")
        if current == latest:
            continue

        findings.append(
            Finding(
                module=MODULE,
                rule_id="outdated-package",
                severity=Severity.MEDIUM if current != wanted else Severity.LOW,
                file=package_file,
                message=f"{pkg} is outdated: {current or 'not installed'} -> {latest}",
                remediation=f"Run: npm update {pkg}",
                metadata={"package": pkg, "version": current, "wanted": wanted, "latest": latest},
            )
        )

    return findings


async def audit_dependencies(context: ScanContext, runner: NpmRunner) -> ModuleResult:
    """
    Run both npm calls and normalize their output.

    A failing vulnerability audit propagates as DependencyAuditError so the
    worker records it as this module's error. A failing outdated check only
    loses the outdated findings.
    """
    audit_data = await runner.audit(context.target_path)

    try:
        outdated_data = await runner.outdated(context.target_path)
    except DependencyAuditError as e:
        logger.warning(f"Outdated-package check unavailable: {e}")
        outdated_data = None

    findings = vulnerability_findings(audit_data) + outdated_findings(outdated_data)
    return ModuleResult(module=MODULE, findings=findings)
