"""
Capability Auditor — Declared vs. observed capabilities.

With a manifest, reports capabilities used but not declared and
capabilities declared but never used. Without one, reports dangerous
capabilities that are used at all, recommending a manifest.

Only the first occurrence's location is kept for each capability,
together with the total occurrence count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mcpshield.collectors.discovery import read_source
from mcpshield.core.capability_catalog import (
    CAPABILITY_CATALOG,
    DANGEROUS_CAPABILITIES,
    PROCESS_EXEC,
)
from mcpshield.core.detection_engine import line_number
from mcpshield.models.context_models import Manifest, ScanContext, SourceFile
from mcpshield.models.finding_models import Finding, ModuleResult, Severity
from mcpshield.models.rule_models import CapabilityRule

logger = logging.getLogger("mcpshield.engine.perms")

MODULE = "perms"


@dataclass
class CapabilityUsage:
    """Where a capability was first seen and how often it appears."""

    capability: str
    file: str
    line: int
    match: str
    occurrences: int = 0


def collect_usage(
    files: tuple[SourceFile, ...] | list[SourceFile],
    catalog: tuple[CapabilityRule, ...] = CAPABILITY_CATALOG,
) -> dict[str, CapabilityUsage]:
    """Scan every file against every capability's usage signatures."""
    usage: dict[str, CapabilityUsage] = {}

    for source_file in files:
        content = read_source(source_file)
        if content is None:
            continue

        for rule in catalog:
            matches = [m for pattern in rule.patterns for m in pattern.finditer(content)]
            if not matches:
                continue

            entry = usage.get(rule.capability)
            if entry is None:
                first = min(matches, key=lambda m: m.start())
                entry = CapabilityUsage(
                    capability=rule.capability,
                    file=source_file.relative,
                    line=line_number(content, first.start()),
                    match=first.group(0),
                )
                usage[rule.capability] = entry
            entry.occurrences += len(matches)

    return usage


def audit_capabilities(
    context: ScanContext,
    catalog: tuple[CapabilityRule, ...] = CAPABILITY_CATALOG,
) -> ModuleResult:
    usage = collect_usage(context.files, catalog)
    logger.debug(f"Observed capabilities: {sorted(usage)}")

    if context.manifest is not None:
        findings = _compare_with_manifest(context.manifest, usage)
    else:
        findings = _advise_without_manifest(usage)

    return ModuleResult(module=MODULE, findings=findings)


def _compare_with_manifest(
    manifest: Manifest, usage: dict[str, CapabilityUsage]
) -> list[Finding]:
    findings: list[Finding] = []
    declared = manifest.declared_capabilities

    for capability, used in usage.items():
        if capability in declared:
            continue
        plural = "s" if used.occurrences > 1 else ""
        findings.append(
            Finding(
                module=MODULE,
                rule_id="undeclared-capability",
                severity=Severity.HIGH if capability == PROCESS_EXEC else Severity.MEDIUM,
                file=used.file,
                line=used.line,
                message=(
                    f"Uses {capability} without declaring it in manifest "
                    f"({used.occurrences} occurrence{plural})"
                ),
                remediation=f'Add "{capability}" to capabilities in {manifest.path}',
                evidence=used.match,
                occurrences=used.occurrences,
                metadata={"capability": capability},
            )
        )

    for capability in sorted(declared):
        if capability in usage:
            continue
        findings.append(
            Finding(
                module=MODULE,
                rule_id="unused-capability",
                severity=Severity.INFO,
                file=manifest.path,
                line=1,
                message=f'Capability "{capability}" declared but not used in source code',
                remediation=(
                    f'Remove "{capability}" from capabilities if not needed '
                    "(principle of least privilege)"
                ),
                metadata={"capability": capability},
            )
        )

    return findings


def _advise_without_manifest(usage: dict[str, CapabilityUsage]) -> list[Finding]:
    findings: list[Finding] = []
    for capability, used in usage.items():
        if capability not in DANGEROUS_CAPABILITIES:
            continue
        findings.append(
            Finding(
                module=MODULE,
                rule_id="no-manifest-dangerous-capability",
                severity=Severity.LOW,
                file=used.file,
                line=used.line,
                message=(
                    f"No MCP manifest found, but code uses {capability} "
                    f"({used.occurrences} times)"
                ),
                remediation="Add a server.json manifest declaring capabilities for transparency",
                evidence=used.match,
                occurrences=used.occurrences,
                metadata={"capability": capability},
            )
        )
    return findings
