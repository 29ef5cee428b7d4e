"""
Metadata Auditor — package.json and manifest hygiene checks.

Each check maps one missing or risky field to one finding with a fixed
severity. No cross-file correlation.
"""

from __future__ import annotations

from mcpshield.config import settings
from mcpshield.models.context_models import Manifest, PackageMetadata, ScanContext
from mcpshield.models.finding_models import Finding, ModuleResult, Severity

MODULE = "meta"

# Substrings that make a package script suspicious
RISKY_SCRIPT_PATTERNS = ("curl", "wget", "eval", "base64", "nc ", "ncat", "/dev/tcp")

INSTALL_HOOKS = ("preinstall", "install", "postinstall")

MIN_TOOL_DESCRIPTION_LENGTH = 10

# check id -> (severity, message, remediation)
CHECKS: dict[str, tuple[Severity, str, str]] = {
    "missing-version": (
        Severity.LOW,
        "package.json missing version field",
        "Add a semantic version for tracking",
    ),
    "missing-author": (
        Severity.LOW,
        "No author or maintainer information",
        "Add author field for accountability",
    ),
    "missing-license": (
        Severity.LOW,
        "No license specified",
        "Add a license field",
    ),
    "risky-script": (
        Severity.HIGH,
        'Script "{script}" contains suspicious command: {pattern}',
        "Review this script for malicious behavior",
    ),
    "install-hook": (
        Severity.MEDIUM,
        "Package has install lifecycle hooks, a common supply chain attack vector",
        "Review install scripts carefully. Consider using --ignore-scripts for untrusted packages",
    ),
    "missing-package-json": (
        Severity.MEDIUM,
        "No package.json found",
        "Add a package.json with proper metadata",
    ),
    "manifest-missing-name": (
        Severity.LOW,
        "MCP manifest missing server name",
        'Add a "name" field to your manifest',
    ),
    "manifest-missing-version": (
        Severity.LOW,
        "MCP manifest missing version",
        'Add a "version" field',
    ),
    "manifest-no-capabilities": (
        Severity.MEDIUM,
        "MCP manifest declares no capabilities or tools",
        "Declare capabilities for transparency and permission auditing",
    ),
    "vague-tool-description": (
        Severity.LOW,
        'Tool "{tool}" has vague or missing description',
        "Provide clear descriptions of what each tool does",
    ),
}


def audit_metadata(context: ScanContext) -> ModuleResult:
    findings: list[Finding] = []

    if context.package is not None:
        findings.extend(_check_package(context.package))
    else:
        findings.append(_finding("missing-package-json", "."))

    if context.manifest is not None:
        findings.extend(_check_manifest(context.manifest))

    return ModuleResult(module=MODULE, findings=findings)


def _check_package(package: PackageMetadata) -> list[Finding]:
    package_file = settings.package_file
    findings: list[Finding] = []

    if not package.version:
        findings.append(_finding("missing-version", package_file))
    if not package.has_author:
        findings.append(_finding("missing-author", package_file))
    if not package.has_license:
        findings.append(_finding("missing-license", package_file))

    for name, command in package.scripts.items():
        lowered = command.lower()
        for pattern in RISKY_SCRIPT_PATTERNS:
            if pattern in lowered:
                findings.append(
                    _finding(
                        "risky-script",
                        package_file,
                        script=name,
                        pattern=pattern,
                        evidence=command,
                    )
                )

    if any(package.scripts.get(hook) for hook in INSTALL_HOOKS):
        findings.append(_finding("install-hook", package_file))

    return findings


def _check_manifest(manifest: Manifest) -> list[Finding]:
    findings: list[Finding] = []

    if not manifest.name:
        findings.append(_finding("manifest-missing-name", manifest.path))
    if not manifest.version:
        findings.append(_finding("manifest-missing-version", manifest.path))
    if manifest.capabilities is None and manifest.tools is None:
        findings.append(_finding("manifest-no-capabilities", manifest.path))

    for tool in manifest.tools or ():
        if not tool.description or len(tool.description) < MIN_TOOL_DESCRIPTION_LENGTH:
            findings.append(
                _finding("vague-tool-description", manifest.path, tool=tool.name or "unknown")
            )

    return findings


def _finding(check_id: str, file: str, evidence: str | None = None, **fields: str) -> Finding:
    severity, message, remediation = CHECKS[check_id]
    return Finding(
        module=MODULE,
        rule_id=check_id,
        severity=severity,
        file=file,
        message=message.format(**fields) if fields else message,
        remediation=remediation,
        evidence=evidence,
        metadata=dict(fields),
    )
