"""
Detection Engine — Applies the rule catalog to every source file.

Pure pattern matching over raw text. Unreadable files are skipped for
this module only and produce neither a finding nor an error.
"""

from __future__ import annotations

import logging

from mcpshield.collectors.discovery import read_source
from mcpshield.config import settings
from mcpshield.core.rule_catalog import RULE_REGISTRY
from mcpshield.models.context_models import ScanContext, SourceFile
from mcpshield.models.finding_models import Finding, ModuleResult
from mcpshield.models.rule_models import DetectionRule

logger = logging.getLogger("mcpshield.engine.static")

MODULE = "static"

_QUOTES = frozenset("'\"`")


class DetectionEngine:
    """
    Pattern-based vulnerability detector.

    Every rule is run over the full text of every file; each surviving
    match becomes one Finding carrying the rule's static metadata plus the
    computed line and evidence.
    """

    def __init__(
        self,
        rules: dict[str, DetectionRule] | None = None,
        evidence_max_length: int | None = None,
    ) -> None:
        self.rules = rules if rules is not None else RULE_REGISTRY
        self.evidence_max_length = (
            evidence_max_length
            if evidence_max_length is not None
            else settings.evidence_max_length
        )

    def run(self, context: ScanContext) -> ModuleResult:
        findings: list[Finding] = []
        for source_file in context.files:
            content = read_source(source_file)
            if content is None:
                continue
            findings.extend(self.scan_text(content, source_file.relative))

        logger.debug(f"{len(findings)} pattern matches across {len(context.files)} files")
        return ModuleResult(module=MODULE, findings=findings)

    def scan_file(self, source_file: SourceFile) -> list[Finding]:
        """Scan one file; an unreadable file yields nothing."""
        content = read_source(source_file)
        if content is None:
            return []
        return self.scan_text(content, source_file.relative)

    def scan_text(self, content: str, file: str) -> list[Finding]:
        findings: list[Finding] = []
        lines = content.split("\n")

        for rule in self.rules.values():
            for match in rule.pattern.finditer(content):
                offset = match.start()
                if rule.suppress_in_strings and is_in_string(content, offset):
                    continue

                line_num = line_number(content, offset)
                source_line = lines[line_num - 1].strip()

                findings.append(
                    Finding(
                        module=MODULE,
                        rule_id=rule.id,
                        severity=rule.severity,
                        file=file,
                        line=line_num,
                        message=rule.message,
                        remediation=rule.remediation,
                        cwe=rule.cwe,
                        evidence=source_line[: self.evidence_max_length],
                    )
                )

        return findings


def line_number(content: str, offset: int) -> int:
    """1-based line of a character offset."""
    return content.count("\n", 0, offset) + 1


def is_in_string(content: str, position: int) -> bool:
    """Whether ``position`` sits inside an open string literal.

    Toggles quote state from the start of the file. Only the quote that
    opened a literal can close it and a backslash skips the next
    character; anything smarter (regex literals, comments) is out of reach
    of this scanner.
    """
    open_quote: str | None = None
    i = 0
    while i < position:
        ch = content[i]
        if open_quote is not None and ch == "\\":
            i += 2
            continue
        if ch in _QUOTES:
            if open_quote is None:
                open_quote = ch
            elif ch == open_quote:
                open_quote = None
        i += 1
    return open_quote is not None
