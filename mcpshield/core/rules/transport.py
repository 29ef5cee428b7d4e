"""
Transport Rules — Request handling and network exposure.
"""

from __future__ import annotations

import re

from mcpshield.models.finding_models import Severity
from mcpshield.models.rule_models import DetectionRule


MISSING_INPUT_VALIDATION = DetectionRule(
    id="missing-input-validation",
    severity=Severity.MEDIUM,
    pattern=re.compile(r"\b(?:req\.body|req\.params|req\.query)\s*\.\s*\w+"),
    message="Direct use of request parameters without visible validation",
    remediation="Validate and sanitize all request inputs before use",
    cwe="CWE-20",
)

HTTP_NOT_HTTPS = DetectionRule(
    id="http-not-https",
    severity=Severity.MEDIUM,
    pattern=re.compile(r"['\"`]http://(?!localhost|127\.0\.0\.1|0\.0\.0\.0)"),
    message="HTTP URL in production code (should use HTTPS)",
    remediation="Use HTTPS for all external connections",
    cwe="CWE-319",
)

CORS_WILDCARD = DetectionRule(
    id="cors-wildcard",
    severity=Severity.MEDIUM,
    pattern=re.compile(r"['\"`]\*['\"`]\s*[,)]"),
    message="Possible wildcard CORS, verify this is intentional",
    remediation="Restrict CORS to specific origins in production",
    cwe="CWE-346",
)

RULES: list[DetectionRule] = [
    MISSING_INPUT_VALIDATION,
    HTTP_NOT_HTTPS,
    CORS_WILDCARD,
]
