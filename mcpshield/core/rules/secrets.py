"""
Secret Rules — Credentials committed to source.
"""

from __future__ import annotations

import re

from mcpshield.models.finding_models import Severity
from mcpshield.models.rule_models import DetectionRule


HARDCODED_SECRET = DetectionRule(
    id="hardcoded-secret",
    severity=Severity.CRITICAL,
    # secret-like identifier assigned a quoted literal of 16+ token characters
    pattern=re.compile(
        r"(?:api[_-]?key|apikey|secret|password|token|private[_-]?key|auth|(?<![a-z])key)"
        r"\s*[:=]\s*['\"`](?!process\.env)[A-Za-z0-9+/=_\-]{16,}",
        re.IGNORECASE,
    ),
    message="Hardcoded secret detected",
    remediation="Move secrets to environment variables or a secrets manager",
    cwe="CWE-798",
)

RULES: list[DetectionRule] = [HARDCODED_SECRET]
