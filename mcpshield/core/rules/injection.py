"""
Injection Rules — Command, code, path and deserialization injection.

Each rule is a regex over raw source text. Matches never span lines except
where a pattern explicitly allows it.
"""

from __future__ import annotations

import re

from mcpshield.models.finding_models import Severity
from mcpshield.models.rule_models import DetectionRule


SHELL_INJECTION = DetectionRule(
    id="shell-injection",
    severity=Severity.CRITICAL,
    # exec/spawn whose first argument is a template with ${...} or is built with '+'
    pattern=re.compile(
        r"\b(?:exec|execSync|spawn|spawnSync)\s*\(\s*"
        r"(?:`[^`]*\$\{|['\"][^'\"\n]*['\"]\s*\+|[A-Za-z_$][\w$.]*\s*\+)"
    ),
    message="Potential shell injection: user input in command execution",
    remediation="Use execFile() with argument arrays instead of exec() with string interpolation",
    cwe="CWE-78",
)

EVAL_USAGE = DetectionRule(
    id="eval-usage",
    severity=Severity.CRITICAL,
    pattern=re.compile(r"(?<!['\"`])\b(?:eval|Function)\s*\("),
    message="Use of eval() or Function() constructor, potential code injection",
    remediation="Avoid eval/Function. Use JSON.parse() for data, or a sandboxed interpreter",
    cwe="CWE-95",
    suppress_in_strings=True,
)

PATH_TRAVERSAL = DetectionRule(
    id="path-traversal",
    severity=Severity.HIGH,
    pattern=re.compile(
        r"\b(?:readFile|readFileSync|createReadStream|writeFile|writeFileSync|"
        r"unlink|unlinkSync|rmdir)\s*\(\s*[^)]*"
        r"(?:\+\s*(?:req\.|params|query|body|input|args)|`[^`]*\$\{)"
    ),
    message="Potential path traversal: user input in file system operation",
    remediation=(
        "Validate and sanitize paths. Use path.resolve() with a safe base directory "
        "and verify the result stays within bounds"
    ),
    cwe="CWE-22",
)

UNSAFE_DESERIALIZATION = DetectionRule(
    id="unsafe-deserialization",
    severity=Severity.HIGH,
    pattern=re.compile(r"JSON\.parse\s*\(\s*(?:req\.|params|query|body|input|args|socket|ws)"),
    message="Parsing untrusted JSON input without validation",
    remediation="Validate input structure with a schema library (ajv, zod) before or after parsing",
    cwe="CWE-502",
)

RULES: list[DetectionRule] = [
    SHELL_INJECTION,
    EVAL_USAGE,
    PATH_TRAVERSAL,
    UNSAFE_DESERIALIZATION,
]
