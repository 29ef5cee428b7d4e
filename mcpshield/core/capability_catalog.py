"""
Capability Catalog — Usage signatures per namespaced capability.

Signatures are lexical. They can flag mocked or unreachable code and miss
usage reached only through indirection; no data flow is tracked.
"""

from __future__ import annotations

import re

from mcpshield.models.rule_models import CapabilityRule


PROCESS_EXEC = "process:exec"
FS_WRITE = "fs:write"
NETWORK_HTTP = "network:http"

# Capabilities worth an advisory even when no manifest is present
DANGEROUS_CAPABILITIES: frozenset[str] = frozenset({PROCESS_EXEC, FS_WRITE, NETWORK_HTTP})


def _signatures(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


CAPABILITY_CATALOG: tuple[CapabilityRule, ...] = (
    CapabilityRule(
        capability="fs:read",
        patterns=_signatures(
            r"\breadFile\b", r"\breadFileSync\b", r"\bcreateReadStream\b",
            r"\breaddir\b", r"\breaddirSync\b", r"\bstat\b", r"\bstatSync\b",
        ),
    ),
    CapabilityRule(
        capability=FS_WRITE,
        patterns=_signatures(
            r"\bwriteFile\b", r"\bwriteFileSync\b", r"\bcreateWriteStream\b",
            r"\bmkdir\b", r"\bmkdirSync\b", r"\bunlink\b", r"\bunlinkSync\b",
            r"\brm\b", r"\brmSync\b",
        ),
    ),
    CapabilityRule(
        capability=NETWORK_HTTP,
        patterns=_signatures(
            r"\bfetch\s*\(", r"\baxios\b", r"\bhttps?\.\w+",
            r"\bnew\s+URL\b",
        ),
    ),
    CapabilityRule(
        capability="network:ws",
        patterns=_signatures(r"\bnew\s+WebSocket\b", r"\bWebSocketServer\b", r"\bws\.\w+"),
    ),
    CapabilityRule(
        capability=PROCESS_EXEC,
        patterns=_signatures(
            r"\bexec\b", r"\bexecSync\b", r"\bspawn\b", r"\bspawnSync\b",
            r"\bchild_process\b", r"\bexecFile\b",
        ),
    ),
    CapabilityRule(
        capability="process:env",
        patterns=_signatures(r"\bprocess\.env\b"),
    ),
    CapabilityRule(
        capability="crypto",
        patterns=_signatures(
            r"\bcrypto\.\w+", r"\bcreateHash\b", r"\bcreateHmac\b", r"\brandomBytes\b",
        ),
    ),
)

if len({rule.capability for rule in CAPABILITY_CATALOG}) != len(CAPABILITY_CATALOG):
    raise ValueError("Duplicate capability id in CAPABILITY_CATALOG")
