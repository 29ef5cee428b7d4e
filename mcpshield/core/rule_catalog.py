"""
Rule Catalog — The static table of detection rules.

Adding a rule means adding a DetectionRule to one of the rule modules;
the detection engine never changes.
"""

from __future__ import annotations

from mcpshield.core.rules import injection, secrets, transport
from mcpshield.models.rule_models import DetectionRule


def _build_registry(*groups: list[DetectionRule]) -> dict[str, DetectionRule]:
    registry: dict[str, DetectionRule] = {}
    for group in groups:
        for rule in group:
            if rule.id in registry:
                raise ValueError(f"Duplicate detection rule id: {rule.id}")
            registry[rule.id] = rule
    return registry


# Registry of all detection rules, keyed by rule id
RULE_REGISTRY: dict[str, DetectionRule] = _build_registry(
    injection.RULES,
    secrets.RULES,
    transport.RULES,
)
