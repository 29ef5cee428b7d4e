"""
Rule Data Models — Detection and capability rule definitions.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from mcpshield.models.finding_models import Severity


class DetectionRule(BaseModel):
    """A pattern-based vulnerability rule. Pure data."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique rule identifier, e.g. 'shell-injection'")
    severity: Severity
    pattern: re.Pattern[str]
    message: str
    remediation: str
    cwe: str | None = None
    suppress_in_strings: bool = Field(
        default=False,
        description="Discard matches that start inside an open string literal",
    )


class CapabilityRule(BaseModel):
    """Usage signatures for one namespaced capability, e.g. 'fs:write'."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    capability: str
    patterns: tuple[re.Pattern[str], ...]
