"""
Tests for Risk Scorer and Aggregator — score formula, levels, ordering, isolation.
"""

import pytest

from mcpshield.core.aggregator import aggregate
from mcpshield.core.risk_scorer import (
    compute_risk_score,
    exceeds_threshold,
    filter_by_severity,
    risk_level,
    sort_findings,
    summarize,
)
from mcpshield.models.finding_models import SEVERITY_WEIGHTS, Finding, ModuleResult, Severity


def _finding(severity, rule_id="r", module="static"):
    return Finding(module=module, rule_id=rule_id, severity=severity, file="a.js", message="m")


def test_score_is_weighted_sum():
    findings = [_finding(Severity.CRITICAL), _finding(Severity.HIGH), _finding(Severity.MEDIUM),
                _finding(Severity.LOW), _finding(Severity.INFO)]
    assert compute_risk_score(findings) == 25 + 10 + 3 + 1 + 0


def test_score_clamped_to_100():
    assert compute_risk_score([_finding(Severity.CRITICAL)] * 5) == 100


def test_score_monotonic_in_counts():
    findings = []
    previous = 0
    for severity in [Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL] * 3:
        findings.append(_finding(severity))
        score = compute_risk_score(findings)
        assert score >= previous
        assert score == min(100, sum(SEVERITY_WEIGHTS[f.severity] for f in findings))
        previous = score


@pytest.mark.parametrize(
    "score, level",
    [(0, "none"), (1, "low"), (24, "low"), (25, "medium"), (49, "medium"),
     (50, "high"), (74, "high"), (75, "critical"), (100, "critical")],
)
def test_level_buckets(score, level):
    assert risk_level(score) == level


def test_sort_is_stable_and_idempotent():
    findings = [
        _finding(Severity.LOW, "low-1"),
        _finding(Severity.CRITICAL, "crit-1"),
        _finding(Severity.LOW, "low-2"),
        _finding(Severity.INFO, "info-1"),
        _finding(Severity.CRITICAL, "crit-2"),
    ]
    ordered = sort_findings(findings)

    assert [f.rule_id for f in ordered] == ["crit-1", "crit-2", "low-1", "low-2", "info-1"]
    assert sort_findings(ordered) == ordered


def test_min_severity_filter_and_threshold():
    findings = [_finding(Severity.MEDIUM), _finding(Severity.LOW), _finding(Severity.INFO)]

    assert len(filter_by_severity(findings, Severity.LOW)) == 2
    assert len(filter_by_severity(findings, Severity.INFO)) == 3
    assert exceeds_threshold(findings, Severity.MEDIUM)
    assert not exceeds_threshold(findings, Severity.HIGH)


def test_summary_counts():
    summary = summarize([_finding(Severity.LOW), _finding(Severity.LOW)])
    assert summary.risk_score == 2
    assert summary.risk_level == "low"
    assert summary.total_findings == 2
    assert summary.by_severity[Severity.LOW] == 2
    assert summary.by_severity[Severity.CRITICAL] == 0


def test_aggregate_isolates_module_errors():
    results = [
        ModuleResult(module="static", findings=[_finding(Severity.LOW, "a")]),
        ModuleResult(module="deps", findings=[_finding(Severity.CRITICAL, module="deps")], error="boom"),
        ModuleResult(module="meta", findings=[_finding(Severity.HIGH, "b", module="meta")]),
    ]
    merged = aggregate(results, known_modules=["static", "deps", "perms", "meta"])

    assert [f.rule_id for f in merged.findings] == ["b", "a"]
    assert [(e.module, e.error) for e in merged.errors] == [("deps", "boom")]
    assert merged.modules["deps"].ran and merged.modules["deps"].findings == 0
    assert merged.modules["deps"].error == "boom"
    assert not merged.modules["perms"].ran
    assert merged.summary.risk_score == 11
    assert merged.summary.risk_level == "low"


def test_aggregate_empty():
    merged = aggregate([])
    assert merged.findings == []
    assert merged.summary.risk_score == 0
    assert merged.summary.risk_level == "none"
