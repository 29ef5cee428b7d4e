"""
Tests for FastAPI Scan API — integration tests for the full pipeline.
"""

import pytest
from fastapi.testclient import TestClient

from mcpshield.api.dependencies import get_audit_logger, get_scan_worker
from mcpshield.audit.logger import AuditLogger
from mcpshield.main import app
from mcpshield.workers.scan_worker import ScanWorker


@pytest.fixture
def audit_logger(tmp_path):
    return AuditLogger(log_path=str(tmp_path / "audit.jsonl"), enabled=True)


@pytest.fixture
def client(fake_npm, audit_logger):
    app.dependency_overrides[get_scan_worker] = lambda: ScanWorker(
        npm_runner=fake_npm(audit={"vulnerabilities": {}}, outdated={})
    )
    app.dependency_overrides[get_audit_logger] = lambda: audit_logger
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"
    assert data["rules"] == 8


def test_scan_clean_project(client, make_project, clean_server_code, complete_package):
    root = make_project({"index.js": clean_server_code, "package.json": complete_package})
    response = client.post("/scan", json={"target_path": str(root)})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "scan_complete"
    assert data["passed"] is True
    report = data["report"]
    assert report["findings"] == []
    assert report["summary"]["risk_score"] == 0
    assert report["summary"]["risk_level"] == "none"
    assert report["modules"]["static"] == {"ran": True, "findings": 0, "error": None}


def test_scan_vulnerable_project_fails_threshold(client, make_project, vulnerable_server_code):
    root = make_project({"index.js": vulnerable_server_code})
    response = client.post("/scan", json={"target_path": str(root), "threshold": "critical"})

    assert response.status_code == 200
    data = response.json()
    assert data["passed"] is False
    finding = data["report"]["findings"][0]
    assert finding["severity"] == "critical"
    for key in ("module", "rule_id", "file", "line", "message", "remediation", "cwe", "evidence"):
        assert key in finding


def test_min_severity_filters_returned_findings(client, make_project, vulnerable_server_code):
    root = make_project({"index.js": vulnerable_server_code})
    response = client.post("/scan", json={"target_path": str(root), "min_severity": "high"})

    report = response.json()["report"]
    assert {f["severity"] for f in report["findings"]} <= {"critical", "high"}
    assert report["summary"]["total_findings"] > len(report["findings"])


def test_scan_unknown_module_rejected(client, tmp_path):
    response = client.post("/scan", json={"target_path": str(tmp_path), "modules": ["sandbox"]})
    assert response.status_code == 422


def test_scan_missing_target(client, tmp_path):
    response = client.post("/scan", json={"target_path": str(tmp_path / "nope")})
    assert response.status_code == 400
    assert "not a directory" in response.json()["detail"]


def test_scans_are_audited(client, audit_logger, make_project, complete_package):
    root = make_project({"package.json": complete_package})
    scan_id = client.post("/scan", json={"target_path": str(root)}).json()["scan_id"]

    recent = client.get("/scans/recent").json()
    assert [entry["scan_id"] for entry in recent] == [scan_id]
    assert recent[0]["passed"] is True
    assert audit_logger.read_recent(5)[0].scan_id == scan_id
