"""
Tests for the npm Runner — bounded subprocess calls against a stand-in npm.
"""

import asyncio
import sys
import time

import pytest

from mcpshield.collectors.npm import DependencyAuditError, NpmRunner
from mcpshield.config import settings

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts")


@pytest.fixture
def fake_npm_script(tmp_path):
    """Write an executable shell script that stands in for npm."""

    def _write(body):
        script = tmp_path / "npm"
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(0o755)
        return str(script)

    return _write


def test_audit_returns_parsed_object(fake_npm_script, tmp_path):
    npm = fake_npm_script(
        'if [ "$1" = "audit" ]; then echo \'{"vulnerabilities": {"lodash": {"severity": "high"}}}\'; exit 1; fi\n'
        "echo '{}'"
    )
    runner = NpmRunner(executable=npm)

    audit = asyncio.run(runner.audit(str(tmp_path)))
    outdated = asyncio.run(runner.outdated(str(tmp_path)))

    assert audit == {"vulnerabilities": {"lodash": {"severity": "high"}}}
    assert outdated == {}


@pytest.mark.parametrize("output", ["not json at all", "[1, 2, 3]"])
def test_non_object_output_is_no_data(fake_npm_script, tmp_path, output):
    runner = NpmRunner(executable=fake_npm_script(f"echo '{output}'"))
    assert asyncio.run(runner.audit(str(tmp_path))) is None


def test_empty_output_is_empty_payload(fake_npm_script, tmp_path):
    runner = NpmRunner(executable=fake_npm_script("exit 0"))
    assert asyncio.run(runner.outdated(str(tmp_path))) == {}


def test_spawn_failure(tmp_path):
    runner = NpmRunner(executable=str(tmp_path / "no-such-npm"))
    with pytest.raises(DependencyAuditError, match="Could not start"):
        asyncio.run(runner.audit(str(tmp_path)))


def test_timeout_kills_wrapped_children_promptly(fake_npm_script, tmp_path, monkeypatch):
    # The shell forks sleep instead of exec-ing it, so a grandchild holds stdout
    npm = fake_npm_script("sleep 20\necho '{}'")
    monkeypatch.setattr(settings, "npm_audit_timeout", 0.5)

    start = time.monotonic()
    with pytest.raises(DependencyAuditError, match="timed out"):
        asyncio.run(NpmRunner(executable=npm).audit(str(tmp_path)))
    assert time.monotonic() - start < 5


def test_output_cap_kills_runaway_output(fake_npm_script, tmp_path, monkeypatch):
    npm = fake_npm_script("yes\necho done")
    monkeypatch.setattr(settings, "npm_audit_max_bytes", 1000)
    monkeypatch.setattr(settings, "npm_audit_timeout", 10.0)

    start = time.monotonic()
    with pytest.raises(DependencyAuditError, match="exceeded 1000 bytes"):
        asyncio.run(NpmRunner(executable=npm).audit(str(tmp_path)))
    assert time.monotonic() - start < 5
