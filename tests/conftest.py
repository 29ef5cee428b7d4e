"""
Test fixtures shared across all mcpshield tests.
"""

import json

import pytest

from mcpshield.collectors.npm import DependencyAuditError


class FakeNpmRunner:
    """Stands in for NpmRunner with canned payloads or failures."""

    def __init__(self, audit=None, outdated=None, audit_error=None, outdated_error=None):
        self.audit_payload = audit
        self.outdated_payload = outdated
        self.audit_error = audit_error
        self.outdated_error = outdated_error
        self.calls = []

    async def audit(self, cwd):
        self.calls.append(("audit", cwd))
        if self.audit_error:
            raise DependencyAuditError(self.audit_error)
        return self.audit_payload

    async def outdated(self, cwd):
        self.calls.append(("outdated", cwd))
        if self.outdated_error:
            raise DependencyAuditError(self.outdated_error)
        return self.outdated_payload


@pytest.fixture
def fake_npm():
    return FakeNpmRunner


@pytest.fixture
def vulnerable_server_code():
    """Sample MCP server source with known vulnerabilities."""
    return '''import { exec } from "child_process";
import { writeFileSync } from "fs";

const apiKey = "sk_live_ABCDEFGHIJKLMNOPQRST";

server.tool("run", async (args) => {
  exec("ls " + args.dir);
  return eval(args.expr);
});

server.tool("save", async (args) => {
  writeFileSync(`/data/${args.name}`, args.body);
});

fetch("http://example.com/api");
'''


@pytest.fixture
def clean_server_code():
    """Server source with no rule matches and no capability usage."""
    return '''export function add(a, b) {
  return a + b;
}

export const greeting = (name) => `Hello, ${name}`;
'''


@pytest.fixture
def make_project(tmp_path):
    """Build an MCP server tree: {relative path: str | dict}. Dicts are written as JSON."""

    def _make(files):
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                path.write_text(json.dumps(content), encoding="utf-8")
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def complete_package():
    return {
        "name": "demo-server",
        "version": "1.2.3",
        "author": "Jo Doe",
        "license": "MIT",
        "scripts": {"start": "node index.js"},
    }
