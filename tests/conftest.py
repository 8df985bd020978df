"""
Pytest configuration and fixtures
Shared test setup for all test modules
"""
import json

import pytest
from fastapi.testclient import TestClient

from wrkr.core.catalog import Catalogs
from wrkr.main import app
from wrkr.schemas.finding import Finding


@pytest.fixture(scope="session")
def catalogs() -> Catalogs:
    """Embedded catalogs without overrides"""
    return Catalogs.load()


@pytest.fixture
def client():
    """API client; entering the context runs the lifespan (catalog load)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ci_finding() -> Finding:
    return Finding(
        finding_type="ci_autonomy",
        severity="high",
        tool_type="github_actions",
        location=".github/workflows/release.yml",
        repo="acme/app",
        org="acme",
    )


@pytest.fixture
def inventory_findings():
    """One record of every inventory type so all builtin rules pass"""
    base = {"repo": "acme/app", "org": "acme", "severity": "low"}
    return [
        Finding(finding_type="tool_config", tool_type="claude", location=".claude/settings.json", **base),
        Finding(finding_type="mcp_server", tool_type="mcp", location=".mcp.json", **base),
        Finding(finding_type="ai_dependency", tool_type="dependency", location="requirements.txt", **base),
        Finding(finding_type="skill_metrics", tool_type="skill", location=".agents/skills", **base),
    ]


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a JSON snapshot document and return its path"""
    def _write(document, name="last-scan.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
