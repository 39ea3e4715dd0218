"""Tests for API endpoints and application settings."""

from __future__ import annotations

from fastapi.testclient import TestClient

from svgir.config import Settings
from svgir.main import app
from svgir.schema import NodeKind
from svgir.svg import DecodeLimits
from tests.conftest import (
    BROKEN_ATTRIBUTES_SVG,
    CIRCLE_SVG,
    GRADIENT_SVG,
    SMILEY_SVG,
    nested_groups_svg,
)


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["node_kinds_registered"] == len(NodeKind)


# ---------------------------------------------------------------------------
# Normalize
# ---------------------------------------------------------------------------

def test_normalize_circle():
    response = client.post("/api/normalize", json={"svg": CIRCLE_SVG})
    assert response.status_code == 200
    data = response.json()
    assert data["node_count"] == 2
    assert data["issues"] == []
    assert data["svg"].endswith(CIRCLE_SVG)


def test_normalize_compact():
    response = client.post("/api/normalize", json={"svg": CIRCLE_SVG, "indent": 0, "precision": 2})
    assert response.status_code == 200
    assert "\n  <circle" not in response.json()["svg"]


def test_normalize_reports_issues():
    response = client.post("/api/normalize", json={"svg": BROKEN_ATTRIBUTES_SVG})
    assert response.status_code == 200
    issues = response.json()["issues"]
    path_issue = next(i for i in issues if i["attribute"] == "d")
    assert path_issue["code"] == "parse-error"
    assert path_issue["position"] == 8


def test_normalize_malformed():
    response = client.post("/api/normalize", json={"svg": "<svg"})
    assert response.status_code == 400


def test_normalize_too_deep():
    response = client.post("/api/normalize", json={"svg": nested_groups_svg(300)})
    assert response.status_code == 413
    assert "nesting depth" in response.json()["detail"]


def test_normalize_bad_precision():
    response = client.post("/api/normalize", json={"svg": CIRCLE_SVG, "precision": 40})
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------

def test_validate_valid():
    response = client.post("/api/validate", json={"svg": GRADIENT_SVG})
    assert response.status_code == 200
    assert response.json() == {"valid": True, "issues": []}


def test_validate_unresolved_reference():
    svg = '<svg xmlns="http://www.w3.org/2000/svg"><rect width="1" height="1" fill="url(#nope)"/></svg>'
    response = client.post("/api/validate", json={"svg": svg})
    data = response.json()
    assert data["valid"] is False
    assert [i["code"] for i in data["issues"]] == ["unresolved-reference"]


def test_validate_broken():
    response = client.post("/api/validate", json={"svg": BROKEN_ATTRIBUTES_SVG})
    data = response.json()
    assert data["valid"] is False
    codes = {i["code"] for i in data["issues"]}
    assert codes == {"parse-error", "invalid-language-tag", "missing-attribute"}


# ---------------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------------

def test_edit():
    response = client.post("/api/edit", json={
        "svg": SMILEY_SVG,
        "operations": [
            {"action": "delete", "target": "mouth"},
            {"action": "modify", "target": "face", "attributes": {"fill": "#ffcc00"}},
        ],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["changes"] == ["deleted mouth", "set fill='#ffcc00' on face"]
    assert 'id="mouth"' not in data["svg"]
    assert 'fill="#ffcc00"' in data["svg"]


def test_edit_fragment_depth_limited():
    fragment = "<g>" * 300 + "</g>" * 300
    response = client.post("/api/edit", json={
        "svg": SMILEY_SVG,
        "operations": [{"action": "add", "svg_fragment": fragment}],
    })
    assert response.status_code == 200
    assert response.json()["changes"][0].startswith("skipped add: nesting depth")


def test_edit_rejects_unknown_action():
    response = client.post("/api/edit", json={"svg": SMILEY_SVG, "operations": [{"action": "rename"}]})
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def test_settings_defaults():
    s = Settings()
    assert s.max_depth == 256
    assert s.numeric_precision == 6


def test_limits_from_settings():
    limits = DecodeLimits.from_settings(Settings(max_depth=8, max_nodes=50, max_input_chars=1000))
    assert limits == DecodeLimits(max_depth=8, max_nodes=50, max_input_chars=1000)


def test_settings_fields():
    assert "svgir_env" not in Settings.model_fields
    assert "svgir_log_level" in Settings.model_fields
