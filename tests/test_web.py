"""Tests for the web API.

The web API exposes transcript analysis over HTTP.  Tests use
``pytest.importorskip`` so they are skipped gracefully when Flask is
not installed.
"""

from __future__ import annotations

from typing import Any

import pytest

flask = pytest.importorskip("flask")

from py_dirsize.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
SMALL_CAP = 600
SMALL_SUM = 584
SESSION_SMALL_SUM = 95437

SESSION = "\n".join(
    [
        "$ cd /",
        "$ ls",
        "dir a",
        "14848514 b.txt",
        "8504156 c.dat",
        "dir d",
        "$ cd a",
        "$ ls",
        "dir e",
        "29116 f",
        "2557 g",
        "62596 h.lst",
        "$ cd e",
        "$ ls",
        "584 i",
        "$ cd ..",
        "$ cd ..",
        "$ cd d",
        "$ ls",
        "4060174 j",
        "8033020 d.log",
        "5626152 d.ext",
        "7214296 k",
    ]
)


def _create_client() -> Any:
    """Create a test client from a fresh app."""
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify the app factory."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)


class TestAnalyzeEndpoint:
    """Verify the /api/analyze POST endpoint."""

    def test_report_values(self) -> None:
        """A good transcript returns the report as JSON."""
        client = _create_client()
        response = client.post("/api/analyze", json={"transcript": SESSION})
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert data["sum_at_most_cap"] == SESSION_SMALL_SUM
        assert data["directory_to_delete"] == {"path": "/d", "size": 24933642}

    def test_directories_in_post_order(self) -> None:
        """Every directory is listed, children first."""
        client = _create_client()
        data = client.post("/api/analyze", json={"transcript": SESSION}).get_json()
        assert [d["path"] for d in data["directories"]] == ["/a/e", "/a", "/d", "/"]

    def test_custom_settings(self) -> None:
        """Settings in the body override the defaults."""
        client = _create_client()
        body = {"transcript": SESSION, "settings": {"size_cap": SMALL_CAP}}
        data = client.post("/api/analyze", json=body).get_json()
        assert data["size_cap"] == SMALL_CAP
        assert data["sum_at_most_cap"] == SMALL_SUM

    def test_missing_transcript(self) -> None:
        """A body without a transcript is rejected."""
        client = _create_client()
        response = client.post("/api/analyze", json={})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "error" in response.get_json()

    def test_bad_transcript(self) -> None:
        """An analysis error becomes a 400 with the message."""
        client = _create_client()
        response = client.post("/api/analyze", json={"transcript": "$ cd /\n$ cd ghost"})
        assert response.status_code == HTTP_BAD_REQUEST
        data = response.get_json()
        assert "invalid cd" in data["error"]
        assert len(data["log"]) == 1

    def test_bad_settings(self) -> None:
        """Settings that are not an object are rejected."""
        client = _create_client()
        response = client.post("/api/analyze", json={"transcript": SESSION, "settings": [1]})
        assert response.status_code == HTTP_BAD_REQUEST


class TestDefaultsEndpoint:
    """Verify the /api/defaults endpoint."""

    def test_defaults(self) -> None:
        """The default settings are returned."""
        client = _create_client()
        data = client.get("/api/defaults").get_json()
        assert data == {"capacity": 70_000_000, "required_free": 30_000_000, "size_cap": 100_000}
