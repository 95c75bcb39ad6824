"""Flask application factory for the py-dirsize web API.

The ``create_app`` function returns a Flask app with two endpoints:

- ``POST /api/analyze`` — rebuild a tree from a transcript and return
  the disk report as JSON.
- ``GET /api/defaults`` — return the default report settings.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from py_dirsize.config import ConfigError, ReportSettings
from py_dirsize.logging import Logger, LogLevel
from py_dirsize.report import build_report
from py_dirsize.sizes import NoCandidateError, SizeAggregator
from py_dirsize.transcript import NavigationError, ParseError, build_tree

_HTTP_BAD_REQUEST = 400


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)

    @app.route("/api/analyze", methods=["POST"])
    def analyze() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Analyse a transcript and return the report.

        Expects JSON body: ``{"transcript": "...", "settings": {...}}``
        (``settings`` optional).

        Returns:
            JSON with the report values and every directory's size, or
            an ``error`` field with status 400.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "transcript" not in data:
            return jsonify({"error": "Missing 'transcript' field"}), _HTTP_BAD_REQUEST

        logger = Logger()
        try:
            settings = _settings_from(data.get("settings"))
            tree = build_tree(str(data["transcript"]).splitlines(), logger=logger)
            report = build_report(tree, settings, logger=logger)
        except (ConfigError, ParseError, NavigationError, NoCandidateError) as e:
            errors = [str(entry) for entry in logger.filter(min_level=LogLevel.ERROR)]
            return jsonify({"error": str(e), "log": errors}), _HTTP_BAD_REQUEST

        victim = report.directory_to_delete
        body: dict[str, Any] = {
            "total_used": report.total_used,
            "capacity": report.capacity,
            "unused": report.unused,
            "size_cap": report.size_cap,
            "sum_at_most_cap": report.sum_at_most_cap,
            "space_to_free": report.space_to_free,
            "directory_to_delete": (
                None if victim is None else {"path": victim.path, "size": victim.size}
            ),
            "directories": [
                {"name": e.name, "path": e.path, "size": e.size}
                for e in SizeAggregator(tree).all_sizes()
            ],
        }
        return jsonify(body)

    @app.route("/api/defaults")
    def defaults() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the default report settings."""
        return jsonify(ReportSettings().to_dict())

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-dirsize-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)


def _settings_from(raw: object) -> ReportSettings:
    """Build settings from a request's optional ``settings`` object."""
    if raw is None:
        return ReportSettings()
    if not isinstance(raw, dict):
        msg = "'settings' must be a JSON object"
        raise ConfigError(msg)
    return ReportSettings.from_dict(raw)  # pyright: ignore[reportUnknownArgumentType]
