"""Web API for py-dirsize.

This package provides a Flask application that analyses transcripts
over HTTP.  It is an **optional** extra — install with::

    pip install py-dirsize[web]

The ``create_app`` factory in ``app.py`` serves two endpoints:

- ``POST /api/analyze`` — analyse a transcript and return JSON.
- ``GET /api/defaults`` — the default report settings.
"""
