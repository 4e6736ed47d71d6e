#!/usr/bin/env python3
"""WSGI entry point.

Exposes the Flask ``app`` for production WSGI servers
(``gunicorn entrypoint.wsgi:app``) and runs the development server when
executed directly.
"""

from __future__ import annotations

import os

from shiptrack.startup import create_app

app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    debug = os.getenv("FLASK_DEBUG", "0") in ("1", "true", "yes")
    app.run(host="0.0.0.0", port=port, debug=debug)
