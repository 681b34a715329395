#!/usr/bin/env python3
"""
Cheesy Parts - Parts & Orders Tracking Service
==============================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify

import config
from db import init_db, get_session
from api import api_bp
from services.auth_service import UsersService
from services.settings_service import get_settings

logger = logging.getLogger(__name__)


def create_app(overrides: dict | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.SECRET,
        DB_URL=config.DB_URL,
        ADMIN_EMAIL=config.ADMIN_EMAIL,
        ADMIN_PASSWORD=config.ADMIN_PASSWORD,
    )
    if overrides:
        app.config.update(overrides)
    app.json.sort_keys = False

    # ── Initialise database ─────────────────────────────────────────
    init_db(app.config["DB_URL"])
    _bootstrap(app)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Error handlers (outside the blueprint) ──────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _bootstrap(app: Flask) -> None:
    """Create the settings row and, on an empty users table, the admin."""
    session = get_session()
    try:
        get_settings(session)
        UsersService.ensure_admin(
            session, app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"],
        )
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  Cheesy Parts")
    print("=" * 56)

    app = create_app()

    print(f"  Database: {config.DB_URL}")
    print(f"\n  http://{config.HOST}:{config.PORT}/api/health")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
