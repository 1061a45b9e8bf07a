# patch_tracker/web/app.py
"""Flask application: catalog read endpoint and update-check trigger."""
from __future__ import annotations

import hmac
from typing import Any, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from loguru import logger

from patch_tracker.config import Settings
from patch_tracker.errors import ConfigError, StoreFailure
from patch_tracker.extract.chain import build_update_extractor
from patch_tracker.scrape.http import fetch_page_text
from patch_tracker.scrape.orchestrator import run_update_check
from patch_tracker.storage.catalog import CatalogStore

bp = Blueprint("api", __name__, url_prefix="/api")


def _settings() -> Settings:
    return current_app.config["PATCH_TRACKER_SETTINGS"]


def _store() -> CatalogStore:
    return current_app.config["PATCH_TRACKER_STORE"]


def _authorized(settings: Settings) -> bool:
    if settings.is_development:
        return True
    if not settings.cron_secret:
        return False
    header = request.headers.get("Authorization", "")
    return hmac.compare_digest(header.encode("utf-8"), f"Bearer {settings.cron_secret}".encode("utf-8"))


@bp.route("/games", methods=["GET"])
def list_games():
    try:
        games = _store().load()
    except StoreFailure as e:
        logger.error(f"Catalog read failed: {e}")
        return jsonify({"error": "Failed to load games"}), 500
    return jsonify([g.to_dict() for g in games])


@bp.route("/update", methods=["GET", "POST"])
def update_check():
    settings = _settings()

    if not _authorized(settings):
        logger.warning(f"Rejected unauthorized update request from {request.remote_addr}")
        return jsonify({"error": "Unauthorized"}), 401

    extractor = current_app.config.get("PATCH_TRACKER_EXTRACTOR")
    if extractor is None:
        try:
            extractor = build_update_extractor(settings)
        except ConfigError as e:
            return jsonify({"success": False, "error": str(e), "logs": []}), 500

    report = run_update_check(
        store=_store(),
        extractor=extractor,
        fetch=current_app.config.get("PATCH_TRACKER_FETCH") or fetch_page_text,
    )
    return jsonify(report.to_dict()), (200 if report.success else 500)


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[CatalogStore] = None,
    extractor: Optional[Any] = None,
    fetch: Optional[Any] = None,
) -> Flask:
    """
    Application factory.

    extractor/fetch override the defaults (tests, alternative backends);
    without them each update request builds the OpenAI + regex chain.
    """
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config["PATCH_TRACKER_SETTINGS"] = settings
    app.config["PATCH_TRACKER_STORE"] = store or CatalogStore(settings.catalog_file)
    app.config["PATCH_TRACKER_EXTRACTOR"] = extractor
    app.config["PATCH_TRACKER_FETCH"] = fetch

    app.register_blueprint(bp)

    logger.info(f"Flask app created (env={settings.env}, catalog={settings.catalog_file})")
    return app
