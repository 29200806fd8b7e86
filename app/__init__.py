"""Application factory for the Engineering Toolkit server."""

from __future__ import annotations

import importlib
from pathlib import Path

import yaml
from flask import Flask

from common.errors import InternalAppError, NotFoundAppError
from common.logging import configure_level, get_logger, install_request_logging
from common.responses import fail, ok

from . import config as config_module
from .blueprints import iter_plugin_packages, register_plugin_blueprints

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yml"


def _load_yaml_config(path: Path = CONFIG_PATH) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _load_manifests() -> list[dict[str, str]]:
    manifests: list[dict[str, str]] = []
    for dotted in iter_plugin_packages():
        module = importlib.import_module(dotted)
        manifest = getattr(module, "manifest", None)
        if manifest:
            manifests.append(dict(manifest))
    manifests.sort(key=lambda item: item["title"].lower())
    return manifests


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    app.config.from_object(config_module.BaseConfig)

    yaml_config = _load_yaml_config()
    site_settings = yaml_config.get("site", {}) or {}
    plugin_settings = yaml_config.get("plugins", {}) or {}

    app.config["SITE_SETTINGS"] = site_settings
    if "max_content_length_mb" in site_settings:
        try:
            max_bytes = int(float(site_settings["max_content_length_mb"]) * 1024 * 1024)
            app.config["MAX_CONTENT_LENGTH"] = max_bytes
        except (TypeError, ValueError):
            pass
    app.config["PLUGIN_SETTINGS"] = plugin_settings
    if site_settings.get("log_level"):
        app.config["LOG_LEVEL"] = site_settings["log_level"]

    if config_name:
        config_obj = getattr(config_module, config_name, None)
        if config_obj:
            app.config.from_object(config_obj)

    configure_level(app.config.get("LOG_LEVEL"))
    install_request_logging(app)
    register_plugin_blueprints(app)

    manifests = _load_manifests()
    for manifest in manifests:
        blueprint = manifest.get("blueprint")
        plugin_config = plugin_settings.get(blueprint, {}) if blueprint else {}
        if plugin_config.get("summary"):
            manifest["summary"] = plugin_config["summary"]
    app.config["PLUGIN_MANIFESTS"] = manifests

    @app.after_request
    def apply_response_headers(response):
        """Attach strict security headers to every outgoing response."""

        configured = app.config.get("RESPONSE_HEADERS", {})
        for header, value in configured.items():
            if header not in response.headers:
                response.headers[header] = value
        return response

    @app.route("/")
    def home():
        site_config = app.config.get("SITE_SETTINGS", {})
        return ok(
            {
                "name": site_config.get("name", "Engineering Toolkit"),
                "plugins": app.config.get("PLUGIN_MANIFESTS", []),
            }
        )

    @app.errorhandler(404)
    def not_found(error):
        return fail(NotFoundAppError(message="Resource not found"))

    @app.errorhandler(405)
    def method_not_allowed(error):
        return fail(
            {"code": "method_not_allowed", "message": "Method not allowed", "details": {}},
            status=405,
        )

    @app.errorhandler(413)
    def payload_too_large(error):
        return fail({"code": "payload_too_large", "message": "Request body too large", "details": {}}, status=413)

    @app.errorhandler(500)
    def server_error(error):  # pragma: no cover
        get_logger().error("unhandled server error: %s", error)
        return fail(InternalAppError(message="Internal server error"))

    return app


__all__ = ["create_app"]
