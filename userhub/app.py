# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from userhub.infrastructure.admin_setup import setup_admin_users
from userhub.infrastructure.container import Container
from userhub.infrastructure.db import SessionLocal, init_db
from userhub.shared.config import AppConfig, load_config
from userhub.shared.logging import logger, setup_logging
from userhub.shared.middleware.error_handler import configure_error_handling
from userhub.shared.middleware.request_logger import configure_request_logging

_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def _install_security_headers(app: Flask, config: AppConfig) -> None:
    headers = dict(_SECURITY_HEADERS)
    if config.security.enable_hsts:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    @app.after_request
    def _security_headers(resp):
        for name, value in headers.items():
            resp.headers.setdefault(name, value)
        return resp


def _trust_proxies(app: Flask, hops: int) -> None:
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    init_db()

    container = container or Container(config)
    seeded = setup_admin_users(container.user_repository)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.extensions["userhub.container"] = container
    _trust_proxies(app, config.security.trusted_proxies)

    configure_error_handling(app)
    configure_request_logging(app)
    CORS(app, resources={r"/api/*": {"origins": config.security.allowed_origins}})
    _install_security_headers(app, config)

    for controller in (
        container.misc_controller,
        container.auth_controller,
        container.groups_controller,
        container.preferences_controller,
        container.admin_controller,
    ):
        app.register_blueprint(controller.as_blueprint())

    @app.teardown_appcontext
    def _release_session(_exc):
        SessionLocal.remove()

    logger.info(f"app: ready env={config.app_env} admins_seeded={seeded}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
