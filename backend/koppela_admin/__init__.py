# backend/koppela_admin/__init__.py
import logging

from flask import Flask, request

from .config import Config
from .extensions import admin_api, console_sessions
from .responses import bad_request
from .validation import ValidationError


def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_object is not None:
        app.config.from_object(config_object)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # Initialize extensions
    admin_api.init_app(app)
    console_sessions.init_app(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.notifications import notifications_bp
    from .routes.console import console_bp
    from .routes.stores import stores_bp
    from .routes.transfers import transfers_bp
    from .routes.business import business_bp
    from .routes.users import users_bp
    from .routes.catalog import catalog_bp
    from .routes.stock_adjustments import stock_adjustments_bp
    from .routes.credit import credit_bp
    from .routes.subscription import subscription_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(console_bp)
    app.register_blueprint(stores_bp)
    app.register_blueprint(transfers_bp)
    app.register_blueprint(business_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(stock_adjustments_bp)
    app.register_blueprint(credit_bp)
    app.register_blueprint(subscription_bp)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return bad_request(str(e))

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type, X-Business-Id"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
