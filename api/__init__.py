from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import AuthSettings, get_config
from .errors import register_error_handlers
from models import DBStorage
from services.auth_service import build_auth_service
from utils.security import utc_now

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Auth Core API",
        "version": "1.0.0",
        "description": "Registration, login, logout and session-token validation.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, overrides: dict | None = None, clock=utc_now) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    Startup order: load config, validate it into AuthSettings (missing
    JWT_SECRET or DATABASE_URL raises ConfigurationError and nothing is
    served), open the store, then build the auth service once. Routes reach
    both through app.extensions.
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    settings = AuthSettings.from_mapping(app.config)

    storage = DBStorage(settings.database_url, timeout=settings.store_timeout)
    storage.reload()
    app.extensions["storage"] = storage
    app.extensions["auth_service"] = build_auth_service(settings, storage, clock=clock)

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")

    # Remove the thread's DB session at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Auth Core API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
