from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import get_config
from .errors import register_error_handlers
from .sessions import SessionConfig, TokenSessionManager
from models.db_storage import DBStorage
from models.stores import AccountStore, TodoStore
from utils.security import PasswordHasher

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Todo Auth API",
        "version": "1.0.0",
        "description": "User registration, access/refresh token sessions and per-user todos.",
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
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, password_hasher=None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Storage, stores and the session manager are built here and kept in
    ``app.extensions`` so each app (and each test) gets its own.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    if app.debug:
        logging.basicConfig(level=logging.INFO)

    # "*" or a comma-separated list; the refresh cookie needs explicit origins
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "*").split(",") if o.strip()]
    if not origins or "*" in origins:
        CORS(app, resources={r"/*": {"origins": "*"}})
    else:
        CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage = DBStorage(app.config["DATABASE_URL"])
    storage.reload()
    accounts = AccountStore(storage)
    app.extensions["storage"] = storage
    app.extensions["todo_store"] = TodoStore(storage)
    app.extensions["session_manager"] = TokenSessionManager(
        SessionConfig.from_mapping(app.config),
        accounts,
        password_hasher or PasswordHasher(),
    )

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .todos import bp as todos_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/user")
    app.register_blueprint(todos_bp, url_prefix="/api/v1/user")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Todo Auth API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
