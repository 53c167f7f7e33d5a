import os

from flask import Flask, abort, send_file
from flask_swagger_ui import get_swaggerui_blueprint

from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .api.public import public_bp
from .cli import cms_cli
from .middleware.current_user import current_user_middleware
from .errors import register_error_handlers

OPENAPI_URL = "/openapi/cms.yaml"
SWAGGER_URL = "/swagger"


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    current_user_middleware(app)

    # -------------------------------------------------
    # Content library API, CLI and error handlers
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    app.register_blueprint(cms_cli)
    register_error_handlers(app)

    register_api_docs(app)

    # -------------------------------------------------
    # Public site (registered last, catches /<path>/<slug>)
    # -------------------------------------------------
    app.register_blueprint(public_bp)

    app.logger.debug("blockcms started with %s config", config_name)
    return app


def register_api_docs(app: Flask) -> None:
    """OpenAPI document of the content library plus a Swagger UI for it."""
    spec_path = os.path.join(app.root_path, "api", "v1", "cms_openapi.yaml")

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        if not os.path.exists(spec_path):
            abort(404)
        return send_file(spec_path, mimetype="application/yaml")

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        OPENAPI_URL,
        config={
            "app_name": "Content Block API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )
    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)
