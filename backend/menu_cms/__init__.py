from flask import Flask, send_file, current_app
import click
from .config import config_by_name
from .extensions import db, migrate, jwt
from .logging_config import configure_logging
from .api.v1 import v1_bp
from .errors import register_error_handlers
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development", config_overrides: dict = None) -> Flask:
    config_class = config_by_name[config_name]
    configure_logging(config_class.LOG_LEVEL)

    app = Flask(__name__)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # CLI
    # -------------------------------------------------
    @app.cli.command("seed-menu-types")
    def seed_menu_types_command():
        """Create the default menu types that are missing."""
        from .application.menu_types import seed_default_menu_types

        created = seed_default_menu_types(current_app.config["DEFAULT_MENU_TYPES"])
        click.echo(f"Created {created} menu type(s)")

    # -------------------------------------------------
    # Serve OpenAPI YAML
    # -------------------------------------------------
    @app.route("/openapi/cms.yaml", methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "cms_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/cms.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Menu CMS API",
            "deepLinking": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.logger.debug("Menu CMS app created with %s config", config_name)
    return app
