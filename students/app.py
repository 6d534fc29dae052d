import logging

from flask import Flask
from flask_cors import CORS

from students.cli import register_commands
from students.config import Config
from students.db import init_db
from students.middleware import register_error_handlers, register_request_logging
from students.routes import register_routes

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    if not app.testing:
        Config.check(app.config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    origins = [origin.strip() for origin in app.config["CORS_ORIGINS"].split(",")]
    CORS(
        app,
        supports_credentials=True,
        resources={r"/api/*": {"origins": origins, "expose_headers": ["Authorization"]}},
    )

    init_db(app)
    register_routes(app)
    register_error_handlers(app)
    register_request_logging(app)
    register_commands(app)
    return app


if __name__ == "__main__":
    app = create_app()
    logger.info("Server started listening on port %s", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=app.debug)
