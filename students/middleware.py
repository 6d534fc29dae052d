import logging
import time

from flask import g, jsonify, request
from werkzeug.exceptions import HTTPException

from students.errors import ApplicationError, UserCausedError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(ApplicationError)
    def handle_application_error(error):
        if isinstance(error, UserCausedError):
            logger.info("%s %s: %s", request.method, request.path, error.message)
        else:
            logger.error("%s %s failed: %s", request.method, request.path, error.message)
        return jsonify(error.to_json()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        body = {"error": {"code": error.code, "name": error.name, "message": error.description}}
        return jsonify(body), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        body = {"error": {"code": 500, "name": type(error).__name__, "message": str(error)}}
        return jsonify(body), 500


def register_request_logging(app):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        logger.info(
            "%s %s %s %.3f ms", request.method, request.path, response.status_code, elapsed
        )
        return response
