from flask import Flask, request
from werkzeug.exceptions import HTTPException
import simplejson as json
import logging

from qandagql.errors import QandaError, RoutingError

log = logging.getLogger(__name__)


def json_response(app: Flask, body, status: int = 200):
    return app.response_class(json.dumps(body), status=status, mimetype='application/json')


def register(app: Flask):
    """Install the gateway's error responses."""

    @app.errorhandler(404)
    @app.errorhandler(405)
    def method_not_allowed(e):
        log.info(f"no route for {request.method} {request.path}")
        return json_response(app, dict(message=RoutingError.message), RoutingError.status_code)

    @app.errorhandler(QandaError)
    def qanda_error(e: QandaError):
        if e.status_code >= 500:
            log.error(f"{request.method} {request.path} failed: {e}")
            return json_response(app, dict(message="Internal Server Error"), 500)
        body = dict(message=e.message)
        fields = getattr(e, 'fields', None)
        if fields:
            body['errors'] = fields
        return json_response(app, body, e.status_code)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return json_response(app, dict(message=e.name), e.code)

    @app.errorhandler(Exception)
    def internal_error(e):
        log.exception(f"{request.method} {request.path} failed")
        return json_response(app, dict(message="Internal Server Error"), 500)
