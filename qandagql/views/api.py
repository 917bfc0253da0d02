from flask import Flask, request
import marshmallow
from typing import Dict

from qandagql.errors import RoutingError, ValidationError
from qandagql.gateway import Gateway
from qandagql.schema import AnswerBodySchema, AskBodySchema
from qandagql.views.index import json_response


def load_body(schema: marshmallow.Schema) -> Dict:
    """Load the JSON request body through `schema`; a missing body counts as {}."""
    data = request.get_json(force=True, silent=True)
    if data is None:
        data = {}
    try:
        return schema.load(data)
    except marshmallow.ValidationError as e:
        raise ValidationError("Invalid request body", fields=e.messages) from e


def bearer() -> str:
    """The caller's Authorization header, forwarded untouched."""
    return request.headers.get('Authorization', '')


def register(app: Flask, gateway: Gateway):
    """Mount the REST routes, all served by `gateway`."""

    @app.before_request
    def exact_methods_only():
        # werkzeug answers HEAD with the GET view; only declared methods are served
        if request.method == 'HEAD':
            raise RoutingError()

    @app.route('/oauth2/token', methods=['POST'], provide_automatic_options=False)
    def oauth2_token():
        """Exchange an authorization code (or refresh token) for tokens."""
        status, body = gateway.exchange_token(
            request.get_data(),
            authorization=request.headers.get('Authorization'),
            content_type=request.headers.get('Content-Type'),
        )
        return json_response(app, body, status)

    @app.route('/questions', methods=['GET'], provide_automatic_options=False)
    def list_questions():
        """Get today's newest questions."""
        return json_response(app, gateway.list_questions(bearer()))

    @app.route('/questions', methods=['POST'], provide_automatic_options=False)
    def ask():
        """Ask a question, with an answer."""
        args = load_body(AskBodySchema())
        return json_response(app, gateway.ask(bearer(), question=args['question'], answer=args['answer']))

    @app.route('/questions/<question_id>/answers', methods=['POST'], provide_automatic_options=False)
    def post_answer(question_id: str):
        """Answer a question."""
        args = load_body(AnswerBodySchema())
        return json_response(app, gateway.post_answer(bearer(), question_id=question_id, content=args['content']))

    @app.route('/questions/<question_id>', methods=['DELETE'], provide_automatic_options=False)
    def delete_question(question_id: str):
        gateway.delete_question(bearer(), question_id=question_id)
        return app.response_class('', status=204, mimetype='application/json')
