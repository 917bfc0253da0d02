"""Marshalling for questions, answers and resolver arguments.

Rows come back from DynamoDB with their `pk`/`sk` key attributes attached;
dumping through these schemas leaves only the public fields.
"""
from marshmallow import EXCLUDE, Schema, fields, validate


class AnswerSchema(Schema):
    id = fields.Str()
    content = fields.Str()
    questionId = fields.Str()
    createdAt = fields.Str()


class QuestionSchema(Schema):
    id = fields.Str()
    content = fields.Str()
    answers = fields.List(fields.Nested(AnswerSchema))
    createdAt = fields.Str()


class ArgsSchema(Schema):
    class Meta:
        # AppSync may pass args we don't declare (e.g. nulls for optionals)
        unknown = EXCLUDE


class ListQuestionsArgs(ArgsSchema):
    date = fields.Str(required=True, validate=validate.Regexp(r'^\d{4}-\d{2}-\d{2}$'))
    limit = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    cursor = fields.Str(data_key='nextToken', load_default=None, allow_none=True)


class PostQuestionArgs(ArgsSchema):
    content = fields.Str(required=True, validate=validate.Length(min=1))


class PostAnswerArgs(ArgsSchema):
    content = fields.Str(required=True)
    question_id = fields.Str(data_key='questionId', required=True, validate=validate.Length(min=1))


class DeleteQuestionArgs(ArgsSchema):
    id = fields.Str(required=True, validate=validate.Length(min=1))


class AskBodySchema(Schema):
    """Body of POST /questions."""
    question = fields.Str(required=True)
    answer = fields.Str(required=True)

    class Meta:
        unknown = EXCLUDE


class AnswerBodySchema(Schema):
    """Body of POST /questions/<id>/answers."""
    content = fields.Str(required=True)

    class Meta:
        unknown = EXCLUDE
