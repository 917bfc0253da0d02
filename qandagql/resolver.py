"""GraphQL field resolvers.

AppSync invokes one Lambda for every field; the field name in the event picks
the model operation to run.
"""
import enum
import logging
from typing import Any, Dict, Optional

from qandagql.model import Model
from qandagql.schema import (
    DeleteQuestionArgs,
    ListQuestionsArgs,
    PostAnswerArgs,
    PostQuestionArgs,
)

log = logging.getLogger(__name__)


class Operation(enum.Enum):
    LIST_QUESTIONS = 'listQuestions'
    POST_QUESTION = 'postQuestion'
    POST_ANSWER = 'postAnswer'
    DELETE_QUESTION = 'deleteQuestion'

    @classmethod
    def from_field_name(cls, field_name: str) -> Optional['Operation']:
        try:
            return cls(field_name)
        except ValueError:
            return None


class Resolver:
    def __init__(self, model: Model):
        self.model = model
        # operation -> (argument schema, handler)
        self.handlers = {
            Operation.LIST_QUESTIONS: (ListQuestionsArgs(), self.list_questions),
            Operation.POST_QUESTION: (PostQuestionArgs(), self.post_question),
            Operation.POST_ANSWER: (PostAnswerArgs(), self.post_answer),
            Operation.DELETE_QUESTION: (DeleteQuestionArgs(), self.delete_question),
        }
        missing = set(Operation) - set(self.handlers)
        if missing:
            raise TypeError(f"no resolver for {missing}")

    def handle_event(self, event: Dict) -> Any:
        """Resolve an AppSync Lambda resolver event."""
        field_name = event['info']['fieldName']
        return self.dispatch(field_name, event.get('arguments') or {})

    def dispatch(self, field_name: str, arguments: Dict) -> Any:
        """Run the operation named `field_name`.

        Unknown names resolve to None. Raises marshmallow.ValidationError on
        bad arguments; storage errors propagate.
        """
        operation = Operation.from_field_name(field_name)
        if operation is None:
            log.warning(f"no resolver for field {field_name}")
            return None

        schema, handler = self.handlers[operation]
        kwargs = schema.load(arguments)
        log.debug(f"resolving {operation.value}")
        return handler(**kwargs)

    def list_questions(self, date: str, limit: int, cursor: str = None) -> Dict:
        items, next_cursor = self.model.list_questions(date=date, limit=limit, cursor=cursor)
        return dict(
            items=items,
            nextToken=next_cursor,
        )

    def post_question(self, content: str) -> Dict:
        return self.model.post_question(content=content)

    def post_answer(self, content: str, question_id: str) -> Dict:
        return self.model.post_answer(content=content, question_id=question_id)

    def delete_question(self, id: str) -> bool:
        return self.model.delete_question(id=id)
