import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple
from boto3.dynamodb.conditions import Key, Attr
from botocore.exceptions import BotoCoreError, ClientError
import logging

from qandagql.errors import QuestionExistsError, StoreUnavailableError
from qandagql.schema import QuestionSchema

log = logging.getLogger(__name__)


Question = Dict
Answer = Dict

# appends the new answer, creating the list on first answer
APPEND_ANSWER = "SET answers = list_append(if_not_exists(answers, :empty), :answer)"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime) -> str:
    """Format as e.g. `2024-05-01T12:34:56.789Z`.

    Fixed width and always UTC, so ids built from it sort in creation order.
    """
    dt = dt.astimezone(timezone.utc)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f'{dt.microsecond // 1000:03d}Z'


def date_of(id_: str) -> str:
    """Partition key (calendar day) of a question or answer id."""
    return id_.split('T')[0]


def key_for(id_: str) -> Dict:
    return {'pk': date_of(id_), 'sk': id_}


@contextmanager
def store_call(action: str):
    """Translate botocore failures into storage errors."""
    try:
        yield
    except ClientError as e:
        code = e.response.get('Error', {}).get('Code')
        if code == 'ConditionalCheckFailedException':
            raise QuestionExistsError(f"{action}: row already exists") from e
        log.error(f"{action} failed: {code}")
        raise StoreUnavailableError(f"{action} failed: {code}") from e
    except BotoCoreError as e:
        log.error(f"{action} failed: {e}")
        raise StoreUnavailableError(f"{action} failed") from e


class Model:
    """Questions and answers in a single table keyed by (day, id).

    Answers are not rows of their own; they live in the `answers` list of
    the question they belong to.
    """

    def __init__(self, table, clock: Callable[[], datetime] = utcnow):
        self.table = table
        self.clock = clock
        self.question_schema = QuestionSchema()

    def id_and_created(self) -> Dict:
        created = iso_timestamp(self.clock())
        return dict(
            id=f"{created}#{uuid.uuid4()}",
            createdAt=created,
        )

    def list_questions(self, date: str, limit: int, cursor: str = None) -> Tuple[List[Question], Optional[str]]:
        """Get the newest questions asked on `date` (YYYY-MM-DD).

        Returns the page of questions and the cursor to pass back for the next
        page, or None when there is nothing more to read.
        """
        query_params = dict(
            KeyConditionExpression=Key('pk').eq(date),
            Limit=limit,
            ScanIndexForward=False,  # give us most recent first
        )
        if cursor:
            query_params['ExclusiveStartKey'] = {'pk': date, 'sk': cursor}

        with store_call('list questions'):
            res = self.table.query(**query_params)

        items = [self.question_schema.dump(item) for item in res.get('Items', [])]
        last_key = res.get('LastEvaluatedKey')
        return items, last_key['sk'] if last_key else None

    def get_question(self, id: str) -> Optional[Question]:
        with store_call('get question'):
            res = self.table.get_item(Key=key_for(id))
        if 'Item' not in res:
            return None
        return self.question_schema.dump(res['Item'])

    def post_question(self, content: str) -> Question:
        """Record a new question."""
        q = dict(
            **self.id_and_created(),
            content=content,
            answers=[],
        )
        with store_call('put question'):
            self.table.put_item(
                Item={**key_for(q['id']), **q},
                ConditionExpression=Attr('sk').not_exists(),  # insert, never overwrite
            )
        log.info(f"new question {q['id']}")
        return q

    def post_answer(self, content: str, question_id: str) -> Answer:
        """Append an answer to a question's `answers`.

        The question row is addressed by the question's id, not the answer's.
        Its existence isn't checked.
        """
        answer = dict(
            **self.id_and_created(),
            content=content,
            questionId=question_id,
        )
        with store_call('append answer'):
            self.table.update_item(
                Key=key_for(question_id),
                UpdateExpression=APPEND_ANSWER,
                ExpressionAttributeValues={
                    ':answer': [answer],
                    ':empty': [],
                },
                ReturnValues='NONE',
            )
        log.info(f"new answer {answer['id']} for question {question_id}")
        return answer

    def delete_question(self, id: str) -> bool:
        """Delete a question and its answers. Deleting a missing question is fine."""
        with store_call('delete question'):
            self.table.delete_item(Key=key_for(id))
        log.info(f"deleted question {id}")
        return True
