import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
import requests

from qandagql.errors import UpstreamError, ValidationError
from qandagql.gql_client import GraphQLClient
from qandagql.idp import IdentityProvider
from qandagql.model import iso_timestamp, date_of, utcnow

log = logging.getLogger(__name__)


class Gateway:
    """REST operations on top of the GraphQL API and the identity provider."""

    @classmethod
    def from_config(cls, config) -> 'Gateway':
        for name in ('COGNITO_DOMAIN', 'APPSYNC_DOMAIN'):
            if not config.get(name):
                raise Exception(f"Configuration error: missing {name}")

        # one pooled session for every upstream call this process makes
        session = requests.Session()
        timeout = config['UPSTREAM_TIMEOUT']
        return cls(
            idp=IdentityProvider(config['COGNITO_DOMAIN'], session=session, timeout=timeout),
            graphql=GraphQLClient(config['APPSYNC_DOMAIN'], session=session, timeout=timeout),
            list_limit=config['LIST_QUESTIONS_LIMIT'],
        )

    def __init__(self, idp: IdentityProvider, graphql: GraphQLClient,
                 clock: Callable[[], datetime] = utcnow, list_limit: int = 5):
        self.idp = idp
        self.graphql = graphql
        self.clock = clock
        self.list_limit = list_limit

    def today(self) -> str:
        return date_of(iso_timestamp(self.clock()))

    def exchange_token(self, body: bytes, authorization: Optional[str], content_type: Optional[str]) -> Tuple[int, Dict]:
        return self.idp.exchange_token(body, authorization=authorization, content_type=content_type)

    def list_questions(self, auth: str) -> List[Dict]:
        """Today's newest questions."""
        return self.graphql.list_questions(auth, date=self.today(), limit=self.list_limit)

    def ask(self, auth: str, question: str, answer: str) -> Dict:
        """Post a question together with its first answer.

        If the answer can't be written the question is deleted again, so a
        failed call normally leaves nothing behind.
        """
        question_id = self.graphql.post_question(auth, content=question)['id']
        try:
            answer_id = self.graphql.post_answer(auth, content=answer, question_id=question_id)['id']
        except Exception:
            log.error(f"answer for new question {question_id} failed; deleting the question")
            self._discard_question(auth, question_id)
            raise
        return dict(
            questionId=question_id,
            answerId=answer_id,
        )

    def _discard_question(self, auth: str, question_id: str):
        try:
            self.graphql.delete_question(auth, question_id=question_id)
        except UpstreamError:
            log.exception(f"could not delete question {question_id}; it is left without an answer")

    def post_answer(self, auth: str, question_id: str, content: str) -> Dict:
        question_id = require_id(question_id)
        return self.graphql.post_answer(auth, content=content, question_id=question_id)

    def delete_question(self, auth: str, question_id: str) -> bool:
        question_id = require_id(question_id)
        return self.graphql.delete_question(auth, question_id=question_id)


def require_id(question_id: Optional[str]) -> str:
    if not question_id or not question_id.strip():
        raise ValidationError("Question ID is required")
    return question_id
