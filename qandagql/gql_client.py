import logging
from typing import Any, Dict
import requests
import simplejson as json

from qandagql.errors import UpstreamError

log = logging.getLogger(__name__)


LIST_QUESTIONS = """
query ListQuestions($date: String!, $limit: Int!) {
    listQuestions(date: $date, limit: $limit) {
        items {
            id
            content
            createdAt
            answers {
                content
            }
        }
    }
}
"""

POST_QUESTION = """
mutation PostQuestion($content: String!) {
    postQuestion(content: $content) {
        id
    }
}
"""

POST_ANSWER = """
mutation PostAnswer($content: String!, $questionId: ID!) {
    postAnswer(content: $content, questionId: $questionId) {
        id
        content
    }
}
"""

DELETE_QUESTION = """
mutation DeleteQuestion($questionId: ID!) {
    deleteQuestion(id: $questionId)
}
"""


class GraphQLClient:
    """Calls the question API's GraphQL endpoint on behalf of a user.

    The caller's Authorization header is forwarded as-is; the API does its
    own authorization.
    """

    def __init__(self, domain: str, session: requests.Session = None, timeout: float = 10):
        self.domain = domain
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"https://{self.domain}/graphql"

    def execute(self, query: str, auth: str, variables: Dict = None) -> Dict[str, Any]:
        """Run a query and return its `data`.

        Raises UpstreamError for transport failures, non-2xx responses and
        GraphQL errors.
        """
        payload = json.dumps(dict(query=query, variables=variables or {}))
        try:
            res = self.session.post(
                self.url,
                data=payload,
                headers={
                    'Content-Type': 'application/json',
                    'Authorization': auth,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"GraphQL request failed: {e}") from e

        if not res.ok:
            raise UpstreamError(f"GraphQL request failed with status {res.status_code}")

        try:
            body = json.loads(res.content)
        except ValueError as e:
            raise UpstreamError("GraphQL response is not JSON") from e

        if body.get('errors'):
            messages = '; '.join(str(err.get('message', err)) for err in body['errors'])
            raise UpstreamError(f"GraphQL errors: {messages}")
        if not body.get('data'):
            raise UpstreamError("GraphQL response has no data")
        return body['data']

    def list_questions(self, auth: str, date: str, limit: int):
        data = self.execute(LIST_QUESTIONS, auth, dict(date=date, limit=limit))
        return data['listQuestions']['items']

    def post_question(self, auth: str, content: str) -> Dict:
        data = self.execute(POST_QUESTION, auth, dict(content=content))
        return data['postQuestion']

    def post_answer(self, auth: str, content: str, question_id: str) -> Dict:
        data = self.execute(POST_ANSWER, auth, dict(content=content, questionId=question_id))
        return data['postAnswer']

    def delete_question(self, auth: str, question_id: str) -> bool:
        data = self.execute(DELETE_QUESTION, auth, dict(questionId=question_id))
        return data['deleteQuestion']
