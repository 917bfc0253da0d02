"""In-memory stand-ins for DynamoDB and the upstream HTTP services."""
import copy
from datetime import datetime, timedelta, timezone
import requests
import simplejson as json
from botocore.exceptions import ClientError

from qandagql import gql_client
from qandagql.model import APPEND_ANSWER


class FakeTable:
    """Just enough of a DynamoDB Table resource for the model."""

    def __init__(self):
        self.rows = {}  # (pk, sk) -> item

    def _key(self, key):
        return key['pk'], key['sk']

    def query(self, KeyConditionExpression, Limit=None, ScanIndexForward=True, ExclusiveStartKey=None):
        expr = KeyConditionExpression.get_expression()
        key_attr, pk = expr['values']
        assert key_attr.name == 'pk' and expr['operator'] == '='

        sks = sorted((sk for (p, sk) in self.rows if p == pk), reverse=not ScanIndexForward)
        if ExclusiveStartKey:
            start = ExclusiveStartKey['sk']
            sks = [sk for sk in sks if (sk > start if ScanIndexForward else sk < start)]
        page = sks[:Limit] if Limit else sks

        res = {
            'Items': [copy.deepcopy(self.rows[(pk, sk)]) for sk in page],
            'Count': len(page),
        }
        # like DynamoDB, stopping at the limit yields a key even if nothing is left
        if Limit and len(sks) >= Limit:
            res['LastEvaluatedKey'] = {'pk': pk, 'sk': page[-1]}
        return res

    def get_item(self, Key):
        key = self._key(Key)
        if key not in self.rows:
            return {}
        return {'Item': copy.deepcopy(self.rows[key])}

    def put_item(self, Item, ConditionExpression=None):
        key = self._key(Item)
        if ConditionExpression is not None and key in self.rows:
            raise ClientError(
                {'Error': {'Code': 'ConditionalCheckFailedException', 'Message': 'The conditional request failed'}},
                'PutItem',
            )
        self.rows[key] = copy.deepcopy(Item)

    def update_item(self, Key, UpdateExpression, ExpressionAttributeValues, ReturnValues='NONE'):
        assert UpdateExpression == APPEND_ANSWER
        key = self._key(Key)
        row = self.rows.setdefault(key, dict(Key))
        existing = row.get('answers', ExpressionAttributeValues[':empty'])
        row['answers'] = list(existing) + copy.deepcopy(ExpressionAttributeValues[':answer'])
        return {}

    def delete_item(self, Key):
        self.rows.pop(self._key(Key), None)
        return {}


class TickingClock:
    """Clock that moves forward a millisecond every time it's read."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(milliseconds=1)
        return self.now


def make_response(status: int, body=None, url='https://upstream.example.com/') -> requests.Response:
    res = requests.Response()
    res.status_code = status
    res.url = url
    res._content = b'' if body is None else json.dumps(body).encode('utf-8')
    return res


# query document -> (field name, GraphQL variable name -> resolver argument name)
FIELDS = {
    gql_client.LIST_QUESTIONS: ('listQuestions', {}),
    gql_client.POST_QUESTION: ('postQuestion', {}),
    gql_client.POST_ANSWER: ('postAnswer', {}),
    gql_client.DELETE_QUESTION: ('deleteQuestion', {'questionId': 'id'}),
}


class ResolverSession:
    """Session that answers GraphQL POSTs by calling a Resolver directly.

    Stands in for AppSync. Fields named in `failing` come back as GraphQL
    errors.
    """

    def __init__(self, resolver, failing=()):
        self.resolver = resolver
        self.failing = set(failing)
        self.requests = []

    def post(self, url, data=None, headers=None, timeout=None):
        payload = json.loads(data)
        self.requests.append(dict(url=url, headers=headers, payload=payload))

        field_name, renames = FIELDS[payload['query']]
        if field_name in self.failing:
            return make_response(200, {'data': None, 'errors': [{'message': f'{field_name} exploded'}]}, url)

        arguments = {renames.get(k, k): v for k, v in payload['variables'].items()}
        result = self.resolver.dispatch(field_name, arguments)
        return make_response(200, {'data': {field_name: result}}, url)
