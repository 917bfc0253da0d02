import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
import uuid
from botocore.exceptions import ClientError, EndpointConnectionError

from fakes import FakeTable, TickingClock
from qandagql.errors import QuestionExistsError, StoreUnavailableError
from qandagql.model import Model, date_of, iso_timestamp


class ModelTestCase(unittest.TestCase):
    def setUp(self):
        self.table = FakeTable()
        self.clock = TickingClock()
        self.model = Model(self.table, clock=self.clock)

    def test_iso_timestamp(self):
        dt = datetime(2024, 5, 1, 9, 8, 7, 654321, tzinfo=timezone.utc)
        self.assertEqual(iso_timestamp(dt), '2024-05-01T09:08:07.654Z')
        # converted to UTC
        est = timezone(timedelta(hours=-5))
        self.assertEqual(iso_timestamp(datetime(2024, 5, 1, 22, 0, tzinfo=est)), '2024-05-02T03:00:00.000Z')

    def test_date_of(self):
        self.assertEqual(date_of('2024-05-01T09:08:07.654Z#abc'), '2024-05-01')

    def test_post_question(self):
        q = self.model.post_question("What is a closure?")
        self.assertEqual(q['content'], "What is a closure?")
        self.assertEqual(q['answers'], [])

        created, _, rest = q['id'].partition('#')
        self.assertEqual(created, q['createdAt'])
        self.assertEqual(created, '2024-05-01T12:00:00.001Z')
        uuid.UUID(rest)

        row = self.table.rows[('2024-05-01', q['id'])]
        self.assertEqual(row['pk'], '2024-05-01')
        self.assertEqual(row['sk'], q['id'])
        self.assertEqual(self.model.get_question(q['id']), q)

    def test_post_question_never_overwrites(self):
        fixed = uuid.UUID('12345678-1234-5678-1234-567812345678')
        clock = lambda: datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        model = Model(self.table, clock=clock)
        with patch('qandagql.model.uuid.uuid4', return_value=fixed):
            first = model.post_question("first")
            with self.assertRaises(QuestionExistsError):
                model.post_question("second")
        self.assertEqual(self.model.get_question(first['id'])['content'], "first")

    def test_post_answer_appends_in_order(self):
        q = self.model.post_question("Q")
        a1 = self.model.post_answer("A1", q['id'])
        a2 = self.model.post_answer("A2", q['id'])

        self.assertEqual(a1['questionId'], q['id'])
        self.assertEqual(a1['content'], "A1")
        self.assertTrue(a1['id'].startswith(a1['createdAt'] + '#'))

        stored = self.model.get_question(q['id'])
        self.assertEqual(stored['answers'], [a1, a2])
        self.assertEqual(stored['content'], "Q")

        a3 = self.model.post_answer("A3", q['id'])
        stored = self.model.get_question(q['id'])
        self.assertEqual(stored['answers'], [a1, a2, a3])

    def test_post_answer_keys_by_question(self):
        # question asked yesterday, answered today
        q = self.model.post_question("old question")
        self.clock.now += timedelta(days=1)
        a = self.model.post_answer("late answer", q['id'])
        self.assertNotEqual(date_of(a['id']), date_of(q['id']))
        self.assertEqual(len(self.table.rows), 1)
        self.assertEqual(self.model.get_question(q['id'])['answers'], [a])

    def test_post_answer_without_question(self):
        # not validated; leaves a row holding only answers
        question_id = '2024-05-01T00:00:00.000Z#missing'
        a = self.model.post_answer("orphan", question_id)
        stored = self.model.get_question(question_id)
        self.assertEqual(stored, {'answers': [a]})

    def test_list_questions_newest_first(self):
        ids = [self.model.post_question(f"Q{i}")['id'] for i in range(3)]
        items, cursor = self.model.list_questions('2024-05-01', limit=10)
        self.assertEqual([q['id'] for q in items], list(reversed(ids)))
        self.assertIsNone(cursor)
        for q in items:
            self.assertNotIn('pk', q)
            self.assertNotIn('sk', q)

    def test_list_questions_pagination(self):
        ids = [self.model.post_question(f"Q{i}")['id'] for i in range(5)]
        newest_first = list(reversed(ids))

        seen = []
        cursor = None
        while True:
            items, cursor = self.model.list_questions('2024-05-01', limit=2, cursor=cursor)
            self.assertLessEqual(len(items), 2)
            seen.extend(q['id'] for q in items)
            if cursor is None:
                break
            self.assertEqual(cursor, items[-1]['id'])
        self.assertEqual(seen, newest_first)
        self.assertEqual(seen, sorted(seen, reverse=True))

    def test_list_questions_one_day(self):
        today = self.model.post_question("today")
        self.clock.now -= timedelta(days=1)
        self.model.post_question("yesterday")

        items, _ = self.model.list_questions('2024-05-01', limit=10)
        self.assertEqual([q['id'] for q in items], [today['id']])
        items, _ = self.model.list_questions('2024-04-30', limit=10)
        self.assertEqual([q['content'] for q in items], ["yesterday"])
        items, cursor = self.model.list_questions('2023-01-01', limit=10)
        self.assertEqual(items, [])
        self.assertIsNone(cursor)

    def test_delete_question(self):
        q = self.model.post_question("doomed")
        self.model.post_answer("answer", q['id'])
        self.assertTrue(self.model.delete_question(q['id']))

        items, _ = self.model.list_questions(date_of(q['id']), limit=10)
        self.assertNotIn(q['id'], [i['id'] for i in items])
        self.assertIsNone(self.model.get_question(q['id']))

        # again
        self.assertTrue(self.model.delete_question(q['id']))

    def test_store_unavailable(self):
        table = MagicMock()
        table.query.side_effect = ClientError(
            {'Error': {'Code': 'ProvisionedThroughputExceededException', 'Message': 'slow down'}},
            'Query',
        )
        table.delete_item.side_effect = EndpointConnectionError(endpoint_url='https://dynamodb.example.com')
        model = Model(table)

        with self.assertRaises(StoreUnavailableError) as ctx:
            model.list_questions('2024-05-01', limit=5)
        self.assertTrue(ctx.exception.retryable)
        with self.assertRaises(StoreUnavailableError):
            model.delete_question('2024-05-01T00:00:00.000Z#x')

    def test_query_params(self):
        table = MagicMock()
        table.query.return_value = {'Items': [], 'Count': 0}
        Model(table).list_questions('2024-05-01', limit=3, cursor='2024-05-01T10:00:00.000Z#x')

        kwargs = table.query.call_args.kwargs
        self.assertEqual(kwargs['Limit'], 3)
        self.assertFalse(kwargs['ScanIndexForward'])
        self.assertEqual(kwargs['ExclusiveStartKey'], {'pk': '2024-05-01', 'sk': '2024-05-01T10:00:00.000Z#x'})
