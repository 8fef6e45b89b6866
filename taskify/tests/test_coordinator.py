import datetime
import tempfile
import unittest

from taskify.core.errors import (
    AlreadyCompletedError, DataAccessError, InvalidFieldError, ItemNotFoundError, NotAuthenticatedError,
    StaleListError,
)
from taskify.core.session import UserSession
from taskify.tests.helpers import FakeSupabaseClient, habit_row, progress_row, task_row

TODAY = datetime.date(2025, 3, 10)


class CoordinatorTestCase(unittest.TestCase):
    def setUp(self):
        self.client = FakeSupabaseClient()
        self.client.tables['tasks'] = [
            task_row('t1', 'Pagar aluguel', '2025-03-20T10:00:00+00:00'),
            task_row('t2', 'Enviar relatório', '2025-03-05T10:00:00+00:00', status='em progresso'),
        ]
        self.client.tables['progress'] = [
            progress_row('p1', 'março 2025', [
                habit_row('h1', 'Água', 4, 2, unit='glasses', streak=5),
                habit_row('h2', 'Ler', 2, 0),
            ], overall=25),
        ]
        self.session = UserSession(self.client, cache_dir=None)
        self.coordinator = self.session.coordinator
        self.coordinator.today = lambda: TODAY
        self.coordinator.refresh()
        self.client.calls.clear()

    def progress(self):
        return self.client.tables['progress'][0]

    def stored_habit(self, habit_id):
        return next(h for h in self.progress()['habits'] if h['id'] == habit_id)

    def stored_task(self, task_id):
        return next(t for t in self.client.tables['tasks'] if t['id'] == task_id)


class TestComplete(CoordinatorTestCase):
    def test_complete_task(self):
        item = self.coordinator.complete('t1')
        self.assertEqual(self.stored_task('t1')['status'], 'concluída')
        self.assertTrue(item.is_completed)

    def test_complete_task_twice_changes_nothing(self):
        self.coordinator.complete('t1')
        before = dict(self.stored_task('t1'))
        self.client.calls.clear()
        with self.assertRaises(AlreadyCompletedError):
            self.coordinator.complete('t1')
        self.assertEqual(self.stored_task('t1'), before)
        self.assertEqual(self.client.calls, [])

    def test_complete_habit(self):
        self.assertEqual(self.coordinator.find('h1').current, 2)
        item = self.coordinator.complete('h1')
        stored = self.stored_habit('h1')
        self.assertEqual(stored['current'], 4)
        self.assertEqual(stored['streak'], 6)
        self.assertEqual(item.status, 'completed')
        self.assertTrue(item.is_completed)
        # (100 + 0) / 2
        self.assertEqual(self.progress()['overall'], 50)

    def test_complete_refreshes_list(self):
        self.coordinator.complete('h2')
        self.assertIn(('progress', 'update'), self.client.calls)
        self.assertEqual(self.client.calls[-1], ('progress', 'select'))
        self.assertEqual(self.coordinator.find('h2').current, 2)


class TestSkip(CoordinatorTestCase):
    def test_skip_task(self):
        item = self.coordinator.skip('t1')
        self.assertEqual(self.stored_task('t1')['status'], 'cancelada')
        self.assertEqual(item.status, 'cancelada')

    def test_skip_habit_resets_streak_only(self):
        item = self.coordinator.skip('h1')
        stored = self.stored_habit('h1')
        self.assertEqual(stored['streak'], 0)
        self.assertEqual(stored['current'], 2)
        self.assertEqual(item.status, 'skipped')
        self.assertEqual(self.progress()['overall'], 25)

    def test_complete_after_skip(self):
        self.coordinator.skip('h1')
        item = self.coordinator.complete('h1')
        self.assertEqual(item.status, 'completed')
        self.assertEqual(item.streak, 1)
        self.assertNotIn('status', self.stored_habit('h1'))


    def test_skip_completed_habit_reports_skipped(self):
        self.coordinator.complete('h1')
        item = self.coordinator.skip('h1')
        self.assertEqual(item.status, 'skipped')
        self.assertEqual(item.streak, 0)
        self.assertEqual(item.current, 4)
        self.assertEqual(self.stored_habit('h1')['status'], 'skipped')

    def test_complete_skipped_habit_at_target(self):
        self.coordinator.complete('h1')
        self.coordinator.skip('h1')
        item = self.coordinator.complete('h1')
        self.assertEqual(item.status, 'completed')
        self.assertEqual(item.streak, 1)

    def test_progress_change_clears_skip(self):
        self.coordinator.skip('h1')
        self.assertEqual(self.coordinator.increment('h1').status, 'in_progress')
        self.coordinator.skip('h2')
        self.assertEqual(self.coordinator.update('h2', {'current': 2}).status, 'completed')
        self.assertNotIn('status', self.stored_habit('h2'))


class TestWriteThenRefreshFailure(CoordinatorTestCase):
    def test_habit_completed_once_when_retried(self):
        self.client.failures.add(('tasks', 'select'))
        with self.assertRaises(StaleListError) as ctx:
            self.coordinator.complete('h1')
        self.assertNotIsInstance(ctx.exception, DataAccessError)
        self.assertEqual(self.stored_habit('h1')['streak'], 6)
        self.assertEqual(self.stored_habit('h1')['current'], 4)
        # A lista em memória continua a antiga
        self.assertEqual(self.coordinator.find('h1').current, 2)

        self.client.failures.clear()
        with self.assertRaises(AlreadyCompletedError):
            self.coordinator.complete('h1')
        self.assertEqual(self.stored_habit('h1')['streak'], 6)

    def test_task_insert_reported_as_saved(self):
        self.client.failures.add(('tasks', 'select'))
        with self.assertRaises(StaleListError):
            self.coordinator.add_task({'name': 'Comprar pão'})
        titles = [t['title'] for t in self.client.tables['tasks']]
        self.assertEqual(titles.count('Comprar pão'), 1)

    def test_write_failure_is_still_data_access_error(self):
        self.client.failures.add(('progress', 'update'))
        with self.assertRaises(DataAccessError):
            self.coordinator.complete('h1')
        self.assertEqual(self.stored_habit('h1')['streak'], 5)


class TestUpdate(CoordinatorTestCase):
    def test_update_task_maps_fields(self):
        self.coordinator.update('t1', {
            'name': 'Pagar condomínio',
            'priority': 'alta',
            'dueDate': '2025-03-25T12:00:00+00:00',
            'category': 'financeiro',
            'color': 'azul',
        })
        stored = self.stored_task('t1')
        self.assertEqual(stored['title'], 'Pagar condomínio')
        self.assertEqual(stored['priority'], 'alta')
        self.assertEqual(stored['category'], 'Financeiro')
        self.assertEqual(stored['due_date'], '2025-03-25T12:00:00+00:00')
        self.assertNotIn('color', stored)
        self.assertIn('updated_at', stored)

    def test_update_with_only_unknown_fields_does_nothing(self):
        self.coordinator.update('t1', {'color': 'azul'})
        self.assertEqual(self.client.calls, [])

    def test_update_task_invalid_status(self):
        with self.assertRaises(InvalidFieldError):
            self.coordinator.update('t1', {'status': 'arquivada'})
        self.assertEqual(self.client.calls, [])

    def test_update_habit(self):
        item = self.coordinator.update('h2', {'target': 4, 'current': '2', 'unit': 'páginas', 'priority': 'alta'})
        stored = self.stored_habit('h2')
        self.assertEqual(stored['target'], 4)
        self.assertEqual(stored['current'], 2)
        self.assertEqual(stored['unit'], 'páginas')
        self.assertNotIn('priority', stored)
        self.assertEqual(item.unit, 'páginas')
        # (50 + 50) / 2
        self.assertEqual(self.progress()['overall'], 50)

    def test_update_habit_negative_value(self):
        with self.assertRaises(InvalidFieldError):
            self.coordinator.update('h2', {'current': -1})


class TestDelete(CoordinatorTestCase):
    def test_delete_task(self):
        self.coordinator.delete('t2')
        self.assertEqual([t['id'] for t in self.client.tables['tasks']], ['t1'])
        self.assertIsNone(self.coordinator.get('t2'))

    def test_delete_habit_removes_one_entry(self):
        self.coordinator.delete('h2')
        habits = self.progress()['habits']
        self.assertEqual([h['id'] for h in habits], ['h1'])
        self.assertEqual(self.progress()['overall'], 50)
        self.assertIsNone(self.coordinator.get('h2'))

    def test_delete_habit_removed_elsewhere(self):
        self.progress()['habits'] = [h for h in self.progress()['habits'] if h['id'] != 'h2']
        with self.assertRaises(ItemNotFoundError):
            self.coordinator.delete('h2')


class TestPreconditions(CoordinatorTestCase):
    def test_unknown_id_makes_no_remote_calls(self):
        for action in (self.coordinator.complete, self.coordinator.skip, self.coordinator.delete):
            with self.assertRaises(ItemNotFoundError):
                action('nao-existe')
        with self.assertRaises(ItemNotFoundError):
            self.coordinator.update('nao-existe', {'name': 'x'})
        self.assertEqual(self.client.calls, [])

    def test_not_authenticated(self):
        self.client.set_user(None)
        with self.assertRaises(NotAuthenticatedError):
            self.coordinator.complete('t1')
        self.assertEqual(self.client.calls, [])

    def test_refresh_without_session_is_empty(self):
        self.client.set_user(None)
        self.assertEqual(self.coordinator.refresh(), [])

    def test_remote_failure_leaves_items_untouched(self):
        before = list(self.coordinator.items)
        self.client.failures.add(('tasks', 'update'))
        with self.assertRaises(DataAccessError):
            self.coordinator.complete('t1')
        self.assertEqual(self.coordinator.items, before)
        self.assertFalse(self.coordinator.find('t1').is_completed)

    def test_refresh_failure_keeps_previous_items(self):
        before = list(self.coordinator.items)
        self.client.failures.add('tasks')
        with self.assertRaises(DataAccessError):
            self.coordinator.refresh()
        self.assertEqual(self.coordinator.items, before)
        self.assertIsNotNone(self.coordinator.error)


class TestHabitSteps(CoordinatorTestCase):
    def test_increment_and_decrement(self):
        self.assertEqual(self.coordinator.increment('h1').current, 3)
        self.assertEqual(self.coordinator.increment('h1').current, 4)
        self.assertEqual(self.coordinator.increment('h1').current, 4)
        self.assertEqual(self.coordinator.decrement('h2').current, 0)

    def test_increment_task_is_rejected(self):
        with self.assertRaises(InvalidFieldError):
            self.coordinator.increment('t1')


class TestAdd(CoordinatorTestCase):
    def test_add_task_with_defaults(self):
        item = self.coordinator.add_task({'name': 'Comprar pão'})
        self.assertEqual(item.name, 'Comprar pão')
        stored = self.stored_task(item.id)
        self.assertEqual(stored['user_id'], 'user-1')
        self.assertEqual(stored['status'], 'pendente')
        self.assertEqual(stored['priority'], 'média')
        self.assertEqual(stored['category'], 'Outro')

    def test_add_task_requires_title(self):
        with self.assertRaises(InvalidFieldError):
            self.coordinator.add_task({'priority': 'alta'})

    def test_add_habit_creates_month_lazily(self):
        self.coordinator.today = lambda: datetime.date(2025, 4, 2)
        item, created = self.coordinator.add_habit('Correr', target=3, unit='km')
        self.assertTrue(created)
        self.assertEqual(item.target, 3)
        april = [p for p in self.client.tables['progress'] if p['month'] == 'abril 2025']
        self.assertEqual(len(april), 1)
        self.assertEqual(april[0]['overall'], 0)
        self.assertEqual(april[0]['habits'][0]['name'], 'Correr')

    def test_add_duplicate_habit_is_skipped(self):
        item, created = self.coordinator.add_habit('água', target=8)
        self.assertFalse(created)
        self.assertEqual(item.id, 'h1')
        self.assertEqual(len(self.progress()['habits']), 2)


class TestCache(CoordinatorTestCase):
    def test_refresh_writes_cache(self):
        with tempfile.TemporaryDirectory() as tmp:
            session = UserSession(self.client, cache_dir=tmp)
            session.coordinator.today = lambda: TODAY
            session.coordinator.refresh()
            cached = session.cache.load('user-1')
            self.assertEqual([c['id'] for c in cached], ['t2', 't1', 'h1', 'h2'])
            self.assertEqual(session.cache.load('user-2'), [])


if __name__ == '__main__':
    unittest.main()
