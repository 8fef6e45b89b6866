import copy
import itertools
import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock


class FakeQuery:
    """Imita a cadeia table().select().eq().order().execute() do cliente Supabase."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, columns='*'):
        self.op = 'select'
        return self

    def insert(self, row):
        self.op = 'insert'
        self.payload = row
        return self

    def update(self, fields):
        self.op = 'update'
        self.payload = fields
        return self

    def delete(self):
        self.op = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(col) == value for col, value in self.filters)

    def execute(self):
        self.client.calls.append((self.table, self.op))
        if (self.table, self.op) in self.client.failures or self.table in self.client.failures:
            raise Exception(f"Falha simulada em {self.table}.{self.op}")

        rows = self.client.tables.setdefault(self.table, [])
        if self.op == 'insert':
            row = copy.deepcopy(self.payload)
            row.setdefault('id', str(uuid.uuid4()))
            row.setdefault('created_at', self.client.next_timestamp())
            for key in self.client.unique.get(self.table, []):
                if any(all(r.get(k) == row.get(k) for k in key) for r in rows):
                    raise Exception('duplicate key value violates unique constraint')
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])
        if self.op == 'update':
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    changed.append(copy.deepcopy(row))
            return SimpleNamespace(data=changed)
        if self.op == 'delete':
            removed = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        result = [copy.deepcopy(r) for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: r.get(column) or '', reverse=desc)
        if self.limit_n is not None:
            result = result[:self.limit_n]
        return SimpleNamespace(data=result)


class FakeSupabaseClient:
    """Cliente Supabase em memória. Registra cada chamada remota em `calls`."""

    def __init__(self, user_id='user-1'):
        self.tables = {}
        self.calls = []
        self.failures = set()
        self.unique = {'progress': [('user_id', 'month')]}
        self._clock = itertools.count(1)
        self.auth = MagicMock()
        self.set_user(user_id)

    def set_user(self, user_id):
        if user_id is None:
            self.auth.get_session.return_value = None
        else:
            self.auth.get_session.return_value = SimpleNamespace(user=SimpleNamespace(id=user_id))

    def next_timestamp(self):
        return f"2025-03-01T00:00:{next(self._clock):02d}+00:00"

    def table(self, name):
        return FakeQuery(self, name)


def task_row(id, title, due_date=None, status='pendente', user_id='user-1', **extra):
    row = {
        'id': id,
        'user_id': user_id,
        'title': title,
        'status': status,
        'priority': extra.pop('priority', 'média'),
        'category': extra.pop('category', 'Outro'),
        'due_date': due_date,
        'created_at': extra.pop('created_at', '2025-03-01T00:00:00+00:00'),
    }
    row.update(extra)
    return row


def habit_row(id, name, target, current, unit='vezes', streak=0):
    return {'id': id, 'name': name, 'target': target, 'current': current, 'unit': unit, 'streak': streak}


def progress_row(id, month, habits, user_id='user-1', overall=0):
    return {'id': id, 'user_id': user_id, 'month': month, 'habits': habits, 'overall': overall}
