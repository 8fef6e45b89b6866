# taskify/core/repositories.py
"""Repositórios: traduzem as linhas do Supabase (dicionários) para os modelos
do núcleo. Cada repositório recebe o cliente no construtor, assim os serviços
não dependem de estado global."""
import datetime
from typing import Any, Dict, List, Union

from supabase import Client

from taskify.core import db
from taskify.core.errors import DataAccessError
from taskify.core.models import Appointment, MonthlyProgress, Notification, Task
from taskify.core.progress import recompute_overall


class TaskRepository:
    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def list(self, user_id: str) -> List[Task]:
        return [Task.from_row(row) for row in db.list_tasks(self.client, user_id)]

    def insert(self, fields: Dict[str, Any]) -> Union[Task, None]:
        row = db.insert_task(self.client, fields)
        return Task.from_row(row) if row else None

    def update(self, task_id: str, fields: Dict[str, Any]) -> None:
        fields = dict(fields)
        fields.setdefault('updated_at', datetime.datetime.now(datetime.timezone.utc).isoformat())
        db.update_task(self.client, task_id, fields)

    def delete(self, task_id: str) -> None:
        db.delete_task(self.client, task_id)


class HabitRepository:
    """Hábitos vivem dentro do documento de progresso mensal (tabela 'progress')."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def find_month(self, user_id: str, month: str) -> Union[MonthlyProgress, None]:
        rows = db.list_monthly_progress(self.client, user_id, month)
        return MonthlyProgress.from_row(rows[0]) if rows else None

    def get(self, progress_id: str) -> Union[MonthlyProgress, None]:
        row = db.get_monthly_progress(self.client, progress_id)
        return MonthlyProgress.from_row(row) if row else None

    def history(self, user_id: str) -> List[MonthlyProgress]:
        return [MonthlyProgress.from_row(row) for row in db.list_all_monthly_progress(self.client, user_id)]

    def ensure_month(self, user_id: str, month: str) -> MonthlyProgress:
        """Retorna o documento do mês, criando-o na primeira visita.

        Se outro cliente criou o mesmo mês entre a leitura e a inserção, a
        inserção falha pela restrição (user_id, month) e o documento existente
        é relido.
        """
        existing = self.find_month(user_id, month)
        if existing:
            return existing
        try:
            row = db.insert_monthly_progress(self.client, {
                'user_id': user_id,
                'month': month,
                'habits': [],
                'overall': 0,
            })
        except DataAccessError:
            existing = self.find_month(user_id, month)
            if existing:
                print(f"DEBUG: Progresso de '{month}' já existia, criação ignorada.")
                return existing
            raise
        if row:
            return MonthlyProgress.from_row(row)
        return self.find_month(user_id, month) or MonthlyProgress(id='', user_id=user_id, month=month)

    def save_habits(self, progress: MonthlyProgress) -> int:
        """Recalcula o percentual geral e grava hábitos + percentual juntos."""
        progress.overall = recompute_overall(progress.habits)
        db.update_monthly_progress(self.client, progress.id, {
            'habits': [habit.to_row() for habit in progress.habits],
            'overall': progress.overall,
        })
        return progress.overall


class NotificationRepository:
    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def list(self, user_id: str) -> List[Notification]:
        return [Notification.from_row(row) for row in db.list_notifications(self.client, user_id)]

    def insert(self, user_id: str, message: str, type: str) -> Union[Notification, None]:
        row = db.insert_notification(self.client, {
            'user_id': user_id,
            'message': message,
            'type': type,
            'read': False,
        })
        return Notification.from_row(row) if row else None

    def mark_read(self, notification_id: str) -> None:
        db.update_notification(self.client, notification_id, {'read': True})

    def mark_all_read(self, user_id: str) -> None:
        db.mark_all_notifications_read(self.client, user_id)

    def delete(self, notification_id: str) -> None:
        db.delete_notification(self.client, notification_id)


class AppointmentRepository:
    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def list(self, user_id: str) -> List[Appointment]:
        return [Appointment.from_row(row) for row in db.list_appointments(self.client, user_id)]

    def insert(self, user_id: str, title: str, date: datetime.datetime,
               location: str = '', reminder: bool = False) -> Union[Appointment, None]:
        row = db.insert_appointment(self.client, {
            'user_id': user_id,
            'title': title,
            'location': location,
            'date': date.isoformat(),
            'reminder': reminder,
        })
        return Appointment.from_row(row) if row else None

    def update(self, appointment_id: str, fields: Dict[str, Any]) -> None:
        db.update_appointment(self.client, appointment_id, fields)

    def delete(self, appointment_id: str) -> None:
        db.delete_appointment(self.client, appointment_id)
