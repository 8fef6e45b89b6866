# taskify/core/session.py
from typing import Union

from supabase import Client

from taskify.config import CACHE_DIR
from taskify.core.auth import AuthService
from taskify.core.cache import ItemCache
from taskify.core.coordinator import MutationCoordinator
from taskify.core.notifications import NotificationCenter
from taskify.core.reconciliation import ReconciliationService
from taskify.core.repositories import (
    AppointmentRepository, HabitRepository, NotificationRepository, TaskRepository,
)


class UserSession:
    """Monta os serviços de um usuário uma única vez, sobre o mesmo cliente Supabase."""

    def __init__(self, supabase_client: Client, cache_dir: Union[str, None] = CACHE_DIR):
        self.client = supabase_client
        self.auth = AuthService(supabase_client)
        self.tasks = TaskRepository(supabase_client)
        self.habits = HabitRepository(supabase_client)
        self.appointments = AppointmentRepository(supabase_client)
        self.reconciliation = ReconciliationService(self.tasks, self.habits)
        self.cache = ItemCache(cache_dir) if cache_dir else None
        self.coordinator = MutationCoordinator(
            self.auth, self.tasks, self.habits, self.reconciliation, cache=self.cache,
        )
        self.notifications = NotificationCenter(self.auth, NotificationRepository(supabase_client))
        self.auth.on_session_change(self._on_session_change)

    def _on_session_change(self, event: str, session) -> None:
        # Sem sessão não há dados: limpa o que estava em memória
        if session is None:
            self.coordinator.items = []
            self.notifications.notifications = []
