# taskify/core/reconciliation.py
import datetime
from typing import Iterable, List, Tuple, Union

from taskify.core.models import (
    HABIT_COMPLETED, HABIT_IN_PROGRESS, HABIT_SKIPPED,
    STATUS_CANCELLED, STATUS_DONE, STATUS_IN_PROGRESS,
    HabitItem, MonthlyProgress, Task, TaskItem, TrackableItem,
)
from taskify.core.repositories import HabitRepository, TaskRepository
from taskify.utils.text_utils import month_label, normalize_search

# Status de tarefa -> status equivalente de hábito, usado pelo filtro da lista
STATUS_ALIASES = {
    STATUS_DONE: HABIT_COMPLETED,
    STATUS_CANCELLED: HABIT_SKIPPED,
    STATUS_IN_PROGRESS: HABIT_IN_PROGRESS,
}


def sort_key(item: TrackableItem):
    # Itens com data primeiro (ordem cronológica), depois os sem data por nome
    if item.due_date is not None:
        return (0, item.due_date.timestamp(), "")
    return (1, 0, normalize_search(item.name))


def reconcile(tasks: Iterable[Task], progress: Union[MonthlyProgress, None]) -> List[TrackableItem]:
    """Junta tarefas e hábitos do mês numa única lista ordenada.

    É uma função pura: as mesmas tarefas e o mesmo documento de progresso
    produzem sempre a mesma sequência.
    """
    items: List[TrackableItem] = [TaskItem(task) for task in tasks]
    if progress is not None:
        items.extend(HabitItem(habit, progress.id) for habit in progress.habits)
    return sorted(items, key=sort_key)


class ReconciliationService:
    def __init__(self, tasks: TaskRepository, habits: HabitRepository):
        self.tasks = tasks
        self.habits = habits

    def load_items(self, user_id: str, day: Union[datetime.date, None] = None) -> List[TrackableItem]:
        """Busca tarefas e o progresso do mês e devolve a lista unificada.

        Uma falha em qualquer das buscas propaga DataAccessError: nunca é
        montada uma lista parcial.
        """
        month = month_label(day)
        tasks = self.tasks.list(user_id)
        progress = self.habits.find_month(user_id, month)
        items = reconcile(tasks, progress)
        print(f"DEBUG: {len(items)} itens reconciliados para '{month}'.")
        return items


def matches_status(item: TrackableItem, status: str) -> bool:
    if status in (None, "", "todas"):
        return True
    if item.status == status:
        return True
    return STATUS_ALIASES.get(status) == item.status


def filter_items(items: Iterable[TrackableItem],
                 search: str = "",
                 item_type: str = "all",
                 status: str = "todas",
                 priority: str = "todas") -> List[TrackableItem]:
    """Filtros da lista unificada. O filtro de prioridade só existe para tarefas,
    então hábitos somem quando uma prioridade é escolhida."""
    wanted = normalize_search(search)
    result = []
    for item in items:
        if wanted and wanted not in normalize_search(item.name):
            continue
        if item_type not in (None, "", "all") and item.type != item_type:
            continue
        if not matches_status(item, status):
            continue
        if priority not in (None, "", "todas"):
            if item.type != "task" or item.priority != priority:
                continue
        result.append(item)
    return result


def split_by_day(items: Iterable[TrackableItem],
                 today: Union[datetime.date, None] = None) -> Tuple[List[TrackableItem], List[TrackableItem]]:
    """Separa os itens de hoje (hábitos e tarefas vencendo até hoje) dos futuros."""
    today = today or datetime.date.today()
    todays, future = [], []
    for item in items:
        if item.type == "habit":
            todays.append(item)
        elif item.due_date is not None:
            if item.due_date.date() <= today:
                todays.append(item)
            else:
                future.append(item)
    return todays, future
