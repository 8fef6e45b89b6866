# taskify/core/coordinator.py
import datetime
from typing import Any, Callable, Dict, List, Tuple, Union

from taskify.core.auth import AuthService
from taskify.core.cache import ItemCache
from taskify.core.errors import (
    AlreadyCompletedError, DataAccessError, InvalidFieldError, ItemNotFoundError, StaleListError,
)
from taskify.core.models import (
    DEFAULT_CATEGORY, DEFAULT_HABIT_UNIT, DEFAULT_PRIORITY,
    STATUS_CANCELLED, STATUS_DONE, STATUS_PENDING,
    HABIT_SKIPPED, TASK_CATEGORIES, TASK_PRIORITIES, TASK_STATUSES,
    Habit, HabitItem, MonthlyProgress, TrackableItem,
)
from taskify.core.progress import decremented, incremented
from taskify.core.reconciliation import ReconciliationService
from taskify.core.repositories import HabitRepository, TaskRepository
from taskify.utils.text_utils import match_choice, month_label, normalize_search, parse_timestamp

# Campos do item rastreável -> coluna da tabela 'tasks'
TASK_FIELD_MAP = {
    "name": "title",
    "title": "title",
    "status": "status",
    "priority": "priority",
    "dueDate": "due_date",
    "due_date": "due_date",
    "category": "category",
    "description": "description",
}

HABIT_FIELDS = ("name", "current", "target", "unit", "streak")

TASK_CHOICES = {
    "status": TASK_STATUSES,
    "priority": TASK_PRIORITIES,
    "category": TASK_CATEGORIES,
}


def _number(field: str, value: Any, integer: bool = False) -> Union[int, float]:
    try:
        number = float(str(value).replace(",", "."))
    except (TypeError, ValueError):
        raise InvalidFieldError(field, value)
    if number < 0:
        raise InvalidFieldError(field, value)
    if integer or number.is_integer():
        return int(number)
    return number


def _timestamp(field: str, value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise InvalidFieldError(field, value)
    return parsed.isoformat()


def task_changes(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Converte um update parcial do item para colunas de 'tasks'. Chaves desconhecidas são ignoradas."""
    changes = {}
    for key, value in fields.items():
        column = TASK_FIELD_MAP.get(key)
        if column is None:
            continue
        if column in TASK_CHOICES:
            choice = match_choice(value, TASK_CHOICES[column])
            if choice is None:
                raise InvalidFieldError(key, value)
            value = choice
        elif column == "due_date":
            value = _timestamp(key, value)
        elif column == "title":
            value = str(value).strip()
            if not value:
                raise InvalidFieldError(key, value)
        changes[column] = value
    return changes


def habit_changes(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Filtra e valida um update parcial de hábito. Chaves desconhecidas são ignoradas."""
    changes = {}
    for key in HABIT_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key in ("current", "target"):
            value = _number(key, value)
        elif key == "streak":
            value = _number(key, value, integer=True)
        else:
            value = str(value).strip()
            if key == "name" and not value:
                raise InvalidFieldError(key, value)
        changes[key] = value
    return changes


class MutationCoordinator:
    """Encaminha concluir/pular/atualizar/excluir de um item rastreável para a
    tarefa ou o hábito de origem e, depois de cada escrita, reconstrói a lista
    a partir do backend. Não há atualização otimista: se a escrita falha, a
    lista em memória continua como estava."""

    def __init__(self, auth: AuthService, tasks: TaskRepository, habits: HabitRepository,
                 reconciliation: ReconciliationService,
                 cache: Union[ItemCache, None] = None,
                 today: Callable[[], datetime.date] = datetime.date.today):
        self.auth = auth
        self.tasks = tasks
        self.habits = habits
        self.reconciliation = reconciliation
        self.cache = cache
        self.today = today
        self.items: List[TrackableItem] = []
        self.error: Union[str, None] = None

    # --- Leitura ---
    def refresh(self) -> List[TrackableItem]:
        """Reconstrói a lista. Sem sessão não há dados (lista vazia, sem erro)."""
        user_id = self.auth.current_user_id()
        if not user_id:
            self.items = []
            return self.items
        try:
            items = self.reconciliation.load_items(user_id, self.today())
        except DataAccessError as e:
            self.error = e.user_message
            raise
        self.items = items
        self.error = None
        if self.cache is not None:
            self.cache.save(user_id, items)
        return self.items

    def find(self, item_id: str) -> TrackableItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def get(self, item_id: str) -> Union[TrackableItem, None]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    # --- Mutações ---
    def complete(self, item_id: str) -> Union[TrackableItem, None]:
        self.auth.require_user_id()
        item = self.find(item_id)
        if item.is_completed and item.status != HABIT_SKIPPED:
            raise AlreadyCompletedError(item_id, item.name)
        if item.type == "task":
            self.tasks.update(item_id, {"status": STATUS_DONE})
        else:
            def finish(habit: Habit):
                # A lista em memória pode estar desatualizada: vale o registro relido
                if habit.is_completed and not habit.skipped:
                    raise AlreadyCompletedError(item_id, habit.name)
                habit.current = habit.target
                habit.streak += 1
                habit.skipped = False
            self._change_habit(item, finish)
        return self._after_mutation(item_id)

    def skip(self, item_id: str) -> Union[TrackableItem, None]:
        self.auth.require_user_id()
        item = self.find(item_id)
        if item.type == "task":
            self.tasks.update(item_id, {"status": STATUS_CANCELLED})
        else:
            def reset_streak(habit: Habit):
                habit.streak = 0
                habit.skipped = True
            self._change_habit(item, reset_streak)
        return self._after_mutation(item_id)

    def update(self, item_id: str, fields: Dict[str, Any]) -> Union[TrackableItem, None]:
        self.auth.require_user_id()
        item = self.find(item_id)
        if item.type == "task":
            changes = task_changes(fields)
            if not changes:
                return item
            self.tasks.update(item_id, changes)
        else:
            changes = habit_changes(fields)
            if not changes:
                return item

            def apply(habit: Habit):
                for key, value in changes.items():
                    setattr(habit, key, value)
                if "current" in changes:
                    habit.skipped = False
            self._change_habit(item, apply)
        return self._after_mutation(item_id)

    def delete(self, item_id: str) -> None:
        self.auth.require_user_id()
        item = self.find(item_id)
        if item.type == "task":
            self.tasks.delete(item_id)
        else:
            progress = self._load_parent(item)
            progress.habits = [h for h in progress.habits if h.id != item_id]
            self.habits.save_habits(progress)
        self._after_mutation(item_id)

    def increment(self, item_id: str) -> Union[TrackableItem, None]:
        return self._step(item_id, incremented)

    def decrement(self, item_id: str) -> Union[TrackableItem, None]:
        return self._step(item_id, decremented)

    def add_task(self, fields: Dict[str, Any]) -> Union[TrackableItem, None]:
        user_id = self.auth.require_user_id()
        now = datetime.datetime.now(datetime.timezone.utc)
        row = {
            "status": STATUS_PENDING,
            "priority": DEFAULT_PRIORITY,
            "category": DEFAULT_CATEGORY,
            "due_date": now.isoformat(),
            "description": "",
        }
        row.update(task_changes(fields))
        if not row.get("title"):
            raise InvalidFieldError("name", fields.get("name"))
        row["user_id"] = user_id
        task = self.tasks.insert(row)
        return self._after_mutation(task.id if task else None)

    def add_habit(self, name: str, target: Any = 1, current: Any = 0,
                  unit: str = DEFAULT_HABIT_UNIT) -> Tuple[Union[TrackableItem, None], bool]:
        """Adiciona um hábito ao mês atual, criando o documento do mês se preciso.

        Um hábito com o mesmo nome no mês não é duplicado. Retorna (item, criado),
        com `criado` False quando o hábito já existia.
        """
        user_id = self.auth.require_user_id()
        changes = habit_changes({"name": name, "target": target, "current": current, "unit": unit or DEFAULT_HABIT_UNIT})
        progress = self.habits.ensure_month(user_id, month_label(self.today()))
        for habit in progress.habits:
            if normalize_search(habit.name) == normalize_search(changes["name"]):
                print(f"DEBUG: Hábito '{habit.name}' já existe em '{progress.month}'.")
                return self.get(habit.id) or HabitItem(habit, progress.id), False
        habit = Habit.new(changes["name"], changes["target"], changes["current"], changes["unit"])
        progress.habits.append(habit)
        self.habits.save_habits(progress)
        return self._after_mutation(habit.id), True

    # --- Auxiliares ---
    def _step(self, item_id: str, next_value: Callable[[Habit], float]) -> Union[TrackableItem, None]:
        self.auth.require_user_id()
        item = self.find(item_id)
        if item.type != "habit":
            raise InvalidFieldError("type", item.type)

        def apply(habit: Habit):
            habit.current = next_value(habit)
            habit.skipped = False
        self._change_habit(item, apply)
        return self._after_mutation(item_id)

    def _load_parent(self, item: HabitItem) -> MonthlyProgress:
        # Relê o documento para não sobrescrever hábitos alterados desde a última busca
        progress = self.habits.get(item.progress_id)
        if progress is None or progress.find_habit(item.id) is None:
            raise ItemNotFoundError(item.id)
        return progress

    def _change_habit(self, item: HabitItem, change: Callable[[Habit], None]) -> None:
        progress = self._load_parent(item)
        change(progress.find_habit(item.id))
        self.habits.save_habits(progress)

    def _after_mutation(self, item_id: Union[str, None]) -> Union[TrackableItem, None]:
        # A escrita já foi gravada: falha ao recarregar não pode parecer falha da escrita
        try:
            self.refresh()
        except DataAccessError as e:
            print(f"ERROR: Escrita de '{item_id}' gravada, mas a lista não foi recarregada: {e}")
            raise StaleListError(item_id, e) from e
        return self.get(item_id) if item_id else None
