# taskify/core/models.py
import datetime
import uuid
from typing import Any, Dict, List, Optional

from taskify.utils.text_utils import parse_timestamp

# Valores aceitos pelas colunas da tabela 'tasks'
TASK_CATEGORIES = ("Financeiro", "Trabalho", "Pessoal", "Saúde", "Outro")
TASK_STATUSES = ("pendente", "em progresso", "concluída", "cancelada")
TASK_PRIORITIES = ("baixa", "média", "alta")

STATUS_PENDING = "pendente"
STATUS_IN_PROGRESS = "em progresso"
STATUS_DONE = "concluída"
STATUS_CANCELLED = "cancelada"

# Estados derivados de um hábito
HABIT_COMPLETED = "completed"
HABIT_IN_PROGRESS = "in_progress"
HABIT_SKIPPED = "skipped"

NOTIFICATION_TYPES = ("task", "appointment", "system")

DEFAULT_PRIORITY = "média"
DEFAULT_CATEGORY = "Outro"
DEFAULT_HABIT_UNIT = "vezes"


def _isoformat(value: Optional[datetime.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Task:
    def __init__(self, id: str, user_id: str, title: str,
                 category: str = DEFAULT_CATEGORY,
                 status: str = STATUS_PENDING,
                 priority: str = DEFAULT_PRIORITY,
                 due_date: Optional[datetime.datetime] = None,
                 created_at: Optional[datetime.datetime] = None,
                 updated_at: Optional[datetime.datetime] = None,
                 description: Optional[str] = None):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.description = description
        self.category = category
        self.status = status
        self.priority = priority
        self.due_date = due_date
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Task":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            title=row.get("title") or "",
            description=row.get("description"),
            category=row.get("category") or DEFAULT_CATEGORY,
            status=row.get("status") or STATUS_PENDING,
            priority=row.get("priority") or DEFAULT_PRIORITY,
            due_date=parse_timestamp(row.get("due_date")),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def __repr__(self):
        return f"Task(id={self.id!r}, title={self.title!r}, status={self.status!r})"


class Habit:
    """Hábito embutido na lista 'habits' de um documento de progresso mensal."""

    def __init__(self, id: str, name: str, target: float = 1, current: float = 0,
                 unit: str = DEFAULT_HABIT_UNIT, streak: int = 0, skipped: bool = False):
        self.id = id
        self.name = name
        self.target = target
        self.current = current
        self.unit = unit
        self.streak = streak
        self.skipped = skipped

    @classmethod
    def new(cls, name: str, target: float = 1, current: float = 0,
            unit: str = DEFAULT_HABIT_UNIT) -> "Habit":
        return cls(id=str(uuid.uuid4()), name=name, target=target, current=current, unit=unit)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Habit":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            target=row.get("target") or 0,
            current=row.get("current") or 0,
            unit=row.get("unit") or DEFAULT_HABIT_UNIT,
            streak=row.get("streak") or 0,
            skipped=row.get("status") == HABIT_SKIPPED,
        )

    def to_row(self) -> Dict[str, Any]:
        row = {
            "id": self.id,
            "name": self.name,
            "target": self.target,
            "current": self.current,
            "unit": self.unit,
            "streak": self.streak,
        }
        if self.skipped:
            row["status"] = HABIT_SKIPPED
        return row

    @property
    def is_completed(self) -> bool:
        return self.current >= self.target

    def __repr__(self):
        return f"Habit(id={self.id!r}, name={self.name!r}, {self.current}/{self.target} {self.unit})"


class MonthlyProgress:
    def __init__(self, id: str, user_id: str, month: str,
                 habits: Optional[List[Habit]] = None, overall: int = 0):
        self.id = id
        self.user_id = user_id
        self.month = month
        self.habits = habits or []
        self.overall = overall

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MonthlyProgress":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            month=row.get("month") or "",
            habits=[Habit.from_row(h) for h in (row.get("habits") or [])],
            overall=row.get("overall") or 0,
        )

    def find_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None


class Notification:
    def __init__(self, id: str, user_id: str, message: str, type: str = "system",
                 read: bool = False, created_at: Optional[datetime.datetime] = None):
        self.id = id
        self.user_id = user_id
        self.message = message
        self.type = type
        self.read = read
        self.created_at = created_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Notification":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            message=row.get("message") or "",
            type=row.get("type") or "system",
            read=bool(row.get("read")),
            created_at=parse_timestamp(row.get("created_at")),
        )


class Appointment:
    def __init__(self, id: str, user_id: str, title: str, location: str = "",
                 date: Optional[datetime.datetime] = None, reminder: bool = False,
                 created_at: Optional[datetime.datetime] = None):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.location = location
        self.date = date
        self.reminder = reminder
        self.created_at = created_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Appointment":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            title=row.get("title") or "",
            location=row.get("location") or "",
            date=parse_timestamp(row.get("date")),
            reminder=bool(row.get("reminder")),
            created_at=parse_timestamp(row.get("created_at")),
        )


# --- Visão unificada: item rastreável (tarefa ou hábito) ---

class TrackableItem:
    """Envelope comum aos itens da lista unificada. Nunca é persistido:
    as escritas vão sempre para a tarefa ou o hábito que o originou."""

    type = ""

    def __init__(self, id: str, name: str, status: str,
                 due_date: Optional[datetime.datetime] = None):
        self.id = id
        self.name = name
        self.status = status
        self.due_date = due_date

    @property
    def is_completed(self) -> bool:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "status": self.status,
            "dueDate": _isoformat(self.due_date),
            "isCompleted": self.is_completed,
        }

    def __eq__(self, other):
        return isinstance(other, TrackableItem) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{self.__class__.__name__}(id={self.id!r}, name={self.name!r}, status={self.status!r})"


class TaskItem(TrackableItem):
    type = "task"

    def __init__(self, task: Task):
        super().__init__(task.id, task.title, task.status, task.due_date)
        self.priority = task.priority
        self.category = task.category
        self.description = task.description
        self.created_at = task.created_at

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_DONE

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "priority": self.priority,
            "category": self.category,
            "description": self.description,
        })
        return data


class HabitItem(TrackableItem):
    type = "habit"

    def __init__(self, habit: Habit, progress_id: str):
        # Pular vale até a próxima mudança de progresso, mesmo com a meta atingida
        if habit.skipped:
            status = HABIT_SKIPPED
        elif habit.is_completed:
            status = HABIT_COMPLETED
        else:
            status = HABIT_IN_PROGRESS
        super().__init__(habit.id, habit.name, status)
        self.progress_id = progress_id
        self.target = habit.target
        self.current = habit.current
        self.unit = habit.unit
        self.streak = habit.streak

    @property
    def is_completed(self) -> bool:
        return self.current >= self.target

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "progressId": self.progress_id,
            "target": self.target,
            "current": self.current,
            "unit": self.unit,
            "streak": self.streak,
        })
        return data
