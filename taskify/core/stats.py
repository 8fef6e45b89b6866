# taskify/core/stats.py
import datetime
from typing import Any, Dict, Iterable, List, Union

import pandas as pd

from taskify.core.models import (
    HABIT_COMPLETED, STATUS_CANCELLED, STATUS_DONE,
    TASK_CATEGORIES, TASK_PRIORITIES, TASK_STATUSES,
    MonthlyProgress, Task, TrackableItem,
)
from taskify.core.progress import round_half_up

WEEKDAY_NAMES_PT = ["seg", "ter", "qua", "qui", "sex", "sáb", "dom"]

DUE_BUCKETS = ["Atrasadas", "Hoje", "Próximos 7 dias", "8-14 dias", "15-30 dias", "Mais tarde"]


def _is_done(status: str) -> bool:
    return status in (STATUS_DONE, HABIT_COMPLETED)


def _items_frame(items: Iterable[TrackableItem]) -> pd.DataFrame:
    rows = [{
        "type": item.type,
        "day": item.due_date.date() if item.due_date is not None else None,
        "done": _is_done(item.status),
    } for item in items]
    return pd.DataFrame(rows, columns=["type", "day", "done"])


def _day_counts(df: pd.DataFrame, day: datetime.date) -> Dict[str, int]:
    # Tarefas contam no dia do vencimento; hábitos contam todos os dias
    day_items = df[(df["type"] == "habit") | ((df["type"] == "task") & (df["day"] == day))]
    return {"completed": int(day_items["done"].sum()), "total": int(len(day_items))}


def weekly_progress(items: Iterable[TrackableItem],
                    today: Union[datetime.date, None] = None) -> List[Dict[str, Any]]:
    """Concluídos x total por dia da semana atual (segunda a domingo)."""
    today = today or datetime.date.today()
    week_start = today - datetime.timedelta(days=today.weekday())
    df = _items_frame(items)
    rows = []
    for offset in range(7):
        day = week_start + datetime.timedelta(days=offset)
        counts = _day_counts(df, day)
        rows.append({"day": day, "name": WEEKDAY_NAMES_PT[offset], **counts})
    return rows


def completion_rate(rows: Iterable[Dict[str, Any]]) -> int:
    rows = list(rows)
    total = sum(r["total"] for r in rows)
    completed = sum(r["completed"] for r in rows)
    return round_half_up(completed / total * 100) if total > 0 else 0


def longest_streak(items: Iterable[TrackableItem],
                   today: Union[datetime.date, None] = None, days: int = 30) -> int:
    """Maior sequência de dias (nos últimos `days`) com pelo menos um item concluído.
    Dias sem nenhum item não quebram a sequência."""
    today = today or datetime.date.today()
    df = _items_frame(items)
    current = best = 0
    for offset in range(days):
        counts = _day_counts(df, today - datetime.timedelta(days=offset))
        if counts["total"] == 0:
            continue
        if counts["completed"] > 0:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def _tasks_frame(tasks: Iterable[Task]) -> pd.DataFrame:
    rows = [{
        "status": t.status,
        "priority": t.priority,
        "category": t.category,
        "due_date": t.due_date,
        "created_at": t.created_at,
        "updated_at": t.updated_at or t.created_at,
    } for t in tasks]
    return pd.DataFrame(rows, columns=["status", "priority", "category", "due_date", "created_at", "updated_at"])


def task_summary(tasks: Iterable[Task]) -> Dict[str, Any]:
    """Contagens por status, prioridade e categoria, taxa de conclusão e
    tempo médio (em dias) até a conclusão."""
    df = _tasks_frame(tasks)
    total = len(df)
    done = df[df["status"] == STATUS_DONE]

    avg_days = 0
    timed = done.dropna(subset=["created_at", "updated_at"])
    if not timed.empty:
        elapsed = (pd.to_datetime(timed["updated_at"], utc=True) - pd.to_datetime(timed["created_at"], utc=True)).dt.days
        avg_days = round_half_up(float(elapsed.clip(lower=0).mean()))

    return {
        "total": total,
        "by_status": {k: int(v) for k, v in df["status"].value_counts().reindex(TASK_STATUSES, fill_value=0).items()},
        "by_priority": {k: int(v) for k, v in df["priority"].value_counts().reindex(TASK_PRIORITIES, fill_value=0).items()},
        "by_category": {k: int(v) for k, v in df["category"].value_counts().reindex(TASK_CATEGORIES, fill_value=0).items()},
        "completion_rate": round_half_up(len(done) / total * 100) if total else 0,
        "avg_days_to_complete": avg_days,
    }


def due_buckets(tasks: Iterable[Task], today: Union[datetime.date, None] = None) -> Dict[str, int]:
    """Tarefas em aberto agrupadas pela distância do vencimento."""
    today = today or datetime.date.today()
    counts = dict.fromkeys(DUE_BUCKETS, 0)
    df = _tasks_frame(tasks)
    df = df[~df["status"].isin([STATUS_DONE, STATUS_CANCELLED])].dropna(subset=["due_date"])
    if df.empty:
        return counts
    deltas = df["due_date"].map(lambda d: (d.date() - today).days)
    bins = [-float("inf"), -1, 0, 7, 14, 30, float("inf")]
    labelled = pd.cut(deltas, bins=bins, labels=DUE_BUCKETS)
    for label, value in labelled.value_counts().items():
        counts[str(label)] = int(value)
    return counts


def monthly_overview(progress_docs: Iterable[MonthlyProgress]) -> List[Dict[str, Any]]:
    """Percentual geral, total e concluídos de cada mês."""
    rows = [{
        "month": p.month,
        "overall": p.overall,
        "habits": len(p.habits),
        "completed": sum(1 for h in p.habits if h.is_completed),
    } for p in progress_docs]
    return rows
