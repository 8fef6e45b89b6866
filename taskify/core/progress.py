# taskify/core/progress.py
import math
from typing import Iterable

from taskify.core.models import Habit


def habit_ratio(habit: Habit) -> float:
    """Fração concluída do hábito, limitada a 1.0. Meta <= 0 conta como 0."""
    if habit.target <= 0:
        return 0.0
    return min(habit.current / habit.target, 1.0)


def habit_percentage(habit: Habit) -> int:
    return round_half_up(habit_ratio(habit) * 100)


def round_half_up(value: float) -> int:
    """Arredonda .5 para cima (62.5 -> 63), como o Math.round do app web."""
    return int(math.floor(value + 0.5))


def recompute_overall(habits: Iterable[Habit]) -> int:
    """Percentual geral do mês: média dos percentuais de cada hábito.

    Cada hábito é limitado a 100% antes da média, então superar a meta de um
    hábito não compensa o atraso de outro. Sem hábitos, o percentual é 0.
    """
    ratios = [habit_ratio(h) * 100 for h in habits]
    if not ratios:
        return 0
    return round_half_up(sum(ratios) / len(ratios))


def incremented(habit: Habit) -> float:
    """Próximo valor de 'current' ao somar uma unidade, sem passar da meta.
    Um hábito que já passou da meta fica como está."""
    return max(habit.current, min(habit.current + 1, habit.target))


def decremented(habit: Habit) -> float:
    """Próximo valor de 'current' ao subtrair uma unidade, sem ficar negativo."""
    return max(habit.current - 1, 0)
