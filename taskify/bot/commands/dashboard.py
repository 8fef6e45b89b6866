from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import get_user_session, md, reply_error
from taskify.core import stats
from taskify.core.errors import TaskifyError


async def dashboard_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Resumo da semana, das tarefas e do histórico de hábitos."""
    session = get_user_session(context)
    await update.message.reply_text("Montando seu painel, por favor aguarde...")
    try:
        user_id = session.auth.require_user_id()
        items = session.coordinator.refresh()
        tasks = session.tasks.list(user_id)
        history = session.habits.history(user_id)
    except TaskifyError as e:
        await reply_error(update, e)
        return

    week = stats.weekly_progress(items)
    summary = stats.task_summary(tasks)
    buckets = stats.due_buckets(tasks)

    message = "**Progresso semanal:**\n"
    message += " ".join(f"{row['name']} {row['completed']}/{row['total']}" for row in week) + "\n"
    message += f"Taxa de conclusão: **{stats.completion_rate(week)}%** | Sequência: **{stats.longest_streak(items)} dias**\n\n"

    message += f"**Tarefas** ({summary['total']}, {summary['completion_rate']}% concluídas, "
    message += f"média de {summary['avg_days_to_complete']} dias para concluir):\n"
    message += "\n".join(f"- {status}: {count}" for status, count in summary["by_status"].items()) + "\n"
    message += "Prioridade: " + ", ".join(f"{k} {v}" for k, v in summary["by_priority"].items()) + "\n\n"

    message += "**Vencimentos:**\n"
    message += "\n".join(f"- {label}: {count}" for label, count in buckets.items()) + "\n\n"

    overview = stats.monthly_overview(history)
    if overview:
        message += "**Hábitos por mês:**\n"
        message += "\n".join(f"- {md(row['month'])}: {row['overall']}% ({row['completed']}/{row['habits']})" for row in overview)

    await update.message.reply_text(message.strip(), parse_mode="Markdown")
