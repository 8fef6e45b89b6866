from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import get_user_session, md, reply_error, resolve_item_id
from taskify.core.errors import TaskifyError
from taskify.core.progress import habit_percentage
from taskify.utils.text_utils import month_label


async def habits_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mostra os hábitos do mês atual. O documento do mês é criado na primeira visita."""
    session = get_user_session(context)
    month = month_label()
    try:
        user_id = session.auth.require_user_id()
        progress = session.habits.ensure_month(user_id, month)
        session.coordinator.refresh()
    except TaskifyError as e:
        await reply_error(update, e)
        return

    if not progress.habits:
        await update.message.reply_text(
            f"📅 Nenhum hábito em {month}. Adicione um com `/novo_habito [nome] [meta] [unidade]`."
        )
        return

    positions = {item.id: i + 1 for i, item in enumerate(session.coordinator.items)}
    message = f"**Hábitos de {month}** - progresso geral: **{progress.overall}%**\n\n"
    for habit in progress.habits:
        position = positions.get(habit.id, "-")
        message += (f"{position}. {md(habit.name)}: {habit.current:g}/{habit.target:g} {md(habit.unit)} "
                    f"({habit_percentage(habit)}%) 🔥 {habit.streak}\n")
    await update.message.reply_text(message, parse_mode="Markdown")


async def add_habit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Adiciona um hábito ao mês atual: /novo_habito [nome] [meta] [unidade]"""
    if not context.args:
        await update.message.reply_text(
            "Uso: `/novo_habito [nome] [meta] [unidade]`\nEx: `/novo_habito Beber_água 8 copos`"
        )
        return
    session = get_user_session(context)
    name = context.args[0].replace("_", " ")
    target = context.args[1] if len(context.args) > 1 else 1
    unit = " ".join(context.args[2:]) if len(context.args) > 2 else None
    try:
        item, created = session.coordinator.add_habit(name, target=target, unit=unit)
    except TaskifyError as e:
        await reply_error(update, e)
        return
    habit_name = item.name if item else name
    if not created:
        await update.message.reply_text(f"ℹ️ O hábito '{habit_name}' já existe em {month_label()}.")
        return
    await update.message.reply_text(f"🌱 Hábito '{habit_name}' adicionado em {month_label()}!")


async def _step(update: Update, context: ContextTypes.DEFAULT_TYPE, usage: str, increment: bool) -> None:
    if not context.args:
        await update.message.reply_text(usage)
        return
    session = get_user_session(context)
    item_id = resolve_item_id(session, context.args[0])
    try:
        if increment:
            item = session.coordinator.increment(item_id)
        else:
            item = session.coordinator.decrement(item_id)
    except TaskifyError as e:
        await reply_error(update, e)
        return
    if item is None:
        await update.message.reply_text("📈 Progresso atualizado!")
        return
    await update.message.reply_text(f"📈 Progresso atualizado! {item.name}: {item.current:g}/{item.target:g} {item.unit}")


async def increment_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _step(update, context, "Uso: `/mais [nº ou id]`", increment=True)


async def decrement_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _step(update, context, "Uso: `/menos [nº ou id]`", increment=False)
