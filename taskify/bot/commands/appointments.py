from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import get_user_session, md, reply_error
from taskify.core.errors import TaskifyError
from taskify.utils.text_utils import parse_user_date


async def appointments_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = get_user_session(context)
    try:
        user_id = session.auth.require_user_id()
        appointments = session.appointments.list(user_id)
    except TaskifyError as e:
        await reply_error(update, e)
        return

    if not appointments:
        await update.message.reply_text("📅 Nenhum compromisso agendado.")
        return

    message = "**Compromissos:**\n\n"
    for a in appointments:
        when = a.date.strftime("%d/%m/%Y %H:%M") if a.date else "sem data"
        reminder = " ⏰" if a.reminder else ""
        location = f" @ {md(a.location)}" if a.location else ""
        message += f"- {when}: {md(a.title)}{location}{reminder}\n"
    await update.message.reply_text(message, parse_mode="Markdown")


async def add_appointment_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/novo_compromisso [data] [título] [@local] [lembrete]"""
    if len(context.args) < 2:
        await update.message.reply_text(
            "Uso: `/novo_compromisso [dd/mm/aaaa] [título] [@local] [lembrete]`\n"
            "Ex: `/novo_compromisso 20/03/2025 Dentista @Centro lembrete`"
        )
        return
    date = parse_user_date(context.args[0])
    if date is None:
        await update.message.reply_text("📅 Data inválida. Use o formato dd/mm/aaaa.")
        return

    words = context.args[1:]
    reminder = bool(words) and words[-1].lower() == "lembrete"
    if reminder:
        words = words[:-1]
    location = " ".join(w[1:] for w in words if w.startswith("@"))
    title = " ".join(w for w in words if not w.startswith("@"))

    session = get_user_session(context)
    try:
        user_id = session.auth.require_user_id()
        session.appointments.insert(user_id, title, date, location=location, reminder=reminder)
        if reminder:
            session.notifications.add(f"Lembrete: {title} em {date.strftime('%d/%m/%Y')}", "appointment")
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(f"📅 Compromisso '{title}' agendado para {date.strftime('%d/%m/%Y')}!")
