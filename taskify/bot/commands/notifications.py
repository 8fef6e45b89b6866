from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import get_user_session, md, reply_error
from taskify.core.errors import NotAuthenticatedError, TaskifyError

TYPE_ICONS = {"task": "📋", "appointment": "📅", "system": "⚙️"}


async def notifications_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = get_user_session(context)
    center = session.notifications
    try:
        if not session.auth.current_user_id():
            raise NotAuthenticatedError()
        notifications = center.fetch()
    except TaskifyError as e:
        await reply_error(update, e)
        return

    if not notifications:
        await update.message.reply_text("🔔 Nenhuma notificação.")
        return

    message = f"**Notificações** ({center.unread_count} não lidas)\n\n"
    for n in notifications:
        status = "🆕" if not n.read else "  "
        when = n.created_at.strftime("%d/%m %H:%M") if n.created_at else ""
        message += f"{status} {TYPE_ICONS.get(n.type, '')} {md(n.message)} _{when}_ (`{n.id}`)\n"
    await update.message.reply_text(message, parse_mode="Markdown")


async def mark_read_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/lida [id] ou /lida todas"""
    if not context.args:
        await update.message.reply_text("Uso: `/lida [id]` ou `/lida todas`")
        return
    center = get_user_session(context).notifications
    try:
        if context.args[0].lower() == "todas":
            center.mark_all_as_read()
        else:
            center.mark_as_read(context.args[0])
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(f"👍 Feito! {center.unread_count} notificações não lidas.")


async def delete_notification_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not context.args:
        await update.message.reply_text("Uso: `/apagar_notificacao [id]`")
        return
    center = get_user_session(context).notifications
    try:
        center.delete(context.args[0])
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text("🗑️ Notificação apagada.")
