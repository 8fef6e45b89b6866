from typing import Any, Dict
from telegram import Update, ReplyKeyboardMarkup
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import md


async def send_confirmation_message(
    update: Update, context: ContextTypes.DEFAULT_TYPE, pending_task: Dict[str, Any]
) -> None:
    """Mostra o resumo da tarefa pendente e pede confirmação."""
    due = pending_task["dueDate"].strftime("%d/%m/%Y")
    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        "Confere a nova tarefa? 🧐\n\n"
        f"📋 *{md(pending_task['name'])}*\n"
        f"🏷️ Categoria: {md(pending_task['category'])}\n"
        f"⚡ Prioridade: {pending_task['priority']}\n"
        f"📅 Vencimento: {due}",
        reply_markup=reply_markup,
        parse_mode="Markdown",
    )
