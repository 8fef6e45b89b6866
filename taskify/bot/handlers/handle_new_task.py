from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from taskify.bot.handlers.send_confirmation_message import send_confirmation_message
from taskify.bot.handlers.states import (
    ASKING_CATEGORY,
    ASKING_CONFIRMATION,
    ASKING_DUE_DATE,
    ASKING_PRIORITY,
    ASKING_TITLE,
)
from taskify.bot.commands.utils import get_user_session
from taskify.core.models import TASK_CATEGORIES, TASK_PRIORITIES
from taskify.utils.text_utils import match_choice, parse_user_date


def _keyboard(options, columns: int = 3) -> ReplyKeyboardMarkup:
    rows = [list(options[i:i + columns]) for i in range(0, len(options), columns)]
    return ReplyKeyboardMarkup(rows, one_time_keyboard=True, resize_keyboard=True)


async def start_new_task(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Entrada do fluxo /nova_tarefa."""
    session = get_user_session(context)
    if not session.auth.current_user_id():
        await update.message.reply_text("🔒 Você precisa entrar na sua conta para fazer isso. Use /entrar.")
        return ConversationHandler.END

    context.user_data["pending_task"] = {}
    await update.message.reply_text("📝 Qual é o título da tarefa? (use /cancel para desistir)")
    return ASKING_TITLE


async def handle_title(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    title = (update.message.text or "").strip()
    if not title:
        await update.message.reply_text("O título não pode ficar vazio. Qual é o título da tarefa?")
        return ASKING_TITLE

    context.user_data["pending_task"]["name"] = title
    await update.message.reply_text("🏷️ Qual a categoria?", reply_markup=_keyboard(TASK_CATEGORIES))
    return ASKING_CATEGORY


async def handle_category(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    category = match_choice(update.message.text, TASK_CATEGORIES)
    if category is None:
        await update.message.reply_text(
            "Categoria não reconhecida. Escolha uma das opções 👇", reply_markup=_keyboard(TASK_CATEGORIES)
        )
        return ASKING_CATEGORY

    context.user_data["pending_task"]["category"] = category
    await update.message.reply_text("⚡ Qual a prioridade?", reply_markup=_keyboard(TASK_PRIORITIES))
    return ASKING_PRIORITY


async def handle_priority(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    priority = match_choice(update.message.text, TASK_PRIORITIES)
    if priority is None:
        await update.message.reply_text(
            "Prioridade não reconhecida. Escolha uma das opções 👇", reply_markup=_keyboard(TASK_PRIORITIES)
        )
        return ASKING_PRIORITY

    context.user_data["pending_task"]["priority"] = priority
    await update.message.reply_text(
        "📅 Para quando? (dd/mm/aaaa, 'hoje' ou 'amanhã')", reply_markup=_keyboard(["hoje", "amanhã"], columns=2)
    )
    return ASKING_DUE_DATE


async def handle_due_date(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    due = parse_user_date(update.message.text or "")
    if due is None:
        await update.message.reply_text("Data inválida 😕. Use dd/mm/aaaa, 'hoje' ou 'amanhã'.")
        return ASKING_DUE_DATE

    pending_task = context.user_data["pending_task"]
    pending_task["dueDate"] = due
    await send_confirmation_message(update, context, pending_task)
    return ASKING_CONFIRMATION


async def cancel_new_task(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    context.user_data.pop("pending_task", None)
    await update.message.reply_text("Criação de tarefa cancelada. 👍", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
