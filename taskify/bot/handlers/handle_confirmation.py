from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from taskify.bot.commands.utils import get_user_session
from taskify.bot.handlers.states import ASKING_CONFIRMATION
from taskify.core.errors import StaleListError, TaskifyError


async def handle_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com a confirmação (Sim/Não) da nova tarefa."""
    user_response = (update.message.text or "").lower()
    pending_task = context.user_data.get("pending_task")

    if not pending_task:
        await update.message.reply_text(
            "Ops! 😬 Não encontrei uma tarefa pendente para confirmar. Use /nova_tarefa. 🔄",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("sim ✅", "sim"):
        session = get_user_session(context)
        try:
            session.coordinator.add_task(pending_task)
        except StaleListError as e:
            # A tarefa foi gravada; só a lista ficou para trás
            context.user_data.pop("pending_task", None)
            await update.message.reply_text(e.user_message, reply_markup=ReplyKeyboardRemove())
            return ConversationHandler.END
        except TaskifyError as e:
            print(f"ERROR: Falha ao criar tarefa: {e}")
            # A tarefa pendente fica guardada para o usuário tentar de novo
            await update.message.reply_text(
                f"{e.user_message}\nResponda 'Sim ✅' para tentar novamente ou 'Não ❌' para desistir.",
            )
            return ASKING_CONFIRMATION

        context.user_data.pop("pending_task", None)
        await update.message.reply_text(
            f"✅ Tarefa '{pending_task['name']}' criada com sucesso! 🎉",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    elif user_response in ("não ❌", "não", "nao"):
        context.user_data.pop("pending_task", None)
        await update.message.reply_text("Tudo bem, tarefa descartada. 👍", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    else:
        keyboard = [["Sim ✅", "Não ❌"]]
        reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
        await update.message.reply_text("Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.", reply_markup=reply_markup)
        return ASKING_CONFIRMATION
