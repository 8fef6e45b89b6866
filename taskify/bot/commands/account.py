from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import get_user_session, reply_error
from taskify.core.errors import TaskifyError


async def login_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Login com email e senha: /entrar [email] [senha]"""
    if len(context.args) != 2:
        await update.message.reply_text("Uso: `/entrar [email] [senha]`")
        return
    session = get_user_session(context)
    email, password = context.args
    try:
        user = session.auth.sign_in(email, password)
        session.coordinator.refresh()
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(f"👋 Bem-vindo(a), {getattr(user, 'email', email)}! Use /itens para começar.")


async def register_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Cria uma conta: /cadastrar [email] [senha] [nome]"""
    if len(context.args) < 3:
        await update.message.reply_text("Uso: `/cadastrar [email] [senha] [nome]`")
        return
    session = get_user_session(context)
    email, password = context.args[0], context.args[1]
    name = " ".join(context.args[2:])
    try:
        session.auth.sign_up(email, password, name)
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(f"🎉 Conta criada para {name}! Confirme seu email e use /entrar.")


async def google_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia o link de login com Google."""
    session = get_user_session(context)
    try:
        url = session.auth.sign_in_with_oauth("google")
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(f"🔗 Abra este link para entrar com Google:\n{url}")


async def logout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = get_user_session(context)
    try:
        session.auth.sign_out()
    except TaskifyError as e:
        await reply_error(update, e)
        return
    session.coordinator.items = []
    await update.message.reply_text("👋 Você saiu da sua conta.")
