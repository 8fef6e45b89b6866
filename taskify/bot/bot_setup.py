from telegram.ext import Application, CommandHandler, ConversationHandler, MessageHandler, filters

from taskify.bot.commands import ALL_COMMANDS
from taskify.bot.handlers import (
    ASKING_CATEGORY,
    ASKING_CONFIRMATION,
    ASKING_DUE_DATE,
    ASKING_PRIORITY,
    ASKING_TITLE,
    cancel_new_task,
    handle_category,
    handle_confirmation,
    handle_due_date,
    handle_priority,
    handle_title,
    start_new_task,
)


def setup_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (comandos e a conversa de nova tarefa).
    Retorna o objeto Application configurado, pronto para ser usado por um servidor WSGI.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # Cada chat cria seu próprio cliente Supabase (a sessão de auth é por cliente)
    application.bot_data["client_factory"] = config["SUPABASE_CLIENT_FACTORY"]

    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    text = filters.TEXT & ~filters.COMMAND
    conv_handler = ConversationHandler(
        entry_points=[CommandHandler("nova_tarefa", start_new_task)],
        states={
            ASKING_TITLE: [MessageHandler(text, handle_title)],
            ASKING_CATEGORY: [MessageHandler(text, handle_category)],
            ASKING_PRIORITY: [MessageHandler(text, handle_priority)],
            ASKING_DUE_DATE: [MessageHandler(text, handle_due_date)],
            ASKING_CONFIRMATION: [MessageHandler(text, handle_confirmation)],
        },
        fallbacks=[CommandHandler("cancel", cancel_new_task)],
    )
    application.add_handler(conv_handler)

    print("DEBUG: Bot Telegram configurado para Webhooks. Pronto para ser rodado pelo WSGI.")
    return application
