# taskify/main.py
import asyncio
import sys
import traceback

from flask import Flask, jsonify, request
from telegram import Update

from taskify.bot.bot_setup import setup_bot
from taskify.config import TELEGRAM_BOT_TOKEN, WEBHOOK_PATH
from taskify.core.db import get_supabase_client


def create_app(config: dict) -> Flask:
    """Cria a aplicação Flask que recebe os updates do Telegram via webhook."""
    ptb_application = setup_bot(config)

    # A aplicação PTB precisa ser inicializada uma única vez antes de processar updates
    asyncio.run(ptb_application.initialize())
    print("DEBUG: python-telegram-bot Application inicializada com sucesso!")

    flask_app = Flask(__name__)

    @flask_app.route(config.get("WEBHOOK_PATH", WEBHOOK_PATH), methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            print("ERROR: Webhook received non-JSON request.", file=sys.stderr)
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        print(f"DEBUG: Webhook received update: {update_json.keys() if update_json else 'None'}")

        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception as e:
            print(f"ERROR: Failed to process Telegram update: {e}", file=sys.stderr)
            traceback.print_exc(file=sys.stderr)
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    return flask_app


def build_wsgi_app() -> Flask:
    config = {
        "TELEGRAM_BOT_TOKEN": TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT_FACTORY": get_supabase_client,
        "WEBHOOK_PATH": WEBHOOK_PATH,
    }
    print(f"DEBUG: Configurações do bot criadas: {list(config.keys())}")
    try:
        return create_app(config)
    except Exception as e:
        print(f"ERROR: Erro crítico durante a inicialização: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        raise


def main() -> None:
    """Roda o bot em modo polling (desenvolvimento local)."""
    config = {
        "TELEGRAM_BOT_TOKEN": TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT_FACTORY": get_supabase_client,
    }
    application = setup_bot(config)
    print("Bot Telegram iniciado em modo polling!")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
