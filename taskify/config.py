# taskify/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Configurações do Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "/webhook")

# Configurações do Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Cache local dos itens (apenas consultivo, sobrescrito a cada busca)
CACHE_DIR = os.getenv("TASKIFY_CACHE_DIR", os.path.join(os.path.expanduser("~"), ".taskify"))
