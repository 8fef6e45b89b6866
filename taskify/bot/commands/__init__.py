# taskify/bot/commands/__init__.py

from .utils import start_command, help_command
from .account import google_command, login_command, logout_command, register_command
from .items import (
    complete_command,
    delete_command,
    list_items_command,
    skip_command,
    update_command,
)
from .habits import add_habit_command, decrement_command, habits_command, increment_command
from .notifications import delete_notification_command, mark_read_command, notifications_command
from .appointments import add_appointment_command, appointments_command
from .dashboard import dashboard_command

# Nome do comando no Telegram -> função
ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "entrar": login_command,
    "cadastrar": register_command,
    "google": google_command,
    "sair": logout_command,
    "itens": list_items_command,
    "concluir": complete_command,
    "pular": skip_command,
    "excluir": delete_command,
    "atualizar": update_command,
    "habitos": habits_command,
    "novo_habito": add_habit_command,
    "mais": increment_command,
    "menos": decrement_command,
    "notificacoes": notifications_command,
    "lida": mark_read_command,
    "apagar_notificacao": delete_notification_command,
    "compromissos": appointments_command,
    "novo_compromisso": add_appointment_command,
    "painel": dashboard_command,
}
