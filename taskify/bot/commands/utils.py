from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from taskify.core.errors import TaskifyError
from taskify.core.models import TrackableItem
from taskify.core.session import UserSession


def get_user_session(context: ContextTypes.DEFAULT_TYPE) -> UserSession:
    """Cada usuário do Telegram tem sua própria sessão (e seu próprio cliente Supabase),
    guardada em `user_data`."""
    session = context.user_data.get("session")
    if session is None:
        client_factory = context.bot_data["client_factory"]
        session = UserSession(client_factory())
        context.user_data["session"] = session
        print("DEBUG: Nova sessão de usuário criada para o chat.")
    return session


async def reply_error(update: Update, error: TaskifyError) -> None:
    """Aviso passageiro ao usuário; o estado em memória não é alterado."""
    print(f"ERROR: {error.__class__.__name__}: {error}")
    await update.message.reply_text(error.user_message)


def resolve_item_id(session: UserSession, ref: str) -> str:
    """Aceita o número mostrado em /itens (1, 2, ...) ou o ID do item."""
    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(session.coordinator.items):
            return session.coordinator.items[index].id
    return ref


def md(text) -> str:
    """Escapa texto do usuário para mensagens com parse_mode="Markdown"."""
    return escape_markdown(str(text))


def format_item(position: int, item: TrackableItem) -> str:
    """Linha de um item em /itens, já escapada para Markdown."""
    if item.status in ("cancelada", "skipped"):
        mark = "⏭️"
    else:
        mark = "✅" if item.is_completed else "⬜"
    if item.type == "task":
        due = item.due_date.strftime("%d/%m/%Y") if item.due_date else "sem data"
        return (f"{position}. {mark} 📋 {md(item.name)} ({item.status}, {item.priority}, {md(item.category)})"
                f" - vence {due}")
    return (f"{position}. {mark} 🔁 {md(item.name)} ({item.current:g}/{item.target:g} {md(item.unit)}) "
            f"- sequência {item.streak}")


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou o Taskify, seu assistente de tarefas e hábitos. 📋🔁\n\n"
        "Entre na sua conta com `/entrar [email] [senha]` e depois use:\n"
        "- `/itens` para ver tarefas e hábitos juntos.\n"
        "- `/habitos` para ver o progresso do mês.\n"
        "- `/painel` para um resumo da semana.\n"
        "- `/help` para todos os comandos."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "**Conta:**\n"
        "- `/entrar [email] [senha]`, `/cadastrar [email] [senha] [nome]`, `/google`, `/sair`\n\n"
        "**Itens (tarefas e hábitos):**\n"
        "- `/itens [busca] [tipo=task|habit] [status=...] [prioridade=...]`: lista unificada.\n"
        "- `/concluir [nº ou id]`, `/pular [nº ou id]`, `/excluir [nº ou id]`\n"
        "- `/atualizar [nº ou id] campo=valor ...` (ex: `/atualizar 2 prioridade=alta`)\n"
        "- `/nova_tarefa`: cria uma tarefa passo a passo.\n\n"
        "**Hábitos:**\n"
        "- `/habitos`: hábitos do mês e percentual geral.\n"
        "- `/novo_habito [nome] [meta] [unidade]` (ex: `/novo_habito Água 8 copos`)\n"
        "- `/mais [nº ou id]` e `/menos [nº ou id]`: ajusta o progresso.\n\n"
        "**Outros:**\n"
        "- `/notificacoes`, `/lida [id|todas]`, `/apagar_notificacao [id]`\n"
        "- `/compromissos`, `/painel`",
        parse_mode="Markdown",
    )
