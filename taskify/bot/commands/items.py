from typing import Dict, List, Tuple

from telegram import Update
from telegram.ext import ContextTypes

from taskify.bot.commands.utils import format_item, get_user_session, reply_error, resolve_item_id
from taskify.core.errors import DataAccessError, NotAuthenticatedError, TaskifyError
from taskify.core.reconciliation import filter_items, split_by_day

FILTER_KEYS = {"tipo": "item_type", "status": "status", "prioridade": "priority"}

# Aceita os nomes em português para o filtro de tipo
TYPE_ALIASES = {"tarefa": "task", "tarefas": "task", "habito": "habit", "hábito": "habit", "habitos": "habit"}


def parse_filters(args: List[str]) -> Dict[str, str]:
    filters = {"search": ""}
    words = []
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in FILTER_KEYS:
            filters[FILTER_KEYS[key.lower()]] = value.replace("_", " ")
        else:
            words.append(arg)
    filters["search"] = " ".join(words)
    if "item_type" in filters:
        filters["item_type"] = TYPE_ALIASES.get(filters["item_type"].lower(), filters["item_type"].lower())
    return filters


def parse_assignments(args: List[str]) -> Dict[str, str]:
    """'prioridade=alta nome=Pagar_conta' -> {'priority': 'alta', 'name': 'Pagar conta'}"""
    aliases = {
        "nome": "name", "status": "status", "prioridade": "priority",
        "vencimento": "dueDate", "data": "dueDate", "categoria": "category",
        "descricao": "description", "descrição": "description",
        "atual": "current", "meta": "target", "unidade": "unit", "sequencia": "streak",
    }
    fields = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            continue
        fields[aliases.get(key.lower(), key)] = value.replace("_", " ")
    return fields


async def list_items_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista unificada de tarefas e hábitos, com filtros opcionais."""
    session = get_user_session(context)
    coordinator = session.coordinator
    user_id = None
    try:
        user_id = session.auth.current_user_id()
        if not user_id:
            raise NotAuthenticatedError()
        coordinator.refresh()
    except DataAccessError as e:
        await reply_error(update, e)
        cached = session.cache.load(user_id) if session.cache and user_id else []
        if cached:
            await update.message.reply_text(f"📦 Última lista salva tinha {len(cached)} itens.")
        return
    except TaskifyError as e:
        await reply_error(update, e)
        return

    filters = parse_filters(context.args or [])
    visible = filter_items(coordinator.items, **filters)
    if not visible:
        await update.message.reply_text("📭 Nenhum item encontrado. Crie uma tarefa com /nova_tarefa ou um hábito com /novo_habito.")
        return

    positions = {item.id: i + 1 for i, item in enumerate(coordinator.items)}
    todays, future = split_by_day(visible)
    sections: List[Tuple[str, list]] = [("**Para hoje:**", todays), ("**Próximos:**", future)]
    message = ""
    for title, section in sections:
        if section:
            message += f"{title}\n" + "\n".join(format_item(positions[item.id], item) for item in section) + "\n\n"
    await update.message.reply_text(message.strip(), parse_mode="Markdown")


async def _run_mutation(update: Update, context: ContextTypes.DEFAULT_TYPE, usage: str, action) -> None:
    if not context.args:
        await update.message.reply_text(usage)
        return
    session = get_user_session(context)
    item_id = resolve_item_id(session, context.args[0])
    try:
        message = action(session.coordinator, item_id, context.args[1:])
    except TaskifyError as e:
        await reply_error(update, e)
        return
    await update.message.reply_text(message)


def _complete(coordinator, item_id, _args) -> str:
    item = coordinator.complete(item_id)
    if item is not None and item.type == "habit":
        return f"🔥 Hábito concluído! Sequência: {item.streak} dias"
    return "✅ Tarefa concluída com sucesso!"


def _skip(coordinator, item_id, _args) -> str:
    item = coordinator.skip(item_id)
    if item is not None and item.type == "habit":
        return "⏭️ Hábito pulado. Sequência reiniciada."
    return "🚫 Tarefa cancelada."


def _delete(coordinator, item_id, _args) -> str:
    coordinator.delete(item_id)
    return "🗑️ Item excluído."


def _update(coordinator, item_id, args) -> str:
    fields = parse_assignments(args)
    item = coordinator.update(item_id, fields)
    return f"✏️ '{item.name}' atualizado." if item is not None else "✏️ Item atualizado."


async def complete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _run_mutation(update, context, "Uso: `/concluir [nº ou id]`", _complete)


async def skip_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _run_mutation(update, context, "Uso: `/pular [nº ou id]`", _skip)


async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _run_mutation(update, context, "Uso: `/excluir [nº ou id]`", _delete)


async def update_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _run_mutation(
        update, context,
        "Uso: `/atualizar [nº ou id] campo=valor ...`\nEx: `/atualizar 2 prioridade=alta vencimento=2025-03-20`",
        _update,
    )
