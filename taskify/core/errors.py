# taskify/core/errors.py
from typing import Union


class TaskifyError(Exception):
    """Erro base do núcleo. Nenhum erro do núcleo deve derrubar o processo."""

    user_message = "Ocorreu um erro inesperado. Tente novamente."

    def __init__(self, message: Union[str, None] = None):
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class NotAuthenticatedError(TaskifyError):
    user_message = "🔒 Você precisa entrar na sua conta para fazer isso. Use /entrar."


class DataAccessError(TaskifyError):
    """Falha numa chamada remota (rede ou backend). Não há nova tentativa automática."""

    user_message = "⚠️ Não foi possível falar com o servidor. Tente novamente mais tarde."

    def __init__(self, operation: str, cause: Union[Exception, None] = None):
        self.operation = operation
        self.cause = cause
        super().__init__()


class ItemNotFoundError(TaskifyError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"🔎 Item '{item_id}' não encontrado. Atualize a lista com /itens.")


class AlreadyCompletedError(TaskifyError):
    def __init__(self, item_id: str, name: str = ""):
        self.item_id = item_id
        super().__init__(f"✅ '{name or item_id}' já está concluído.")


class InvalidFieldError(TaskifyError):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"❌ Valor inválido para '{field}': {value}")


class StaleListError(TaskifyError):
    """A escrita foi gravada, mas a lista não pôde ser recarregada depois dela."""

    user_message = "💾 Alteração salva, mas não consegui atualizar a lista. Use /itens para recarregar."

    def __init__(self, item_id: Union[str, None], cause: Union[Exception, None] = None):
        self.item_id = item_id
        self.cause = cause
        super().__init__()
