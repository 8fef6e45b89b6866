# taskify/core/cache.py
import json
import os
from typing import Any, Dict, Iterable, List

from taskify.core.models import TrackableItem


class ItemCache:
    """Cópia local da última lista reconciliada de um usuário.

    É só consultiva: nunca é tratada como fonte da verdade e é sobrescrita por
    inteiro a cada busca bem-sucedida.
    """

    def __init__(self, cache_dir: str):
        self.cache_dir = cache_dir

    def _path(self, user_id: str) -> str:
        return os.path.join(self.cache_dir, f"trackable-items-{user_id}.json")

    def save(self, user_id: str, items: Iterable[TrackableItem]) -> None:
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(self._path(user_id), "w", encoding="utf-8") as f:
                json.dump([item.to_dict() for item in items], f, ensure_ascii=False)
        except OSError as e:
            print(f"Erro ao salvar cache local de itens: {e}")

    def load(self, user_id: str) -> List[Dict[str, Any]]:
        path = self._path(user_id)
        if not os.path.exists(path):
            return []
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Erro ao ler cache local de itens: {e}")
            return []

    def clear(self, user_id: str) -> None:
        path = self._path(user_id)
        if os.path.exists(path):
            os.remove(path)
