# taskify/core/auth.py
from typing import Any, Callable, List, Union

from supabase import Client

from taskify.core import db
from taskify.core.errors import NotAuthenticatedError


class AuthService:
    """Sessão do usuário no Supabase Auth. O núcleo só usa a sessão para
    descobrir o ID do usuário que filtra todas as consultas."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client
        self._listeners: List[Callable[[str, Any], None]] = []
        self._subscription = None

    def sign_in(self, email: str, password: str):
        response = db.sign_in(self.client, email, password)
        return response.user

    def sign_up(self, email: str, password: str, name: str):
        response = db.sign_up(self.client, email, password, name)
        return response.user

    def sign_in_with_oauth(self, provider: str = "google") -> str:
        """Inicia o login OAuth e retorna a URL que o usuário deve abrir."""
        response = db.sign_in_with_oauth(self.client, provider)
        return response.url

    def sign_out(self) -> None:
        db.sign_out(self.client)

    def get_session(self):
        return db.get_session(self.client)

    def current_user_id(self) -> Union[str, None]:
        """ID do usuário logado, ou None se não houver sessão."""
        session = self.get_session()
        if session is None or session.user is None:
            return None
        return session.user.id

    def require_user_id(self) -> str:
        user_id = self.current_user_id()
        if not user_id:
            raise NotAuthenticatedError()
        return user_id

    def on_session_change(self, callback: Callable[[str, Any], None]) -> None:
        """Registra um callback(evento, sessão). A inscrição no Supabase é feita uma vez só."""
        self._listeners.append(callback)
        if self._subscription is None:
            self._subscription = db.on_session_change(self.client, self._dispatch)

    def _dispatch(self, event: str, session: Any) -> None:
        print(f"DEBUG: Mudança de sessão: {event}")
        for listener in list(self._listeners):
            listener(event, session)
