# taskify/core/db.py
from supabase import create_client, Client
from taskify.config import SUPABASE_URL, SUPABASE_KEY
from taskify.core.errors import DataAccessError
from typing import Any, Callable, Dict, List, Union


def get_supabase_client() -> Client:
    """Retorna uma instância do cliente Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def _first(response) -> Union[Dict[str, Any], None]:
    return response.data[0] if response.data else None


# --- Funções para Tarefas ---
def list_tasks(supabase_client: Client, user_id: str) -> List[Dict[str, Any]]:
    """Obtém todas as tarefas do usuário, das mais recentes para as mais antigas."""
    try:
        response = supabase_client.table('tasks').select('*').eq('user_id', user_id).order('created_at', desc=True).execute()
        return response.data
    except Exception as e:
        print(f"Erro ao obter tarefas do Supabase: {e}")
        raise DataAccessError('list_tasks', e) from e


def insert_task(supabase_client: Client, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    """Insere uma nova tarefa e retorna a linha criada."""
    try:
        response = supabase_client.table('tasks').insert(fields).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao adicionar tarefa ao Supabase: {e}")
        raise DataAccessError('insert_task', e) from e


def update_task(supabase_client: Client, task_id: str, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    """Atualiza parcialmente uma tarefa."""
    try:
        response = supabase_client.table('tasks').update(fields).eq('id', task_id).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao atualizar tarefa {task_id}: {e}")
        raise DataAccessError('update_task', e) from e


def delete_task(supabase_client: Client, task_id: str) -> bool:
    """Remove uma tarefa."""
    try:
        supabase_client.table('tasks').delete().eq('id', task_id).execute()
        return True
    except Exception as e:
        print(f"Erro ao remover tarefa {task_id}: {e}")
        raise DataAccessError('delete_task', e) from e


# --- Funções para Progresso Mensal (hábitos) ---
def list_monthly_progress(supabase_client: Client, user_id: str, month: str) -> List[Dict[str, Any]]:
    """Obtém o documento de progresso do usuário para um mês (ex: 'março 2025')."""
    try:
        response = supabase_client.table('progress').select('*').eq('user_id', user_id).eq('month', month).execute()
        return response.data
    except Exception as e:
        print(f"Erro ao obter progresso de '{month}' do Supabase: {e}")
        raise DataAccessError('list_monthly_progress', e) from e


def list_all_monthly_progress(supabase_client: Client, user_id: str) -> List[Dict[str, Any]]:
    """Obtém todos os documentos de progresso do usuário."""
    try:
        response = supabase_client.table('progress').select('*').eq('user_id', user_id).order('created_at', desc=True).execute()
        return response.data
    except Exception as e:
        print(f"Erro ao obter histórico de progresso do Supabase: {e}")
        raise DataAccessError('list_all_monthly_progress', e) from e


def get_monthly_progress(supabase_client: Client, progress_id: str) -> Union[Dict[str, Any], None]:
    """Obtém um documento de progresso pelo ID."""
    try:
        response = supabase_client.table('progress').select('*').eq('id', progress_id).limit(1).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao obter progresso {progress_id}: {e}")
        raise DataAccessError('get_monthly_progress', e) from e


def insert_monthly_progress(supabase_client: Client, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    """Cria o documento de progresso de um mês."""
    try:
        response = supabase_client.table('progress').insert(fields).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao criar progresso mensal: {e}")
        raise DataAccessError('insert_monthly_progress', e) from e


def update_monthly_progress(supabase_client: Client, progress_id: str, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    """Atualiza o documento de progresso (lista de hábitos e percentual geral)."""
    try:
        response = supabase_client.table('progress').update(fields).eq('id', progress_id).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao atualizar progresso {progress_id}: {e}")
        raise DataAccessError('update_monthly_progress', e) from e


# --- Funções para Notificações ---
def list_notifications(supabase_client: Client, user_id: str) -> List[Dict[str, Any]]:
    try:
        response = supabase_client.table('notifications').select('*').eq('user_id', user_id).order('created_at', desc=True).execute()
        return response.data
    except Exception as e:
        print(f"Erro ao obter notificações do Supabase: {e}")
        raise DataAccessError('list_notifications', e) from e


def insert_notification(supabase_client: Client, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    try:
        response = supabase_client.table('notifications').insert(fields).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao adicionar notificação: {e}")
        raise DataAccessError('insert_notification', e) from e


def update_notification(supabase_client: Client, notification_id: str, fields: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('notifications').update(fields).eq('id', notification_id).execute()
        return True
    except Exception as e:
        print(f"Erro ao atualizar notificação {notification_id}: {e}")
        raise DataAccessError('update_notification', e) from e


def mark_all_notifications_read(supabase_client: Client, user_id: str) -> bool:
    try:
        supabase_client.table('notifications').update({'read': True}).eq('user_id', user_id).eq('read', False).execute()
        return True
    except Exception as e:
        print(f"Erro ao marcar notificações como lidas: {e}")
        raise DataAccessError('mark_all_notifications_read', e) from e


def delete_notification(supabase_client: Client, notification_id: str) -> bool:
    try:
        supabase_client.table('notifications').delete().eq('id', notification_id).execute()
        return True
    except Exception as e:
        print(f"Erro ao remover notificação {notification_id}: {e}")
        raise DataAccessError('delete_notification', e) from e


# --- Funções para Compromissos ---
def list_appointments(supabase_client: Client, user_id: str) -> List[Dict[str, Any]]:
    try:
        response = supabase_client.table('appointments').select('*').eq('user_id', user_id).order('date').execute()
        return response.data
    except Exception as e:
        print(f"Erro ao obter compromissos do Supabase: {e}")
        raise DataAccessError('list_appointments', e) from e


def insert_appointment(supabase_client: Client, fields: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    try:
        response = supabase_client.table('appointments').insert(fields).execute()
        return _first(response)
    except Exception as e:
        print(f"Erro ao adicionar compromisso: {e}")
        raise DataAccessError('insert_appointment', e) from e


def update_appointment(supabase_client: Client, appointment_id: str, fields: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('appointments').update(fields).eq('id', appointment_id).execute()
        return True
    except Exception as e:
        print(f"Erro ao atualizar compromisso {appointment_id}: {e}")
        raise DataAccessError('update_appointment', e) from e


def delete_appointment(supabase_client: Client, appointment_id: str) -> bool:
    try:
        supabase_client.table('appointments').delete().eq('id', appointment_id).execute()
        return True
    except Exception as e:
        print(f"Erro ao remover compromisso {appointment_id}: {e}")
        raise DataAccessError('delete_appointment', e) from e


# --- Funções de Autenticação ---
def get_session(supabase_client: Client):
    """Retorna a sessão atual ou None quando não há usuário logado."""
    try:
        return supabase_client.auth.get_session()
    except Exception as e:
        print(f"Erro ao obter sessão do Supabase: {e}")
        raise DataAccessError('get_session', e) from e


def on_session_change(supabase_client: Client, callback: Callable[[str, Any], None]):
    """Registra um callback(evento, sessão) chamado a cada mudança de sessão."""
    return supabase_client.auth.on_auth_state_change(callback)


def sign_in(supabase_client: Client, email: str, password: str):
    try:
        return supabase_client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        print(f"Erro ao fazer login: {e}")
        raise DataAccessError('sign_in', e) from e


def sign_up(supabase_client: Client, email: str, password: str, name: str):
    try:
        return supabase_client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"name": name}},
        })
    except Exception as e:
        print(f"Erro ao criar conta: {e}")
        raise DataAccessError('sign_up', e) from e


def sign_in_with_oauth(supabase_client: Client, provider: str = "google"):
    try:
        return supabase_client.auth.sign_in_with_oauth({"provider": provider})
    except Exception as e:
        print(f"Erro ao iniciar login com {provider}: {e}")
        raise DataAccessError('sign_in_with_oauth', e) from e


def sign_out(supabase_client: Client) -> bool:
    try:
        supabase_client.auth.sign_out()
        return True
    except Exception as e:
        print(f"Erro ao fazer logout: {e}")
        raise DataAccessError('sign_out', e) from e
