# taskify/utils/text_utils.py
import datetime
import re
import unicodedata
from typing import Iterable, Union

MONTH_NAMES_PT = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def month_label(day: Union[datetime.date, None] = None) -> str:
    """Rótulo do mês no formato usado na tabela 'progress'.
    Ex: date(2025, 3, 10) -> "março 2025"
    """
    day = day or datetime.date.today()
    return f"{MONTH_NAMES_PT[day.month - 1]} {day.year}"


def strip_accents(s: str) -> str:
    """Remove acentos. Ex: "Saúde" -> "Saude", "concluída" -> "concluida"."""
    normalized = unicodedata.normalize("NFKD", s)
    return "".join(c for c in normalized if not unicodedata.combining(c))


def normalize_search(s: Union[str, None]) -> str:
    """Normaliza um texto para comparação: sem acentos, minúsculo e sem espaços nas pontas."""
    if not s:
        return ""
    return strip_accents(s).casefold().strip()


def match_choice(text: Union[str, None], choices: Iterable[str]) -> Union[str, None]:
    """Encontra a opção que corresponde ao texto ignorando acentos, maiúsculas e separadores.
    Ex: match_choice("saude", ["Saúde", "Outro"]) -> "Saúde"
    Ex: match_choice("em_progresso", ["pendente", "em progresso"]) -> "em progresso"
    """
    if text is None:
        return None
    wanted = re.sub(r"[\s_\-]+", " ", normalize_search(text))
    for choice in choices:
        if normalize_search(choice) == wanted:
            return choice
    return None


def parse_timestamp(value) -> Union[datetime.datetime, None]:
    """Converte um timestamp vindo do Supabase (ISO 8601) num datetime com fuso.
    Datas sem fuso são consideradas UTC. Retorna None para valores vazios ou inválidos.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        parsed = datetime.datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def parse_user_date(text: str) -> Union[datetime.datetime, None]:
    """Interpreta datas digitadas pelo usuário: 'dd/mm/aaaa', 'aaaa-mm-dd', 'hoje' ou 'amanhã'."""
    text = normalize_search(text)
    today = datetime.date.today()
    if text == "hoje":
        day = today
    elif text == "amanha":
        day = today + datetime.timedelta(days=1)
    else:
        day = None
        for fmt in ("%d/%m/%Y", "%Y-%m-%d", "%d/%m"):
            try:
                parsed = datetime.datetime.strptime(text, fmt)
            except ValueError:
                continue
            day = parsed.date() if fmt != "%d/%m" else parsed.date().replace(year=today.year)
            break
        if day is None:
            return None
    return datetime.datetime(day.year, day.month, day.day, 12, 0, tzinfo=datetime.timezone.utc)
