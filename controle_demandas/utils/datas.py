# Conversão e validação de datas: exibição DD/MM/YYYY, armazenamento YYYY-MM-DD
import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

DISPLAY_FORMAT = "%d/%m/%Y"
STORAGE_FORMAT = "%Y-%m-%d"

FUTURE_DATE_MESSAGE = "A data informada deve ser igual ou anterior à data atual."

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DASHED_RE = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")
_DISPLAY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


class ValidacaoData(BaseModel):
    is_valid: bool
    message: Optional[str] = None


def to_storage_date(display: str) -> str:
    """DD/MM/YYYY -> YYYY-MM-DD. Qualquer outro formato vira ""."""
    if not display or len(display) != 10:
        return ""
    parts = display.split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return ""
    day, month, year = parts
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def to_display_date(storage: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY. Menos de três partes vira ""."""
    if not storage:
        return ""
    parts = storage.split("-")
    if len(parts) < 3 or not all(parts[:3]):
        return ""
    year, month, day = parts[:3]
    return f"{day}/{month}/{year}"


def format_date_for_display(value: Optional[str]) -> str:
    if not value:
        return ""
    if "/" in value:
        return value
    return to_display_date(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Aceita YYYY-MM-DD, DD-MM-YYYY e DD/MM/YYYY."""
    if not value:
        return None
    match = _ISO_RE.match(value)
    if match:
        year, month, day = match.groups()
    else:
        match = _DASHED_RE.match(value) or _DISPLAY_RE.match(value)
        if not match:
            return None
        day, month, year = match.groups()
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def not_in_future(display: str, today: Optional[date] = None) -> ValidacaoData:
    """Datas posteriores a hoje são inválidas; datas ilegíveis passam."""
    if not display or len(display) != 10:
        return ValidacaoData(is_valid=True)
    try:
        informed = datetime.strptime(display, DISPLAY_FORMAT).date()
    except ValueError:
        return ValidacaoData(is_valid=True)
    if informed > (today or date.today()):
        return ValidacaoData(is_valid=False, message=FUTURE_DATE_MESSAGE)
    return ValidacaoData(is_valid=True)


def days_between(start: Optional[str], end: Optional[str] = None, today: Optional[date] = None) -> int:
    """Dias inteiros entre duas datas; sem data final conta até hoje."""
    start_date = parse_date(start)
    if start_date is None:
        return 0
    end_date = parse_date(end) if end else (today or date.today())
    if end_date is None:
        return 0
    return max(0, (end_date - start_date).days)


def demanda_duration_text(data_inicial: str, data_final: Optional[str], status: str,
                          today: Optional[date] = None) -> str:
    dias = days_between(data_inicial, data_final, today=today)
    unidade = "dia" if dias == 1 else "dias"
    if status == "Finalizada" and data_final:
        return f"{dias} {unidade} finalizada"
    return f"{dias} {unidade} aberta"


def apply_date_mask(value: str) -> str:
    """Aplica a máscara DD/MM/YYYY sobre o que foi digitado."""
    digits = re.sub(r"\D", "", value or "")
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}/{digits[2:]}"
    return f"{digits[:2]}/{digits[2:4]}/{digits[4:8]}"
