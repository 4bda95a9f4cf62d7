# Base comum dos modelos pydantic
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegistroBase(BaseModel):
    """Campos em snake_case, aceitando as chaves camelCase dos registros armazenados."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_record(self) -> dict:
        """Exporta no formato dos registros armazenados (chaves camelCase)."""
        return self.model_dump(by_alias=True)

    @classmethod
    def record_keys(cls, campos: Dict[str, Any]) -> Dict[str, Any]:
        """Troca nomes de campos pelas chaves dos registros; chaves desconhecidas passam como estão."""
        return {
            (cls.model_fields[nome].alias or to_camel(nome)) if nome in cls.model_fields else nome: valor
            for nome, valor in campos.items()
        }


def empty_if_none(value: Any) -> Any:
    """Normaliza None para "" e números para texto, para checagens de vazio uniformes."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def false_if_none(value: Any) -> Any:
    return False if value is None else value
