# Pydantic models
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from controle_demandas.models.base import RegistroBase, empty_if_none


class StatusDemanda(str, Enum):
    EM_ANDAMENTO = "Em Andamento"
    FINALIZADA = "Finalizada"
    FILA_DE_ESPERA = "Fila de Espera"
    AGUARDANDO = "Aguardando"


# Status que ainda pedem ação do analista
STATUS_ATIVOS = frozenset(
    s.value for s in (StatusDemanda.EM_ANDAMENTO, StatusDemanda.AGUARDANDO, StatusDemanda.FILA_DE_ESPERA)
)


class Demanda(RegistroBase):
    """
    Registro de uma demanda.

    Datas ficam no formato de exibição (DD/MM/YYYY). O campo `status` é apenas o
    último valor gravado; o status real é sempre recalculado pelo status_service.
    """
    id: int
    sged: str = ""
    tipo_demanda: str = ""
    orgao: str = ""
    analista: str = ""
    distribuidor: str = ""
    descricao: str = ""
    data_inicial: str = ""
    data_final: Optional[str] = None
    data_reabertura: Optional[str] = None
    nova_data_final: Optional[str] = None
    status: Optional[StatusDemanda] = Field(default=None)

    @field_validator("sged", "tipo_demanda", "orgao", "analista", "distribuidor", "descricao", "data_inicial",
                     mode="before")
    @classmethod
    def _text_fields(cls, value):
        return empty_if_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, value):
        return value or None
