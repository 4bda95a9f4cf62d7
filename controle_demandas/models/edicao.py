# Pydantic models
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from controle_demandas.models.base import RegistroBase


class TipoAtualizacao(str, Enum):
    """Fluxo de atualização aplicável a um documento."""
    FINALIZACAO = "finalizacao"
    MIDIA = "midia"
    OFICIO = "oficio"
    OFICIO_CIRCULAR = "oficio_circular"
    OFICIO_CIRCULAR_OUTROS = "oficio_circular_outros"
    COMUNICACAO_NAO_CUMPRIMENTO = "comunicacao_nao_cumprimento"
    ENCAMINHAMENTO_DECISAO_JUDICIAL = "encaminhamento_decisao_judicial"
    OFICIO_MIDIA = "oficio_midia"
    OFICIO_RELATORIO_TECNICO = "oficio_relatorio_tecnico"
    OFICIO_RELATORIO_INTELIGENCIA = "oficio_relatorio_inteligencia"
    OFICIO_RELATORIO_MIDIA = "oficio_relatorio_midia"
    OFICIO_AUTOS_CIRCUNSTANCIADOS = "oficio_autos_circunstanciados"
    DEFAULT = "default"


class DestinatarioEdicao(RegistroBase):
    nome: str = ""
    data_envio: str = ""
    data_resposta: str = ""
    codigo_rastreio: str = ""
    naopossui_rastreio: bool = False


class EstadoEdicao(RegistroBase):
    """Cópia editável de um documento; datas no formato de exibição."""
    numero_atena: str = ""
    data_finalizacao: str = ""
    apresentou_defeito: bool = False
    data_envio: str = ""
    data_resposta: str = ""
    codigo_rastreio: str = ""
    naopossui_rastreio: bool = False
    selected_midias: List[int] = Field(default_factory=list)
    selected_relatorios_tecnicos: List[int] = Field(default_factory=list)
    selected_relatorios_inteligencia: List[int] = Field(default_factory=list)
    selected_autos_circunstanciados: List[int] = Field(default_factory=list)
    selected_decisoes: List[int] = Field(default_factory=list)
    destinatarios_data: List[DestinatarioEdicao] = Field(default_factory=list)


class CamposVisiveis(BaseModel):
    numero_atena: bool = False
    data_envio: bool = False
    data_resposta: bool = False
    codigo_rastreio: bool = False
    data_finalizacao: bool = False
    apresentou_defeito: bool = False
    status: bool = False
    selected_midias: bool = False
    selected_relatorios_tecnicos: bool = False
    selected_relatorios_inteligencia: bool = False
    selected_autos_circunstanciados: bool = False
    selected_decisoes: bool = False
    destinatarios_individuais: bool = False


class ResultadoAtualizacao(BaseModel):
    """Payload parcial a persistir ou mensagem de erro, nunca os dois."""
    payload: Optional[Dict[str, Any]] = None
    erro: Optional[str] = None

    @classmethod
    def aceito(cls, payload: Dict[str, Any]) -> "ResultadoAtualizacao":
        return cls(payload=payload)

    @classmethod
    def rejeitado(cls, erro: str) -> "ResultadoAtualizacao":
        return cls(erro=erro)

    @property
    def ok(self) -> bool:
        return self.erro is None


class EstadoEdicaoDemanda(RegistroBase):
    """Cópia editável das datas de encerramento e reabertura de uma demanda."""
    data_final: str = ""
    is_reaberto: bool = False
    data_reabertura: str = ""
    nova_data_final: str = ""
