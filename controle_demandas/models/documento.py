# Pydantic models
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from controle_demandas.models.base import RegistroBase, empty_if_none, false_if_none


class TipoDocumento(str, Enum):
    OFICIO = "Ofício"
    OFICIO_CIRCULAR = "Ofício Circular"
    MIDIA = "Mídia"
    RELATORIO_TECNICO = "Relatório Técnico"
    RELATORIO_INTELIGENCIA = "Relatório de Inteligência"
    AUTOS_CIRCUNSTANCIADOS = "Autos Circunstanciados"


class Assunto(str, Enum):
    """Assuntos de ofícios e ofícios circulares."""
    COMUNICACAO_NAO_CUMPRIMENTO = "Comunicação de não cumprimento de decisão judicial"
    ENCAMINHAMENTO_AUTOS = "Encaminhamento de autos circunstanciados"
    ENCAMINHAMENTO_DECISAO_JUDICIAL = "Encaminhamento de decisão judicial"
    ENCAMINHAMENTO_MIDIA = "Encaminhamento de mídia"
    ENCAMINHAMENTO_RELATORIO_INTELIGENCIA = "Encaminhamento de relatório de inteligência"
    ENCAMINHAMENTO_RELATORIO_TECNICO = "Encaminhamento de relatório técnico"
    ENCAMINHAMENTO_RELATORIO_TECNICO_MIDIA = "Encaminhamento de relatório técnico e mídia"
    REQUISICAO_DADOS_CADASTRAIS = "Requisição de dados cadastrais"
    REQUISICAO_DADOS_CADASTRAIS_PRESERVACAO = "Requisição de dados cadastrais e preservação de dados"
    SOLICITACAO_DADOS_CADASTRAIS = "Solicitação de dados cadastrais"
    OUTROS = "Outros"


TIPOS_PRODUCAO = frozenset(t.value for t in (
    TipoDocumento.RELATORIO_TECNICO,
    TipoDocumento.RELATORIO_INTELIGENCIA,
    TipoDocumento.AUTOS_CIRCUNSTANCIADOS,
))

ASSUNTOS_ENCAMINHAMENTO = frozenset(a.value for a in (
    Assunto.ENCAMINHAMENTO_MIDIA,
    Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO,
    Assunto.ENCAMINHAMENTO_RELATORIO_INTELIGENCIA,
    Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO_MIDIA,
    Assunto.ENCAMINHAMENTO_AUTOS,
))

# Assuntos que não aguardam resposta do destinatário
ASSUNTOS_SEM_RESPOSTA = ASSUNTOS_ENCAMINHAMENTO | {
    Assunto.COMUNICACAO_NAO_CUMPRIMENTO.value,
    Assunto.OUTROS.value,
}

ASSUNTOS_DADOS_CADASTRAIS = frozenset(a.value for a in (
    Assunto.REQUISICAO_DADOS_CADASTRAIS,
    Assunto.REQUISICAO_DADOS_CADASTRAIS_PRESERVACAO,
    Assunto.SOLICITACAO_DADOS_CADASTRAIS,
))


class DestinatarioData(RegistroBase):
    """Destinatário individual de um Ofício Circular."""
    nome: str = ""
    data_envio: str = ""
    data_resposta: str = ""
    respondido: bool = False
    codigo_rastreio: str = ""
    naopossui_rastreio: bool = False

    @field_validator("nome", "data_envio", "data_resposta", "codigo_rastreio", mode="before")
    @classmethod
    def _text_fields(cls, value):
        return empty_if_none(value)

    @field_validator("respondido", "naopossui_rastreio", mode="before")
    @classmethod
    def _flags(cls, value):
        return false_if_none(value)


class Documento(RegistroBase):
    """
    Documento vinculado a uma demanda por `demanda_id`.

    Os campos `selected_*` guardam ids de outros documentos da mesma demanda
    (referências fracas, resolvidas por busca). Em um Ofício Circular os campos
    de envio/resposta/rastreio do topo espelham o primeiro destinatário.
    """
    id: int
    demanda_id: Optional[int] = None
    tipo_documento: str = ""
    assunto: str = ""
    numero_documento: str = ""
    numero_atena: str = ""
    destinatario: str = ""
    enderecamento: str = ""

    data_envio: str = ""
    data_resposta: str = ""
    respondido: bool = False
    codigo_rastreio: str = ""
    naopossui_rastreio: bool = False

    data_finalizacao: str = ""

    apresentou_defeito: bool = False
    tamanho_midia: str = ""
    hash_midia: str = ""
    senha_midia: str = ""

    selected_midias: List[int] = Field(default_factory=list)
    selected_relatorios_tecnicos: List[int] = Field(default_factory=list)
    selected_relatorios_inteligencia: List[int] = Field(default_factory=list)
    selected_autos_circunstanciados: List[int] = Field(default_factory=list)
    selected_decisoes: List[int] = Field(default_factory=list)

    destinatarios_data: List[DestinatarioData] = Field(default_factory=list)

    @field_validator("tipo_documento", "assunto", "numero_documento", "numero_atena", "destinatario",
                     "enderecamento", "data_envio", "data_resposta", "codigo_rastreio", "data_finalizacao",
                     "tamanho_midia", "hash_midia", "senha_midia", mode="before")
    @classmethod
    def _text_fields(cls, value):
        return empty_if_none(value)

    @field_validator("respondido", "naopossui_rastreio", "apresentou_defeito", mode="before")
    @classmethod
    def _flags(cls, value):
        return false_if_none(value)

    @field_validator("selected_midias", "selected_relatorios_tecnicos", "selected_relatorios_inteligencia",
                     "selected_autos_circunstanciados", "selected_decisoes", "destinatarios_data", mode="before")
    @classmethod
    def _lists(cls, value):
        return [] if value is None else value
