# Status de demandas e documentos
import logging
from collections import defaultdict
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from controle_demandas.models.demanda import Demanda, StatusDemanda
from controle_demandas.models.documento import ASSUNTOS_SEM_RESPOSTA, Assunto, DestinatarioData, Documento, TipoDocumento

logger = logging.getLogger(__name__)


class StatusDocumento(str, Enum):
    NAO_ENVIADO = "Não Enviado"
    PENDENTE = "Pendente"
    RESPONDIDO = "Respondido"
    ENCAMINHADO = "Encaminhado"
    EM_PRODUCAO = "Em Produção"
    FINALIZADO = "Finalizado"
    SEM_STATUS = "Sem Status"


class CategoriaDocumento(str, Enum):
    COMUNICACAO = "comunicacao"
    PRODUCAO = "producao"
    SEM_STATUS = "sem_status"


def _calculate(demanda: Demanda, documentos_da_demanda: Sequence[Documento]) -> StatusDemanda:
    """
    Regras, em ordem:
    1. Reaberta: Finalizada somente com nova_data_final; sem ela segue para as regras gerais.
    2. Não reaberta: data_inicial + data_final -> Finalizada.
    3. Sem data_inicial: último status gravado (ou Fila de Espera).
    4. Nenhum documento -> Fila de Espera.
    5. Algum documento não respondido -> Aguardando.
    6. Caso contrário -> Em Andamento.
    """
    if demanda.data_reabertura:
        if demanda.nova_data_final:
            return StatusDemanda.FINALIZADA
    elif demanda.data_inicial and demanda.data_final:
        return StatusDemanda.FINALIZADA

    if not demanda.data_inicial:
        return demanda.status or StatusDemanda.FILA_DE_ESPERA

    if not documentos_da_demanda:
        return StatusDemanda.FILA_DE_ESPERA
    if any(not doc.respondido for doc in documentos_da_demanda):
        return StatusDemanda.AGUARDANDO
    return StatusDemanda.EM_ANDAMENTO


def calculate_demanda_status(demanda: Demanda, documentos: Iterable[Documento]) -> StatusDemanda:
    """Status de uma demanda; `documentos` pode conter documentos de outras demandas."""
    da_demanda = [doc for doc in documentos if doc.demanda_id == demanda.id]
    status = _calculate(demanda, da_demanda)
    logger.debug(f"Demanda {demanda.id}: {status.value} ({len(da_demanda)} documentos)")
    return status


def group_by_demanda(documentos: Iterable[Documento]) -> Dict[Optional[int], List[Documento]]:
    grouped = defaultdict(list)
    for doc in documentos:
        grouped[doc.demanda_id].append(doc)
    return grouped


def calculate_demandas_status(demandas: Iterable[Demanda], documentos: Iterable[Documento]) -> Dict[int, StatusDemanda]:
    """Status de várias demandas, agrupando os documentos uma única vez."""
    grouped = group_by_demanda(documentos)
    return {demanda.id: _calculate(demanda, grouped.get(demanda.id, [])) for demanda in demandas}


# --- Status de documentos ---

def document_category(tipo_documento: str) -> CategoriaDocumento:
    tipo = (tipo_documento or "").lower()
    if "ofício" in tipo:
        return CategoriaDocumento.COMUNICACAO
    if "relatório" in tipo or "autos circunstanciados" in tipo:
        return CategoriaDocumento.PRODUCAO
    if "mídia" in tipo:
        return CategoriaDocumento.SEM_STATUS
    return CategoriaDocumento.COMUNICACAO


def is_encaminhamento_oficio(doc: Documento) -> bool:
    """Ofícios que só encaminham ou comunicam, sem resposta esperada."""
    if TipoDocumento.OFICIO.value not in doc.tipo_documento:
        return False
    return doc.assunto == Assunto.OUTROS or doc.assunto in ASSUNTOS_SEM_RESPOSTA


def recipient_status(destinatario: DestinatarioData) -> StatusDocumento:
    if not destinatario.data_envio:
        return StatusDocumento.NAO_ENVIADO
    if destinatario.respondido:
        return StatusDocumento.RESPONDIDO
    return StatusDocumento.PENDENTE


def calculate_document_status(doc: Documento) -> StatusDocumento:
    categoria = document_category(doc.tipo_documento)

    if categoria == CategoriaDocumento.PRODUCAO:
        return StatusDocumento.FINALIZADO if doc.data_finalizacao else StatusDocumento.EM_PRODUCAO
    if categoria == CategoriaDocumento.SEM_STATUS:
        return StatusDocumento.SEM_STATUS

    if not doc.data_envio:
        return StatusDocumento.NAO_ENVIADO
    if is_encaminhamento_oficio(doc):
        return StatusDocumento.ENCAMINHADO
    if doc.tipo_documento == TipoDocumento.OFICIO_CIRCULAR and doc.destinatarios_data:
        todos = all(dest.respondido for dest in doc.destinatarios_data)
        return StatusDocumento.RESPONDIDO if todos else StatusDocumento.PENDENTE
    return StatusDocumento.RESPONDIDO if doc.respondido else StatusDocumento.PENDENTE


def available_statuses(tipo_documento: Optional[str] = None) -> List[StatusDocumento]:
    """Status que fazem sentido como filtro para um tipo de documento."""
    todos = [s for s in StatusDocumento if s is not StatusDocumento.SEM_STATUS]
    if not tipo_documento:
        return todos
    if tipo_documento in (TipoDocumento.OFICIO.value, TipoDocumento.OFICIO_CIRCULAR.value):
        return [StatusDocumento.NAO_ENVIADO, StatusDocumento.PENDENTE, StatusDocumento.RESPONDIDO,
                StatusDocumento.ENCAMINHADO]
    if tipo_documento in (TipoDocumento.AUTOS_CIRCUNSTANCIADOS.value, TipoDocumento.RELATORIO_TECNICO.value,
                          TipoDocumento.RELATORIO_INTELIGENCIA.value):
        return [StatusDocumento.EM_PRODUCAO, StatusDocumento.FINALIZADO]
    if tipo_documento == TipoDocumento.MIDIA:
        return []
    return todos
