# Classificação de completude de documentos
import logging

from controle_demandas.models.documento import (
    ASSUNTOS_SEM_RESPOSTA,
    TIPOS_PRODUCAO,
    Assunto,
    Documento,
    TipoDocumento,
)

logger = logging.getLogger(__name__)


def _missing_tracking(doc) -> bool:
    return not doc.naopossui_rastreio and not doc.codigo_rastreio


def is_encaminhamento_incomplete(doc: Documento) -> bool:
    """Encaminhamentos precisam ter sido enviados e ter os anexos do assunto selecionados."""
    if not doc.data_envio:
        return True
    assunto = doc.assunto
    if assunto == Assunto.ENCAMINHAMENTO_MIDIA:
        return not doc.selected_midias
    if assunto == Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO:
        return not doc.selected_relatorios_tecnicos
    if assunto == Assunto.ENCAMINHAMENTO_RELATORIO_INTELIGENCIA:
        return not doc.selected_relatorios_inteligencia
    if assunto == Assunto.ENCAMINHAMENTO_AUTOS:
        return not doc.selected_autos_circunstanciados
    if assunto == Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO_MIDIA:
        return not doc.selected_relatorios_tecnicos or not doc.selected_midias
    return False


def is_oficio_circular_incomplete(doc: Documento) -> bool:
    # 1. não enviado
    if not doc.data_envio:
        return True

    # 2. aguardando resposta
    if doc.assunto not in ASSUNTOS_SEM_RESPOSTA and not doc.data_resposta:
        return True

    # 3. dados administrativos
    if not doc.numero_atena:
        return True
    if doc.assunto != Assunto.OUTROS:
        return any(dest.data_envio and _missing_tracking(dest) for dest in doc.destinatarios_data)
    return False


def is_oficio_incomplete(doc: Documento) -> bool:
    if not doc.numero_atena:
        return True

    if doc.assunto.startswith("Encaminhamento") or doc.assunto == Assunto.OUTROS:
        return is_encaminhamento_incomplete(doc)

    if doc.assunto == Assunto.COMUNICACAO_NAO_CUMPRIMENTO:
        return not doc.data_envio or _missing_tracking(doc)

    # Ofício que aguarda resposta
    return (
        not doc.data_envio
        or _missing_tracking(doc)
        or (doc.respondido and not doc.data_resposta)
        or not doc.respondido
    )


def is_document_incomplete(doc: Documento) -> bool:
    tipo = doc.tipo_documento

    if tipo == TipoDocumento.MIDIA:
        incomplete = not doc.tamanho_midia or not doc.hash_midia
    elif tipo in TIPOS_PRODUCAO:
        incomplete = not doc.data_finalizacao
    elif tipo == TipoDocumento.OFICIO_CIRCULAR:
        incomplete = is_oficio_circular_incomplete(doc)
    elif tipo == TipoDocumento.OFICIO:
        incomplete = is_oficio_incomplete(doc)
    else:
        incomplete = False

    logger.debug(f"Documento {doc.id} ({tipo or 'sem tipo'}): {'incompleto' if incomplete else 'completo'}")
    return incomplete
