# Fluxos de atualização de documentos: tipo de fluxo, estado de edição, payload e sessão
import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from controle_demandas.models.documento import (
    ASSUNTOS_DADOS_CADASTRAIS,
    TIPOS_PRODUCAO,
    Assunto,
    DestinatarioData,
    Documento,
    TipoDocumento,
)
from controle_demandas.models.edicao import (
    CamposVisiveis,
    DestinatarioEdicao,
    EstadoEdicao,
    ResultadoAtualizacao,
    TipoAtualizacao,
)
from controle_demandas.utils.datas import format_date_for_display, to_display_date, to_storage_date
from controle_demandas.utils.destinatarios import mirror_first_recipient, parse_destinatarios

logger = logging.getLogger(__name__)

LookupDocumento = Callable[[int], Optional[Documento]]

_KIND_POR_ASSUNTO_OFICIO = {
    Assunto.COMUNICACAO_NAO_CUMPRIMENTO.value: TipoAtualizacao.COMUNICACAO_NAO_CUMPRIMENTO,
    Assunto.ENCAMINHAMENTO_MIDIA.value: TipoAtualizacao.OFICIO_MIDIA,
    Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO.value: TipoAtualizacao.OFICIO_RELATORIO_TECNICO,
    Assunto.ENCAMINHAMENTO_RELATORIO_INTELIGENCIA.value: TipoAtualizacao.OFICIO_RELATORIO_INTELIGENCIA,
    Assunto.ENCAMINHAMENTO_RELATORIO_TECNICO_MIDIA.value: TipoAtualizacao.OFICIO_RELATORIO_MIDIA,
    Assunto.ENCAMINHAMENTO_AUTOS.value: TipoAtualizacao.OFICIO_AUTOS_CIRCUNSTANCIADOS,
    Assunto.ENCAMINHAMENTO_DECISAO_JUDICIAL.value: TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL,
    **{assunto: TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL for assunto in ASSUNTOS_DADOS_CADASTRAIS},
}

_CAMPOS_OFICIO = ("numero_atena", "data_envio", "data_resposta", "codigo_rastreio", "naopossui_rastreio")

# Campos do EstadoEdicao comparados por has_changes em cada fluxo
CAMPOS_COMPARADOS = {
    TipoAtualizacao.FINALIZACAO: ("data_finalizacao",),
    TipoAtualizacao.MIDIA: ("apresentou_defeito",),
    TipoAtualizacao.OFICIO: _CAMPOS_OFICIO,
    TipoAtualizacao.OFICIO_CIRCULAR: ("numero_atena", "destinatarios_data"),
    TipoAtualizacao.OFICIO_CIRCULAR_OUTROS: ("numero_atena", "destinatarios_data"),
    TipoAtualizacao.COMUNICACAO_NAO_CUMPRIMENTO: ("selected_decisoes",),
    TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL: _CAMPOS_OFICIO + ("selected_decisoes",),
    TipoAtualizacao.OFICIO_MIDIA: ("numero_atena", "selected_midias"),
    TipoAtualizacao.OFICIO_RELATORIO_TECNICO: ("selected_relatorios_tecnicos",),
    TipoAtualizacao.OFICIO_RELATORIO_INTELIGENCIA: ("selected_relatorios_inteligencia",),
    TipoAtualizacao.OFICIO_RELATORIO_MIDIA: ("numero_atena", "selected_relatorios_tecnicos", "selected_midias"),
    TipoAtualizacao.OFICIO_AUTOS_CIRCUNSTANCIADOS: ("selected_autos_circunstanciados",),
    TipoAtualizacao.DEFAULT: (),
}

# Listas de referências gravadas por cada fluxo
_CAMPOS_REFERENCIA = {
    TipoAtualizacao.COMUNICACAO_NAO_CUMPRIMENTO: ("selected_decisoes",),
    TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL: ("selected_decisoes",),
    TipoAtualizacao.OFICIO_MIDIA: ("selected_midias",),
    TipoAtualizacao.OFICIO_RELATORIO_TECNICO: ("selected_relatorios_tecnicos",),
    TipoAtualizacao.OFICIO_RELATORIO_INTELIGENCIA: ("selected_relatorios_inteligencia",),
    TipoAtualizacao.OFICIO_RELATORIO_MIDIA: ("selected_relatorios_tecnicos", "selected_midias"),
    TipoAtualizacao.OFICIO_AUTOS_CIRCUNSTANCIADOS: ("selected_autos_circunstanciados",),
}

# Referências que só podem ser encaminhadas depois de finalizadas
_REFERENCIAS_FINALIZADAS = frozenset({
    "selected_relatorios_tecnicos",
    "selected_relatorios_inteligencia",
    "selected_autos_circunstanciados",
})

_CAMPOS_VISIVEIS = {
    TipoAtualizacao.FINALIZACAO: ("data_finalizacao",),
    TipoAtualizacao.MIDIA: ("apresentou_defeito",),
    TipoAtualizacao.OFICIO: ("numero_atena", "data_envio", "data_resposta", "codigo_rastreio", "status"),
    TipoAtualizacao.OFICIO_CIRCULAR: ("numero_atena", "destinatarios_individuais", "status"),
    TipoAtualizacao.OFICIO_CIRCULAR_OUTROS: ("numero_atena", "data_envio"),
    TipoAtualizacao.COMUNICACAO_NAO_CUMPRIMENTO: ("selected_decisoes",),
    TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL: ("numero_atena", "data_envio", "data_resposta",
                                                      "codigo_rastreio", "status", "selected_decisoes"),
    TipoAtualizacao.OFICIO_MIDIA: ("numero_atena", "selected_midias"),
    TipoAtualizacao.OFICIO_RELATORIO_TECNICO: ("numero_atena", "selected_relatorios_tecnicos"),
    TipoAtualizacao.OFICIO_RELATORIO_INTELIGENCIA: ("numero_atena", "selected_relatorios_inteligencia"),
    TipoAtualizacao.OFICIO_RELATORIO_MIDIA: ("numero_atena", "selected_relatorios_tecnicos", "selected_midias"),
    TipoAtualizacao.OFICIO_AUTOS_CIRCUNSTANCIADOS: ("numero_atena", "selected_autos_circunstanciados"),
    TipoAtualizacao.DEFAULT: (),
}


def _as_kind(kind: Union[TipoAtualizacao, str]) -> TipoAtualizacao:
    try:
        return TipoAtualizacao(kind)
    except ValueError:
        logger.warning(f"Tipo de atualização desconhecido: {kind!r}")
        return TipoAtualizacao.DEFAULT


def resolve_kind(doc: Optional[Documento]) -> TipoAtualizacao:
    if doc is None:
        return TipoAtualizacao.DEFAULT

    tipo = doc.tipo_documento
    if tipo in TIPOS_PRODUCAO:
        return TipoAtualizacao.FINALIZACAO
    if tipo == TipoDocumento.MIDIA:
        return TipoAtualizacao.MIDIA
    if tipo == TipoDocumento.OFICIO:
        return _KIND_POR_ASSUNTO_OFICIO.get(doc.assunto, TipoAtualizacao.OFICIO)
    if tipo == TipoDocumento.OFICIO_CIRCULAR:
        if doc.assunto == Assunto.OUTROS:
            return TipoAtualizacao.OFICIO_CIRCULAR_OUTROS
        return TipoAtualizacao.OFICIO_CIRCULAR
    return TipoAtualizacao.DEFAULT


def visible_fields(doc: Optional[Documento]) -> CamposVisiveis:
    return CamposVisiveis(**{campo: True for campo in _CAMPOS_VISIVEIS[resolve_kind(doc)]})


# --- Estado de edição ---

def _initial_recipients(doc: Documento, recipient_names) -> List[DestinatarioEdicao]:
    if doc.destinatarios_data:
        return [
            DestinatarioEdicao(
                nome=dest.nome,
                data_envio=format_date_for_display(dest.data_envio),
                data_resposta=format_date_for_display(dest.data_resposta),
                codigo_rastreio=dest.codigo_rastreio,
                naopossui_rastreio=dest.naopossui_rastreio,
            )
            for dest in doc.destinatarios_data
        ]

    # Registros antigos: uma linha por nome, todas com os dados do topo
    nomes = parse_destinatarios(recipient_names if recipient_names is not None else doc.destinatario)
    return [
        DestinatarioEdicao(
            nome=nome,
            data_envio=format_date_for_display(doc.data_envio),
            data_resposta=format_date_for_display(doc.data_resposta),
            codigo_rastreio=doc.codigo_rastreio,
            naopossui_rastreio=doc.naopossui_rastreio,
        )
        for nome in nomes
    ]


def initialize_edit_state(doc: Optional[Documento],
                          recipient_names: Union[str, Sequence[str], None] = None) -> EstadoEdicao:
    """
    Cria uma cópia editável e independente do documento.

    Nenhuma lista do estado retornado é compartilhada com o documento ou com
    outro estado, então o estado "inicial" e o "em edição" podem divergir.
    """
    if doc is None:
        return EstadoEdicao()

    estado = EstadoEdicao(
        numero_atena=doc.numero_atena,
        data_finalizacao=format_date_for_display(doc.data_finalizacao),
        apresentou_defeito=doc.apresentou_defeito,
        data_envio=format_date_for_display(doc.data_envio),
        data_resposta=format_date_for_display(doc.data_resposta),
        codigo_rastreio=doc.codigo_rastreio,
        naopossui_rastreio=doc.naopossui_rastreio,
        selected_midias=list(doc.selected_midias),
        selected_relatorios_tecnicos=list(doc.selected_relatorios_tecnicos),
        selected_relatorios_inteligencia=list(doc.selected_relatorios_inteligencia),
        selected_autos_circunstanciados=list(doc.selected_autos_circunstanciados),
        selected_decisoes=list(doc.selected_decisoes),
    )
    if doc.tipo_documento == TipoDocumento.OFICIO_CIRCULAR:
        estado.destinatarios_data = _initial_recipients(doc, recipient_names)
    return estado


def copy_edit_state(estado: EstadoEdicao) -> EstadoEdicao:
    return estado.model_copy(deep=True)


def has_changes(working: EstadoEdicao, initial: EstadoEdicao, kind: Union[TipoAtualizacao, str]) -> bool:
    """Habilita o botão salvar: compara apenas os campos editados pelo fluxo."""
    campos = CAMPOS_COMPARADOS[_as_kind(kind)]
    return any(getattr(working, campo) != getattr(initial, campo) for campo in campos)


# --- Payload de atualização ---

def _clean_date(value: str) -> str:
    return to_display_date(to_storage_date(value))


def _oficio_payload(working: EstadoEdicao) -> Dict[str, Any]:
    data_resposta = _clean_date(working.data_resposta)
    return {
        "data_envio": _clean_date(working.data_envio),
        "data_resposta": data_resposta,
        "codigo_rastreio": "" if working.naopossui_rastreio else working.codigo_rastreio,
        "naopossui_rastreio": working.naopossui_rastreio,
        "respondido": bool(data_resposta),
    }


def _circular_payload(working: EstadoEdicao) -> Dict[str, Any]:
    destinatarios = []
    for dest in working.destinatarios_data:
        data_resposta = _clean_date(dest.data_resposta)
        destinatarios.append({
            "nome": dest.nome,
            "data_envio": _clean_date(dest.data_envio),
            "data_resposta": data_resposta,
            "codigo_rastreio": "" if dest.naopossui_rastreio else dest.codigo_rastreio,
            "naopossui_rastreio": dest.naopossui_rastreio,
            "respondido": bool(data_resposta),
        })

    payload = {
        "destinatarios_data": [DestinatarioData.model_validate(dest).to_record() for dest in destinatarios],
        "respondido": bool(destinatarios) and all(dest["respondido"] for dest in destinatarios),
    }
    payload.update(mirror_first_recipient(destinatarios))
    return payload


def _unfinished_references(ids: Iterable[int], lookup: LookupDocumento) -> List[str]:
    pendentes = []
    for doc_id in ids:
        referenciado = lookup(doc_id)
        if referenciado is None or not referenciado.data_finalizacao:
            nome = referenciado.numero_documento if referenciado and referenciado.numero_documento else f"#{doc_id}"
            pendentes.append(nome)
    return pendentes


def _not_finalized_message(pendentes: List[str]) -> str:
    if len(pendentes) == 1:
        return f"Documento {pendentes[0]} não foi finalizado."
    return f"Documentos {', '.join(pendentes)} não foram finalizados."


def prepare_update(working: EstadoEdicao, kind: Union[TipoAtualizacao, str],
                   all_docs: Iterable[Documento] = (),
                   lookup_by_id: Optional[LookupDocumento] = None) -> ResultadoAtualizacao:
    """
    Monta o payload parcial a persistir ou devolve o erro de validação.

    O payload usa as chaves dos registros armazenados (camelCase), pronto para
    ser aplicado como atualização parcial.

    `lookup_by_id` resolve os ids referenciados; sem ele, os ids são buscados
    em `all_docs`.
    """
    kind = _as_kind(kind)
    if lookup_by_id is None:
        lookup_by_id = {doc.id: doc for doc in all_docs}.get

    payload: Dict[str, Any] = {"numero_atena": working.numero_atena}

    if kind == TipoAtualizacao.FINALIZACAO:
        payload["data_finalizacao"] = _clean_date(working.data_finalizacao)
    elif kind == TipoAtualizacao.MIDIA:
        payload["apresentou_defeito"] = working.apresentou_defeito
    elif kind in (TipoAtualizacao.OFICIO_CIRCULAR, TipoAtualizacao.OFICIO_CIRCULAR_OUTROS):
        payload.update(_circular_payload(working))
    elif kind in (TipoAtualizacao.OFICIO, TipoAtualizacao.ENCAMINHAMENTO_DECISAO_JUDICIAL,
                  TipoAtualizacao.DEFAULT):
        payload.update(_oficio_payload(working))

    for campo in _CAMPOS_REFERENCIA.get(kind, ()):
        ids = list(getattr(working, campo))
        if campo in _REFERENCIAS_FINALIZADAS:
            pendentes = _unfinished_references(ids, lookup_by_id)
            if pendentes:
                erro = _not_finalized_message(pendentes)
                logger.warning(f"Atualização rejeitada ({kind.value}): {erro}")
                return ResultadoAtualizacao.rejeitado(erro)
        payload[campo] = ids

    payload = Documento.record_keys(payload)
    logger.debug(f"Payload preparado ({kind.value}): {sorted(payload)}")
    return ResultadoAtualizacao.aceito(payload)


def apply_update(doc: Documento, payload: Dict[str, Any]) -> Documento:
    """Novo documento com o payload aplicado; aceita chaves camelCase ou snake_case."""
    return Documento.model_validate({**doc.to_record(), **Documento.record_keys(payload)})


# --- Sessão de edição ---

class EtapaEdicao(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    VALIDATING = "validating"


class SessaoEdicaoDocumento:
    """
    Sessão de edição de um documento: idle -> editing -> validating -> idle.

    Uma validação rejeitada volta para editing com `erro` preenchido; uma
    gravação aceita encerra a sessão.
    """

    SAVE_ERROR_MESSAGE = "Erro ao salvar o documento."

    def __init__(self):
        self.etapa = EtapaEdicao.IDLE
        self.documento: Optional[Documento] = None
        self.kind = TipoAtualizacao.DEFAULT
        self.initial: Optional[EstadoEdicao] = None
        self.working: Optional[EstadoEdicao] = None
        self.erro: Optional[str] = None

    def open(self, documento: Documento, recipient_names: Union[str, Sequence[str], None] = None) -> EstadoEdicao:
        self.documento = documento
        self.kind = resolve_kind(documento)
        self.initial = initialize_edit_state(documento, recipient_names)
        self.working = copy_edit_state(self.initial)
        self.erro = None
        self.etapa = EtapaEdicao.EDITING
        logger.info(f"Edição do documento {documento.id} aberta ({self.kind.value}).")
        return self.working

    def update(self, **changes) -> EstadoEdicao:
        self._require_editing()
        self.working = EstadoEdicao.model_validate({**self.working.model_dump(), **changes})
        return self.working

    def update_recipient(self, index: int, **changes) -> EstadoEdicao:
        self._require_editing()
        destinatarios = [dest.model_dump() for dest in self.working.destinatarios_data]
        destinatarios[index].update(changes)
        return self.update(destinatarios_data=destinatarios)

    def has_changes(self) -> bool:
        if self.etapa != EtapaEdicao.EDITING:
            return False
        return has_changes(self.working, self.initial, self.kind)

    def can_save(self) -> bool:
        return self.has_changes()

    def save(self, all_docs: Iterable[Documento], lookup_by_id: Optional[LookupDocumento],
             persist: Callable[[int, Dict[str, Any]], bool]) -> ResultadoAtualizacao:
        """Valida e, se aceito, entrega o payload a `persist(doc_id, payload)`."""
        self._require_editing()
        self.etapa = EtapaEdicao.VALIDATING
        resultado = prepare_update(self.working, self.kind, all_docs, lookup_by_id)
        if not resultado.ok:
            self.erro = resultado.erro
            self.etapa = EtapaEdicao.EDITING
            return resultado

        doc_id = self.documento.id
        try:
            saved = persist(doc_id, resultado.payload)
        except Exception as e:
            logger.error(f"Erro ao persistir documento {doc_id}: {e}", exc_info=True)
            saved = False
        if not saved:
            self.erro = self.SAVE_ERROR_MESSAGE
            self.etapa = EtapaEdicao.EDITING
            return ResultadoAtualizacao.rejeitado(self.erro)

        logger.info(f"Documento {doc_id} atualizado.")
        self.close()
        return resultado

    def close(self) -> None:
        self.etapa = EtapaEdicao.IDLE
        self.documento = None
        self.kind = TipoAtualizacao.DEFAULT
        self.initial = None
        self.working = None
        self.erro = None

    def _require_editing(self) -> None:
        if self.etapa == EtapaEdicao.IDLE:
            raise RuntimeError("Nenhum documento em edição.")
