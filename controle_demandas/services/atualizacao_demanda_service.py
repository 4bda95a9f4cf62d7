# Encerramento e reabertura de demandas
import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from controle_demandas.models.demanda import Demanda
from controle_demandas.models.documento import Documento
from controle_demandas.models.edicao import EstadoEdicaoDemanda, ResultadoAtualizacao
from controle_demandas.services.status_service import calculate_demanda_status
from controle_demandas.utils.datas import (
    ValidacaoData,
    format_date_for_display,
    parse_date,
    to_display_date,
    to_storage_date,
)

logger = logging.getLogger(__name__)


class TipoDataDemanda(str, Enum):
    FINAL = "final"
    REABERTURA = "reabertura"
    NOVA_FINAL = "nova_final"


_NOMES_DATA = {
    TipoDataDemanda.FINAL: "Data final",
    TipoDataDemanda.REABERTURA: "Data de reabertura",
    TipoDataDemanda.NOVA_FINAL: "Nova data final",
}


def initialize_demanda_edit_state(demanda: Optional[Demanda]) -> EstadoEdicaoDemanda:
    if demanda is None:
        return EstadoEdicaoDemanda()
    return EstadoEdicaoDemanda(
        data_final=format_date_for_display(demanda.data_final),
        is_reaberto=bool(demanda.data_reabertura),
        data_reabertura=format_date_for_display(demanda.data_reabertura),
        nova_data_final=format_date_for_display(demanda.nova_data_final),
    )


def demanda_has_changes(working: EstadoEdicaoDemanda, initial: EstadoEdicaoDemanda) -> bool:
    return working != initial


def validate_demanda_date(value: str, demanda: Demanda, tipo: TipoDataDemanda = TipoDataDemanda.FINAL,
                          working: Optional[EstadoEdicaoDemanda] = None,
                          today: Optional[date] = None) -> ValidacaoData:
    """
    Valida uma data de encerramento/reabertura contra as demais datas da demanda.

    Datas ilegíveis, ou uma demanda sem data inicial, passam na validação.
    """
    if not value or not demanda.data_inicial:
        return ValidacaoData(is_valid=True)
    target = parse_date(value)
    inicial = parse_date(demanda.data_inicial)
    if target is None or inicial is None:
        return ValidacaoData(is_valid=True)

    tipo = TipoDataDemanda(tipo)
    if target > (today or date.today()):
        return ValidacaoData(is_valid=False,
                             message=f"{_NOMES_DATA[tipo]} não pode ser posterior à data atual.")

    if tipo == TipoDataDemanda.FINAL and target < inicial:
        return ValidacaoData(is_valid=False, message="Data final não pode ser anterior à data inicial.")

    if tipo == TipoDataDemanda.REABERTURA and demanda.data_final:
        final = parse_date((working.data_final if working else "") or demanda.data_final)
        if final and target < final:
            return ValidacaoData(is_valid=False, message="Data de reabertura não pode ser anterior à data final.")

    if tipo == TipoDataDemanda.NOVA_FINAL:
        reabertura = parse_date((working.data_reabertura if working else "") or demanda.data_reabertura)
        if reabertura and target < reabertura:
            return ValidacaoData(is_valid=False,
                                 message="A nova data final não pode ser anterior à data de reabertura.")

    return ValidacaoData(is_valid=True)


def _checked_date(value: str, tipo: TipoDataDemanda, demanda: Demanda, working: EstadoEdicaoDemanda,
                  today: Optional[date]):
    """Data normalizada para DD/MM/YYYY, ou a mensagem de erro."""
    storage = to_storage_date(value)
    if not storage or parse_date(storage) is None:
        return None, f"{_NOMES_DATA[tipo]} inválida."
    validacao = validate_demanda_date(value, demanda, tipo, working, today)
    if not validacao.is_valid:
        return None, validacao.message
    return to_display_date(storage), None


def prepare_demanda_update(working: EstadoEdicaoDemanda, demanda: Demanda,
                           documentos: Iterable[Documento] = (),
                           today: Optional[date] = None) -> ResultadoAtualizacao:
    payload: Dict[str, Any] = {}

    if working.is_reaberto:
        if not working.data_reabertura:
            return _reject(demanda, "Data de reabertura é obrigatória quando marcado como reaberto.")
        reabertura, erro = _checked_date(working.data_reabertura, TipoDataDemanda.REABERTURA, demanda, working,
                                         today)
        if erro:
            return _reject(demanda, erro)
        nova_final = None
        if working.nova_data_final:
            nova_final, erro = _checked_date(working.nova_data_final, TipoDataDemanda.NOVA_FINAL, demanda,
                                             working, today)
            if erro:
                return _reject(demanda, erro)
        payload["data_reabertura"] = reabertura
        payload["nova_data_final"] = nova_final
    else:
        if demanda.data_reabertura:
            # reabertura desmarcada
            payload["data_reabertura"] = None
            payload["nova_data_final"] = None
        data_final = None
        if working.data_final.strip():
            data_final, erro = _checked_date(working.data_final, TipoDataDemanda.FINAL, demanda, working, today)
            if erro:
                return _reject(demanda, erro)
        payload["data_final"] = data_final

    # status sempre recalculado com as novas datas, nunca lido do formulário
    payload["status"] = calculate_demanda_status(demanda.model_copy(update=payload), documentos).value
    payload = Demanda.record_keys(payload)
    logger.debug(f"Demanda {demanda.id}: payload {payload}")
    return ResultadoAtualizacao.aceito(payload)


def _reject(demanda: Demanda, erro: str) -> ResultadoAtualizacao:
    logger.warning(f"Atualização da demanda {demanda.id} rejeitada: {erro}")
    return ResultadoAtualizacao.rejeitado(erro)


def apply_demanda_update(demanda: Demanda, payload: Dict[str, Any]) -> Demanda:
    return Demanda.model_validate({**demanda.to_record(), **Demanda.record_keys(payload)})
