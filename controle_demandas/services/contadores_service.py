# Contadores do painel
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel

from controle_demandas.models.demanda import STATUS_ATIVOS, Demanda, StatusDemanda
from controle_demandas.models.documento import Documento
from controle_demandas.services.completude_service import is_document_incomplete
from controle_demandas.services.status_service import calculate_demandas_status
from controle_demandas.utils.datas import parse_date

logger = logging.getLogger(__name__)

ORDEM_STATUS = [s.value for s in (StatusDemanda.FINALIZADA, StatusDemanda.EM_ANDAMENTO,
                                  StatusDemanda.AGUARDANDO, StatusDemanda.FILA_DE_ESPERA)]


class Contadores(BaseModel):
    demandas: int = 0
    documentos: int = 0


def _year_of(demanda: Demanda) -> Optional[str]:
    data = parse_date(demanda.data_inicial)
    return str(data.year) if data else None


def get_contadores(demandas: Sequence[Demanda], documentos: Sequence[Documento],
                   analistas: Optional[Iterable[str]] = None) -> Contadores:
    """
    Demandas ativas e documentos incompletos que precisam de atualização.

    Sem filtro de analista tudo é contado. Documentos de demandas finalizadas
    também contam: podem precisar de correção depois do encerramento.
    """
    filtro = set(analistas or [])
    selecionadas = [d for d in demandas if not filtro or d.analista in filtro]
    status = calculate_demandas_status(selecionadas, documentos)
    ativas = sum(1 for d in selecionadas if status[d.id].value in STATUS_ATIVOS)

    if filtro:
        ids = {d.id for d in selecionadas}
        documentos = [doc for doc in documentos if doc.demanda_id in ids]
    incompletos = sum(1 for doc in documentos if is_document_incomplete(doc))

    logger.debug(f"Contadores (analistas={sorted(filtro) or 'todos'}): {ativas} demandas, {incompletos} documentos")
    return Contadores(demandas=ativas, documentos=incompletos)


def filter_by_year_and_analyst(demandas: Sequence[Demanda], documentos: Sequence[Documento],
                               anos: Optional[Iterable[str]] = None,
                               analistas: Optional[Iterable[str]] = None) -> Tuple[List[Demanda], List[Documento]]:
    """Filtra demandas pelo ano da data inicial e pelo analista; os documentos acompanham suas demandas."""
    anos_set = {str(ano) for ano in (anos or [])}
    analistas_set = set(analistas or [])

    filtradas = []
    for demanda in demandas:
        if anos_set and _year_of(demanda) not in anos_set:
            continue
        if analistas_set and demanda.analista not in analistas_set:
            continue
        filtradas.append(demanda)

    ids = {d.id for d in filtradas}
    return filtradas, [doc for doc in documentos if doc.demanda_id in ids]


def status_frame(demandas: Sequence[Demanda], documentos: Sequence[Documento]) -> pd.DataFrame:
    status = calculate_demandas_status(demandas, documentos)
    rows = [
        {"id": d.id, "analista": d.analista, "ano": _year_of(d), "status": status[d.id].value}
        for d in demandas
    ]
    return pd.DataFrame(rows, columns=["id", "analista", "ano", "status"])


def status_breakdown(demandas: Sequence[Demanda], documentos: Sequence[Documento]) -> Dict[str, int]:
    counts = status_frame(demandas, documentos)["status"].value_counts()
    return {status: int(counts.get(status, 0)) for status in ORDEM_STATUS}


def document_breakdown(documentos: Sequence[Documento]) -> Dict[str, int]:
    pendentes = sum(1 for doc in documentos if is_document_incomplete(doc))
    return {"precisam_atualizacao": pendentes, "concluidos": len(documentos) - pendentes}


def status_by_year(demandas: Sequence[Demanda], documentos: Sequence[Documento]) -> pd.DataFrame:
    """Quantidade de demandas por ano (linhas) e status (colunas)."""
    df = status_frame(demandas, documentos).dropna(subset=["ano"])
    if df.empty:
        return pd.DataFrame(columns=ORDEM_STATUS, dtype="int64")
    tabela = pd.crosstab(df["ano"], df["status"]).reindex(columns=ORDEM_STATUS, fill_value=0)
    return tabela.sort_index()
