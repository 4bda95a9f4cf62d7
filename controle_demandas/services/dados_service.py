# Carregamento de registros vindos da camada de dados
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar, Union

import pandas as pd
from pydantic import ValidationError

from controle_demandas.models.base import RegistroBase
from controle_demandas.models.demanda import Demanda
from controle_demandas.models.documento import Documento

logger = logging.getLogger(__name__)

Registros = Union[pd.DataFrame, Iterable[Dict[str, Any]]]
M = TypeVar("M", bound=RegistroBase)


def _records(data: Registros) -> List[Dict[str, Any]]:
    if isinstance(data, pd.DataFrame):
        if data.empty:
            return []
        # NaN das colunas ausentes em alguns registros vira None
        return data.astype(object).where(pd.notna(data), None).to_dict(orient="records")
    return list(data or [])


def _load(model: Type[M], data: Registros, collection: str) -> List[M]:
    loaded = []
    for record in _records(data):
        try:
            loaded.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Registro inválido em '{collection}' (id={record.get('id')}) ignorado: {e}")
    logger.info(f"{len(loaded)} registros carregados de '{collection}'.")
    return loaded


def load_demandas(data: Registros) -> List[Demanda]:
    return _load(Demanda, data, "demandas")


def load_documentos(data: Registros) -> List[Documento]:
    return _load(Documento, data, "documentos")


def build_lookup(documentos: Iterable[Documento]) -> Callable[[int], Optional[Documento]]:
    """Busca de documento por id, no formato esperado por prepare_update."""
    index = {doc.id: doc for doc in documentos}

    def lookup(doc_id: int) -> Optional[Documento]:
        try:
            return index.get(int(doc_id))
        except (TypeError, ValueError):
            return None

    return lookup


def documentos_da_demanda(demanda_id: int, documentos: Iterable[Documento]) -> List[Documento]:
    return [doc for doc in documentos if doc.demanda_id == demanda_id]
