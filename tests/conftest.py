"""Fixtures pytest compartilhadas."""
from datetime import date

import pytest

from controle_demandas.models.demanda import Demanda
from controle_demandas.models.documento import Documento


@pytest.fixture
def hoje():
    return date(2024, 6, 15)


@pytest.fixture
def make_demanda():
    """Fábrica de demandas; aceita campos em snake_case ou camelCase."""
    def _make(**fields):
        record = {"id": 1, "data_inicial": "01/01/2024", "analista": "Ana"}
        record.update(fields)
        return Demanda.model_validate(record)
    return _make


@pytest.fixture
def make_documento():
    def _make(**fields):
        record = {"id": 1, "demanda_id": 1}
        record.update(fields)
        return Documento.model_validate(record)
    return _make


@pytest.fixture
def oficio_circular(make_documento):
    return make_documento(
        id=20,
        tipo_documento="Ofício Circular",
        assunto="Requisição de dados cadastrais",
        numero_documento="OC-01/2024",
        numero_atena="AT20",
        destinatario="Vivo, Claro e TIM",
        data_envio="01/03/2024",
    )
