import pandas as pd

from controle_demandas.services.dados_service import (
    build_lookup,
    documentos_da_demanda,
    load_demandas,
    load_documentos,
)


def test_load_demandas_de_registros_camel_case():
    registros = [
        {"id": 1, "sged": "2024.0001", "dataInicial": "01/01/2024", "dataFinal": None, "status": "Aguardando"},
        {"id": "2", "tipoDemanda": "Quebra de sigilo", "dataInicial": "02/01/2024", "status": ""},
    ]
    demandas = load_demandas(registros)

    assert [d.id for d in demandas] == [1, 2]
    assert demandas[0].sged == "2024.0001"
    assert demandas[1].tipo_demanda == "Quebra de sigilo"
    assert demandas[1].status is None


def test_registros_invalidos_sao_ignorados(caplog):
    registros = [{"id": "abc", "tipoDocumento": "Ofício"}, {"tipoDocumento": "Mídia"}, {"id": 3}]
    with caplog.at_level("WARNING"):
        documentos = load_documentos(registros)
    assert [doc.id for doc in documentos] == [3]
    assert "ignorado" in caplog.text


def test_load_documentos_de_dataframe():
    df = pd.DataFrame([
        {"id": 1, "demandaId": 5, "tipoDocumento": "Ofício", "numeroAtena": "AT1", "selectedMidias": [2, 3]},
        {"id": 2, "demandaId": 5, "tipoDocumento": "Mídia", "tamanhoMidia": 4, "naopossuiRastreio": True},
    ])
    documentos = load_documentos(df)

    assert [doc.id for doc in documentos] == [1, 2]
    assert documentos[0].selected_midias == [2, 3]
    assert documentos[0].tamanho_midia == ""
    assert documentos[0].naopossui_rastreio is False
    assert documentos[1].numero_atena == ""
    assert documentos[1].selected_midias == []
    assert documentos[1].naopossui_rastreio is True


def test_load_dataframe_vazio():
    assert load_demandas(pd.DataFrame()) == []
    assert load_documentos([]) == []


def test_build_lookup(make_documento):
    lookup = build_lookup([make_documento(id=7, numero_documento="AC-07")])
    assert lookup(7).numero_documento == "AC-07"
    assert lookup("7").numero_documento == "AC-07"
    assert lookup(8) is None
    assert lookup("sete") is None
    assert lookup(None) is None


def test_documentos_da_demanda(make_documento):
    docs = [make_documento(id=1, demanda_id=1), make_documento(id=2, demanda_id=2), make_documento(id=3, demanda_id=1)]
    assert [doc.id for doc in documentos_da_demanda(1, docs)] == [1, 3]
