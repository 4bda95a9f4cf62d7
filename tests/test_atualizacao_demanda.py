from controle_demandas.models.demanda import StatusDemanda
from controle_demandas.models.edicao import EstadoEdicaoDemanda
from controle_demandas.services.atualizacao_demanda_service import (
    TipoDataDemanda,
    apply_demanda_update,
    demanda_has_changes,
    initialize_demanda_edit_state,
    prepare_demanda_update,
    validate_demanda_date,
)
from controle_demandas.services.dados_service import load_demandas, load_documentos


def test_initialize_demanda_edit_state(make_demanda):
    demanda = make_demanda(data_final="2024-01-10", data_reabertura="05/02/2024")
    estado = initialize_demanda_edit_state(demanda)
    assert estado == EstadoEdicaoDemanda(data_final="10/01/2024", is_reaberto=True, data_reabertura="05/02/2024")
    assert initialize_demanda_edit_state(None) == EstadoEdicaoDemanda()


def test_demanda_has_changes(make_demanda):
    initial = initialize_demanda_edit_state(make_demanda())
    working = initial.model_copy(update={"data_final": "10/01/2024"})
    assert demanda_has_changes(working, initial)
    assert not demanda_has_changes(initial.model_copy(), initial)


def test_validate_data_final(make_demanda, hoje):
    demanda = make_demanda(data_inicial="10/01/2024")
    assert validate_demanda_date("10/01/2024", demanda, today=hoje).is_valid

    anterior = validate_demanda_date("09/01/2024", demanda, today=hoje)
    assert anterior.message == "Data final não pode ser anterior à data inicial."

    futura = validate_demanda_date("16/06/2024", demanda, TipoDataDemanda.FINAL, today=hoje)
    assert futura.message == "Data final não pode ser posterior à data atual."


def test_validate_falha_aberta(make_demanda, hoje):
    assert validate_demanda_date("ontem", make_demanda(), today=hoje).is_valid
    assert validate_demanda_date("01/01/2020", make_demanda(data_inicial=""), today=hoje).is_valid


def test_validate_reabertura_e_nova_final(make_demanda, hoje):
    demanda = make_demanda(data_final="10/02/2024")
    resultado = validate_demanda_date("05/02/2024", demanda, "reabertura", today=hoje)
    assert resultado.message == "Data de reabertura não pode ser anterior à data final."

    working = EstadoEdicaoDemanda(is_reaberto=True, data_reabertura="01/03/2024")
    resultado = validate_demanda_date("20/02/2024", demanda, TipoDataDemanda.NOVA_FINAL, working, today=hoje)
    assert resultado.message == "A nova data final não pode ser anterior à data de reabertura."
    assert validate_demanda_date("02/03/2024", demanda, TipoDataDemanda.NOVA_FINAL, working, today=hoje).is_valid


def test_prepare_data_final(make_demanda, make_documento, hoje):
    demanda = make_demanda()
    docs = [make_documento(respondido=False)]

    resultado = prepare_demanda_update(EstadoEdicaoDemanda(data_final="10/02/2024"), demanda, docs, today=hoje)

    assert resultado.ok
    assert resultado.payload == {"dataFinal": "10/02/2024", "status": StatusDemanda.FINALIZADA}


def test_prepare_limpa_data_final(make_demanda, make_documento, hoje):
    demanda = make_demanda(data_final="10/02/2024")
    docs = [make_documento(respondido=False)]

    resultado = prepare_demanda_update(EstadoEdicaoDemanda(data_final="  "), demanda, docs, today=hoje)

    assert resultado.payload == {"dataFinal": None, "status": StatusDemanda.AGUARDANDO}


def test_prepare_data_final_invalida(make_demanda, hoje):
    resultado = prepare_demanda_update(EstadoEdicaoDemanda(data_final="31/02/2024"), make_demanda(), today=hoje)
    assert resultado.erro == "Data final inválida."
    assert resultado.payload is None

    resultado = prepare_demanda_update(EstadoEdicaoDemanda(data_final="01/12/2023"), make_demanda(), today=hoje)
    assert resultado.erro == "Data final não pode ser anterior à data inicial."


def test_reabertura_exige_data(make_demanda, hoje):
    working = EstadoEdicaoDemanda(data_final="10/02/2024", is_reaberto=True)
    resultado = prepare_demanda_update(working, make_demanda(data_final="10/02/2024"), today=hoje)
    assert resultado.erro == "Data de reabertura é obrigatória quando marcado como reaberto."


def test_reabrir_e_refinalizar(make_demanda, make_documento, hoje):
    demanda = make_demanda(data_final="10/02/2024")
    docs = [make_documento(respondido=True)]

    working = EstadoEdicaoDemanda(data_final="10/02/2024", is_reaberto=True, data_reabertura="01/03/2024")
    reaberta = prepare_demanda_update(working, demanda, docs, today=hoje)
    assert reaberta.payload == {"dataReabertura": "01/03/2024", "novaDataFinal": None,
                                "status": StatusDemanda.EM_ANDAMENTO}

    demanda = apply_demanda_update(demanda, reaberta.payload)
    assert demanda.data_final == "10/02/2024"

    working = working.model_copy(update={"nova_data_final": "20/03/2024"})
    refinalizada = prepare_demanda_update(working, demanda, docs, today=hoje)
    assert refinalizada.payload["novaDataFinal"] == "20/03/2024"
    assert refinalizada.payload["status"] == StatusDemanda.FINALIZADA


def test_reabertura_com_nova_final_invalida(make_demanda, hoje):
    working = EstadoEdicaoDemanda(is_reaberto=True, data_reabertura="01/03/2024", nova_data_final="20/07/2024")
    resultado = prepare_demanda_update(working, make_demanda(data_final="10/02/2024"), today=hoje)
    assert resultado.erro == "Nova data final não pode ser posterior à data atual."


def test_desmarcar_reabertura(make_demanda, hoje):
    demanda = make_demanda(data_final="10/02/2024", data_reabertura="01/03/2024")
    working = EstadoEdicaoDemanda(data_final="10/02/2024", is_reaberto=False)

    resultado = prepare_demanda_update(working, demanda, today=hoje)

    assert resultado.payload == {"dataReabertura": None, "novaDataFinal": None, "dataFinal": "10/02/2024",
                                 "status": StatusDemanda.FINALIZADA}


def test_apply_demanda_update_preserva_a_entrada(make_demanda):
    demanda = make_demanda()
    atualizada = apply_demanda_update(demanda, {"data_final": "10/02/2024", "status": StatusDemanda.FINALIZADA})
    assert atualizada.status == StatusDemanda.FINALIZADA
    assert demanda.data_final is None


def test_payload_gravado_no_registro_mantem_a_data_final(hoje):
    registro = {"id": 9, "dataInicial": "01/01/2024", "analista": "Ana", "status": "Em Andamento"}
    documentos = load_documentos([{"id": 90, "demandaId": 9, "tipoDocumento": "Ofício", "respondido": True}])

    demanda, = load_demandas([registro])
    resultado = prepare_demanda_update(EstadoEdicaoDemanda(data_final="10/02/2024"), demanda, documentos, today=hoje)
    registro.update(resultado.payload)

    recarregada, = load_demandas([registro])
    assert recarregada.data_final == "10/02/2024"
    assert recarregada.status == StatusDemanda.FINALIZADA
    assert "data_final" not in registro


def test_apply_demanda_update_aceita_chaves_do_registro(make_demanda):
    atualizada = apply_demanda_update(make_demanda(), {"dataFinal": "10/02/2024", "status": "Finalizada"})
    assert atualizada.data_final == "10/02/2024"
    assert atualizada.status == StatusDemanda.FINALIZADA
