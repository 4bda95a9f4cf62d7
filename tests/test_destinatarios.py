from controle_demandas.utils.destinatarios import mirror_first_recipient, parse_destinatarios


def test_parse_destinatarios_por_extenso():
    assert parse_destinatarios("Vivo, Claro e TIM") == ["Vivo", "Claro", "TIM"]
    assert parse_destinatarios("Vivo e Claro") == ["Vivo", "Claro"]


def test_parse_destinatarios_lista():
    assert parse_destinatarios("Vivo, Claro, ") == ["Vivo", "Claro"]
    assert parse_destinatarios(["Vivo", " ", "TIM "]) == ["Vivo", "TIM"]
    assert parse_destinatarios("Oi") == ["Oi"]
    assert parse_destinatarios(None) == []
    assert parse_destinatarios("") == []


def test_mirror_first_recipient():
    destinatarios = [
        {"nome": "Vivo", "data_envio": "01/03/2024", "data_resposta": "", "codigo_rastreio": "BR1",
         "naopossui_rastreio": False},
        {"nome": "TIM", "data_envio": "02/03/2024", "data_resposta": "05/03/2024", "codigo_rastreio": "",
         "naopossui_rastreio": True},
    ]
    assert mirror_first_recipient(destinatarios) == {
        "data_envio": "01/03/2024",
        "data_resposta": "",
        "codigo_rastreio": "BR1",
        "naopossui_rastreio": False,
    }


def test_mirror_first_recipient_sem_destinatarios():
    assert mirror_first_recipient([]) == {}
