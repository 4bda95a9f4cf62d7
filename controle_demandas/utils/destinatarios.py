# Destinatários de Ofício Circular
from typing import Any, Dict, List, Sequence, Union


def parse_destinatarios(destinatarios: Union[str, Sequence[str], None]) -> List[str]:
    """
    Separa a lista de destinatários em nomes.

    Aceita "A, B, C", o formato por extenso "A, B e C" ou uma sequência já
    separada. Nomes vazios são descartados.
    """
    if not destinatarios:
        return []
    if not isinstance(destinatarios, str):
        return [nome.strip() for nome in destinatarios if nome and nome.strip()]

    if " e " in destinatarios:
        parts = destinatarios.split(" e ")
        ultimo = parts.pop().strip()
        nomes = [nome.strip() for nome in " e ".join(parts).split(",")]
        if ultimo:
            nomes.append(ultimo)
    else:
        nomes = [nome.strip() for nome in destinatarios.split(",")]
    return [nome for nome in nomes if nome]


def mirror_first_recipient(destinatarios_data: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Deriva os campos de topo de um Ofício Circular a partir do primeiro destinatário.

    O documento guarda `data_envio`, `data_resposta`, `codigo_rastreio` e
    `naopossui_rastreio` no topo apenas como espelho de `destinatarios_data[0]`.
    Sem destinatários não há o que espelhar e o resultado é vazio.
    """
    if not destinatarios_data:
        return {}
    primeiro = destinatarios_data[0]
    return {
        "data_envio": primeiro.get("data_envio", ""),
        "data_resposta": primeiro.get("data_resposta", ""),
        "codigo_rastreio": primeiro.get("codigo_rastreio", ""),
        "naopossui_rastreio": primeiro.get("naopossui_rastreio", False),
    }
