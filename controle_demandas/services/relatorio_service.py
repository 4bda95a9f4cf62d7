# Relatórios de pendências
import io
import logging
from typing import Sequence

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from controle_demandas.models.demanda import Demanda, StatusDemanda
from controle_demandas.models.documento import Documento
from controle_demandas.services.completude_service import is_document_incomplete
from controle_demandas.services.status_service import StatusDocumento, calculate_demandas_status, calculate_document_status
from controle_demandas.utils.datas import STORAGE_FORMAT, to_storage_date

logger = logging.getLogger(__name__)

COLUNAS_DEMANDAS = ["id", "sged", "tipo_demanda", "orgao", "analista", "data_inicial", "data_final", "status"]
COLUNAS_PENDENCIAS = ["demanda_id", "sged", "analista", "documento_id", "tipo_documento", "assunto",
                      "numero_documento", "status"]

_FILLS = {
    "green": PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    "red": PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"),
    "yellow": PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"),
    "blue": PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid"),
}

_COR_STATUS = {
    StatusDemanda.FINALIZADA.value: "green",
    StatusDocumento.FINALIZADO.value: "green",
    StatusDocumento.RESPONDIDO.value: "green",
    StatusDemanda.AGUARDANDO.value: "red",
    StatusDocumento.PENDENTE.value: "red",
    StatusDocumento.NAO_ENVIADO.value: "red",
    StatusDemanda.EM_ANDAMENTO.value: "yellow",
    StatusDocumento.EM_PRODUCAO.value: "yellow",
    StatusDemanda.FILA_DE_ESPERA.value: "blue",
    StatusDocumento.ENCAMINHADO.value: "blue",
}


def demandas_frame(demandas: Sequence[Demanda], documentos: Sequence[Documento]) -> pd.DataFrame:
    """Demandas com o status calculado, mais recentes primeiro."""
    status = calculate_demandas_status(demandas, documentos)
    rows = [d.model_dump(include=set(COLUNAS_DEMANDAS)) | {"status": status[d.id].value} for d in demandas]
    df = pd.DataFrame(rows, columns=COLUNAS_DEMANDAS)
    if not df.empty:
        ordem = pd.to_datetime(df["data_inicial"].map(to_storage_date), format=STORAGE_FORMAT, errors="coerce")
        df = df.loc[ordem.sort_values(ascending=False, na_position="last").index].reset_index(drop=True)
    return df


def pending_documents_frame(demandas: Sequence[Demanda], documentos: Sequence[Documento]) -> pd.DataFrame:
    """Uma linha por documento incompleto, com os dados da demanda."""
    por_id = {d.id: d for d in demandas}
    rows = []
    for doc in documentos:
        if not is_document_incomplete(doc):
            continue
        demanda = por_id.get(doc.demanda_id)
        rows.append({
            "demanda_id": doc.demanda_id,
            "sged": demanda.sged if demanda else "",
            "analista": demanda.analista if demanda else "",
            "documento_id": doc.id,
            "tipo_documento": doc.tipo_documento,
            "assunto": doc.assunto,
            "numero_documento": doc.numero_documento,
            "status": calculate_document_status(doc).value,
        })
    return pd.DataFrame(rows, columns=COLUNAS_PENDENCIAS)


def to_excel(df: pd.DataFrame, title: str = "Relatório") -> bytes:
    """Planilha formatada; células de status coloridas pelo status calculado."""
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=title)
        worksheet = writer.sheets[title]
        header_fill = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True)
        border = Border(left=Side(style="thin"), right=Side(style="thin"), top=Side(style="thin"),
                        bottom=Side(style="thin"))
        alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        for col_num, col_name in enumerate(df.columns, 1):
            cell = worksheet.cell(row=1, column=col_num)
            cell.fill, cell.font, cell.border, cell.alignment = header_fill, header_font, border, alignment
            max_len = max([len(str(col_name))] + [len(str(v)) for v in df[col_name]]) + 2
            worksheet.column_dimensions[get_column_letter(col_num)].width = min(max_len, 50)

        for row in range(2, len(df) + 2):
            for col in range(1, len(df.columns) + 1):
                cell = worksheet.cell(row=row, column=col)
                cell.border = border
                cell.alignment = Alignment(horizontal="left", vertical="center")

        if "status" in df.columns:
            status_col = df.columns.get_loc("status") + 1
            for row in range(2, len(df) + 2):
                cell = worksheet.cell(row=row, column=status_col)
                cor = _COR_STATUS.get(cell.value)
                if cor:
                    cell.fill = _FILLS[cor]

        worksheet.freeze_panes = "A2"
        worksheet.auto_filter.ref = worksheet.dimensions
    logger.info(f"Planilha '{title}' gerada com {len(df)} linhas.")
    return output.getvalue()
