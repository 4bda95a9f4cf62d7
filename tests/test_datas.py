from datetime import date

import pytest

from controle_demandas.utils.datas import (
    FUTURE_DATE_MESSAGE,
    apply_date_mask,
    days_between,
    demanda_duration_text,
    format_date_for_display,
    not_in_future,
    parse_date,
    to_display_date,
    to_storage_date,
)


def test_to_storage_date():
    assert to_storage_date("05/03/2024") == "2024-03-05"


@pytest.mark.parametrize("value", ["", None, "5/3/2024", "2024-03-05", "ab/cd/efgh", "05/03/2024 "])
def test_to_storage_date_rejects_other_shapes(value):
    assert to_storage_date(value) == ""


def test_to_display_date():
    assert to_display_date("2024-03-05") == "05/03/2024"
    assert to_display_date("2024-03") == ""
    assert to_display_date("") == ""


@pytest.mark.parametrize("display", ["01/01/2024", "29/02/2024", "31/12/1999"])
def test_display_storage_round_trip(display):
    assert to_display_date(to_storage_date(display)) == display


def test_format_date_for_display():
    assert format_date_for_display("2024-03-05") == "05/03/2024"
    assert format_date_for_display("05/03/2024") == "05/03/2024"
    assert format_date_for_display(None) == ""


def test_parse_date_formats():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("29-02-2024") == date(2024, 2, 29)
    assert parse_date("29/02/2024") == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["31/02/2024", "2024/02/01", "ontem", "", None])
def test_parse_date_never_raises(value):
    assert parse_date(value) is None


def test_not_in_future(hoje):
    assert not_in_future("15/06/2024", today=hoje).is_valid
    assert not_in_future("01/01/2024", today=hoje).is_valid

    futura = not_in_future("16/06/2024", today=hoje)
    assert not futura.is_valid
    assert futura.message == FUTURE_DATE_MESSAGE


@pytest.mark.parametrize("value", ["", "32/13/2024", "xx/xx/xxxx", "1/1/2024"])
def test_not_in_future_fails_open(value, hoje):
    assert not_in_future(value, today=hoje).is_valid


def test_days_between(hoje):
    assert days_between("01/01/2024", "11/01/2024") == 10
    assert days_between("2024-01-01", "2024-01-02") == 1
    assert days_between("11/01/2024", "01/01/2024") == 0
    assert days_between("05/06/2024", today=hoje) == 10
    assert days_between("", "01/01/2024") == 0


def test_demanda_duration_text(hoje):
    assert demanda_duration_text("01/01/2024", "02/01/2024", "Finalizada") == "1 dia finalizada"
    assert demanda_duration_text("05/06/2024", None, "Aguardando", today=hoje) == "10 dias aberta"


def test_apply_date_mask():
    assert apply_date_mask("15") == "15"
    assert apply_date_mask("150") == "15/0"
    assert apply_date_mask("1503") == "15/03"
    assert apply_date_mask("15032024") == "15/03/2024"
    assert apply_date_mask("15/03/2024999") == "15/03/2024"
    assert apply_date_mask(None) == ""
