import re
from datetime import date
from decimal import Decimal

import pytest
from runlog.errors import InvalidInput
from runlog.utils.calculos import calculate_pace, parse_date, parse_distance, parse_duration

PACE_RE = re.compile(r"^\d+:\d{2}/km$")


def test_pace_ejemplo_basico():
    # 59 min / 10 km = 5.9 min/km -> 5:54
    assert calculate_pace(10, "0:59") == "5:54/km"


def test_pace_maraton():
    # 210 / 42.195 = 4.9769 -> 4:58.6 -> 4:59
    assert calculate_pace(42.195, "3:30") == "4:59/km"


def test_pace_horas_dos_digitos():
    assert calculate_pace("100", "10:00") == "6:00/km"


def test_segundos_60_se_suman_al_minuto():
    # 1199 / 200 = 5.995 -> 0.995 * 60 = 59.7 -> 60 -> 6:00
    assert calculate_pace(200, "19:59") == "6:00/km"


def test_duracion_cero():
    assert calculate_pace(5, "0:00") == "0:00/km"


def test_distancia_texto_con_coma():
    assert calculate_pace("10,0", "0:59") == "5:54/km"


@pytest.mark.parametrize("distance", [0, "0", 0.0, Decimal("0"), -1, "-3.5"])
def test_distancia_cero_o_negativa_es_invalid_input(distance):
    with pytest.raises(InvalidInput) as exc:
        calculate_pace(distance, "1:00")
    assert exc.value.field == "distance"
    assert exc.value.status_code == 400


@pytest.mark.parametrize("distance", [None, "", "abc", float("nan"), float("inf"), True])
def test_distancia_no_numerica(distance):
    with pytest.raises(InvalidInput):
        calculate_pace(distance, "1:00")


@pytest.mark.parametrize("duration", ["130", "1:5", "1:60", "123:00", "ab:cd", "", None, 90])
def test_duracion_mal_formada(duration):
    with pytest.raises(InvalidInput) as exc:
        calculate_pace(10, duration)
    assert exc.value.field == "duration"


@pytest.mark.parametrize(
    "distance, duration",
    [(1, "0:07"), (3, "0:20"), (5.5, "0:31"), (7, "0:45"), (21.0975, "1:45"),
     (13.3, "1:07"), (0.8, "0:04"), (30, "2:33"), (9.99, "0:59"), (2.2, "99:59")],
)
def test_formato_y_rango_de_segundos(distance, duration):
    pace = calculate_pace(distance, duration)
    assert PACE_RE.match(pace)
    seconds = int(pace.split(":")[1][:2])
    assert 0 <= seconds <= 59


def test_parse_duration():
    assert parse_duration("1:30") == (1, 30)
    assert parse_duration(" 01:05 ") == (1, 5)


def test_parse_distance_devuelve_decimal():
    assert parse_distance(10.1) == Decimal("10.1")
    assert parse_distance("42.195") == Decimal("42.195")


def test_parse_date():
    assert parse_date("2025-03-01") == date(2025, 3, 1)
    assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)
    with pytest.raises(InvalidInput):
        parse_date("01/03/2025")


@pytest.mark.parametrize("value", [20250101, None, ["2025-01-01"]])
def test_parse_date_rechaza_tipos_no_texto(value):
    with pytest.raises(InvalidInput) as exc:
        parse_date(value)
    assert exc.value.field == "date"
