# tests/test_record_store.py
from datetime import date
from decimal import Decimal

import pytest
from runlog.errors import InvalidInput, StoreError
from runlog.models.training import TrainingRecord
from runlog.services.auth_gateway import Session
from runlog.services.record_store import NewRecord, RecordStore
from runlog.utils.calculos import calculate_pace

from conftest import make_user


@pytest.fixture
def users(app):
    a = make_user(app, "a@x.com")
    b = make_user(app, "b@x.com")
    return Session(a, "a@x.com"), Session(b, "b@x.com")


def _record(session, day, distance="10", duration="0:59", **kw):
    return NewRecord(user_id=session.user_id, date=day, distance=distance, duration=duration, **kw)


def test_roundtrip_create_list(app, users):
    a, _ = users
    with app.app_context():
        store = RecordStore(a)
        store.create(_record(a, "2025-02-10", distance="10.5", duration="1:02",
                             location="Retiro", notes="rodaje suave"))
        rows = store.list()

    assert len(rows) == 1
    r = rows[0]
    assert r.date == date(2025, 2, 10)
    assert r.distance == Decimal("10.5")
    assert r.duration == "1:02"
    assert r.location == "Retiro"
    assert r.notes == "rodaje suave"
    assert r.pace == calculate_pace("10.5", "1:02")
    assert r.user_id == a.user_id
    assert r.id and r.created_at is not None


def test_roundtrip_distancia_con_tres_decimales(app, users):
    a, _ = users
    with app.app_context():
        store = RecordStore(a)
        store.create(_record(a, "2025-01-01", distance="1.005", duration="0:10"))
        r = store.list()[0]
        assert r.distance == Decimal("1.005")
        assert r.pace == calculate_pace("1.005", "0:10") == "9:57/km"


def test_orden_por_fecha_descendente(app, users):
    a, _ = users
    with app.app_context():
        store = RecordStore(a)
        for day in ("2025-01-01", "2025-03-01", "2025-02-01"):
            store.create(_record(a, day))
        dates = [r.date.isoformat() for r in store.list()]
    assert dates == ["2025-03-01", "2025-02-01", "2025-01-01"]


def test_list_solo_devuelve_registros_propios(app, users):
    a, b = users
    with app.app_context():
        RecordStore(a).create(_record(a, "2025-01-01"))
        RecordStore(b).create(_record(b, "2025-01-02"))
        assert [r.user_id for r in RecordStore(a).list()] == [a.user_id]
        assert [r.user_id for r in RecordStore(b).list()] == [b.user_id]


def test_delete_de_otro_usuario_no_hace_nada(app, users):
    a, b = users
    with app.app_context():
        foreign = RecordStore(b).create(_record(b, "2025-01-02"))
        foreign_id = foreign.id

        assert RecordStore(a).delete(foreign_id) is False
        assert RecordStore(a).get(foreign_id) is None
        # Sigue ahí para su dueño
        assert [r.id for r in RecordStore(b).list()] == [foreign_id]


def test_delete_propio(app, users):
    a, _ = users
    with app.app_context():
        store = RecordStore(a)
        row = store.create(_record(a, "2025-01-01"))
        assert store.delete(row.id) is True
        assert store.list() == []
        # Segunda vez: ya no existe
        assert store.delete(row.id) is False


def test_create_para_otro_usuario_prohibido(app, users):
    a, b = users
    with app.app_context():
        with pytest.raises(StoreError) as exc:
            RecordStore(a).create(_record(b, "2025-01-01"))
        assert exc.value.code == "forbidden"
        assert exc.value.status_code == 403
        assert TrainingRecord.query.count() == 0


def test_sin_sesion_no_autenticado(app, users):
    a, _ = users
    store = RecordStore(None)
    with app.app_context():
        for op in (store.list, lambda: store.create(_record(a, "2025-01-01")), lambda: store.delete("x")):
            with pytest.raises(StoreError) as exc:
                op()
            assert exc.value.code == "not_authenticated"


def test_distancia_cero_no_inserta(app, users):
    a, _ = users
    with app.app_context():
        with pytest.raises(InvalidInput):
            RecordStore(a).create(_record(a, "2025-01-01", distance="0"))
        assert TrainingRecord.query.count() == 0


def test_distancia_pequena_se_guarda_sin_redondear(app, users):
    a, _ = users
    with app.app_context():
        store = RecordStore(a)
        store.create(_record(a, "2025-01-01", distance="0.004", duration="0:01"))
        r = store.list()[0]
        assert r.distance == Decimal("0.004")
        assert r.pace == "250:00/km"


def test_distancia_enorme_es_invalida(app, users):
    a, _ = users
    with app.app_context():
        with pytest.raises(InvalidInput) as exc:
            RecordStore(a).create(_record(a, "2025-01-01", distance="1e30"))
        assert exc.value.field == "distance"
        assert TrainingRecord.query.count() == 0


@pytest.mark.parametrize("field, value", [("date", 20250101), ("location", 5), ("notes", ["x"])])
def test_campos_con_tipo_incorrecto_son_invalidos(app, users, field, value):
    a, _ = users
    record = _record(a, "2025-01-01")
    setattr(record, field, value)
    with app.app_context():
        with pytest.raises(InvalidInput) as exc:
            RecordStore(a).create(record)
        assert exc.value.field == field
        assert TrainingRecord.query.count() == 0
