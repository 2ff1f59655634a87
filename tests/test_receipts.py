"""Tests for the persisted receipt store."""

import json

import pytest

from inventarioti.db import PreferencesDB
from inventarioti.imaging import TIME_UNAVAILABLE
from inventarioti.models import Comprobante
from inventarioti.receipts import PREFS_KEY, PREFS_NAME, ReceiptStore, filter_by_name


@pytest.fixture
def prefs(tmp_path):
    store = PreferencesDB(PREFS_NAME, tmp_path / "prefs.db")
    yield store
    store.close()


@pytest.fixture
def store(prefs):
    return ReceiptStore(prefs)


ROUTER = Comprobante(uri="a.jpg", nombre="Router", fecha="01 Jan 2024", hora="10:00 AM")
SWITCH = Comprobante(uri="b.jpg", nombre="Switch", fecha="02 Jan 2024", hora="11:30 AM")


def test_load_empty(store):
    assert store.load() == []


def test_append_then_load(store):
    store.append(ROUTER)
    assert store.load() == [ROUTER]


def test_append_keeps_order_and_duplicates(store):
    store.append(ROUTER)
    store.append(SWITCH)
    store.append(ROUTER)
    assert store.load() == [ROUTER, SWITCH, ROUTER]


def test_persisted_shape(store, prefs):
    store.append(ROUTER)
    data = json.loads(prefs.get_string(PREFS_KEY))
    assert data == [
        {"uri": "a.jpg", "nombre": "Router", "fecha": "01 Jan 2024", "hora": "10:00 AM"}
    ]


def test_replace_all(store):
    store.append(ROUTER)
    store.replace_all([SWITCH])
    assert store.load() == [SWITCH]


def test_missing_hora_backfilled_from_exif(prefs, jpeg):
    path = jpeg(taken_at="2024:01:01 10:00:00")
    prefs.put_string(
        PREFS_KEY,
        json.dumps([{"uri": str(path), "nombre": "Router", "fecha": "01 Jan 2024"}]),
    )

    records = ReceiptStore(prefs).load()

    assert records == [
        Comprobante(uri=str(path), nombre="Router", fecha="01 Jan 2024", hora="10:00 AM")
    ]


def test_backfill_is_not_written_back(prefs, jpeg):
    path = jpeg(taken_at="2024:01:01 10:00:00")
    raw = json.dumps([{"uri": str(path), "nombre": "R", "fecha": "f", "hora": None}])
    prefs.put_string(PREFS_KEY, raw)

    ReceiptStore(prefs).load()
    assert prefs.get_string(PREFS_KEY) == raw


def test_backfill_unreadable_image_uses_sentinel(prefs, tmp_path):
    prefs.put_string(
        PREFS_KEY,
        json.dumps([{"uri": str(tmp_path / "gone.jpg"), "nombre": "R", "fecha": "f"}]),
    )
    assert ReceiptStore(prefs).load()[0].hora == TIME_UNAVAILABLE


def test_backfill_uses_injected_reader(prefs):
    prefs.put_string(PREFS_KEY, json.dumps([{"uri": "x", "nombre": "R", "fecha": "f"}]))
    calls = []

    def reader(uri):
        calls.append(uri)
        return "09:15 PM"

    store = ReceiptStore(prefs, time_reader=reader)
    assert store.load()[0].hora == "09:15 PM"
    assert store.load()[0].hora == "09:15 PM"
    assert calls == ["x", "x"]


def test_remove(store):
    store.append(ROUTER)
    store.append(SWITCH)
    assert store.remove(ROUTER) is True
    assert store.load() == [SWITCH]


def test_remove_missing(store):
    store.append(ROUTER)
    assert store.remove(SWITCH) is False
    assert store.load() == [ROUTER]


def test_replace_moves_new_record_to_end(store):
    store.append(ROUTER)
    store.append(SWITCH)
    renamed = Comprobante(ROUTER.uri, "Router 2", ROUTER.fecha, ROUTER.hora)

    assert store.replace(ROUTER, renamed) is True
    assert store.load() == [SWITCH, renamed]


def test_replace_missing_leaves_store_untouched(store):
    store.append(ROUTER)
    stale = Comprobante(ROUTER.uri, ROUTER.nombre, ROUTER.fecha, "12:00 PM")
    assert store.replace(stale, SWITCH) is False
    assert store.load() == [ROUTER]


def test_filter_by_name():
    records = [ROUTER, SWITCH]
    assert filter_by_name(records, "ROUT") == [ROUTER]
    assert filter_by_name(records, "") == records
    assert filter_by_name(records, "   ") == records
    assert filter_by_name(records, "impresora") == []
