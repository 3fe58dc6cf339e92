from api.translation import reshape_latest, reshape_live, to_store_record
from sources.base import Reading


def test_to_store_record_uses_storage_naming():
    reading = Reading(voltage=230.0, current=2.5, power=575.0, energy_kwh=0.5, cost_rs=3.0)

    record = to_store_record(reading)

    assert record == {
        "voltage": 230.0,
        "current": 2.5,
        "power": 575.0,
        "energy_kwh": 0.5,
        "cost_rs": 3.0,
        "pf": 0.95,
        "frequency": 50.0,
    }


def test_reshape_latest_aliases_without_mutating_other_fields():
    record = {
        "id": 7,
        "voltage": 231.2,
        "current": 1.1,
        "power": 241.6,
        "energy_kwh": 1.23,
        "cost_rs": 7.38,
        "pf": 0.93,
        "frequency": 50.1,
        "created_at": "2026-10-19T08:00:00+00:00",
    }

    reshaped = reshape_latest(record)

    assert reshaped["energy_kWh"] == 1.23
    assert reshaped["timestamp"] == "2026-10-19T08:00:00+00:00"
    for key, value in record.items():
        assert reshaped[key] == value


def test_reshape_latest_does_not_modify_input():
    record = {"energy_kwh": 1.23, "created_at": "T"}

    reshape_latest(record)

    assert record == {"energy_kwh": 1.23, "created_at": "T"}


def test_reshape_live_shape():
    record = {
        "id": 1,
        "voltage": 230.0,
        "current": 2.5,
        "power": 575.0,
        "energy_kwh": 0.5,
        "cost_rs": 3.0,
        "pf": 0.95,
        "frequency": 50.0,
        "created_at": "2026-10-19T08:00:00+00:00",
    }

    assert reshape_live(record) == {
        "timestamp": "2026-10-19T08:00:00+00:00",
        "power": 575.0,
        "voltage": 230.0,
        "current": 2.5,
        "energy": 0.5,
        "cost_rs": 3.0,
        "pf": 0.95,
        "frequency": 50.0,
    }
