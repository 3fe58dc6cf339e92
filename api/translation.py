"""
Translation between storage naming and client naming.

The store and the dashboard version their field names independently
(energy_kwh vs energy_kWh, created_at vs timestamp). This module is the only
place that maps one onto the other; keep it in sync with both schemas.
"""
from typing import Any

from sources.base import Reading
from storage.base import Record


def to_store_record(reading: Reading) -> Record:
    """Reading -> row for the energy_readings table."""
    return {
        "voltage": reading.voltage,
        "current": reading.current,
        "power": reading.power,
        "energy_kwh": reading.energy_kwh,
        "cost_rs": reading.cost_rs,
        "pf": reading.pf,
        "frequency": reading.frequency,
    }


def reshape_latest(record: Record) -> dict[str, Any]:
    """
    Stored row -> latest-reading response.

    Adds `timestamp` (alias of created_at) and `energy_kWh` (alias of
    energy_kwh); every stored field is passed through unchanged.
    """
    return {
        **record,
        "timestamp": record.get("created_at"),
        "energy_kWh": record.get("energy_kwh"),
        "pf": record.get("pf"),
        "frequency": record.get("frequency"),
    }


def reshape_live(record: Record) -> dict[str, Any]:
    """Stored row -> live/history item polled by the dashboard."""
    return {
        "timestamp": record.get("created_at"),
        "power": record.get("power"),
        "voltage": record.get("voltage"),
        "current": record.get("current"),
        "energy": record.get("energy_kwh"),
        "cost_rs": record.get("cost_rs"),
        "pf": record.get("pf"),
        "frequency": record.get("frequency"),
    }
