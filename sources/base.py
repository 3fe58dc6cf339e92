"""Base definitions for energy readings - data contracts and client errors"""
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_PF = 0.95
DEFAULT_FREQUENCY = 50.0


@dataclass(frozen=True)
class Reading:
    """
    One set of electrical measurements from the sensor node.

    Attributes:
        voltage: RMS voltage in V.
        current: RMS current in A.
        power: Active power in W.
        energy_kwh: Cumulative energy in kWh (non-decreasing per device).
        cost_rs: Cost of the cumulative energy.
        pf: Power factor in (0, 1].
        frequency: Grid frequency in Hz.
    """
    voltage: float
    current: float
    power: float
    energy_kwh: float
    cost_rs: float
    pf: float = DEFAULT_PF
    frequency: float = DEFAULT_FREQUENCY

    def to_payload(self) -> dict[str, float]:
        """Device wire format, as POSTed to the ingestion endpoint."""
        payload = asdict(self)
        payload["energy_kWh"] = payload.pop("energy_kwh")
        return payload


@dataclass(frozen=True)
class LiveDataSnapshot:
    """
    The most recently fetched reading as the dashboard sees it.

    Replaced wholesale on every successful poll.
    """
    power: float
    voltage: float
    current: float
    energy: float
    timestamp: str
    cost_rs: float | None = None
    pf: float | None = None
    frequency: float | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LiveDataSnapshot":
        """
        Build a snapshot from a live endpoint response.

        Accepts both the live shape (`energy`) and the latest-reading shape
        (`energy_kWh`). Raises KeyError/TypeError/ValueError on a malformed
        payload.
        """
        energy = data.get("energy")
        if energy is None:
            energy = data["energy_kWh"]

        def optional(key):
            value = data.get(key)
            return float(value) if value is not None else None

        return cls(
            power=float(data["power"]),
            voltage=float(data["voltage"]),
            current=float(data["current"]),
            energy=float(energy),
            timestamp=str(data["timestamp"]),
            cost_rs=optional("cost_rs"),
            pf=optional("pf"),
            frequency=optional("frequency"),
        )


@dataclass(frozen=True)
class HistorySample:
    """One point of a history chart: a time label with power (W) and energy (kWh)."""
    time: str
    power: float
    energy: float


def _parse_timestamp(timestamp: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return None
    # Aware timestamps are shown in local time, like a browser would
    return parsed.astimezone() if parsed.tzinfo else parsed


def live_sample(snapshot: LiveDataSnapshot) -> HistorySample:
    """Time-of-day sample for the short-term live history."""
    parsed = _parse_timestamp(snapshot.timestamp)
    label = parsed.strftime("%H:%M:%S") if parsed else snapshot.timestamp
    return HistorySample(time=label, power=round(snapshot.power, 1), energy=snapshot.energy)


def daily_sample(snapshot: LiveDataSnapshot) -> HistorySample:
    """Date-labelled sample for the 7-day history."""
    parsed = _parse_timestamp(snapshot.timestamp)
    label = parsed.date().isoformat() if parsed else snapshot.timestamp
    return HistorySample(time=label, power=round(snapshot.power, 1), energy=snapshot.energy)


class ConnectionStatus(str, Enum):
    """Connection state shown next to the live view."""
    CONNECTING = "Connecting..."
    LIVE = "Live"
    DISCONNECTED = "Disconnected"
    DEMO_LIVE = "Demo Live"


class FetchError(Exception):
    """
    A dashboard request that did not produce data.

    Attributes:
        status_code: HTTP status of the response, None when there was none.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(FetchError):
    """Backend unreachable (connection refused, DNS failure, reset...)."""


class AuthExpiredError(FetchError):
    """Backend rejected the session token (HTTP 401)."""
