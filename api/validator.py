"""Validation of inbound device payloads"""
import logging
import math
from typing import Any, Mapping

from api.errors import ValidationError
from sources.base import DEFAULT_FREQUENCY, DEFAULT_PF, Reading

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("voltage", "current", "power", "energy_kWh", "cost_rs")


def _to_float(name: str, value: Any) -> float:
    # bool is an int subclass, but True is not a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Field '{name}' must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"Field '{name}' must be a finite number")
    return float(value)


def validate_reading(payload: Any) -> Reading:
    """
    Check a raw device payload and apply defaults for optional fields.

    All five primary fields must be present; 0 is a valid value, only a
    missing key (or JSON null) is rejected. The payload is rejected as a
    whole if any primary field is missing.

    pf and frequency fall back to 0.95 and 50.0 when absent or falsy, so a
    reported pf of 0 is stored as 0.95.

    Raises:
        ValidationError: naming the missing fields, or the first non-numeric
            or non-finite one
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if payload.get(name) is None]
    if missing:
        logger.warning(f"Validator: Rejected payload, missing {', '.join(missing)}")
        raise ValidationError(
            f"All primary sensor data fields are required (missing: {', '.join(missing)})",
            missing=missing,
        )

    pf = payload.get("pf") or DEFAULT_PF
    frequency = payload.get("frequency") or DEFAULT_FREQUENCY

    return Reading(
        voltage=_to_float("voltage", payload["voltage"]),
        current=_to_float("current", payload["current"]),
        power=_to_float("power", payload["power"]),
        energy_kwh=_to_float("energy_kWh", payload["energy_kWh"]),
        cost_rs=_to_float("cost_rs", payload["cost_rs"]),
        pf=_to_float("pf", pf),
        frequency=_to_float("frequency", frequency),
    )
