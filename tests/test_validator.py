import pytest

from api.errors import ValidationError
from api.validator import REQUIRED_FIELDS, validate_reading
from sources.base import Reading


VALID_PAYLOAD = {
    "voltage": 230,
    "current": 2.5,
    "power": 575,
    "energy_kWh": 0.5,
    "cost_rs": 3.0,
}


def test_validate_applies_defaults_for_missing_optional_fields():
    """pf and frequency fall back to 0.95 and 50.0 when absent"""
    reading = validate_reading(VALID_PAYLOAD)

    assert reading == Reading(
        voltage=230.0,
        current=2.5,
        power=575.0,
        energy_kwh=0.5,
        cost_rs=3.0,
        pf=0.95,
        frequency=50.0,
    )


def test_validate_keeps_reported_optional_fields():
    reading = validate_reading({**VALID_PAYLOAD, "pf": 0.91, "frequency": 49.9})

    assert reading.pf == 0.91
    assert reading.frequency == 49.9


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_validate_rejects_payload_missing_any_required_field(field):
    payload = {k: v for k, v in VALID_PAYLOAD.items() if k != field}

    with pytest.raises(ValidationError) as exc_info:
        validate_reading(payload)

    assert exc_info.value.status_code == 400
    assert exc_info.value.missing == [field]
    assert field in exc_info.value.message


def test_validate_names_every_missing_field():
    with pytest.raises(ValidationError) as exc_info:
        validate_reading({"voltage": 230, "power": 575})

    assert exc_info.value.missing == ["current", "energy_kWh", "cost_rs"]


def test_validate_accepts_zero_values():
    """Zero is a reading, not a missing value"""
    payload = {"voltage": 0, "current": 0, "power": 0, "energy_kWh": 0, "cost_rs": 0}

    reading = validate_reading(payload)

    assert reading.power == 0.0
    assert reading.energy_kwh == 0.0


def test_validate_treats_null_as_missing():
    with pytest.raises(ValidationError) as exc_info:
        validate_reading({**VALID_PAYLOAD, "cost_rs": None})

    assert exc_info.value.missing == ["cost_rs"]


def test_validate_defaults_falsy_power_factor():
    """A reported pf of 0 is replaced by the default"""
    reading = validate_reading({**VALID_PAYLOAD, "pf": 0, "frequency": 0})

    assert reading.pf == 0.95
    assert reading.frequency == 50.0


def test_validate_rejects_non_numeric_field():
    with pytest.raises(ValidationError) as exc_info:
        validate_reading({**VALID_PAYLOAD, "voltage": "230"})

    assert "voltage" in exc_info.value.message


def test_validate_rejects_boolean_field():
    with pytest.raises(ValidationError):
        validate_reading({**VALID_PAYLOAD, "power": True})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_validate_rejects_non_finite_field(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_reading({**VALID_PAYLOAD, "voltage": value})

    assert exc_info.value.message == "Field 'voltage' must be a finite number"


def test_validate_rejects_non_finite_optional_field():
    with pytest.raises(ValidationError):
        validate_reading({**VALID_PAYLOAD, "frequency": float("inf")})


def test_validate_rejects_non_object_body():
    with pytest.raises(ValidationError):
        validate_reading([VALID_PAYLOAD])
