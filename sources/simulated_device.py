"""Synthetic sensor node - generates plausible sequential readings without hardware"""
import random
from dataclasses import dataclass, replace

from sources.base import Reading

# Power factor assumed for the simulated load when deriving power
LOAD_POWER_FACTOR = 0.95
DEFAULT_COST_PER_KWH = 6.0

VOLTAGE_RANGE = (220.0, 240.0)
VOLTAGE_STEP = 5.0
CURRENT_RANGE = (0.5, 5.0)
CURRENT_STEP = 0.3
# Appliance switching on/off: current jumps to a fresh value in this range
SWITCH_PROBABILITY = 0.1
SWITCH_CURRENT_RANGE = (1.0, 5.0)

PF_RANGE = (0.90, 0.99)
FREQUENCY_RANGE = (49.8, 50.2)


@dataclass(frozen=True)
class SimulatorState:
    """
    Running state of the simulated device.

    Attributes:
        voltage, current, power, energy_kwh, cost_rs: Last emitted values
            (unrounded).
        last_update: Epoch seconds of the previous tick.
    """
    voltage: float
    current: float
    power: float
    energy_kwh: float
    cost_rs: float
    last_update: float


def initial_state(now: float) -> SimulatorState:
    return SimulatorState(
        voltage=230.0,
        current=2.5,
        power=575.0,
        energy_kwh=0.5,
        cost_rs=3.0,
        last_update=now,
    )


def fluctuate(value: float, low: float, high: float, span: float, rng: random.Random) -> float:
    """Random walk step of at most span/2 either way, clamped to [low, high]."""
    change = (rng.random() - 0.5) * span
    return max(low, min(high, value + change))


def tick(
    state: SimulatorState,
    now: float,
    rng: random.Random,
    cost_per_kwh: float = DEFAULT_COST_PER_KWH
) -> tuple[SimulatorState, Reading]:
    """
    Advance the simulated device to `now`.

    Energy accumulates with the power held since the previous tick
    (left Riemann sum), so a constant P watts over one hour adds exactly
    P/1000 kWh. pf and frequency are reported only; they do not feed into
    power, energy or cost.

    Returns:
        (new state, reading to emit)
    """
    elapsed_hours = max(0.0, now - state.last_update) / 3600
    energy_kwh = state.energy_kwh + (state.power / 1000) * elapsed_hours

    voltage = fluctuate(state.voltage, *VOLTAGE_RANGE, VOLTAGE_STEP, rng)
    if rng.random() < SWITCH_PROBABILITY:
        current = rng.uniform(*SWITCH_CURRENT_RANGE)
    else:
        current = fluctuate(state.current, *CURRENT_RANGE, CURRENT_STEP, rng)

    power = voltage * current * LOAD_POWER_FACTOR
    cost_rs = energy_kwh * cost_per_kwh

    pf = rng.uniform(*PF_RANGE)
    frequency = rng.uniform(*FREQUENCY_RANGE)

    new_state = replace(
        state,
        voltage=voltage,
        current=current,
        power=power,
        energy_kwh=energy_kwh,
        cost_rs=cost_rs,
        last_update=now,
    )

    reading = Reading(
        voltage=round(voltage, 2),
        current=round(current, 3),
        power=round(power, 1),
        energy_kwh=round(energy_kwh, 4),
        cost_rs=round(cost_rs, 2),
        pf=round(pf, 2),
        frequency=round(frequency, 2),
    )
    return new_state, reading
