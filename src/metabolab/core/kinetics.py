"""Rate-law helpers and physical constants shared by the engine."""

from __future__ import annotations

import math
from typing import Mapping

# Gas constant in kJ/(mol*K)
GAS_CONSTANT = 8.314e-3

# Floors keeping log/division terms finite
CONCENTRATION_FLOOR = 1e-6
KEQ_FLOOR = 0.01
PARAMETER_EPSILON = 1e-9

# Largest exponent passed to math.exp
MAX_EXPONENT = 700.0

# Unfavorable-direction cutoffs (kJ/mol)
FORWARD_CUTOFF = 10.0
EXTENDED_FORWARD_CUTOFF = 5.0
REVERSE_CUTOFF = 10.0

DEFAULT_TEMPERATURE = 310.0  # K


def rt(temperature: float) -> float:
    """Return R*T in kJ/mol."""
    return GAS_CONSTANT * max(temperature, PARAMETER_EPSILON)


def positive(value: float) -> float:
    """Substitute epsilon for zero/negative Km, Kd and half-life values."""
    return value if value > 0 else PARAMETER_EPSILON


def michaelis_menten(substrate: float, vmax: float, km: float) -> float:
    """Michaelis-Menten kinetics: v = Vmax * S / (Km + S)."""
    if substrate <= 0 or vmax <= 0:
        return 0.0
    return vmax * substrate / (positive(km) + substrate)


def saturation(concentration: float, km: float) -> float:
    """Fractional saturation S / (Km + S)."""
    return michaelis_menten(concentration, 1.0, km)


def occupancy(concentration: float, kd: float) -> float:
    """Single-site binding occupancy [R] / (Kd + [R])."""
    if concentration <= 0:
        return 0.0
    return concentration / (positive(kd) + concentration)


def hill(x: float, k: float, n: float = 2.0) -> float:
    """Hill function for cooperative binding: x^n / (K^n + x^n)."""
    if x <= 0:
        return 0.0
    xn = x ** n
    return xn / (positive(k) ** n + xn)


def equilibrium_constant(delta_g0: float, temperature: float) -> float:
    """Keq = exp(-dG0 / RT), with the exponent capped to stay finite."""
    return math.exp(min(-delta_g0 / rt(temperature), MAX_EXPONENT))


def inhibition_factor(concentrations: Mapping[str, float], constants: Mapping[str, float]) -> float:
    """Product of (1 + [I]/Ki) over every inhibitor present."""
    factor = 1.0
    for species, ki in constants.items():
        conc = concentrations.get(species, 0.0)
        if conc > 0:
            factor *= 1.0 + conc / positive(ki)
    return factor
