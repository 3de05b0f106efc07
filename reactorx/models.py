from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_INPUTS: Dict[str, float] = {
    "Ha": -40000.0,
    "Hb": -60000.0,
    "Ca": 50.0,
    "Cb": 50.0,
    "Fa0": 40.0,
    "Ke": 100000.0,
    "temperature": 300.0,
    "T0": 300.0,
    "cooling_temp": 350.0,
    "target_conversion": 0.8,
}


class UnequalHeatCapacityError(ValueError):
    """Raised when Cp,A and Cp,B differ; the energy balance uses a single Cp."""

    def __init__(self, Ca: float, Cb: float):
        self.Ca = Ca
        self.Cb = Cb
        super().__init__("Cpa and Cpb must be equal for this calculation model.")


@dataclass(frozen=True)
class ReactionParameters:
    """Inputs for the staged adiabatic calculation of A <-> B.

    Attributes
    ----------
    Ha, Hb: float
        Standard enthalpies of A and B (cal/mol)
    Ca, Cb: float
        Heat capacities of A and B (cal/mol-K); must be equal
    Fa0: float
        Feed molar flow of A (mol/s)
    Ke: float
        Equilibrium constant at 298 K
    temperature: float
        Operating temperature for the single-point evaluation (K)
    T0: float
        Feed temperature entering the first reactor (K)
    cooling_temp: float
        Temperature the stream is cooled back to between reactors (K)
    target_conversion: float
        Desired overall conversion of A, in [0, 1]
    """

    Ha: float
    Hb: float
    Ca: float
    Cb: float
    Fa0: float
    Ke: float
    temperature: float
    T0: float
    cooling_temp: float
    target_conversion: float

    def __post_init__(self) -> None:
        if self.Ca != self.Cb:
            raise UnequalHeatCapacityError(self.Ca, self.Cb)
        if not (0.0 <= self.target_conversion <= 1.0):
            raise ValueError(f"target_conversion must be in [0, 1], got {self.target_conversion}")
        for name in ("temperature", "T0", "cooling_temp"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be a positive absolute temperature (K)")
        if self.Ke <= 0.0:
            raise ValueError("Ke must be positive")
        if self.Fa0 <= 0.0:
            raise ValueError("Fa0 must be a positive feed flow (mol/s)")
        if self.Ha == self.Hb:
            raise ValueError("Ha and Hb must differ; the reaction enthalpy change is zero")
        if self.Hb > self.Ha:
            logger.warning("Hb > Ha: reaction is endothermic, the staged model assumes an exothermic reaction")


@dataclass(frozen=True)
class DerivedCoefficients:
    delta_h: float  # Hb - Ha (cal/mol)
    heat_capacity: float  # shared Cp (cal/mol-K)
    base_k: float  # K at 298 K


def derive_coefficients(params: ReactionParameters) -> DerivedCoefficients:
    return DerivedCoefficients(
        delta_h=params.Hb - params.Ha,
        heat_capacity=params.Ca,
        base_k=params.Ke,
    )


def parse_parameters(inputs: Dict) -> ReactionParameters:
    """Parse a session inputs dict into ReactionParameters.

    Missing keys fall back to DEFAULT_INPUTS; unknown keys are ignored.
    Raises UnequalHeatCapacityError or ValueError on invalid input.
    """
    values = dict(DEFAULT_INPUTS)
    if inputs:
        values.update({k: v for k, v in inputs.items() if k in DEFAULT_INPUTS})
    names = [f.name for f in fields(ReactionParameters)]
    return ReactionParameters(**{name: float(values[name]) for name in names})
