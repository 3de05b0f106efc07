"""Equilibrium model for a first-order reversible reaction A <-> B.

All functions accept floats or numpy arrays of temperatures (K).
"""

import numpy as np

R_CAL_PER_MOLK: float = 1.987  # gas constant (cal/mol-K)
T_REF_K: float = 298.0  # reference temperature of the equilibrium constant


def _log_k(T, base_k: float, delta_h: float):
    return np.log(base_k) + (delta_h / R_CAL_PER_MOLK) * (1.0 / T_REF_K - 1.0 / T)


def equilibrium_constant(T, base_k: float, delta_h: float):
    """Van 't Hoff equilibrium constant at T, anchored at K(298 K) = base_k.

    Overflows to inf far below the reference temperature.
    """
    exp_term = (delta_h / R_CAL_PER_MOLK) * (1.0 / T_REF_K - 1.0 / T)
    with np.errstate(over="ignore"):
        return base_k * np.exp(exp_term)


def thermodynamic_conversion(T, base_k: float, delta_h: float):
    """Equilibrium conversion Xe = K / (1 + K), evaluated as 1 / (1 + exp(-ln K))."""
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-_log_k(T, base_k, delta_h)))


def energy_balance_conversion(T, reference_T, heat_capacity: float, delta_h: float):
    """Adiabatic energy-balance conversion Xeb for a stage entering at reference_T.

    Xeb = Cp * (T - T_ref) / |dH_rxn|
    """
    return heat_capacity * (T - reference_T) / abs(delta_h)
