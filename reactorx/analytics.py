from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .models import ReactionParameters, derive_coefficients
from .settings import SolverSettings, settings as default_settings
from .solver import CalculationResult, StageResult
from .thermo import energy_balance_conversion, thermodynamic_conversion

XE_LABEL = "Xe (Thermodynamic)"
XEB_LABEL = "Xeb (Energy Balance)"


def stage_line_label(stage_number: int) -> str:
    return f"Stage {stage_number} Energy Balance"


def temperature_grid(T0: float, settings: Optional[SolverSettings] = None) -> np.ndarray:
    """Chart abscissa: T0 to T0 + curve_span_K (inclusive) every curve_step_K."""
    cfg = settings or default_settings
    return np.arange(T0, T0 + cfg.curve_span_K + 1e-9, cfg.curve_step_K)


def conversion_curves(
    params: ReactionParameters,
    stages: Sequence[StageResult] = (),
    settings: Optional[SolverSettings] = None,
) -> pd.DataFrame:
    """Conversion vs temperature for the equilibrium curve and energy-balance lines.

    Columns: Xe over the grid, the first reactor's Xeb line from T0, and for
    each later stage n a line starting at the previous cumulative conversion
    from the cooling temperature (NaN below the cooling temperature).
    """
    coeffs = derive_coefficients(params)
    T = temperature_grid(params.T0, settings)
    df = pd.DataFrame({"T": T})
    df[XE_LABEL] = thermodynamic_conversion(T, coeffs.base_k, coeffs.delta_h)
    df[XEB_LABEL] = energy_balance_conversion(T, params.T0, coeffs.heat_capacity, coeffs.delta_h)

    for idx, stage in enumerate(stages):
        if idx == 0:
            continue
        prev_x = stages[idx - 1].conversion
        line = prev_x + energy_balance_conversion(T, params.cooling_temp, coeffs.heat_capacity, coeffs.delta_h)
        df[stage_line_label(idx + 1)] = np.where(T >= params.cooling_temp, line, np.nan)
    return df.set_index("T")


def heat_removed_kcal(stage_temperature: float, params: ReactionParameters) -> float:
    """Intercooler duty to bring a stage outlet back to the cooling temperature.

    Q = -Fa0 * Cp * (T_stage - T_cool) / 1000 (kcal); negative when heat is withdrawn.
    """
    return -params.Fa0 * params.Ca * (stage_temperature - params.cooling_temp) / 1000.0


def stage_table(result: CalculationResult, params: ReactionParameters) -> pd.DataFrame:
    rows = []
    for i, stage in enumerate(result.stages):
        rows.append({
            "stage": i + 1,
            "T_eq_K": stage.temperature,
            "added_conversion": stage.added_conversion,
            "cumulative_conversion": stage.conversion,
            "iterations": stage.iterations,
            "heat_removed_kcal": heat_removed_kcal(stage.temperature, params),
        })
    return pd.DataFrame(rows, columns=[
        "stage", "T_eq_K", "added_conversion", "cumulative_conversion", "iterations", "heat_removed_kcal",
    ])
