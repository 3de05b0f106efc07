from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import DerivedCoefficients, ReactionParameters, derive_coefficients
from .settings import SolverSettings, settings as default_settings
from .thermo import energy_balance_conversion, equilibrium_constant, thermodynamic_conversion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageResult:
    temperature: float  # adiabatic equilibrium temperature (K)
    conversion: float  # cumulative conversion leaving the stage
    iterations: int
    inlet_conversion: float = 0.0
    reference_temperature: float = 0.0  # inlet temperature of the stage (K)

    @property
    def added_conversion(self) -> float:
        return self.conversion - self.inlet_conversion


@dataclass(frozen=True)
class CalculationResult:
    thermodynamic_conversion: float
    energy_balance_conversion: float
    equilibrium_constant: float
    intersection: bool
    stages: Tuple[StageResult, ...]
    final_conversion: float
    target_reached: bool

    @property
    def n_reactors(self) -> int:
        return len(self.stages)

    @property
    def adiabatic_eq_temp(self) -> float:
        return self.stages[0].temperature

    @property
    def eq_conversion(self) -> float:
        return self.stages[0].conversion

    @property
    def iterations(self) -> int:
        return self.stages[0].iterations


def solve_stage(
    initial_temp_guess: float,
    cumulative_conversion: float,
    reference_temp: float,
    coefficients: DerivedCoefficients,
    settings: Optional[SolverSettings] = None,
) -> StageResult:
    """Find where the equilibrium curve meets a stage's energy-balance line.

    Solves f(T) = Xe(T) - (X_in + Xeb(T, T_ref)) = 0 with a damped Newton
    iteration on a forward-difference slope:

    - start at initial_temp_guess + initial_offset_K
    - near-flat slope: nudge T by nudge_step_K to whichever side has smaller |f|
    - steps larger than max_step_K are halved
    - T is clamped to at least T_ref + min_offset_K

    Hitting max_iterations is not an error; the last iterate is returned.
    """
    cfg = settings or default_settings
    base_k = coefficients.base_k
    delta_h = coefficients.delta_h
    cp = coefficients.heat_capacity

    def objective(t: float) -> float:
        xe = thermodynamic_conversion(t, base_k, delta_h)
        xeb = energy_balance_conversion(t, reference_temp, cp, delta_h)
        return float(xe - (cumulative_conversion + xeb))

    def slope(t: float) -> float:
        h = cfg.derivative_step_K
        return (objective(t + h) - objective(t)) / h

    t_floor = reference_temp + cfg.min_offset_K
    t = max(initial_temp_guess + cfg.initial_offset_K, t_floor)
    count = 0
    while count < cfg.max_iterations:
        f_val = objective(t)
        if abs(f_val) < cfg.tolerance:
            break
        d = slope(t)
        if abs(d) < cfg.flat_derivative:
            down, up = max(t - cfg.nudge_step_K, t_floor), t + cfg.nudge_step_K
            t = down if abs(objective(down)) <= abs(objective(up)) else up
        else:
            step = f_val / d
            if abs(step) > cfg.max_step_K:
                step *= 0.5
            t -= step
        if t < t_floor:
            t = t_floor
        count += 1
    else:
        logger.warning(
            "Stage intersection not converged after %d iterations (T=%.2f K, |f|=%.2e)",
            count, t, abs(objective(t)),
        )

    conversion = float(thermodynamic_conversion(t, base_k, delta_h))
    logger.debug("Stage from %.2f K at X_in=%.4f: T_eq=%.2f K, X=%.4f, %d iterations",
                 reference_temp, cumulative_conversion, t, conversion, count)
    return StageResult(
        temperature=float(t),
        conversion=conversion,
        iterations=count,
        inlet_conversion=float(cumulative_conversion),
        reference_temperature=float(reference_temp),
    )


def compute_stages(
    params: ReactionParameters,
    coefficients: DerivedCoefficients,
    target_conversion: float,
    stage_limit: int = 5,
    settings: Optional[SolverSettings] = None,
) -> Tuple[Tuple[StageResult, ...], bool]:
    """Chain intercooled adiabatic stages until the target or stage_limit is reached.

    The first stage starts from the feed temperature with no conversion; each
    further stage is cooled back to params.cooling_temp and carries the
    cumulative conversion forward. Stops early once the cumulative conversion
    exceeds completion_cutoff, or when cooling cannot shift the equilibrium
    enough for another stage to add conversion.
    """
    cfg = settings or default_settings
    first = solve_stage(params.T0, 0.0, params.T0, coefficients, cfg)
    stages = [first]
    total = first.conversion

    while total < target_conversion and len(stages) < stage_limit:
        if total > cfg.completion_cutoff:
            break
        nxt = solve_stage(params.cooling_temp, total, params.cooling_temp, coefficients, cfg)
        if nxt.conversion <= total:
            logger.warning(
                "Stage %d adds no conversion at cooling temperature %.2f K (X=%.4f); stopping",
                len(stages) + 1, params.cooling_temp, total,
            )
            break
        stages.append(nxt)
        total = nxt.conversion

    reached = total >= target_conversion
    logger.info("%d stage(s), final conversion %.4f, target %.4f %s",
                len(stages), total, target_conversion, "reached" if reached else "not reached")
    return tuple(stages), reached


def run_multistage_calculation(
    params: ReactionParameters,
    settings: Optional[SolverSettings] = None,
) -> CalculationResult:
    cfg = settings or default_settings
    coeffs = derive_coefficients(params)

    T = params.temperature
    k = float(equilibrium_constant(T, coeffs.base_k, coeffs.delta_h))
    xe = float(thermodynamic_conversion(T, coeffs.base_k, coeffs.delta_h))
    xeb = float(energy_balance_conversion(T, params.T0, coeffs.heat_capacity, coeffs.delta_h))

    stages, reached = compute_stages(params, coeffs, params.target_conversion, cfg.stage_limit, cfg)
    return CalculationResult(
        thermodynamic_conversion=xe,
        energy_balance_conversion=xeb,
        equilibrium_constant=k,
        intersection=abs(xe - xeb) < cfg.intersection_tolerance,
        stages=stages,
        final_conversion=stages[-1].conversion,
        target_reached=reached,
    )
