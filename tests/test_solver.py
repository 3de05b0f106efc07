import logging
import warnings

import pytest
from scipy.optimize import brentq

from reactorx.models import derive_coefficients, parse_parameters
from reactorx.settings import SolverSettings
from reactorx.solver import compute_stages, run_multistage_calculation, solve_stage
from reactorx.thermo import energy_balance_conversion, thermodynamic_conversion


def _gap(coeffs, x_in, T_ref):
    def f(t):
        xe = thermodynamic_conversion(t, coeffs.base_k, coeffs.delta_h)
        return xe - (x_in + energy_balance_conversion(t, T_ref, coeffs.heat_capacity, coeffs.delta_h))
    return f


def test_first_stage_matches_bracketed_root():
    coeffs = derive_coefficients(parse_parameters({}))
    stage = solve_stage(300.0, 0.0, 300.0, coeffs)
    root = brentq(_gap(coeffs, 0.0, 300.0), 301.0, 800.0)
    assert abs(stage.temperature - root) < 0.1
    assert stage.temperature > 300.0
    assert 0.0 < stage.conversion < 1.0
    assert 0 < stage.iterations < 50


def test_later_stage_carries_inlet_conversion():
    coeffs = derive_coefficients(parse_parameters({}))
    stage = solve_stage(350.0, 0.4, 350.0, coeffs)
    root = brentq(_gap(coeffs, 0.4, 350.0), 351.0, 850.0)
    assert abs(stage.temperature - root) < 0.1
    assert stage.conversion > 0.4
    assert stage.inlet_conversion == 0.4
    assert stage.reference_temperature == 350.0
    assert stage.added_conversion == pytest.approx(stage.conversion - 0.4)


def test_solution_never_below_reference_plus_one(caplog):
    coeffs = derive_coefficients(parse_parameters({}))
    # Equilibrium just above 350 K is below 0.999, so the gap is negative everywhere
    with caplog.at_level(logging.WARNING, logger="reactorx.solver"):
        stage = solve_stage(350.0, 0.999, 350.0, coeffs)
    assert stage.temperature >= 351.0
    assert stage.iterations == 50
    assert "not converged" in caplog.text


def test_flat_slope_nudges_towards_root():
    coeffs = derive_coefficients(parse_parameters({}))
    # Every slope counts as flat, so the iterate walks in fixed 10 K steps
    cfg = SolverSettings(flat_derivative=1.0)
    stage = solve_stage(300.0, 0.0, 300.0, coeffs, cfg)
    root = brentq(_gap(coeffs, 0.0, 300.0), 301.0, 800.0)
    assert abs(stage.temperature - root) <= 10.0
    steps = (stage.temperature - 400.0) / 10.0
    assert steps == pytest.approx(round(steps))


def test_damped_steps_still_converge():
    coeffs = derive_coefficients(parse_parameters({}))
    plain = solve_stage(300.0, 0.0, 300.0, coeffs)
    # Every Newton step is halved
    damped = solve_stage(300.0, 0.0, 300.0, coeffs, SolverSettings(max_step_K=1e-6))
    assert abs(damped.temperature - plain.temperature) < 0.1
    assert damped.iterations > plain.iterations
    assert damped.iterations < 50


def test_default_scenario_reaches_target():
    params = parse_parameters({})
    res = run_multistage_calculation(params)
    assert res.adiabatic_eq_temp > 300.0
    assert 0.0 < res.eq_conversion < 1.0
    assert 2 <= res.n_reactors <= 5
    assert res.target_reached
    assert res.final_conversion >= 0.8
    assert res.final_conversion == res.stages[-1].conversion
    convs = [s.conversion for s in res.stages]
    assert convs == sorted(convs)
    for s in res.stages[1:]:
        assert s.reference_temperature == 350.0
        assert s.temperature >= 351.0


def test_single_point_evaluation_at_operating_temperature():
    res = run_multistage_calculation(parse_parameters({}))
    # At T = T0 the energy-balance conversion is zero while Xe is close to one
    assert res.energy_balance_conversion == 0.0
    assert res.thermodynamic_conversion > 0.99
    assert res.equilibrium_constant > 1.0
    assert res.intersection is False


def test_intersection_flag_near_first_stage_temperature():
    first = run_multistage_calculation(parse_parameters({}))
    res = run_multistage_calculation(parse_parameters({"temperature": first.adiabatic_eq_temp}))
    assert res.intersection is True


def test_low_target_needs_one_stage():
    res = run_multistage_calculation(parse_parameters({"target_conversion": 0.01}))
    assert res.n_reactors == 1
    assert res.target_reached


def test_unreachable_target_exhausts_stage_limit():
    res = run_multistage_calculation(parse_parameters({"target_conversion": 0.999}))
    assert res.n_reactors == 5
    assert not res.target_reached
    assert res.final_conversion < 0.999


def test_stage_limit_from_settings():
    res = run_multistage_calculation(parse_parameters({"target_conversion": 0.999}), SolverSettings(stage_limit=2))
    assert res.n_reactors == 2
    assert not res.target_reached


def test_completion_cutoff_stops_chain():
    params = parse_parameters({"target_conversion": 0.999})
    coeffs = derive_coefficients(params)
    stages, reached = compute_stages(params, coeffs, 0.999, stage_limit=10, settings=SolverSettings(completion_cutoff=0.6))
    assert not reached
    assert stages[-1].conversion > 0.6
    assert all(s.conversion <= 0.6 for s in stages[:-1])


def test_hot_intercooling_adds_no_stage(caplog):
    # Equilibrium at 500 K is below what the first reactor already reached
    params = parse_parameters({"cooling_temp": 500.0})
    coeffs = derive_coefficients(params)
    with caplog.at_level(logging.WARNING, logger="reactorx.solver"):
        stages, reached = compute_stages(params, coeffs, params.target_conversion)
    assert len(stages) == 1
    assert not reached
    assert "adds no conversion" in caplog.text


def test_repeated_runs_are_identical():
    params = parse_parameters({})
    assert run_multistage_calculation(params) == run_multistage_calculation(params)


def test_very_cold_feed_solves_without_numpy_warnings():
    params = parse_parameters({"T0": 12.0, "cooling_temp": 12.0, "temperature": 12.0})
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        res = run_multistage_calculation(params)
    assert res.adiabatic_eq_temp >= 13.0
    assert all(0.0 <= s.conversion <= 1.0 for s in res.stages)
