from typing import Dict

import streamlit as st

from reactorx.analytics import conversion_curves, heat_removed_kcal, stage_table
from reactorx.models import DEFAULT_INPUTS, ReactionParameters, parse_parameters
from reactorx.solver import run_multistage_calculation

try:
    st.set_page_config(page_title="ReactorX - Calculator", page_icon="🧪", layout="wide")
except Exception:
    pass

st.title("First Order Reversible Reaction (Exothermic)")
st.caption("A ⇌ B in a train of adiabatic reactors with intercooling to a fixed temperature.")

inputs: Dict[str, float] = dict(st.session_state.get("calc_inputs", DEFAULT_INPUTS))

left, right = st.columns(2)
with left:
    st.subheader("Thermodynamic parameters")
    Ha = st.number_input("H°A (cal/mol)", value=float(inputs["Ha"]), step=1.0)
    Hb = st.number_input("H°B (cal/mol)", value=float(inputs["Hb"]), step=1.0)
    Ca = st.number_input("Cp,A (cal/mol·K)", value=float(inputs["Ca"]), step=1.0)
    Cb = st.number_input("Cp,B (cal/mol·K)", value=float(inputs["Cb"]), step=1.0)
    Fa0 = st.number_input("Fa0 (mol/s)", value=float(inputs["Fa0"]), step=1.0)
    Ke = st.number_input("Ke at 298 K", value=float(inputs["Ke"]), step=1.0)
with right:
    st.subheader("Process parameters")
    temperature = st.number_input("Operating temperature T (K)", value=float(inputs["temperature"]), step=1.0)
    T0 = st.number_input("Initial temperature T0 (K)", value=float(inputs["T0"]), step=1.0)
    cooling_temp = st.number_input("Cooling temperature (K)", value=float(inputs["cooling_temp"]), step=1.0)
    target_conversion = st.number_input(
        "Target conversion (0-1)",
        value=float(inputs["target_conversion"]),
        min_value=0.0,
        max_value=1.0,
        step=0.01,
    )

inputs = {
    "Ha": Ha,
    "Hb": Hb,
    "Ca": Ca,
    "Cb": Cb,
    "Fa0": Fa0,
    "Ke": Ke,
    "temperature": temperature,
    "T0": T0,
    "cooling_temp": cooling_temp,
    "target_conversion": target_conversion,
}
st.session_state["calc_inputs"] = inputs

params: ReactionParameters | None = None
try:
    params = parse_parameters(inputs)
except ValueError as e:
    st.error(f"Error: {e}")

run = st.button("Calculate Multi-Stage Equilibrium", use_container_width=True, disabled=params is None)

if run and params is not None:
    st.session_state["calc_result"] = run_multistage_calculation(params)
    st.session_state["calc_params"] = params

result = st.session_state.get("calc_result")
result_params = st.session_state.get("calc_params")

if result is not None and result_params is not None:
    st.divider()
    st.subheader("Reactor configuration")
    st.metric("Number of reactors required", result.n_reactors)

    st.subheader("Results")
    single = st.columns(4)
    single[0].metric("Xe at T", f"{result.thermodynamic_conversion:.4f}")
    single[1].metric("Xeb at T", f"{result.energy_balance_conversion:.4f}")
    single[2].metric("Ke at T", f"{result.equilibrium_constant:.4g}")
    single[3].metric("Intersection", "Yes (within 1%)" if result.intersection else "No")

    first_col, stages_col = st.columns(2)
    with first_col:
        st.markdown("#### First reactor")
        st.write(f"**Adiabatic equilibrium temperature:** {result.adiabatic_eq_temp:.2f} K")
        st.write(f"**Equilibrium conversion:** {result.eq_conversion:.4f}")
        st.write(f"**Newton iterations:** {result.iterations}")
        st.write(f"**Heat removed (kcal):** {heat_removed_kcal(result.adiabatic_eq_temp, result_params):.2f}")

    with stages_col:
        if result.n_reactors > 1:
            st.markdown("#### Additional reactor stages")
            for i, stage in enumerate(result.stages[1:], start=2):
                with st.container(border=True):
                    st.markdown(f"**Stage {i}**")
                    st.write(f"Equilibrium temperature: {stage.temperature:.2f} K")
                    st.write(f"Additional conversion: {stage.added_conversion:.4f}")
                    st.write(f"Cumulative conversion: {stage.conversion:.4f}")
                    st.write(f"Heat removed (kcal): {heat_removed_kcal(stage.temperature, result_params):.2f}")

        st.markdown("#### Final results")
        st.write(f"**Overall conversion after {result.n_reactors} stages:** {result.final_conversion:.4f}")
        if result.target_reached:
            st.success(f"Target conversion ({result_params.target_conversion:.2f}): ✓ Achieved")
        else:
            st.error(f"Target conversion ({result_params.target_conversion:.2f}): ✗ Not Reached")

    table = stage_table(result, result_params)
    st.dataframe(table, use_container_width=True)
    csv_bytes = table.to_csv(index=False).encode("utf-8")
    st.download_button("Download stage table (CSV)", data=csv_bytes, file_name="stages.csv", mime="text/csv")

st.divider()

st.subheader("Equilibrium conversion vs temperature")
chart_params = params or result_params
if chart_params is not None:
    stages = result.stages if result is not None and chart_params == result_params else ()
    st.line_chart(conversion_curves(chart_params, stages))
    st.caption(
        "The chart shows the thermodynamic equilibrium curve and the energy balance lines "
        "for each reactor stage."
    )
else:
    st.info("Fix the input errors above to draw the curves.")
