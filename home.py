import platform
import importlib
import importlib.util
from pathlib import Path
from datetime import datetime
import streamlit as st

try:
    st.set_page_config(
        page_title="ReactorX",
        page_icon="🧪",
        layout="wide",
        initial_sidebar_state="expanded",
    )
except Exception:
    # set_page_config may have been called already if rendering in-place
    pass

# --- Sidebar navigation (manual fallback) ---
st.sidebar.header("Navigate")
_pages = {
    "Home": None,
    "Calculator": "pages/1_Calculator.py",
}


def _render_fallback(page_name: str) -> None:
    target = _pages.get(page_name)
    if not target:
        return
    base_dir = Path(__file__).parent
    abspath = (base_dir / target).resolve()
    try:
        spec = importlib.util.spec_from_file_location("_embedded_page", str(abspath))
        if spec and spec.loader:
            mod = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(mod)  # page will render at import time
        else:
            st.error(f"Cannot load page module for {page_name}")
    except Exception as e:
        st.error(f"Failed to render {page_name}: {e}")


_choice = st.sidebar.radio("Go to", list(_pages.keys()), index=0)
if _choice != "Home":
    try:
        st.switch_page(_pages[_choice])
        st.stop()
    except Exception:
        st.sidebar.info("Navigation fallback active. Rendering page here.")
        _render_fallback(_choice)
        st.stop()

st.title("🧪 ReactorX")
st.caption("Optimize your reactor design with confidence.")

st.markdown(
    "Welcome to ReactorX. This chemical reaction engineering calculator determines the "
    "number of adiabatic reactors, with intercooling between them, needed to reach a desired "
    "equilibrium conversion for a reversible exothermic reaction A ⇌ B. Whether you are a plant "
    "designer or a student working through a reactor design problem, it handles the "
    "equilibrium and energy-balance bookkeeping for you."
)
st.markdown(
    "Simply input your feed conditions, reaction parameters and target conversion, "
    "and let the calculator handle the rest."
)

if st.button("Launch Calculator", use_container_width=True):
    try:
        st.switch_page(_pages["Calculator"])
        st.stop()
    except Exception:
        st.info("Navigation fallback active. Rendering page here.")
        _render_fallback("Calculator")
        st.stop()

st.divider()

# --- Last run ---
st.markdown("### Session status")
left, right = st.columns(2)
with left:
    res = st.session_state.get("calc_result")
    st.metric("Reactors required", res.n_reactors if res is not None else "Not calculated")
with right:
    st.metric(
        "Final conversion",
        f"{res.final_conversion:.4f}" if res is not None else "Not calculated",
    )

with st.expander("Command-line examples (optional)"):
    st.code(
        "python -m reactorx.cli stages --Ha -40000 --Hb -60000 --Ca 50 --Cb 50 --Ke 100000 --T0 300 --Tcool 350 --target 0.8 --csv stages.csv\n"
        "python -m reactorx.cli curves --T0 300 --Tcool 350 --csv curves.csv",
        language="bash",
    )

st.divider()

# --- Environment / About ---
st.markdown("### Environment")
pyver = platform.python_version()
try:
    rx = importlib.import_module("reactorx")
    rx_ver = getattr(rx, "__version__", "unknown")
except Exception:
    rx_ver = "unknown"
env_cols = st.columns(3)
with env_cols[0]:
    st.write(f"Python: {pyver}")
with env_cols[1]:
    st.write(f"ReactorX: {rx_ver}")
with env_cols[2]:
    st.write(f"Launched: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
