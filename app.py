"""RC Column P-M Interaction Application

Interactive tool for the nominal axial force - bending moment interaction
diagram of a rectangular reinforced concrete column.  The diagram is
recomputed from scratch whenever an input changes.
"""

import matplotlib.pyplot as plt
import streamlit as st

from pmdiagram.diagrams import draw_pm_diagram, draw_section
from pmdiagram.input_parser import LoadCase
from pmdiagram.interaction import check_utilisation, compute_diagram, find_peak_moment, point_labels
from pmdiagram.models import InputError, SectionInputs
from pmdiagram.section import build_section
from pmdiagram.utils import load_material_tables, reinforcement_ratio

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="RC Column P-M Interaction",
    layout="wide",
    initial_sidebar_state="expanded",
)

_BAR_AREAS: dict = load_material_tables()["bar_areas"]


# ── Sidebar inputs ───────────────────────────────────────────────────────────

with st.sidebar:
    st.markdown("### Materials")
    fc = st.number_input("fc (kgf/cm²)", min_value=0.0, value=280.0, step=10.0)
    fy = st.number_input("fy (kgf/cm²)", min_value=0.0, value=4200.0, step=100.0)

    st.markdown("### Section")
    b = st.number_input("Width b (cm)", min_value=0.0, value=30.0, step=5.0)
    h = st.number_input("Depth h (cm)", min_value=0.0, value=50.0, step=5.0)
    cover = st.number_input("Cover to bar centre (cm)", min_value=0.0, value=4.0, step=0.5)

    st.markdown("### Reinforcement")
    bar_size = st.selectbox("Bar size", list(_BAR_AREAS.keys()), index=3)
    nx = st.number_input("Bars per face nx", min_value=1, value=3, step=1)
    ny = st.number_input("Bar rows ny", min_value=2, value=3, step=1)

    st.markdown("### Demand (optional)")
    use_demand = st.checkbox("Check a factored load")
    Pu = st.number_input("Pu (tonf)", value=100.0, step=10.0, disabled=not use_demand)
    Mu = st.number_input("Mu (tonf-m)", value=10.0, step=1.0, disabled=not use_demand)

    st.markdown(
        "<small>Nominal strength, no strength-reduction factors.<br>"
        "Units: kgf, cm, tonf, tonf-m</small>",
        unsafe_allow_html=True,
    )


# ── Main content ─────────────────────────────────────────────────────────────

def main():
    st.markdown("## RC Column P-M Interaction Diagram")

    try:
        inputs = SectionInputs.from_mapping({
            "fc": fc, "fy": fy, "b": b, "h": h, "cover": cover,
            "bar_area": float(_BAR_AREAS[bar_size]), "nx": int(nx), "ny": int(ny),
        })
        section = build_section(inputs)
        diagram = compute_diagram(inputs)
    except InputError as exc:
        st.error(str(exc))
        return

    _, peak = find_peak_moment(inputs)
    demands = [LoadCase("Demand", Pu, Mu)] if use_demand else []

    col1, col2, col3 = st.columns(3)
    col1.metric("Po", f"{diagram.Po:.1f} tonf")
    col2.metric("Mo (approx.)", f"{diagram.Mo_approx:.1f} tonf-m")
    col3.metric("Ast / Ag", f"{reinforcement_ratio(section.Ast, section.Ag):.2%}")

    if use_demand:
        util = check_utilisation(diagram, Pu, Mu)
        if util <= 1.0:
            st.success(f"Demand inside envelope: utilisation {util:.2f}")
        else:
            st.error(f"Demand outside envelope: utilisation {util:.2f}")

    left, right = st.columns([2, 1])
    with left:
        pm_fig = draw_pm_diagram(diagram, demands, peak)
        st.pyplot(pm_fig)
        plt.close(pm_fig)
    with right:
        section_fig = draw_section(inputs, section)
        st.pyplot(section_fig)
        plt.close(section_fig)

    with st.expander("Diagram points"):
        st.table([
            {"Point": label, "Mn (tonf-m)": round(pt.M, 2), "Pn (tonf)": round(pt.P, 2)}
            for label, pt in zip(point_labels(), diagram.points)
        ])


main()
