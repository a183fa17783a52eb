"""
Debt Simulator - Interactive Dashboard

Projects national debt, GDP, population and inflation over a chosen
horizon, with optional random economic events (wars, recessions, booms,
disasters, tech revolutions), and rates the resulting fiscal health.

Run with: streamlit run app.py
"""

import logging

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

from simulation.config import SCENARIO_PRESETS, SimulationConfig
from simulation.engine import EconomicSimulator

logging.basicConfig(level=logging.INFO)

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="Debt Simulator",
    layout="wide",
    initial_sidebar_state="expanded",
)

COLORS = px.colors.qualitative.Set2

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)

RATING_COLORS = {
    "Excellent": "green",
    "Good": "blue",
    "Fair": "orange",
    "Weak": "orange",
    "Concerning": "orange",
    "Critical": "red",
    "Poor": "red",
    "MUCH BETTER": "green",
    "BETTER": "blue",
    "STABLE": "orange",
    "WORSE": "red",
    "MUCH WORSE": "red",
}

HELP = {
    "debt": "Evaluates the sustainability of the national debt based on the "
            "debt-to-GDP ratio and its trend. Lower ratios and downward trends "
            "are more favorable.",
    "growth": "Average real GDP growth across the simulation. Strong, consistent "
              "growth helps manage the debt burden.",
    "stability": "Tracks recessions, depressions and booms. Stable economies "
                 "manage debt obligations more easily.",
    "interest": "Interest payments as a percentage of GDP. Lower means more "
                "fiscal flexibility.",
    "overall": "Combines debt, growth, stability and interest burden into a "
               "0-20 score.",
}


# ── Helper: build line chart ─────────────────────────────────────────
def multi_line(x, series_dict, title, yaxis, height=340, event_years=None):
    fig = go.Figure()
    for i, (name, vals) in enumerate(series_dict.items()):
        fig.add_trace(
            go.Scatter(
                x=x, y=vals, name=name, mode="lines",
                line=dict(color=COLORS[i % len(COLORS)], width=2.5),
            )
        )
    if event_years:
        # Hover-only markers on years where a new event began
        first = next(iter(series_dict.values()))
        ev_x, ev_y, ev_text = [], [], []
        for idx, label in event_years:
            ev_x.append(x[idx])
            ev_y.append(first[idx])
            ev_text.append(label)
        fig.add_trace(
            go.Scatter(
                x=ev_x, y=ev_y, mode="markers",
                marker=dict(size=9, color="red", symbol="diamond",
                            line=dict(width=1, color="#333")),
                text=ev_text,
                hovertemplate="%{text}<extra></extra>",
                showlegend=False,
            )
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=height,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.35, font=dict(size=10)),
    )
    return fig


def badge(rating):
    return f":{RATING_COLORS.get(rating, 'gray')}[**{rating}**]"


# ── Sidebar ──────────────────────────────────────────────────────────
st.sidebar.title("Simulation Controls")

preset_name = st.sidebar.selectbox(
    "Scenario Preset",
    ["Custom"] + list(SCENARIO_PRESETS.keys()),
    index=1,
)
preset = SCENARIO_PRESETS.get(preset_name, SimulationConfig())

with st.sidebar.form("parameters"):
    st.subheader("Debt")
    initial_debt = st.number_input(
        "Initial Debt ($T)", min_value=0.0, value=preset.initial_debt, step=0.1,
    )
    interest_pct = st.number_input(
        "Average Interest Rate (%)", 0.0, 20.0,
        preset.average_interest_rate * 100, step=0.1,
    )
    annual_deficit = st.number_input(
        "Annual Deficit ($T, negative = surplus)", -5.0, 10.0,
        preset.annual_deficits[0] if preset.annual_deficits else 0.8, step=0.1,
    )

    st.subheader("Economy")
    initial_gdp = st.number_input(
        "Initial GDP ($T)", min_value=1.0, value=preset.initial_gdp, step=0.1,
    )
    growth_pct = st.number_input(
        "GDP Growth Rate (%)", -10.0, 20.0,
        preset.base_gdp_growth_rate * 100, step=0.1,
    )
    inflation_pct = st.number_input(
        "Inflation Rate (%)", -5.0, 20.0, preset.inflation_rate * 100, step=0.1,
    )

    st.subheader("Population")
    initial_population = st.number_input(
        "Initial Population (millions)", min_value=1.0,
        value=preset.initial_population, step=1.0,
    )
    pop_growth_pct = st.number_input(
        "Population Growth Rate (%)", -5.0, 5.0,
        preset.base_population_growth_rate * 100, step=0.1,
    )

    st.subheader("Horizon & Events")
    years = st.slider("Simulation Length (years)", 1, 100, preset.simulation_years)
    events_enabled = st.checkbox(
        "Enable Random Economic Events", value=preset.random_events_enabled,
    )
    seed_text = st.text_input(
        "Random Seed (blank = random)",
        "" if preset.random_seed is None else str(preset.random_seed),
        help="The same seed always produces the same sequence of events",
    )

    submitted = st.form_submit_button("Run Simulation", type="primary")

try:
    seed = int(seed_text) if seed_text.strip() else None
except ValueError:
    st.sidebar.error("Seed must be a whole number; running without one.")
    seed = None

# Build config
config = SimulationConfig(
    initial_debt=initial_debt,
    simulation_years=years,
    average_interest_rate=interest_pct / 100,
    inflation_rate=inflation_pct / 100,
    annual_deficits=(annual_deficit,) * years,
    initial_gdp=initial_gdp,
    base_gdp_growth_rate=growth_pct / 100,
    random_events_enabled=events_enabled,
    random_seed=seed,
    initial_population=initial_population,
    base_population_growth_rate=pop_growth_pct / 100,
)

# ── Run simulation ───────────────────────────────────────────────────
# Unseeded runs re-roll on every submit; keep the last result otherwise
if submitted or "simulator" not in st.session_state:
    st.session_state["simulator"] = EconomicSimulator(config).simulate()

sim = st.session_state["simulator"]
results = sim.results
assessment = sim.assessment
df = pd.DataFrame(results.to_records())
labels = results.years

# ── Header ───────────────────────────────────────────────────────────
st.title("Debt Simulator")
st.markdown(
    "Simulating the growth of national debt over time, with interest, "
    "inflation, population change and random economic events."
)

m = assessment.metrics
c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Final Debt", f"${results.final.nominal_debt:,.2f}T",
          f"{m.real_debt_change_percent:+.1f}% real", delta_color="inverse")
c2.metric("Final GDP", f"${results.final.gdp:,.2f}T", f"{m.gdp_change_percent:+.1f}%")
c3.metric("Debt / GDP", f"{results.final.debt_to_gdp_ratio:.1f}%",
          f"{m.debt_ratio_change:+.1f}pp", delta_color="inverse")
c4.metric("Debt per Capita", f"${results.final.debt_per_capita:,.0f}")
c5.metric("Overall Score", f"{m.score}/20")

# ── Tabs ─────────────────────────────────────────────────────────────
tab_assess, tab_charts, tab_years, tab_method = st.tabs(
    ["Assessment", "Charts", "Year by Year", "Methodology"]
)

# ── TAB: Assessment ──────────────────────────────────────────────────
with tab_assess:
    rows = [
        ("Debt", assessment.debt.rating, assessment.debt.description,
         f"Debt ratio change: {assessment.debt.change:+.2f}pp", HELP["debt"]),
        ("Growth", assessment.growth.rating, assessment.growth.description,
         f"Average growth: {assessment.growth.avg_growth * 100:.2f}%", HELP["growth"]),
        ("Stability", assessment.stability.rating, assessment.stability.description,
         f"Recessions: {assessment.stability.recession_years} years | "
         f"Booms: {assessment.stability.boom_years} years | "
         f"Total: {assessment.stability.total_years} years", HELP["stability"]),
        ("Interest Burden", assessment.interest_burden.rating,
         assessment.interest_burden.description,
         f"{assessment.interest_burden.avg_interest_to_gdp:.2f}% of GDP on average",
         HELP["interest"]),
        ("Overall", assessment.overall.rating, assessment.overall.description,
         f"Score: {m.score}/20", HELP["overall"]),
    ]
    for category, rating, description, detail, help_text in rows:
        col_name, col_body = st.columns([1, 4])
        col_name.markdown(f"**{category}**", help=help_text)
        col_body.markdown(f"{badge(rating)} {description}  \n*{detail}*")

    with st.expander("Plain-text report", expanded=False):
        st.code(assessment.formatted_report(), language=None)

# ── TAB: Charts ──────────────────────────────────────────────────────
with tab_charts:
    event_starts = []
    seen = set()
    for s in results:
        for e in s.events:
            if (e.type, e.name) not in seen:
                seen.add((e.type, e.name))
                event_starts.append((s.year_index, e.name))

    st.plotly_chart(
        multi_line(
            labels,
            {"GDP": results.series("gdp"), "Debt": results.series("nominal_debt")},
            "GDP and Nominal Debt ($T)", "Trillions", event_years=event_starts,
        ),
        use_container_width=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            multi_line(
                labels, {"Debt / GDP": results.series("debt_to_gdp_ratio")},
                "Debt-to-GDP Ratio (%)", "%",
            ),
            use_container_width=True,
        )
        st.plotly_chart(
            multi_line(
                labels,
                {
                    "Nominal": results.series("nominal_debt"),
                    "Real (year-0 $)": results.series("real_debt"),
                },
                "Nominal vs Real Debt ($T)", "Trillions",
            ),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(
            multi_line(
                labels,
                {
                    "Interest Rate": results.series("interest_rate") * 100,
                    "Inflation Rate": results.series("inflation_rate") * 100,
                    "GDP Growth": results.series("gdp_growth_rate") * 100,
                },
                "Rates (%)", "%",
            ),
            use_container_width=True,
        )
        st.plotly_chart(
            multi_line(
                labels, {"Debt per Capita": results.series("debt_per_capita")},
                "Debt per Capita ($)", "$",
            ),
            use_container_width=True,
        )

# ── TAB: Year by Year ────────────────────────────────────────────────
with tab_years:
    table = df[[
        "year", "nominal_debt", "real_debt", "interest_payment",
        "principal_change", "gdp", "debt_to_gdp_ratio",
        "inflation_rate", "gdp_growth_rate", "population", "debt_per_capita",
    ]].rename(columns={
        "year": "Year",
        "nominal_debt": "Debt ($T)",
        "real_debt": "Real Debt ($T)",
        "interest_payment": "Interest ($T)",
        "principal_change": "Principal Change ($T)",
        "gdp": "GDP ($T)",
        "debt_to_gdp_ratio": "Debt/GDP (%)",
        "inflation_rate": "Inflation",
        "gdp_growth_rate": "GDP Growth",
        "population": "Population (M)",
        "debt_per_capita": "Debt per Capita ($)",
    })
    st.dataframe(
        table.style.format({
            "Debt ($T)": "{:.2f}", "Real Debt ($T)": "{:.2f}",
            "Interest ($T)": "{:.3f}", "Principal Change ($T)": "{:+.3f}",
            "GDP ($T)": "{:.2f}", "Debt/GDP (%)": "{:.1f}",
            "Inflation": "{:.2%}", "GDP Growth": "{:.2%}",
            "Population (M)": "{:.1f}", "Debt per Capita ($)": "{:,.0f}",
        }),
        hide_index=True, use_container_width=True,
    )

    event_years = [s for s in results if s.events]
    if not event_years:
        st.info("No economic events occurred in this run.")
    for s in event_years:
        with st.expander(
            f"{s.year}: {len(s.events)} event(s), deficit impact "
            f"{s.event_deficit_impact:+.2f}T",
            expanded=False,
        ):
            for e in s.events:
                impacts = [
                    f"Deficit {e.deficit_impact:+.2f}T",
                    f"GDP {e.gdp_growth_impact * 100:+.2f}%",
                ]
                if e.interest_rate_impact != 0:
                    impacts.append(f"Interest {e.interest_rate_impact * 100:+.2f}%")
                if e.inflation_impact != 0:
                    impacts.append(f"Inflation {e.inflation_impact * 100:+.2f}%")
                st.markdown(f"- **{e.name}** {e.description}  \n  {' | '.join(impacts)}")

# ── TAB: Methodology ─────────────────────────────────────────────────
with tab_method:
    st.header("Model Structure")
    st.markdown("""
Each simulated year:

1. **Rates**: start from the baseline interest, inflation, GDP growth and population growth rates, then add the impacts of every active event (with floors of -2% inflation, -15% GDP growth, 0.5% interest, -3% population growth)
2. **Population & GDP**: population grows at the year's rate; half of population growth adds to real GDP growth; inflation is applied on top for nominal GDP
3. **Debt**: simple interest on last year's debt plus the year's deficit and event-driven spending
4. **Inflation accounting**: a cumulative price index converts nominal debt to year-0 dollars
""")

    st.header("Random Events")
    st.dataframe(pd.DataFrame({
        "Event": ["War", "Recession / Depression", "Economic Boom", "Natural Disaster",
                  "Tech Revolution", "Peace Dividend"],
        "Annual Chance": ["5%", "10% (30% of which are depressions)", "8%", "7%", "3%", "10%"],
        "Active Years": ["2-6", "1-3 / 3-6", "2-4", "1", "3-7", "3-6"],
        "Aftermath Years": ["3-6", "2-4 / 5-10", "1-2", "1-2", "5-12", "2-4"],
        "Blocked By": ["Another war", "Another downturn", "Boom or downturn", "Nothing",
                       "Another tech revolution", "War, downturn or dividend"],
    }), hide_index=True, use_container_width=True)

    st.header("Scoring")
    st.markdown("""
Four sub-scores of 0-5 each (debt ratio change, average growth, interest burden, stability) sum to a 0-20 score:
**16+** much better, **12+** better, **8+** stable, **4+** worse, otherwise much worse.
""")

# ── Footer ───────────────────────────────────────────────────────────
st.divider()
st.caption(
    "This is a simplified educational model. It makes no claim of real-world "
    "economic accuracy and should not be used for actual policy or financial "
    "decisions."
)
