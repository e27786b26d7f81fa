"""
Memory Match Simulator Web App
Streamlit interface for running balance simulations.
"""

import pandas as pd
import streamlit as st

from memory_match.presets import PRESETS, StrategyType
from memory_match.simulator import Simulator

# Page config
st.set_page_config(
    page_title="Memory Match Simulator",
    page_icon="🃏",
    layout="wide"
)

st.title("🃏 Memory Match Simulator")
st.markdown("*Monte Carlo simulation of memory card games*")


# Initialize simulator (cached)
@st.cache_resource
def get_simulator():
    return Simulator()


sim = get_simulator()

# Sidebar for settings
st.sidebar.header("Settings")

preset_options = list(PRESETS.keys())
selected_preset = st.sidebar.selectbox(
    "Preset",
    options=preset_options,
    format_func=lambda x: PRESETS[x].name
)

preset = PRESETS[selected_preset]
st.sidebar.markdown(f"*{preset.description}*")
st.sidebar.markdown(f"**Mode:** {preset.mode.name} · **Pairs:** {preset.pair_count} "
                    f"· **Difficulty:** {preset.difficulty.name}")

strategy_choice = st.sidebar.selectbox(
    "Strategy",
    options=["(preset)"] + [s.value for s in StrategyType],
)
strategy_override = None if strategy_choice == "(preset)" else StrategyType(strategy_choice)

seed = st.sidebar.number_input("Seed", min_value=0, value=0, step=1)

run_mode = st.sidebar.radio("Mode", ["Single Game", "Batch Games", "High Roller Circuit"])

if run_mode == "Batch Games":
    num_runs = st.sidebar.slider("Number of Games", min_value=10, max_value=500, value=100, step=10)

st.divider()

if st.button("🎲 Run Simulation", type="primary", use_container_width=True):

    if run_mode == "Single Game":
        with st.spinner("Playing..."):
            result = sim.run(selected_preset, seed=int(seed), strategy_override=strategy_override)

        if result.won:
            st.success("🏆 BOARD CLEARED!")
        elif result.busted:
            st.error("💀 BUSTED")
        else:
            st.error("⏱️ OUT OF TIME")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Score", f"{result.score:,}")
        with col2:
            st.metric("Moves", result.moves)
        with col3:
            st.metric("Best Combo", result.max_combo)
        with col4:
            st.metric("Currency", result.earned_currency)

        if result.mutators:
            st.caption(f"Mutators: {', '.join(result.mutators)}")

        if result.won:
            st.subheader("📜 Score Breakdown")
            b = result.breakdown
            breakdown = pd.DataFrame({
                "Part": ["Match points", "Time bonus", "Move bonus", "Double Down"],
                "Points": [b.match_points, b.time_bonus, b.move_bonus, b.double_down_bonus],
            })
            st.bar_chart(breakdown.set_index("Part"))

    elif run_mode == "Batch Games":
        progress_bar = st.progress(0)
        status_text = st.empty()

        rows = []
        for i in range(num_runs):
            summary = sim.run(selected_preset, seed=int(seed) + i, strategy_override=strategy_override)
            rows.append(summary.to_dict())

            progress_bar.progress((i + 1) / num_runs)
            status_text.text(f"Game {i + 1}/{num_runs}...")

        progress_bar.empty()
        status_text.empty()

        games = pd.DataFrame(rows)
        win_rate = games["won"].mean() * 100

        st.subheader(f"Results ({num_runs} games)")

        if win_rate > 50:
            st.success(f"🏆 Win Rate: {games['won'].sum()}/{num_runs} ({win_rate:.1f}%)")
        elif win_rate > 0:
            st.warning(f"Win Rate: {games['won'].sum()}/{num_runs} ({win_rate:.1f}%)")
        else:
            st.error(f"Win Rate: 0/{num_runs}")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Avg Score", f"{games['score'].mean():,.0f}")
        with col2:
            st.metric("Max Score", f"{games['score'].max():,}")
        with col3:
            st.metric("Avg Moves", f"{games['moves'].mean():.1f}")
        with col4:
            st.metric("Busts", int(games["busted"].sum()))

        st.subheader("Score Distribution")
        games["bucket"] = games["score"] // 1000 * 1000
        chart_data = games.groupby("bucket").size().rename("Games").to_frame()
        st.bar_chart(chart_data)

        st.subheader("Moves vs Score")
        st.scatter_chart(games, x="moves", y="score")

    else:  # Circuit
        with st.spinner("Playing the circuit..."):
            circuit = sim.run_circuit(selected_preset, seed=int(seed), strategy_override=strategy_override)

        if circuit.completed:
            st.success(f"🏆 Circuit complete with {circuit.final_bank:,} banked")
        else:
            st.error(f"💀 Eliminated with {circuit.final_bank:,} banked")

        stages = pd.DataFrame([s.to_dict() for s in circuit.stages])
        st.dataframe(stages[["pair_count", "won", "busted", "moves", "banked_score", "max_combo"]])

# Footer
st.divider()
st.markdown("*Built with the Memory Match engine*")
