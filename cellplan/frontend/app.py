# cellplan/frontend/app.py
import streamlit as st
import pandas as pd
from typing import Any, Dict, List

from cellplan.analysis import indoor, signal_stats
from cellplan.analysis.coverage import location_points
from cellplan.config import configure_logging, load_settings
from cellplan.frontend import api_client, charts

# Page configuration
st.set_page_config(
    page_title="Cellular Network Planning",
    page_icon="📡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #4f46e5;
        text-align: center;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)

settings = load_settings()
configure_logging(settings.log_level)

DEFAULT_SUMMARY = {
    "total_records": 0,
    "unique_cell_ids": 0,
    "mean_rssi": -90,
    "median_rssi": -90,
    "weak_signal_count": 0,
    "weak_signal_percent": 0,
    "good_signal_count": 0,
    "good_signal_percent": 0,
    "recommended_towers": 0,
    "coverage_area_percent": 0,
}

PAGES = [
    "Overview",
    "Signal Analysis",
    "WiFi Analyzer",
    "Indoor Mapper",
    "Local Network Planner",
    "Network Planner",
    "Tower Recommendations",
    "Visualizations",
    "About",
]

@st.cache_data(ttl=60)
def load_data(user: str = "all") -> List[Dict[str, Any]]:
    return api_client.get_data(user)

@st.cache_data(ttl=60)
def load_summary() -> Dict[str, Any] | None:
    return api_client.get_summary()

def merged_summary(summary: Dict[str, Any] | None) -> Dict[str, Any]:
    if not summary:
        return dict(DEFAULT_SUMMARY)
    return {k: summary.get(k) if summary.get(k) is not None else v for k, v in DEFAULT_SUMMARY.items()}

def page_overview():
    st.markdown('<h1 class="main-header">Project Overview</h1>', unsafe_allow_html=True)
    summary = load_summary()
    if summary is None:
        st.warning("⚠️ Summary statistics unavailable, showing defaults")
    stats = merged_summary(summary)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Total Records", f"{int(stats['total_records']):,}")
    m2.metric("Unique Cells", f"{int(stats['unique_cell_ids']):,}")
    m3.metric("Mean RSSI", f"{stats['mean_rssi']:.1f} dBm")
    m4.metric("Median RSSI", f"{stats['median_rssi']:.1f} dBm")

    s1, s2, s3, s4 = st.columns(4)
    s1.metric("Weak Signal", f"{int(stats['weak_signal_count']):,}", f"{stats['weak_signal_percent']:.1f}%")
    s2.metric("Good Signal", f"{int(stats['good_signal_count']):,}", f"{stats['good_signal_percent']:.1f}%")
    s3.metric("Recommended Towers", int(stats["recommended_towers"]))
    s4.metric("Coverage Area", f"{stats['coverage_area_percent']:.1f}%")

def page_signal_analysis(data: List[Dict[str, Any]]):
    st.markdown("### 📶 Signal Analysis")
    if not data:
        st.info("No signal data available.")
        return

    headline = signal_stats.summarize_signals(data)
    c1, c2, c3 = st.columns(3)
    mean = headline["mean_rssi"]
    c1.metric("Average RSSI", f"{mean:.2f} dBm" if mean is not None else "N/A")
    c2.metric("Unique Cells", headline["unique_cells"])
    c3.metric("Body Positions", headline["unique_positions"])

    counts = signal_stats.quality_counts(signal_stats.rssi_values(data))
    q = st.columns(4)
    for col, level in zip(q, ("excellent", "good", "fair", "poor")):
        pct = counts[level] / counts["total"] * 100 if counts["total"] else 0
        col.metric(level.capitalize(), f"{counts[level]:,}", f"{pct:.1f}%")

    stats = signal_stats.position_stats(data, strict=True)
    if stats:
        st.plotly_chart(charts.position_box(stats), use_container_width=True)
        left, right = st.columns(2)
        left.plotly_chart(
            charts.quality_by_position_bar(signal_stats.quality_by_position(data, stats)),
            use_container_width=True,
        )
        right.plotly_chart(charts.radar_chart(signal_stats.radar_scores(stats)), use_container_width=True)
        st.dataframe(
            pd.DataFrame(stats)[["icon", "position", "count", "mean", "median", "std", "min", "max"]].round(2),
            use_container_width=True,
        )

    points = [{"x": p.x, "y": p.y, "rssi": p.rssi} for p in location_points(data)][:2000]
    if points:
        st.plotly_chart(charts.location_scatter(points), use_container_width=True)

    series = signal_stats.time_series(data)
    if series:
        st.plotly_chart(charts.time_series_line(series), use_container_width=True)

def page_wifi():
    st.markdown("### 📡 WiFi Analyzer")
    info = api_client.get_wifi()
    if info is None:
        st.error("Unable to fetch WiFi information")
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("SSID", info["ssid"])
    c2.metric("Signal", f"{info['signal_strength']} dBm", info["quality"].capitalize())
    c3.metric("Channel", info["channel"])
    c4.metric("Frequency", f"{info['frequency'] / 1000:.1f} GHz")
    strength = max(0, min(100, (info["signal_strength"] + 100) / 50 * 100))
    st.progress(int(strength), text=f"Signal strength {strength:.0f}%")
    st.table(pd.DataFrame(
        [
            ("BSSID", info["bssid"]),
            ("Security", info["security"]),
            ("Link speed", info["speed"]),
            ("IP address", info["ip_address"]),
            ("Subnet", info["subnet"]),
            ("Gateway", info["gateway"]),
        ],
        columns=["Field", "Value"],
    ))

def page_indoor():
    st.markdown("### 🏠 Indoor Signal Mapper")
    st.caption("Simulated walk: positions and RSSI are generated, not read from device sensors.")

    if "indoor_walker" not in st.session_state:
        st.session_state["indoor_walker"] = indoor.IndoorWalker()
        st.session_state["indoor_measurements"] = []
    walker = st.session_state["indoor_walker"]
    measurements = st.session_state["indoor_measurements"]

    room = st.text_input("Current Room (optional)", placeholder="e.g., Living Room, Bedroom")
    steps = st.slider("Samples to record", 1, 200, 20)
    b1, b2 = st.columns(2)
    if b1.button("▶️ Record", use_container_width=True):
        if not measurements:
            walker.reset()
        measurements.extend(walker.walk(steps, room))
    if b2.button("🗑 Clear", use_container_width=True):
        measurements.clear()
        walker.reset()

    stats = indoor.indoor_stats(measurements)
    m = st.columns(5)
    m[0].metric("Samples", stats["total"])
    m[1].metric("Average", f"{stats['avg_rssi']:.1f} dBm")
    m[2].metric("Good+", stats["excellent"] + stats["good"])
    m[3].metric("Fair", stats["fair"])
    m[4].metric("Poor", stats["poor"])

    if measurements:
        found = indoor.rooms(measurements)
        if found:
            st.caption("Rooms: " + ", ".join(found))
        st.plotly_chart(charts.grid_heatmap(indoor.indoor_grid(measurements), "Indoor Coverage"),
                        use_container_width=True)
        st.download_button(
            "⬇️ Export JSON",
            data=indoor.export_session(measurements),
            file_name="indoor-signal-map.json",
            mime="application/json",
        )

def page_local_planner(user: str):
    st.markdown("### 🗺️ Local Network Coverage Planner")
    grid_size = st.slider("Grid size", 0.5, 5.0, 1.0, 0.5)
    plan = api_client.local_plan(grid_size, None if user == "all" else user)
    if plan is None:
        st.error("Could not compute local coverage plan.")
        return

    stats = plan["stats"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Data Points", f"{stats['total']:,}")
    c2.metric("Average RSSI", f"{stats['avg_rssi']:.1f} dBm")
    c3.metric("Coverage Quality", f"{stats['coverage_percent']:.1f}%")
    c4.metric("Poor Points", stats["poor"])

    left, right = st.columns(2)
    left.plotly_chart(charts.grid_heatmap(plan["grid"]), use_container_width=True)
    right.plotly_chart(charts.distribution_bar(plan["distribution"]), use_container_width=True)
    if plan["weak_areas"]:
        st.markdown("#### Weakest Areas")
        st.dataframe(pd.DataFrame(plan["weak_areas"]), use_container_width=True)

def page_network_planner(user: str):
    st.markdown("### 📍 Interactive Network Planner")
    col1, col2, col3 = st.columns(3)
    with col1:
        tower_count = st.slider("Number of Towers", 1, 20, 5)
    with col2:
        threshold = st.slider("Coverage Threshold (dBm)", -120, -60, -85, 5)
    with col3:
        algorithm = st.selectbox(
            "Placement Algorithm",
            ["coverage", "density", "kmeans"],
            format_func=lambda a: {
                "coverage": "Coverage greedy",
                "density": "Density based",
                "kmeans": "K-means clustering",
            }[a],
        )

    with st.spinner("Planning tower placement..."):
        plan = api_client.plan_towers(
            tower_count, float(threshold), algorithm, user=None if user == "all" else user
        )
    if plan is None:
        st.error("Could not compute a tower plan.")
        return

    stats = plan["stats"]
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Data Points", f"{stats['total_points']:,}")
    m2.metric("Weak Points", f"{stats['weak_points']:,}", f"{stats['weak_percentage']}%")
    m3.metric("Current Coverage", f"{stats['current_coverage']}%")
    m4.metric("Projected Coverage", f"{stats['projected_coverage']}%", f"+{stats['estimated_improvement']}% of weak")

    points = [{"x": p.x, "y": p.y, "rssi": p.rssi} for p in location_points(load_data(user))][:3000]
    st.plotly_chart(charts.planner_map(points, plan["gaps"], plan["towers"]), use_container_width=True)
    if plan["towers"]:
        st.dataframe(pd.DataFrame(plan["towers"]).round(2), use_container_width=True)
    else:
        st.info("No coverage gaps below the threshold.")

def page_tower_recommendations(data: List[Dict[str, Any]]):
    st.markdown("### 🏗️ Tower Placement Recommendations")
    towers = api_client.get_towers()
    if not towers:
        st.info("No tower recommendations found.")
        return

    m1, m2 = st.columns(2)
    m1.metric("Recommendation Rows", len(towers))
    m2.metric("Total Towers", signal_stats.total_recommended(towers))

    left, right = st.columns(2)
    left.plotly_chart(charts.priority_pie(signal_stats.priority_counts(towers)), use_container_width=True)
    located = [
        {"id": i + 1, "x": t["x"], "y": t["y"], "priority": t.get("priority") or "medium"}
        for i, t in enumerate(towers)
        if t.get("x") is not None and t.get("y") is not None
    ]
    if located:
        points = [{"x": p.x, "y": p.y, "rssi": p.rssi} for p in location_points(data)][:2000]
        right.plotly_chart(charts.planner_map(points, [], located), use_container_width=True)
    st.dataframe(pd.DataFrame(towers), use_container_width=True)

def page_visualizations(data: List[Dict[str, Any]]):
    st.markdown("### 📊 Visualizations")
    if not data:
        st.info("No signal data available.")
        return

    values = signal_stats.rssi_values(data)
    left, right = st.columns(2)
    left.plotly_chart(charts.histogram_bar(signal_stats.rssi_histogram(values)), use_container_width=True)
    right.plotly_chart(charts.quality_pie(signal_stats.quality_counts(values)), use_container_width=True)

    stats = signal_stats.position_stats(data, strict=False)
    if stats:
        left, right = st.columns(2)
        left.plotly_chart(charts.position_mean_bar(stats), use_container_width=True)
        right.plotly_chart(charts.position_share_pie(stats), use_container_width=True)

    cells = signal_stats.cell_performance(data)
    if cells:
        st.plotly_chart(charts.cell_performance_bar(cells), use_container_width=True)

    headline = signal_stats.summarize_signals(data)
    s1, s2, s3 = st.columns(3)
    s1.metric("Records with RSSI", f"{headline['records_with_rssi']:,}")
    s2.metric("Records with Location", f"{headline['records_with_location']:,}")
    s3.metric("Body Positions", headline["unique_positions"])

    coverage = api_client.get_coverage()
    if coverage:
        st.markdown("#### Per-cell Coverage Summary")
        st.dataframe(pd.DataFrame(coverage), use_container_width=True)

def page_about():
    st.markdown("### ℹ️ About")
    st.markdown(
        """
        Dashboard for cellular signal measurements: RSSI per record, body-carry
        position, optional x/y coordinates and per-cell statistics.

        Tower placement suggestions come from a grid-based heuristic
        (coverage greedy, density, k-means). They are visualization aids,
        not a planning-grade solver.
        """
    )

def main():
    st.sidebar.markdown("## 📡 Cellular Network Planning")

    if not api_client.check_health():
        st.error("⚠️ Backend API is not running. Please start it with: `python -m cellplan.backend.main`")
        return
    st.sidebar.success("✅ Backend API is running")

    page = st.sidebar.radio("Page", PAGES)
    user = st.sidebar.text_input("User (blank for all)", "").strip() or "all"

    if page == "Overview":
        page_overview()
    elif page == "Signal Analysis":
        page_signal_analysis(load_data(user))
    elif page == "WiFi Analyzer":
        page_wifi()
    elif page == "Indoor Mapper":
        page_indoor()
    elif page == "Local Network Planner":
        page_local_planner(user)
    elif page == "Network Planner":
        page_network_planner(user)
    elif page == "Tower Recommendations":
        page_tower_recommendations(load_data())
    elif page == "Visualizations":
        page_visualizations(load_data(user))
    else:
        page_about()

    # Footer
    st.markdown("---")
    st.markdown(
        """
        <div style="text-align: center; color: #666; font-size: 0.8rem;">
            Cellular Network Planning — Built with Streamlit & FastAPI
        </div>
        """,
        unsafe_allow_html=True
    )

if __name__ == "__main__":
    main()
