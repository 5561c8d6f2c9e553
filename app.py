"""
Paris WiFi Usage Dashboard
Exploratory analysis of public WiFi sessions: devices, languages,
hotspot locations and usage patterns
"""

import streamlit as st
import pandas as pd
from streamlit_folium import folium_static

from config import DASHBOARD_CONFIG, CACHE_CONFIG, ANALYSIS_CONFIG, configure_logging

# ────────────────────────────────────────────────
# MUST be the first Streamlit command
# ────────────────────────────────────────────────
st.set_page_config(
    page_title=DASHBOARD_CONFIG["title"],
    page_icon=DASHBOARD_CONFIG["page_icon"],
    layout=DASHBOARD_CONFIG["layout"],
    initial_sidebar_state=DASHBOARD_CONFIG["initial_sidebar_state"]
)

configure_logging()

from src.data_loader import DataSchemaError, validate_data
from src.enrichment import load_analysis_tables
from src.feature_classifier import classify_record
from src.data_quality import build_quality_report
from src.usage_analysis import (
    category_shares,
    sessions_per_site,
    usage_heatmap_table,
    daily_sessions,
    get_usage_summary,
)
from src.visualizations import (
    create_hotspot_map,
    create_share_chart,
    create_device_type_chart,
    create_usage_heatmap,
    create_daily_sessions_chart,
)


@st.cache_data(ttl=CACHE_CONFIG["ttl"], show_spinner="Building the analysis table...")
def get_analysis_tables():
    """Load input files and run the enrichment pipeline once per cache period"""
    tables = load_analysis_tables()
    return tables.sessions, tables.coordinates


def filter_sessions(df, sites, device_types):
    """Apply sidebar filters"""
    filtered = df
    if sites:
        filtered = filtered[filtered['site'].isin(sites)]
    if device_types:
        labels = filtered['device_type'].astype('object').fillna(ANALYSIS_CONFIG['unknown_label'])
        filtered = filtered[labels.isin(device_types)]
    return filtered


def render_overview(df):
    summary = get_usage_summary(df)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Sessions", f"{summary['total_sessions']:,}")
    col2.metric("Located sessions", f"{summary['located_sessions']:,}")
    col3.metric("Hotspots", f"{summary['distinct_sites']:,}")
    col4.metric("Mobile / tablet", f"{summary['mobile_share_pct']:.1f}%")

    col1, col2, col3 = st.columns(3)
    col1.metric("Downloaded", f"{summary['total_output_mo'] / 1024:,.1f} GB")
    col2.metric("Uploaded", f"{summary['total_input_mo'] / 1024:,.1f} GB")
    median = summary['median_duration_min']
    col3.metric("Median session", f"{median:.0f} min" if median is not None else "n/a")

    if summary['earliest_session'] is not None and pd.notna(summary['earliest_session']):
        st.caption(f"Sessions from {summary['earliest_session']:%Y-%m-%d} to {summary['latest_session']:%Y-%m-%d}")


def render_devices(df, top_n):
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_share_chart(category_shares(df, 'os_type', top_n), 'Operating systems'),
                        use_container_width=True)
    with col2:
        st.plotly_chart(create_device_type_chart(category_shares(df, 'device_type', top_n)),
                        use_container_width=True)

    st.plotly_chart(create_share_chart(category_shares(df, 'device_brand', top_n), 'Device brands'),
                    use_container_width=True)

    with st.expander("Classify a user agent"):
        os_name = st.text_input("OS", "Android 9")
        device = st.text_input("Device", "Samsung SM-G960F")
        browser = st.text_input("Browser", "Chrome Mobile 74")
        st.json(classify_record(os_name, device, browser))


def render_languages(df, top_n):
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_share_chart(category_shares(df, 'language', top_n), 'Languages'),
                        use_container_width=True)
    with col2:
        st.plotly_chart(create_share_chart(category_shares(df, 'country', top_n), 'Countries'),
                        use_container_width=True)


def render_hotspots(df, coordinates):
    site_stats = sessions_per_site(df, coordinates)
    if site_stats.empty:
        st.info("No located hotspot in the current selection.")
        return

    folium_static(create_hotspot_map(site_stats), width=1200, height=600)

    st.subheader("Busiest hotspots")
    st.dataframe(
        site_stats[['site_id', 'site', 'sessions', 'total_mo', 'avg_mo']].head(20),
        use_container_width=True,
        hide_index=True
    )


def render_usage(df, gaps):
    st.plotly_chart(create_usage_heatmap(usage_heatmap_table(df)), use_container_width=True)
    st.plotly_chart(create_daily_sessions_chart(daily_sessions(df), gaps), use_container_width=True)


def render_quality(report):
    col1, col2, col3 = st.columns(3)
    col1.metric("Unparsable start times", f"{report['unparsable_start_time']:,}")
    col2.metric("Stop before start", f"{report['inverted_sessions']:,}")
    col3.metric("Unresolved sites", f"{report['unresolved_site_share'] * 100:.1f}%")

    gaps = report['chronology_gaps']
    if gaps.empty:
        st.success("No chronology gap detected.")
    else:
        st.warning(
            "Days without any session were found inside the observed period. "
            "Isolated days on the far side of a gap usually are transposed dates "
            "(day and month swapped upstream); they are reported, not corrected."
        )
        st.dataframe(gaps, use_container_width=True, hide_index=True)


def main():
    st.title(DASHBOARD_CONFIG["title"])

    try:
        sessions, coordinates = get_analysis_tables()
    except (FileNotFoundError, DataSchemaError) as e:
        st.error(str(e))
        st.write(validate_data())
        st.stop()

    # Sidebar filters
    st.sidebar.header("Filters")
    sites = st.sidebar.multiselect("Hotspots", sorted(sessions['site'].dropna().unique()))
    device_types = st.sidebar.multiselect(
        "Device type", ['Mobile/Tablet', 'Computer', ANALYSIS_CONFIG['unknown_label']]
    )
    top_n = st.sidebar.slider("Categories shown", 5, 25, ANALYSIS_CONFIG['top_n'])

    df = filter_sessions(sessions, sites, device_types)
    report = build_quality_report(sessions, coordinates)

    tab1, tab2, tab3, tab4, tab5, tab6 = st.tabs(
        ["Overview", "Devices", "Languages", "Hotspots", "Usage patterns", "Data quality"]
    )
    with tab1:
        render_overview(df)
    with tab2:
        render_devices(df, top_n)
    with tab3:
        render_languages(df, top_n)
    with tab4:
        render_hotspots(df, coordinates)
    with tab5:
        render_usage(df, report['chronology_gaps'])
    with tab6:
        render_quality(report)


if __name__ == "__main__":
    main()
