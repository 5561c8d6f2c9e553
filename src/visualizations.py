"""
Visualization components for the dashboard and the batch report
"""
import html

import folium
from folium import plugins
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from config import VIZ_CONFIG
from utils.geo_utils import calculate_bounding_box
from utils.constants import MAP_TILES, HEATMAP_GRADIENT, DEVICE_TYPE_COLORS


def _marker_radius(sessions, max_sessions):
    """Scale marker radius between the configured bounds"""
    low, high = VIZ_CONFIG['min_marker_radius'], VIZ_CONFIG['max_marker_radius']
    if not max_sessions:
        return low
    return low + (high - low) * (sessions / max_sessions) ** 0.5


def create_hotspot_map(site_stats, show_heatmap=True):
    """
    Create interactive map of the WiFi hotspots

    Args:
        site_stats: DataFrame from usage_analysis.sessions_per_site
            (site_id, site, x=longitude, y=latitude, sessions, ...)
        show_heatmap: Whether to add a session density layer

    Returns:
        folium Map object
    """
    # Create base map
    m = folium.Map(
        location=VIZ_CONFIG['map_center'],
        zoom_start=VIZ_CONFIG['map_zoom_start'],
        tiles=None
    )

    # Add custom tile layer
    folium.TileLayer(
        tiles=MAP_TILES["CartoDB Positron"],
        name="CartoDB Positron",
        attr='Map data © OpenStreetMap contributors © CARTO'
    ).add_to(m)

    if site_stats.empty:
        return m

    max_sessions = site_stats['sessions'].max()
    hotspots = folium.FeatureGroup(name='Hotspots')

    for _, site in site_stats.iterrows():
        name = html.escape(str(site['site']))
        popup_html = f"""
        <div style="font-family: Arial; width: 240px;">
            <h4 style="margin-bottom: 8px;">📶 {name}</h4>
            <p><b>Site id:</b> {site['site_id']}</p>
            <p><b>Sessions:</b> {int(site['sessions']):,}</p>
        """
        if 'avg_mo' in site_stats.columns:
            popup_html += f"<p><b>Avg volume:</b> {site['avg_mo']:.2f} MB</p>"
        popup_html += "</div>"

        folium.CircleMarker(
            location=[site['y'], site['x']],
            radius=_marker_radius(site['sessions'], max_sessions),
            popup=folium.Popup(popup_html, max_width=280),
            tooltip=f"{name}: {int(site['sessions']):,} sessions",
            color=VIZ_CONFIG['hotspot_color'],
            fill=True,
            fillColor=VIZ_CONFIG['hotspot_color'],
            fillOpacity=0.6,
            weight=1
        ).add_to(hotspots)

    hotspots.add_to(m)

    if show_heatmap:
        heat_data = site_stats[['y', 'x', 'sessions']].astype(float).values.tolist()
        plugins.HeatMap(
            heat_data,
            name='Session density',
            radius=25,
            gradient=HEATMAP_GRADIENT,
            show=False
        ).add_to(m)

    # Fit bounds to show all hotspots
    bounds = calculate_bounding_box(site_stats, lat_col='y', lon_col='x')
    if bounds:
        m.fit_bounds(bounds)

    # Add layer control
    folium.LayerControl().add_to(m)

    return m


def create_share_chart(shares, title=None):
    """
    Create horizontal bar chart of category shares

    Args:
        shares: DataFrame from usage_analysis.category_shares
        title: Chart title

    Returns:
        plotly figure
    """
    if shares.empty:
        return go.Figure()

    category = shares.columns[0]
    fig = px.bar(
        shares.iloc[::-1],
        x='share_pct',
        y=category,
        orientation='h',
        text='share_pct',
        labels={'share_pct': 'Share of sessions (%)', category: category.replace('_', ' ').title()},
        title=title or f"Sessions by {category.replace('_', ' ')}",
        hover_data={'sessions': ':,'},
    )

    fig.update_traces(texttemplate='%{text:.1f}%', textposition='outside')
    fig.update_layout(showlegend=False, height=max(300, 40 * len(shares)))

    return fig


def create_device_type_chart(shares):
    """
    Create donut chart of the device type split

    Args:
        shares: category_shares(df, 'device_type')

    Returns:
        plotly figure
    """
    if shares.empty:
        return go.Figure()

    fig = px.pie(
        shares,
        names='device_type',
        values='sessions',
        hole=0.5,
        color='device_type',
        color_discrete_map=DEVICE_TYPE_COLORS,
        title='Sessions by device type'
    )
    fig.update_layout(height=350)
    return fig


def create_usage_heatmap(table):
    """
    Create day-of-week by hour heatmap

    Args:
        table: DataFrame from usage_analysis.usage_heatmap_table

    Returns:
        plotly figure
    """
    if table.empty:
        return go.Figure()

    fig = go.Figure(data=go.Heatmap(
        z=table.values,
        x=[f"{h:02d}h" for h in table.columns],
        y=list(table.index),
        colorscale='YlOrRd',
        colorbar=dict(title='Sessions'),
        hovertemplate='%{y} %{x}: %{z:,} sessions<extra></extra>'
    ))

    fig.update_layout(
        title='Sessions by day of week and hour',
        xaxis_title='Hour of day',
        yaxis=dict(autorange='reversed'),
        height=400
    )

    return fig


def create_daily_sessions_chart(daily, gaps=None):
    """
    Create daily sessions line chart with chronology gaps shaded

    Args:
        daily: DataFrame from usage_analysis.daily_sessions
        gaps: DataFrame from data_quality.detect_chronology_gaps (optional)

    Returns:
        plotly figure
    """
    if daily.empty:
        return go.Figure()

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=pd.to_datetime(daily['date']),
        y=daily['sessions'],
        mode='lines+markers',
        name='Sessions',
        line=dict(color=VIZ_CONFIG['hotspot_color'], width=2),
        marker=dict(size=4)
    ))

    if gaps is not None and not gaps.empty:
        for gap in gaps.itertuples():
            fig.add_vrect(
                x0=pd.Timestamp(gap.gap_start),
                x1=pd.Timestamp(gap.gap_end) + pd.Timedelta(days=1),
                fillcolor=VIZ_CONFIG['gap_color'],
                line_width=0,
                annotation_text=f"{gap.gap_days} days without data",
                annotation_position='top left'
            )

    fig.update_layout(
        title='Daily sessions',
        xaxis_title='Date',
        yaxis_title='Sessions',
        hovermode='x unified',
        height=400
    )

    return fig
