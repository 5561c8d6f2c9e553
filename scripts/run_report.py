"""
Batch usage report
Builds the analysis table, prints the descriptive summaries and the data
quality report, and writes the hotspot map and charts as HTML

Usage:
    python scripts/run_report.py [--output-dir reports/] [--top-n 10]
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import REPORTS_DIR, ANALYSIS_CONFIG, QUALITY_CONFIG, configure_logging
from src.data_loader import DataSchemaError
from src.enrichment import load_analysis_tables
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
    create_usage_heatmap,
    create_daily_sessions_chart,
)

SHARE_COLUMNS = ['os_type', 'device_type', 'device_brand', 'language', 'country']


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Paris WiFi usage report")
    parser.add_argument("--output-dir", type=Path, default=REPORTS_DIR,
                        help="Directory for the HTML map and charts")
    parser.add_argument("--top-n", type=int, default=ANALYSIS_CONFIG['top_n'],
                        help="Categories listed before folding the rest into 'Other'")
    parser.add_argument("--min-gap-days", type=int, default=QUALITY_CONFIG['min_gap_days'],
                        help="Shortest run of empty days reported as a chronology gap")
    parser.add_argument("--sessions", type=Path, default=None, help="Session log CSV")
    parser.add_argument("--hotspots", type=Path, default=None, help="Hotspot catalog CSV")
    parser.add_argument("--correspondence", type=Path, default=None, help="Correspondence CSV")
    return parser.parse_args(argv)


def print_section(title):
    print("=" * 70)
    print(title)
    print("=" * 70)


def main(argv=None):
    args = parse_args(argv)
    configure_logging()

    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    try:
        tables = load_analysis_tables(args.sessions, args.hotspots, args.correspondence)
    except (FileNotFoundError, DataSchemaError) as e:
        print(f"❌ {e}")
        return 1

    df = tables.sessions

    print_section("📊 SUMMARY")
    for key, value in get_usage_summary(df).items():
        print(f"  {key:22s}: {value}")
    print()

    for column in SHARE_COLUMNS:
        print_section(f"📱 SESSIONS BY {column.upper()}")
        shares = category_shares(df, column, args.top_n)
        for row in shares.itertuples(index=False):
            print(f"  {str(row[0]):25s}: {row.sessions:9,} ({row.share_pct:5.1f}%)")
        print()

    print_section("🔎 DATA QUALITY")
    report = build_quality_report(df, tables.coordinates, args.min_gap_days)
    gaps = report.pop('chronology_gaps')
    for key, value in report.items():
        print(f"  {key:30s}: {value}")
    if gaps.empty:
        print("  ✅ No chronology gap")
    else:
        print("  ⚠️  Chronology gaps (possible transposed dates):")
        for gap in gaps.itertuples():
            print(f"     {gap.gap_start} → {gap.gap_end} ({gap.gap_days} days)")
    print()

    output_dir = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    site_stats = sessions_per_site(df, tables.coordinates)
    create_hotspot_map(site_stats).save(str(output_dir / "hotspot_map.html"))
    create_usage_heatmap(usage_heatmap_table(df)).write_html(output_dir / "usage_heatmap.html")
    create_daily_sessions_chart(daily_sessions(df), gaps).write_html(output_dir / "daily_sessions.html")
    for column in SHARE_COLUMNS:
        create_share_chart(category_shares(df, column, args.top_n)).write_html(
            output_dir / f"shares_{column}.html"
        )

    print(f"✅ Map and charts written to {output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
