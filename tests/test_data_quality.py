from datetime import date

import pandas as pd
import pytest

from src.enrichment import build_analysis_table
from src.data_quality import (
    find_inverted_sessions,
    detect_chronology_gaps,
    build_quality_report,
)


def _sessions_on(days, tz="Europe/Paris"):
    start = pd.to_datetime(pd.Series(days)).dt.tz_localize(tz)
    return pd.DataFrame({'start_time': start, 'stop_time': start + pd.Timedelta(minutes=30)})


@pytest.fixture
def enriched(raw_sessions, raw_catalog, raw_correspondence):
    return build_analysis_table(raw_sessions, raw_catalog, raw_correspondence)


class TestInvertedSessions:

    def test_stop_before_start(self, enriched):
        inverted = find_inverted_sessions(enriched.sessions)
        assert inverted['session_id'].tolist() == ["s3"]

    def test_missing_times_are_not_inverted(self):
        df = pd.DataFrame({
            'start_time': [pd.NaT, pd.Timestamp("2017-04-01 10:00", tz="Europe/Paris")],
            'stop_time': [pd.Timestamp("2017-04-01 09:00", tz="Europe/Paris"), pd.NaT],
        })
        assert find_inverted_sessions(df).empty


class TestChronologyGaps:

    def test_transposed_days_show_up_as_a_gap(self):
        april = [f"2017-04-{d:02d} 10:00" for d in range(4, 31)]
        december = ["2016-12-01 10:00", "2016-12-02 10:00", "2016-12-03 10:00"]
        gaps = detect_chronology_gaps(_sessions_on(december + april), min_gap_days=3)

        assert len(gaps) == 1
        gap = gaps.iloc[0]
        assert gap['gap_start'] == date(2016, 12, 4)
        assert gap['gap_end'] == date(2017, 4, 3)
        assert gap['gap_days'] == (date(2017, 4, 3) - date(2016, 12, 4)).days + 1

    def test_short_gaps_are_ignored(self):
        days = ["2017-04-01 10:00", "2017-04-03 10:00", "2017-04-04 10:00"]
        assert detect_chronology_gaps(_sessions_on(days), min_gap_days=3).empty

    def test_gap_across_dst_change_is_not_shortened(self):
        days = ["2017-03-20 12:00", "2017-03-31 12:00"]
        gaps = detect_chronology_gaps(_sessions_on(days), min_gap_days=3)

        assert gaps.iloc[0]['gap_days'] == 10

    def test_zero_threshold_is_not_replaced_by_default(self):
        days = ["2017-04-01 10:00", "2017-04-03 10:00", "2017-04-04 10:00"]
        gaps = detect_chronology_gaps(_sessions_on(days), min_gap_days=0)

        assert len(gaps) == 1
        assert gaps.iloc[0]['gap_start'] == date(2017, 4, 2)
        assert gaps.iloc[0]['gap_days'] == 1

    def test_too_few_days(self):
        assert detect_chronology_gaps(_sessions_on(["2017-04-01 10:00"])).empty
        assert detect_chronology_gaps(_sessions_on([])).empty


def test_quality_report(enriched):
    report = build_quality_report(enriched.sessions, enriched.coordinates)

    assert report['total_sessions'] == 5
    assert report['unparsable_start_time'] == 1
    assert report['unparsable_stop_time'] == 0
    assert report['inverted_sessions'] == 1
    assert report['unresolved_sessions'] == 1
    assert report['unresolved_site_share'] == pytest.approx(0.2)
    assert report['sessions_without_coordinates'] == 1
    assert report['missing_locale_share'] == pytest.approx(0.2)
    assert report['located_hotspots'] == 2
    assert report['chronology_gaps'].empty
