"""Integration tests for the timeline builder."""

import csv
import io

import pytest

from mactime_forensic.core.builder import TimelineBuilder, TimelineResult, generate_timeline
from mactime_forensic.core.config import TimelineConfig, load_config
from mactime_forensic.parsers.bodyfile import ParseStatistics
from mactime_forensic.utils.exceptions import TimelineIOError


def summarize(result: TimelineResult):
    return [(row.timestamp, row.macb, row.name) for row in result.rows]


class TestTimelineBuilder:
    """Tests for TimelineBuilder."""

    def test_readme_scenario(self, readme_line):
        result = TimelineBuilder().build([readme_line])
        csv_lines = TimelineBuilder().exporter().to_csv(result.rows).splitlines()
        assert csv_lines == [
            "Date,Size,Type,Mode,UID,GID,Meta,File Name",
            "2021-01-01T00:00:00,512,ma.b,r/rrw-r--r--,1000,1000,12,readme.txt",
            "2021-01-01T00:01:00,512,..c.,r/rrw-r--r--,1000,1000,12,readme.txt",
        ]

    def test_readme_scenario_filtered_out(self, readme_line):
        config = load_config(date_filter="2021-01-02..2021-01-31")
        builder = TimelineBuilder(config)
        result = builder.build([readme_line])
        assert result.rows == []
        assert result.filtered_out == 2
        assert builder.exporter().to_csv(result.rows) == "Date,Size,Type,Mode,UID,GID,Meta,File Name\n"

    def test_unsorted_keeps_bodyfile_order(self, sample_lines):
        result = TimelineBuilder().build(sample_lines)
        assert summarize(result) == [
            (1595291898, "macb", "c:/$MFT"),
            (1609459200, "ma.b", "readme.txt"),
            (1609459260, "..c.", "readme.txt"),
            (1609459100, "m.c.", "/home/user/notes.txt"),
            (1609545600, ".a..", "/home/user/notes.txt"),
            (1609459200, ".a..", "/var/log/syslog"),
            (1609372800, "...b", "/var/log/syslog"),
        ]

    def test_sorted_is_stable(self, sample_lines):
        result = TimelineBuilder(TimelineConfig(sort=True)).build(sample_lines)
        assert summarize(result) == [
            (1595291898, "macb", "c:/$MFT"),
            (1609372800, "...b", "/var/log/syslog"),
            (1609459100, "m.c.", "/home/user/notes.txt"),
            (1609459200, "ma.b", "readme.txt"),
            (1609459200, ".a..", "/var/log/syslog"),
            (1609459260, "..c.", "readme.txt"),
            (1609545600, ".a..", "/home/user/notes.txt"),
        ]

    def test_filter_and_sort(self, sample_lines):
        config = load_config(date_filter="2021-01-01..2021-01-01", sort=True)
        result = TimelineBuilder(config).build(sample_lines)
        assert summarize(result) == [
            (1609459200, "ma.b", "readme.txt"),
            (1609459200, ".a..", "/var/log/syslog"),
            (1609459260, "..c.", "readme.txt"),
        ]
        assert result.filtered_out == 4

    def test_statistics(self, sample_lines):
        result = TimelineBuilder().build(sample_lines)
        assert result.record_count == 4
        assert result.row_count == 7
        assert result.event_count == 13
        assert result.statistics.malformed_records == 1
        assert result.statistics.unparsable_timestamps == 1

    def test_build_from_records_without_statistics(self, make_record):
        result = TimelineBuilder().build_from_records([make_record(mtime=1)])
        assert result.row_count == 1
        assert result.statistics == ParseStatistics()

    def test_build_from_file(self, sample_bodyfile):
        result = TimelineBuilder().build_from_file(sample_bodyfile)
        assert result.row_count == 7

    def test_build_from_missing_file(self, temp_dir):
        with pytest.raises(TimelineIOError):
            TimelineBuilder().build_from_file(temp_dir / "missing.body")

    def test_build_from_stream(self, readme_line):
        result = TimelineBuilder().build_from_stream(io.StringIO(readme_line + "\n"))
        assert result.row_count == 2

    def test_progress_callback(self, readme_line):
        calls = []
        builder = TimelineBuilder(
            TimelineConfig(sort=True),
            progress_callback=lambda step, status, message: calls.append((step, status)),
        )
        builder.build([readme_line])
        assert calls == [
            ("parse", "start"),
            ("parse", "complete"),
            ("coalesce", "complete"),
            ("filter", "skip"),
            ("sort", "complete"),
        ]

    def test_exporter_uses_date_format(self):
        builder = TimelineBuilder(TimelineConfig(date_format="%d/%m/%Y %H:%M:%S"))
        assert builder.exporter().date_format == "%d/%m/%Y %H:%M:%S"


class TestCSVRoundTrip:
    """Tests that serialized rows parse back to the source values."""

    def test_round_trip(self, temp_dir):
        lines = [
            '0|/docs/report, "final".pdf|100|r/rrw-r--r--|501|20|4096|1600000000|1600000000|1600000100|1500000000',
            "0|/tmp/a|b|99|r/rrw-r--r--|0|0|7|1600000000|||",
        ]
        builder = TimelineBuilder()
        result = builder.build(lines)
        parsed = list(csv.reader(io.StringIO(builder.exporter().to_csv(result.rows))))[1:]

        assert [(r[7], int(r[1]), r[2]) for r in parsed] == [
            ('/docs/report, "final".pdf', 4096, "ma.."),
            ('/docs/report, "final".pdf', 4096, "..c."),
            ('/docs/report, "final".pdf', 4096, "...b"),
            ("/tmp/a|b", 7, ".a.."),
        ]
        assert all(len(r[2]) == 4 for r in parsed)

    def test_round_trip_carriage_return_in_name(self):
        builder = TimelineBuilder()
        result = builder.build(["0|cr\rx|5|r/r|0|0|1|1609459200|||"])
        parsed = list(csv.reader(io.StringIO(builder.exporter().to_csv(result.rows))))
        assert parsed[1:] == [["2021-01-01T00:00:00", "1", ".a..", "r/r", "0", "0", "5", "cr\rx"]]


class TestGenerateTimeline:
    """Tests for the generate_timeline convenience function."""

    def test_generate_to_file(self, readme_bodyfile, temp_dir):
        output = temp_dir / "timeline.csv"
        csv_str = generate_timeline(readme_bodyfile, output_path=output)
        assert output.read_text(encoding="utf-8") == csv_str
        assert csv_str.count("\n") == 3

    def test_generate_with_config(self, readme_bodyfile):
        csv_str = generate_timeline(readme_bodyfile, config=load_config(date_filter="2021-01-02"))
        assert csv_str == "Date,Size,Type,Mode,UID,GID,Meta,File Name\n"
