"""Tests for sorting, grouping and text rendering."""

from datetime import datetime, timedelta, timezone

from prdigest_core.config import ReportConfig
from prdigest_core.models import PullRequestRecord
from prdigest_core.report import (
    NO_DESCRIPTION,
    NO_RESULTS,
    NOT_MERGED,
    format_report,
    group_by_repository,
    render_reports,
    sort_records,
)

BASE = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
GENERATED = datetime(2025, 4, 2, 8, 0, tzinfo=timezone.utc)


def _make_config(**overrides):
    values = dict(author="octocat", org="acme", token="tok", start_date="2024-04-01", end_date="2025-04-01")
    values.update(overrides)
    return ReportConfig(**values)


def _record(title, merged_days=None, repository="repoA", description="Body text"):
    return PullRequestRecord(
        title=title,
        owner="acme" if repository else None,
        repository=repository,
        number=abs(hash(title)) % 1000,
        created_at=BASE - timedelta(days=10),
        merged_at=BASE + timedelta(days=merged_days) if merged_days is not None else None,
        url=f"https://github.com/acme/{repository}/pull/1",
        description=description,
    )


class TestSortRecords:
    def test_ascending_by_merge_time(self):
        records = [_record("late", 5), _record("early", 1), _record("mid", 3)]
        assert [r.title for r in sort_records(records)] == ["early", "mid", "late"]

    def test_unmerged_after_every_merged(self):
        records = [_record("open1"), _record("m2", 2), _record("open2"), _record("m1", 1)]
        titles = [r.title for r in sort_records(records)]
        assert titles[:2] == ["m1", "m2"]
        assert set(titles[2:]) == {"open1", "open2"}

    def test_unmerged_keep_search_order(self):
        records = [_record("b"), _record("a"), _record("c")]
        assert [r.title for r in sort_records(records)] == ["b", "a", "c"]

    def test_input_not_mutated(self):
        records = [_record("late", 5), _record("early", 1)]
        sort_records(records)
        assert [r.title for r in records] == ["late", "early"]


class TestGroupByRepository:
    def test_partitions_by_repository_name(self):
        records = [_record("a1", 1, "repoA"), _record("b1", 1, "repoB"), _record("a2", 0, "repoA")]
        groups = group_by_repository(records)
        assert list(groups) == ["repoA", "repoB"]
        assert [r.title for r in groups["repoA"]] == ["a2", "a1"]
        assert [r.title for r in groups["repoB"]] == ["b1"]

    def test_every_parseable_record_in_exactly_one_group(self):
        records = [_record(f"pr{i}", i, f"repo{i % 3}") for i in range(9)]
        groups = group_by_repository(records)
        assert sum(len(g) for g in groups.values()) == 9

    def test_unparseable_repository_dropped_with_warning(self, caplog):
        records = [_record("kept", 1), _record("lost", 2, repository=None)]
        with caplog.at_level("WARNING"):
            groups = group_by_repository(records)
        assert [r.title for r in groups["repoA"]] == ["kept"]
        assert "lost" in caplog.text

    def test_unmerged_last_within_group(self):
        records = [_record("open", None, "repoA"), _record("merged", 1, "repoA")]
        assert [r.title for r in group_by_repository(records)["repoA"]] == ["merged", "open"]


class TestFormatReport:
    def test_header_contains_run_metadata(self):
        text = format_report([_record("x", 1)], _make_config(), GENERATED)
        assert "Pull Requests by octocat in acme" in text
        assert "2024-04-01 to 2025-04-01" in text
        assert "Total Found: 1" in text
        assert "Generated:   2025-04-02 08:00:00 UTC" in text

    def test_entry_fields(self):
        text = format_report([_record("Fix login", 0)], _make_config(), GENERATED)
        assert "[1] Fix login" in text
        assert "Created At:  2024-05-22 12:00:00 UTC" in text
        assert "Merged On:   2024-06-01 12:00:00 UTC" in text
        assert "URL:         https://github.com/acme/repoA/pull/1" in text
        assert "    Body text" in text

    def test_unmerged_marker(self):
        text = format_report([_record("wip")], _make_config(), GENERATED)
        assert f"Merged On:   {NOT_MERGED}" in text

    def test_missing_description_placeholder(self):
        text = format_report([_record("x", 1, description=None)], _make_config(), GENERATED)
        assert NO_DESCRIPTION in text

    def test_blank_description_placeholder(self):
        text = format_report([_record("x", 1, description="  \n\n ")], _make_config(), GENERATED)
        assert NO_DESCRIPTION in text

    def test_description_wrapped_and_indented(self):
        long = "word " * 60
        text = format_report([_record("x", 1, description=long)], _make_config(wrap_width=40), GENERATED)
        body_lines = [line for line in text.splitlines() if line.startswith("    word")]
        assert len(body_lines) > 1
        assert all(len(line) <= 40 for line in body_lines)

    def test_entries_numbered_in_given_order(self):
        text = format_report([_record("first", 1), _record("second", 2)], _make_config(), GENERATED)
        assert text.index("[1] first") < text.index("[2] second")

    def test_zero_records_states_no_results(self):
        text = format_report([], _make_config(), GENERATED)
        assert "Total Found: 0" in text
        assert NO_RESULTS in text

    def test_repository_line_only_for_grouped_reports(self):
        assert "Repository:" not in format_report([], _make_config(), GENERATED)
        assert "Repository:  acme/repoA" in format_report([], _make_config(), GENERATED, repository="repoA")


def test_render_reports_one_text_per_repository():
    records = [_record("a", 1, "repoA"), _record("b", None, "repoB")]
    reports = render_reports(records, _make_config(), GENERATED)
    assert set(reports) == {"repoA", "repoB"}
    assert "[1] a" in reports["repoA"]
    assert NOT_MERGED in reports["repoB"]
    assert "[1] b" in reports["repoB"]


def test_render_reports_empty_for_no_records():
    assert render_reports([], _make_config(), GENERATED) == {}
