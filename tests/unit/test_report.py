"""Unit tests for the plugin output contract in check_consul.report."""

from __future__ import annotations

from check_consul.aggregate import aggregate_instances
from check_consul.models import Verdict
from check_consul.report import Report, format_report, node_filter_trailer, single_line_report
from check_consul.thresholds import Evaluation
from tests.fixtures.consul import make_instance


def test_summary_perfdata_and_details_in_order():
    report = format_report(Verdict.WARNING, "Not enough web service instances", 0,
                           ["line one", "line two"], "instance_count")
    assert report.lines() == [
        "WARNING : Not enough web service instances",
        "|instance_count=0",
        "line one",
        "line two",
    ]


def test_accepts_an_evaluation():
    report = format_report(Evaluation(Verdict.CRITICAL, "critical_max"), "Too many passing checks",
                           9, [], "passing_check_count")
    assert report.verdict is Verdict.CRITICAL
    assert report.render() == "CRITICAL : Too many passing checks\n|passing_check_count=9"


def test_trailer_follows_details():
    report = format_report(Verdict.OK, "1 passing checks", 1, ["Check 'a' is passing : "],
                           "passing_check_count", trailer=node_filter_trailer("web", None))
    assert report.lines()[-3:] == [
        "Check 'a' is passing : ",
        "",
        "(Filtered ServiceName : web, CheckID : None)",
    ]


def test_filter_trailer_names_both_filters():
    assert node_filter_trailer(None, "serfHealth")[1] == "(Filtered ServiceName : None, CheckID : serfHealth)"
    assert node_filter_trailer("db", "c1")[1] == "(Filtered ServiceName : db, CheckID : c1)"


def test_single_line_report_has_no_perfdata():
    report = single_line_report(Verdict.OK, "Cluster leader is 10.0.0.1:8300")
    assert report.perfdata is None
    assert report.lines() == ["OK : Cluster leader is 10.0.0.1:8300"]


def test_level_words():
    for verdict, word in [(Verdict.OK, "OK"), (Verdict.WARNING, "WARNING"),
                          (Verdict.CRITICAL, "CRITICAL"), (Verdict.UNKNOWN, "UNKNOWN")]:
        assert Report(verdict, "x").summary == f"{word} : x"


def test_aggregate_then_format_twice_is_byte_identical():
    instances = [make_instance("web", "n1", "passing"), make_instance("web", "n2", "critical", tags=("a",))]

    def build() -> str:
        result = aggregate_instances(instances)
        return format_report(Verdict.OK, "1 passing web service instances", result.passing_count,
                             result.detail_lines, "instance_count").render()

    assert build() == build()


def test_report_is_not_truncated():
    lines = [f"peer-{i}" for i in range(500)]
    report = format_report(Verdict.OK, "500 peers in cluster", 500, lines, "peers")
    assert len(report.lines()) == 502
