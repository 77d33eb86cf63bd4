# test_reporting.py
from __future__ import annotations

import io
import json

from reporting.assembler import Assemble
from reporting.console import ConsoleReporter
from reporting.recommendations import Recommendations
from zonecheck.models import Finding, GroupOutcome, RecordKey, RunReport


def _report() -> RunReport:
    report = RunReport(total_groups=3)

    ok = GroupOutcome(key=RecordKey("www.example.com", "A"), passed=True)
    ok.warn("www.example.com A: same as `*.example.com`", "WILDCARD_COLLISION", wildcard="*.example.com")

    bad = GroupOutcome(key=RecordKey("api.example.com", "A"), passed=False)
    bad.errors.append("api.example.com A:\n  expected=1.2.3.4(300)\n  actual=1.2.3.4(600)")
    bad.findings.append(
        Finding(name="api.example.com", type="A", issue="TTL_EXCEEDED", severity="error", detail="ttl")
    )

    star = GroupOutcome(key=RecordKey("*.example.com", "A"), passed=True)

    for o in (star, ok, bad):
        report.merge(o)
    return report


def test_run_report_merge_counts_failures():
    report = _report()

    assert report.summary() == (3, 1)
    assert not report.passed
    assert len(report.error_messages) == 1
    assert report.warning_messages == ["www.example.com A: same as `*.example.com`"]
    assert [f.issue for f in report.findings] == ["WILDCARD_COLLISION", "TTL_EXCEEDED"]


def test_assemble_builds_json_safe_response():
    response = Assemble().build(target="zones.yaml", report=_report(), meta={"version": "0.1"})

    # must survive a JSON round trip untouched
    assert json.loads(json.dumps(response)) == response

    assert response["target"] == "zones.yaml"
    assert response["summary"] == {
        "records": 3,
        "failures": 1,
        "passed": 2,
        "error": 1,
        "warning": 1,
        "overall": "fail",
    }
    assert response["groups"][0] == {"name": "*.example.com", "type": "A", "passed": True}
    issues = {f["issue"]: f["recommendation"] for f in response["findings"]}
    assert issues["TTL_EXCEEDED"] == Recommendations.recommend("TTL_EXCEEDED")
    assert issues["WILDCARD_COLLISION"].startswith("This record answers exactly like a wildcard")


def test_unknown_issue_has_fallback_recommendation():
    assert Recommendations.recommend("NOPE") == "No recommendation available for this issue yet."


def test_console_markers_and_messages():
    out, err = io.StringIO(), io.StringIO()
    console = ConsoleReporter(out=out, err=err)
    report = _report()

    for o in report.outcomes:
        console(o)
    console.finish(report)

    text = out.getvalue()
    assert text.count(".") >= 2 and "F" in text
    assert "3 records, 1 failures" in text
    assert "expected=1.2.3.4(300)" in err.getvalue()
    assert "WARNING www.example.com A: same as `*.example.com`" in err.getvalue()


def test_console_debug_mode_has_no_markers():
    out, err = io.StringIO(), io.StringIO()
    console = ConsoleReporter(debug=True, out=out, err=err)
    report = _report()

    for o in report.outcomes:
        console(o)

    assert out.getvalue() == ""
