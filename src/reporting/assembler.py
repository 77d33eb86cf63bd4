from typing import Any, Dict, Iterable, Optional

from fastapi.encoders import jsonable_encoder

from .recommendations import Recommendations


class Assemble:
    """
    Turns a RunReport into the response shared by `zonecheck --json` and POST /check.

    Layout:
      target    what was checked (config path or zone names)
      findings  one entry per structured issue, each with a recommendation
      summary   group totals, finding counts per severity, overall pass|fail
      errors / warnings / groups   the run's messages and per-group verdicts
      meta      caller supplied (version, source, nameservers)
    """

    def build(self, target: str, report: Any, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        data = jsonable_encoder(report.to_dict() if hasattr(report, "to_dict") else report)

        findings = [dict(f, recommendation=Recommendations.recommend(f.get("issue", ""))) for f in data.get("findings", [])]

        return jsonable_encoder(
            {
                "target": target,
                "findings": findings,
                "summary": self.summary(data.get("total_groups", 0), data.get("failed_groups", 0), findings),
                "errors": data.get("error_messages", []),
                "warnings": data.get("warning_messages", []),
                "groups": data.get("groups", []),
                "meta": meta or {},
            }
        )

    @staticmethod
    def summary(total: int, failed: int, findings: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        by_severity = {"error": 0, "warning": 0}
        for f in findings:
            severity = str(f.get("severity") or "unknown").lower()
            by_severity[severity] = by_severity.get(severity, 0) + 1

        return {
            "records": int(total),
            "failures": int(failed),
            "passed": int(total) - int(failed),
            **by_severity,
            "overall": "pass" if not failed else "fail",
        }
