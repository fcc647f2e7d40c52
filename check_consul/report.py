"""
Plugin output contract.

    {LEVEL} : {headline}
    |{perfdata_label}={count}
    {detail line}
    ...
    {trailer line}
    ...

LEVEL is one of OK, WARNING, CRITICAL, UNKNOWN in exactly that casing;
supervisors match on it. Lines are never reordered or truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from check_consul.models import Verdict
from check_consul.thresholds import Evaluation


@dataclass(frozen=True)
class Report:
    verdict: Verdict
    headline: str
    count: Optional[int] = None
    perfdata_label: Optional[str] = None
    detail_lines: tuple[str, ...] = ()
    trailer_lines: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        return f"{self.verdict.label} : {self.headline}"

    @property
    def perfdata(self) -> Optional[str]:
        if self.perfdata_label is None or self.count is None:
            return None
        return f"|{self.perfdata_label}={self.count}"

    def lines(self) -> list[str]:
        out = [self.summary]
        if self.perfdata is not None:
            out.append(self.perfdata)
        out.extend(self.detail_lines)
        out.extend(self.trailer_lines)
        return out

    def render(self) -> str:
        return "\n".join(self.lines())


def format_report(
    verdict: Verdict | Evaluation,
    headline: str,
    count: int,
    detail_lines: Sequence[str],
    perfdata_label: str,
    trailer: Sequence[str] = (),
) -> Report:
    if isinstance(verdict, Evaluation):
        verdict = verdict.verdict
    return Report(
        verdict=verdict,
        headline=headline,
        count=count,
        perfdata_label=perfdata_label,
        detail_lines=tuple(detail_lines),
        trailer_lines=tuple(trailer),
    )


def single_line_report(verdict: Verdict, headline: str) -> Report:
    """Report with a summary line only: no perfdata, no details."""
    return Report(verdict=verdict, headline=headline)


def node_filter_trailer(service: Optional[str], check_id: Optional[str]) -> list[str]:
    """Echo the node-health filters so operators can see what was queried."""
    return [
        "",
        f"(Filtered ServiceName : {service or 'None'}, CheckID : {check_id or 'None'})",
    ]
