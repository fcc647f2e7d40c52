"""
Threshold evaluation: turn a count and optional bounds into a verdict.

Rules are tried in a fixed order and the first one that fires wins:

  1. critical_min   count <= bound   CRITICAL  "Not enough"
  2. warning_min    count <= bound   WARNING   "Not enough"
  3. critical_max   count >= bound   CRITICAL  "Too many"
  4. warning_max    count >= bound   WARNING   "Too many"
  5. (none)                          OK

Both min bounds are checked before either max bound, so a count that breaks
a min and a max bound at once is reported as "Not enough". Bounds may be
given in any order relative to each other; absent bounds never fire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from check_consul.models import Verdict

Rule = Literal["critical_min", "warning_min", "critical_max", "warning_max"]

NOT_ENOUGH = "Not enough"
TOO_MANY = "Too many"

_RULES: tuple[tuple[Rule, Verdict, str], ...] = (
    ("critical_min", Verdict.CRITICAL, "min"),
    ("warning_min", Verdict.WARNING, "min"),
    ("critical_max", Verdict.CRITICAL, "max"),
    ("warning_max", Verdict.WARNING, "max"),
)


class Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    warning_min: Optional[int] = Field(default=None, ge=0)
    warning_max: Optional[int] = Field(default=None, ge=0)
    critical_min: Optional[int] = Field(default=None, ge=0)
    critical_max: Optional[int] = Field(default=None, ge=0)

    @property
    def empty(self) -> bool:
        return all(getattr(self, rule) is None for rule, _, _ in _RULES)


@dataclass(frozen=True)
class Evaluation:
    verdict: Verdict
    rule: Optional[Rule] = None

    @property
    def phrase(self) -> Optional[str]:
        if self.rule is None:
            return None
        return NOT_ENOUGH if self.rule.endswith("_min") else TOO_MANY


OK = Evaluation(Verdict.OK)


def evaluate(count: int, thresholds: Thresholds) -> Evaluation:
    if thresholds.empty:
        return OK
    for rule, verdict, side in _RULES:
        bound = getattr(thresholds, rule)
        if bound is None:
            continue
        if (side == "min" and count <= bound) or (side == "max" and count >= bound):
            return Evaluation(verdict, rule)
    return OK


def evaluate_leader(observed: str, expected: Optional[str]) -> Evaluation:
    """CRITICAL when an expected leader is given and Consul reports another one."""
    if expected is not None and expected != observed:
        return Evaluation(Verdict.CRITICAL)
    return OK


def evaluate_peers(
    count: int,
    expected_count: Optional[int],
    thresholds: Optional[Thresholds] = None,
) -> Evaluation:
    """A peer count mismatch is CRITICAL; count bounds only apply otherwise."""
    if expected_count is not None and expected_count != count:
        return Evaluation(Verdict.CRITICAL)
    if thresholds is None:
        return OK
    return evaluate(count, thresholds)
