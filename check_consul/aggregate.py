"""
Reduce fetched health data to a passing count plus per-item detail lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from check_consul.models import CheckRecord, ServiceInstance


@dataclass(frozen=True)
class Aggregate:
    passing_count: int
    detail_lines: list[str] = field(default_factory=list)


def check_line(check: CheckRecord) -> str:
    # Status is echoed as Consul sent it, not as parsed.
    return f"Check '{check.id}' is {check.raw_status} : {check.output}"


def instance_header(instance: ServiceInstance) -> str:
    tags = ", ".join(instance.tags) if instance.tags else ""
    return f"{instance.service_name} on node {instance.node_name} (tags: {tags})"


def aggregate_instances(instances: Sequence[ServiceInstance]) -> Aggregate:
    """Count instances whose checks all pass; describe every instance and check."""
    passing = 0
    lines: list[str] = []
    for instance in instances:
        if instance.healthy:
            passing += 1
        lines.append(instance_header(instance))
        lines.extend(check_line(check) for check in instance.checks)
    return Aggregate(passing, lines)


def aggregate_checks(checks: Sequence[CheckRecord]) -> Aggregate:
    """Count passing checks; one detail line per check."""
    passing = sum(1 for check in checks if check.passing)
    return Aggregate(passing, [check_line(check) for check in checks])


def aggregate(items: Sequence[ServiceInstance] | Sequence[CheckRecord]) -> Aggregate:
    if not items:
        return Aggregate(0, [])
    if isinstance(items[0], ServiceInstance):
        return aggregate_instances(items)  # type: ignore[arg-type]
    return aggregate_checks(items)  # type: ignore[arg-type]
