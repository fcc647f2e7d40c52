"""
check_consul/modes.py — One evaluation pipeline, four check modes.

Each mode validates its parameters, performs exactly one Consul call and
feeds the answer through aggregate → evaluate → format:

  service-health        instances of a service (optionally by tag), counted
                        as passing when all of their checks pass
  node-service-health   checks on one node, filtered by service and/or check id
  leader                current raft leader, optionally against an expected one
  peers                 raft peers, optionally against an expected count

Parameter errors are raised before anything is fetched.

Importable:
    from check_consul.modes import CheckOptions, run_check
    report = run_check(CheckOptions(mode="leader"), client)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from check_consul.aggregate import aggregate_checks, aggregate_instances
from check_consul.errors import ConfigurationError, ModeError
from check_consul.models import Verdict
from check_consul.report import Report, format_report, node_filter_trailer, single_line_report
from check_consul.thresholds import Thresholds, evaluate, evaluate_leader, evaluate_peers

if TYPE_CHECKING:
    from check_consul.client import ConsulClient

SERVICE_HEALTH = "service-health"
NODE_SERVICE_HEALTH = "node-service-health"
LEADER = "leader"
PEERS = "peers"
MODES = (SERVICE_HEALTH, NODE_SERVICE_HEALTH, LEADER, PEERS)


class CheckOptions(BaseModel):
    """What to check and how to judge it, as given on the command line."""

    model_config = ConfigDict(frozen=True)

    mode: str = ""
    thresholds: Thresholds = Field(default_factory=Thresholds)
    service: Optional[str] = None
    tag: Optional[str] = None
    node: Optional[str] = None
    check_id: Optional[str] = None
    expected_leader: Optional[str] = None
    expected_peer_count: Optional[int] = Field(default=None, ge=0)


def check_service_health(options: CheckOptions, client: ConsulClient) -> Report:
    if not options.service:
        raise ConfigurationError("service must be provided for this mode")
    service = options.service

    result = aggregate_instances(client.service_health(service, options.tag))
    evaluation = evaluate(result.passing_count, options.thresholds)
    if evaluation.rule is None:
        headline = f"{result.passing_count} passing {service} service instances"
    else:
        headline = f"{evaluation.phrase} {service} service instances"
    return format_report(evaluation, headline, result.passing_count, result.detail_lines, "instance_count")


def check_node_service_health(options: CheckOptions, client: ConsulClient) -> Report:
    if not options.node:
        raise ConfigurationError("node must be provided in this mode")
    if not options.service and not options.check_id:
        raise ConfigurationError("service or check-id must be provided for this check")

    result = aggregate_checks(client.node_health(options.node, options.service, options.check_id))
    evaluation = evaluate(result.passing_count, options.thresholds)
    if evaluation.rule is None:
        headline = f"{result.passing_count} passing checks"
    else:
        headline = f"{evaluation.phrase} passing checks"
    return format_report(
        evaluation,
        headline,
        result.passing_count,
        result.detail_lines,
        "passing_check_count",
        trailer=node_filter_trailer(options.service, options.check_id),
    )


def check_leader(options: CheckOptions, client: ConsulClient) -> Report:
    observed = client.leader()
    evaluation = evaluate_leader(observed, options.expected_leader)
    if evaluation.verdict is not Verdict.OK:
        # Name order matches the message the plugin has always printed.
        return single_line_report(
            evaluation.verdict,
            f"{options.expected_leader} is not the expected cluster leader (expected {observed})",
        )
    return single_line_report(evaluation.verdict, f"Cluster leader is {observed}")


def check_peers(options: CheckOptions, client: ConsulClient) -> Report:
    peers = client.peers()
    count = len(peers)
    evaluation = evaluate_peers(count, options.expected_peer_count, options.thresholds)
    if options.expected_peer_count is not None and options.expected_peer_count != count:
        headline = f"Expected {options.expected_peer_count} peers in cluster, found {count}"
    elif evaluation.rule is not None:
        headline = f"{evaluation.phrase} peers in cluster ({count})"
    else:
        headline = f"{count} peers in cluster"
    return format_report(evaluation, headline, count, peers, "peers")


_DISPATCH: dict[str, Callable[[CheckOptions, "ConsulClient"], Report]] = {
    SERVICE_HEALTH: check_service_health,
    NODE_SERVICE_HEALTH: check_node_service_health,
    LEADER: check_leader,
    PEERS: check_peers,
}


def resolve_mode(mode: str) -> Callable[[CheckOptions, "ConsulClient"], Report]:
    mode = mode.strip()
    if not mode:
        raise ModeError("No check mode found")
    try:
        return _DISPATCH[mode]
    except KeyError:
        raise ModeError(f"Unknown check mode {mode}") from None


def run_check(options: CheckOptions, client: ConsulClient) -> Report:
    """Run the selected mode. Raises CheckConsulError subclasses on failure."""
    return resolve_mode(options.mode)(options, client)


def exit_code(report: Report) -> int:
    return int(report.verdict)
