"""
tests/fixtures/consul.py — Canned Consul data for unit tests.

FakeConsul has the same four query methods as ConsulClient and records every
call, so tests can assert that nothing was fetched on parameter errors.
"""

from __future__ import annotations

from check_consul.models import CheckRecord, ServiceInstance


class FakeConsul:
    def __init__(self, instances=None, checks=None, leader="", peers=None, error=None):
        self.instances = instances or []
        self.checks = checks or []
        self._leader = leader
        self._peers = peers or []
        self.error = error
        self.calls: list[tuple] = []

    def _answer(self, call: tuple, value):
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return value

    def service_health(self, service, tag=None):
        return self._answer(("service_health", service, tag), self.instances)

    def node_health(self, node, service=None, check_id=None):
        return self._answer(("node_health", node, service, check_id), self.checks)

    def leader(self):
        return self._answer(("leader",), self._leader)

    def peers(self):
        return self._answer(("peers",), self._peers)


def make_check(check_id: str, status: str = "passing", output: str = "") -> CheckRecord:
    return CheckRecord(CheckID=check_id, Status=status, Output=output)


def make_instance(service: str, node: str, *statuses: str, tags=None) -> ServiceInstance:
    """Instance with one check per status, named '{service}-{index}'."""
    checks = tuple(make_check(f"{service}-{i}", s, f"{s} output") for i, s in enumerate(statuses))
    return ServiceInstance(service_name=service, node_name=node, tags=tags, checks=checks)


# Trimmed /v1/health/service/web answer (one healthy, one failing instance)
SERVICE_HEALTH_PAYLOAD = [
    {
        "Node": {"ID": "a1", "Node": "node-1", "Address": "10.0.0.1"},
        "Service": {"ID": "web-1", "Service": "web", "Tags": ["primary", "v2"], "Port": 80},
        "Checks": [
            {"Node": "node-1", "CheckID": "serfHealth", "Name": "Serf Health Status",
             "Status": "passing", "Output": "Agent alive and reachable",
             "ServiceID": "", "ServiceName": ""},
            {"Node": "node-1", "CheckID": "service:web-1", "Name": "HTTP on :80",
             "Status": "passing", "Output": "HTTP GET http://localhost:80/: 200 OK",
             "ServiceID": "web-1", "ServiceName": "web"},
        ],
    },
    {
        "Node": {"ID": "b2", "Node": "node-2", "Address": "10.0.0.2"},
        "Service": {"ID": "web-2", "Service": "web", "Tags": None, "Port": 80},
        "Checks": [
            {"Node": "node-2", "CheckID": "serfHealth", "Name": "Serf Health Status",
             "Status": "passing", "Output": "Agent alive and reachable",
             "ServiceID": "", "ServiceName": ""},
            {"Node": "node-2", "CheckID": "service:web-2", "Name": "HTTP on :80",
             "Status": "critical", "Output": "connection refused",
             "ServiceID": "web-2", "ServiceName": "web"},
        ],
    },
]
