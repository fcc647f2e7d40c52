"""
check_consul — Nagios/Centreon monitoring plugin for Consul clusters.

One run queries the Consul HTTP API once, reduces the answer to a verdict
(OK / WARNING / CRITICAL / UNKNOWN) and prints the plugin report.

Usage:
    from check_consul import CheckOptions, ConsulClient, run_check
    from config.settings import load_settings

    report = run_check(CheckOptions(mode="peers", expected_peer_count=3),
                       ConsulClient(load_settings()))
    print(report.render())
"""

from check_consul.client import ConsulClient
from check_consul.models import CheckRecord, CheckStatus, ServiceInstance, Verdict
from check_consul.modes import MODES, CheckOptions, run_check
from check_consul.report import Report
from check_consul.thresholds import Thresholds, evaluate

__all__ = [
    "MODES",
    "CheckOptions",
    "CheckRecord",
    "CheckStatus",
    "ConsulClient",
    "Report",
    "ServiceInstance",
    "Thresholds",
    "Verdict",
    "evaluate",
    "run_check",
]
