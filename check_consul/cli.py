#!/usr/bin/env python3
"""
check_consul/cli.py — Nagios/Centreon compatible Consul check command.

Usage:
    check-consul -m service-health --service web --critical-min 1
    check-consul -m node-service-health --node node-1 --check-id serfHealth
    check-consul -m leader --expected-leader 10.0.0.1:8300
    check-consul -m peers --expected-peers-count 3 --critical-on-error
    python -m check_consul -m leader --verbose

Connection defaults come from .env / os.environ (see config/settings.py);
flags given here override them.

Output: the report goes to stdout, diagnostics to stderr. The exit code is
the verdict: 0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from check_consul.client import ConsulClient
from check_consul.errors import CheckConsulError, FetchError
from check_consul.models import Verdict
from check_consul.modes import MODES, CheckOptions, exit_code, run_check
from check_consul.thresholds import Thresholds
from config.settings import Settings, load_settings


class PluginArgumentParser(argparse.ArgumentParser):
    """argparse exits 2 on bad usage; for a monitoring plugin that reads as CRITICAL."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(Verdict.UNKNOWN)


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"must be an integer, got '{raw}'") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_parser() -> PluginArgumentParser:
    parser = PluginArgumentParser(
        prog="check-consul",
        description="Nagios/Centreon compatible Consul check commands.",
    )
    parser.add_argument(
        "-m", "--mode", default="",
        help=f"Consul check mode ({', '.join(MODES)})",
    )

    conn = parser.add_argument_group("connection")
    conn.add_argument("-H", "--host", help="Consul service host (default 127.0.0.1)")
    conn.add_argument("--port", type=int, help="Consul HTTP API port (default 8500)")
    conn.add_argument("--scheme", choices=("http", "https"), help="Consul HTTP API scheme")
    conn.add_argument("--token", help="Consul ACL token")
    conn.add_argument("--timeout", type=int, help="HTTP timeout in seconds (default 10)")
    conn.add_argument("--env-file", default=".env", help="env file with CONSUL_* defaults")

    thresholds = parser.add_argument_group("thresholds")
    thresholds.add_argument("--warning-min", type=_non_negative_int,
                            help="Warning if less than or equal to that value")
    thresholds.add_argument("--warning-max", type=_non_negative_int,
                            help="Warning if more than or equal to that value")
    thresholds.add_argument("--critical-min", type=_non_negative_int,
                            help="Critical if less than or equal to that value")
    thresholds.add_argument("--critical-max", type=_non_negative_int,
                            help="Critical if more than or equal to that value")

    scope = parser.add_argument_group("scope")
    scope.add_argument("--service", help="Service name")
    scope.add_argument("--tag", help="Service tag")
    scope.add_argument("--node", help="Node name")
    scope.add_argument("--check-id", help="CheckID")
    scope.add_argument("--expected-leader", help="Expected cluster leader")
    scope.add_argument("--expected-peers-count", type=_non_negative_int,
                       help="Expected peers count in cluster")

    # default=None so an absent flag leaves the env value alone
    parser.add_argument("--critical-on-error", action="store_true", default=None,
                        help="Exit with critical status when Consul cannot be queried")
    parser.add_argument("--verbose", action="store_true", default=None,
                        help="Print extended output on stderr")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    mapping = {
        "CONSUL_HOST": args.host,
        "CONSUL_PORT": args.port,
        "CONSUL_SCHEME": args.scheme,
        "CONSUL_HTTP_TOKEN": args.token,
        "CONSUL_TIMEOUT_SECONDS": args.timeout,
        "CRITICAL_ON_ERROR": args.critical_on_error,
        "VERBOSE": args.verbose,
    }
    return {k: v for k, v in mapping.items() if v is not None}


def resolve_settings(args: argparse.Namespace) -> Settings:
    base = load_settings(args.env_file)
    return Settings(**{**base.model_dump(), **_overrides(args)})


def options_from_args(args: argparse.Namespace) -> CheckOptions:
    return CheckOptions(
        mode=args.mode,
        thresholds=Thresholds(
            warning_min=args.warning_min,
            warning_max=args.warning_max,
            critical_min=args.critical_min,
            critical_max=args.critical_max,
        ),
        service=args.service,
        tag=args.tag,
        node=args.node,
        check_id=args.check_id,
        expected_leader=args.expected_leader,
        expected_peer_count=args.expected_peers_count,
    )


def handle_failure(exc: CheckConsulError, cfg: Settings) -> Verdict:
    """Report a failed run on stderr and pick its verdict."""
    print(str(exc), file=sys.stderr)
    if isinstance(exc, FetchError):
        if cfg.VERBOSE and exc.detail:
            print(exc.detail, file=sys.stderr)
        return Verdict.CRITICAL if cfg.CRITICAL_ON_ERROR else Verdict.UNKNOWN
    return Verdict.UNKNOWN


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = resolve_settings(args)
    except ValidationError as exc:
        print("Invalid Consul connection settings", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return int(Verdict.UNKNOWN)

    try:
        report = run_check(options_from_args(args), ConsulClient(cfg))
    except CheckConsulError as exc:
        return int(handle_failure(exc, cfg))

    print(report.render())
    return exit_code(report)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
