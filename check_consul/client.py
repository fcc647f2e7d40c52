"""
check_consul/client.py — Minimal Consul HTTP API client.

One GET per call, no retries. Every way a call can fail (connection refused,
timeout, HTTP error status, malformed HTTP response, non-JSON body, unexpected
payload shape) surfaces as FetchError so the CLI can map it to CRITICAL or
UNKNOWN.
"""

from __future__ import annotations

import http.client
import json
import sys
import urllib.error
import urllib.parse
import urllib.request
from typing import TYPE_CHECKING, Any, Optional

from pydantic import TypeAdapter, ValidationError

from check_consul.errors import FetchError
from check_consul.models import CheckRecord, ServiceInstance

if TYPE_CHECKING:
    from config.settings import Settings

_INSTANCES = TypeAdapter(list[ServiceInstance])
_CHECKS = TypeAdapter(list[CheckRecord])
_PEERS = TypeAdapter(list[str])
_LEADER = TypeAdapter(str)


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


def _filter_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def node_filter(service: Optional[str], check_id: Optional[str]) -> Optional[str]:
    """Build the ?filter= expression for /v1/health/node."""
    clauses = []
    if service:
        clauses.append(f"ServiceName == {_filter_literal(service)}")
    if check_id:
        clauses.append(f"CheckID == {_filter_literal(check_id)}")
    return " and ".join(clauses) or None


class ConsulClient:
    def __init__(self, cfg: Settings) -> None:
        self.base_url = cfg.base_url
        self.token = cfg.effective_token
        self.timeout = cfg.CONSUL_TIMEOUT_SECONDS
        self.verbose = cfg.VERBOSE

    def url(self, path: str, params: Optional[dict[str, Optional[str]]] = None) -> str:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        url = f"{self.base_url}{path}"
        if query:
            url += "?" + urllib.parse.urlencode(query)
        return url

    def get_json(self, path: str, failure: str, params: Optional[dict[str, Optional[str]]] = None) -> Any:
        url = self.url(path, params)
        headers = {"Accept": "application/json"}
        if self.token:
            headers["X-Consul-Token"] = self.token
        request = urllib.request.Request(url, headers=headers, method="GET")
        if self.verbose:
            print(f"GET {url}", file=sys.stderr)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as e:
            reason = e.read().decode("utf-8", errors="replace").strip()[:300]
            raise FetchError(failure, detail=f"HTTP {e.code} from {url}: {reason or e.reason}") from e
        except urllib.error.URLError as e:
            raise FetchError(failure, detail=f"not reachable at {self.base_url}: {e.reason}") from e
        except http.client.HTTPException as e:
            # non-HTTP listener on the port, or a body cut short by a proxy
            raise FetchError(failure, detail=f"bad HTTP response from {url}: {e!r}") from e
        except OSError as e:
            # socket timeouts and resets raised while reading the body
            raise FetchError(failure, detail=f"error talking to {self.base_url}: {e}") from e
        try:
            return json.loads(body)
        except ValueError as e:
            raise FetchError(failure, detail=f"invalid JSON from {url}: {e}") from e

    def _parse(self, adapter: TypeAdapter, payload: Any, failure: str) -> Any:
        try:
            return adapter.validate_python(payload)
        except ValidationError as e:
            raise FetchError(failure, detail=f"unexpected response shape: {e}") from e

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def service_health(self, service: str, tag: Optional[str] = None) -> list[ServiceInstance]:
        failure = "Failed to get service instances"
        payload = self.get_json(f"/v1/health/service/{_quote(service)}", failure, {"tag": tag})
        return self._parse(_INSTANCES, payload, failure)

    def node_health(
        self,
        node: str,
        service: Optional[str] = None,
        check_id: Optional[str] = None,
    ) -> list[CheckRecord]:
        failure = f"Failed to get service health on node {node}"
        payload = self.get_json(
            f"/v1/health/node/{_quote(node)}",
            failure,
            {"filter": node_filter(service, check_id)},
        )
        return self._parse(_CHECKS, payload, failure)

    def leader(self) -> str:
        failure = "Failed to get leader"
        return self._parse(_LEADER, self.get_json("/v1/status/leader", failure), failure)

    def peers(self) -> list[str]:
        failure = "Failed to get peers"
        return self._parse(_PEERS, self.get_json("/v1/status/peers", failure), failure)
