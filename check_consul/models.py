"""
Typed records for what Consul returns and what the plugin reports.

Consul answers are parsed into frozen pydantic models by their API field
names (``CheckID``, ``Status``, ``Service.Service`` ...), so everything past
the HTTP client works on validated, immutable data.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CheckStatus(str, Enum):
    """Health check state as reported by Consul."""

    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> CheckStatus:
        """Exact, case-sensitive match; anything else is UNKNOWN (never passing)."""
        if raw in ("passing", "warning", "critical"):
            return cls(raw)
        return cls.UNKNOWN


class Verdict(IntEnum):
    """Plugin verdict. The value is the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        return self.name


class CheckRecord(BaseModel):
    """One health check, from /v1/health/node or nested in a service entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(alias="CheckID")
    raw_status: str = Field(default="", alias="Status")
    output: str = Field(default="", alias="Output")
    name: str = Field(default="", alias="Name")
    node: str = Field(default="", alias="Node")
    service_name: str = Field(default="", alias="ServiceName")
    service_id: str = Field(default="", alias="ServiceID")

    @field_validator("raw_status", "output", "name", "node", "service_name", "service_id", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any) -> Any:
        # a non-string Status parses as UNKNOWN instead of failing the response
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @property
    def status(self) -> CheckStatus:
        return CheckStatus.parse(self.raw_status)

    @property
    def passing(self) -> bool:
        return self.status is CheckStatus.PASSING


class ServiceInstance(BaseModel):
    """One instance of a service on one node, with its attached checks."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    node_name: str
    tags: tuple[str, ...] | None = None
    checks: tuple[CheckRecord, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def unwrap_service_entry(cls, data: Any) -> Any:
        # /v1/health/service entries nest the names one level down:
        # {"Node": {"Node": ...}, "Service": {"Service": ..., "Tags": [...]}, "Checks": [...]}
        if isinstance(data, dict) and "Service" in data:
            service = data.get("Service") or {}
            node = data.get("Node") or {}
            return {
                "service_name": service.get("Service", ""),
                "node_name": node.get("Node", ""),
                "tags": service.get("Tags"),
                "checks": data.get("Checks") or (),
            }
        return data

    @property
    def healthy(self) -> bool:
        """True when every attached check is passing; no checks counts as healthy."""
        return all(check.passing for check in self.checks)
