"""Leak records, stable identifiers and severity handling."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Union

from scrubd.cleanup import Step


class LeakType(str, Enum):
    VETH_INTERFACE = "orphaned_veth_interface"
    NETWORK_BRIDGE = "stale_network_bridge"
    ROUTE = "stale_network_route"
    NETWORK_NS = "stale_network_namespace"
    OVERLAY_SNAPSHOT = "dangling_overlay_snapshot"
    MOUNT = "abandoned_container_mount"
    CGROUP = "stale_cgroup"
    RUNTIME_PROCESS = "orphaned_runtime_process"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANKS = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


@dataclass
class Leak:
    """A resource that looks leaked, with evidence and a suggested remedy."""

    id: str
    leak_type: LeakType
    severity: Severity
    resource: str
    reason: str
    evidence: List[str] = field(default_factory=list)
    safe_action: str = ""
    risk_notes: str = ""
    cleanup_plan: List[Step] = field(default_factory=list)

    def is_valid(self) -> bool:
        return all((self.id, self.leak_type, self.severity, self.resource, self.reason))


def _text(value: Union[str, Enum]) -> str:
    return value.value if isinstance(value, Enum) else value


def new_leak(
    leak_type: LeakType, severity: Severity, resource: str, reason: str
) -> Leak:
    """Build a leak whose id is derived from its type and resource."""
    return Leak(
        id=stable_id(leak_type, resource),
        leak_type=leak_type,
        severity=severity,
        resource=resource,
        reason=reason,
    )


def stable_id(leak_type: Union[LeakType, str], resource: str) -> str:
    """Deterministic short identifier for a leak type and resource."""
    key = _text(leak_type).strip().lower() + "\x00" + resource.strip()
    return "leak-" + hashlib.sha256(key.encode()).hexdigest()[:12]


def severity_rank(severity: Union[Severity, str]) -> int:
    """Rank of a severity, higher is worse; 0 for unknown values."""
    try:
        return _SEVERITY_RANKS[Severity(_text(severity))]
    except ValueError:
        return 0


def valid_severity(severity: Union[Severity, str]) -> bool:
    return severity_rank(severity) > 0


def filter_by_min_severity(
    leaks: Iterable[Leak], minimum: Union[Severity, str]
) -> List[Leak]:
    """Keep leaks at or above ``minimum``; unknown or low keeps everything."""
    leaks = list(leaks)
    if not valid_severity(minimum) or _text(minimum) == Severity.LOW.value:
        return leaks
    threshold = severity_rank(minimum)
    return [leak for leak in leaks if severity_rank(leak.severity) >= threshold]