"""Runs every detection rule and orders the findings."""

from __future__ import annotations

from typing import Iterable, List

from scrubd.filesystem import (
    detect_abandoned_mounts,
    detect_dangling_overlay_snapshots,
    detect_stale_cgroups,
)
from scrubd.inventory import DetectionInput
from scrubd.leaks import Leak, severity_rank
from scrubd.network import (
    detect_orphan_veth,
    detect_stale_network_bridges,
    detect_stale_network_namespaces,
    detect_stale_routes,
)
from scrubd.processes import detect_orphan_runtime_processes


def detect(detection_input: DetectionInput) -> List[Leak]:
    """All leaks found in ``detection_input``, most severe first."""
    leaks: List[Leak] = [
        *detect_orphan_veth(detection_input),
        *detect_stale_network_bridges(detection_input),
        *detect_stale_routes(detection_input),
        *detect_stale_network_namespaces(detection_input.host),
        *detect_abandoned_mounts(detection_input),
        *detect_dangling_overlay_snapshots(detection_input),
        *detect_stale_cgroups(detection_input),
        *detect_orphan_runtime_processes(detection_input),
    ]
    return sort_leaks(leaks)


def sort_leaks(leaks: Iterable[Leak]) -> List[Leak]:
    """Leaks ordered by severity (worst first), then type, then resource."""
    return sorted(
        leaks,
        key=lambda leak: (
            -severity_rank(leak.severity),
            str(leak.leak_type),
            leak.resource,
        ),
    )