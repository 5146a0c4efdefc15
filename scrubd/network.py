"""Detection rules for leaked network resources."""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from scrubd.cleanup import Step
from scrubd.inventory import (
    DetectionInput,
    HostInventory,
    NetworkInterface,
    Route,
)
from scrubd.leaks import Leak, LeakType, Severity, new_leak
from scrubd.references import (
    running_container_count,
    runtime_correlation_available,
    runtime_inventory_complete,
)

_DEFAULT_BRIDGES = frozenset({"docker0", "cni0", "podman0"})
_RUNTIME_BRIDGE_PREFIXES = ("br-", "cni", "podman")


def runtime_bridge_name(name: str) -> bool:
    """True for interface names that look like runtime-created bridges.

    Default bridges that runtimes keep around permanently are excluded.
    """
    if name in _DEFAULT_BRIDGES:
        return False
    return name.startswith(_RUNTIME_BRIDGE_PREFIXES)


def detect_orphan_veth(detection_input: DetectionInput) -> List[Leak]:
    """Veth interfaces whose peer is not visible while no container runs."""
    runtimes = detection_input.runtimes
    if running_container_count(runtimes) > 0:
        return []
    if not runtime_inventory_complete(runtimes):
        return []

    interfaces = detection_input.host.network_interfaces
    visible = _interface_indexes(interfaces)
    leaks: List[Leak] = []
    for iface in interfaces:
        if iface.kind != "veth":
            continue
        if iface.peer_index != 0 and iface.peer_index in visible:
            continue

        leak = new_leak(
            LeakType.VETH_INTERFACE,
            Severity.HIGH,
            iface.name,
            "veth interface found but no running runtime container references are available",
        )
        leak.evidence = [
            f"interface index: {iface.index}",
            "interface kind: veth",
            _veth_peer_evidence(iface),
            "runtime inventories: all selected runtimes available",
            "running containers: 0",
        ]
        leak.safe_action = f"ip link delete {iface.name}"
        leak.risk_notes = "delete only after confirming no workload uses this interface"
        leak.cleanup_plan = [
            Step(
                description=f"delete veth interface {iface.name}",
                command=("ip", "link", "delete", iface.name),
                destructive=True,
            )
        ]
        leaks.append(leak)
    return leaks


def _interface_indexes(interfaces: Iterable[NetworkInterface]) -> Set[int]:
    return {iface.index for iface in interfaces if iface.index != 0}


def _veth_peer_evidence(iface: NetworkInterface) -> str:
    if iface.peer_index == 0:
        return "peer interface index: unknown"
    return f"peer interface index: {iface.peer_index} not visible on host"


def detect_stale_network_bridges(detection_input: DetectionInput) -> List[Leak]:
    """Runtime-looking bridges with no ports while no container runs."""
    runtimes = detection_input.runtimes
    if not runtime_correlation_available(runtimes):
        return []
    if not runtime_inventory_complete(runtimes):
        return []
    if running_container_count(runtimes) > 0:
        return []

    leaks: List[Leak] = []
    for iface in detection_input.host.network_interfaces:
        if not _stale_bridge_candidate(iface):
            continue

        leak = new_leak(
            LeakType.NETWORK_BRIDGE,
            Severity.LOW,
            iface.name,
            "runtime-looking bridge has no attached bridge ports and no running runtime containers",
        )
        leak.evidence = [
            f"interface index: {iface.index}",
            "interface kind: bridge",
            f"bridge ports: {len(iface.bridge_ports)}",
            "runtime inventories: all selected runtimes available",
            "running containers: 0",
        ]
        if iface.flags:
            leak.evidence.append("flags: " + ",".join(iface.flags))
        leak.safe_action = (
            "Review runtime network metadata and remove the bridge with runtime "
            "or network tooling only if it is no longer configured."
        )
        leak.risk_notes = (
            "Removing an active bridge can disrupt container, pod, or host networking; "
            "scrubd does not generate a direct bridge cleanup command."
        )
        leaks.append(leak)
    return leaks


def _stale_bridge_candidate(iface: NetworkInterface) -> bool:
    return (
        iface.kind == "bridge"
        and iface.bridge_ports_known
        and runtime_bridge_name(iface.name)
        and not iface.bridge_ports
    )


def detect_stale_routes(detection_input: DetectionInput) -> List[Leak]:
    """Routes through runtime-looking interfaces that no longer exist."""
    if not runtime_correlation_available(detection_input.runtimes):
        return []

    names = {
        iface.name for iface in detection_input.host.network_interfaces if iface.name
    }
    leaks: List[Leak] = []
    for route in detection_input.host.routes:
        if not _stale_route_candidate(route, names):
            continue

        resource = f"{route.interface} {route.destination}/{route.mask}"
        leak = new_leak(
            LeakType.ROUTE,
            Severity.LOW,
            resource,
            "route references a missing runtime-looking network interface",
        )
        leak.evidence = [
            "interface: " + route.interface,
            "destination: " + route.destination,
            "mask: " + route.mask,
            "gateway: " + route.gateway,
            "source: " + route.source,
            "interface present: false",
        ]
        leak.safe_action = (
            "Review runtime or CNI network metadata and remove the stale route with "
            "network tooling only if the route is no longer configured."
        )
        leak.risk_notes = (
            "Removing an active route can disrupt container, pod, or host networking; "
            "scrubd does not generate a direct route cleanup command."
        )
        leaks.append(leak)
    return leaks


def _stale_route_candidate(route: Route, interfaces: Set[str]) -> bool:
    if not route.interface or not runtime_bridge_name(route.interface):
        return False
    return route.interface not in interfaces


def detect_stale_network_namespaces(host: HostInventory) -> List[Leak]:
    """Named network namespaces that no process is using."""
    process_inodes = {
        ns.inode
        for ns in host.network_namespaces
        if ns.source == "process" and ns.inode
    }

    leaks: List[Leak] = []
    for ns in host.network_namespaces:
        if ns.source != "netns" or not ns.inode or ns.inode in process_inodes:
            continue

        name = _ns_name(ns.path)
        leak = new_leak(
            LeakType.NETWORK_NS,
            Severity.MEDIUM,
            ns.path,
            "named network namespace has no matching process network namespace",
        )
        leak.evidence = [
            f"namespace source: {ns.source}",
            f"namespace inode: {ns.inode}",
            "matching process namespace: none",
        ]
        leak.safe_action = f"ip netns delete {name}"
        leak.risk_notes = (
            "delete only after confirming no CNI plugin or workload still owns this namespace"
        )
        leak.cleanup_plan = [
            Step(
                description=f"delete network namespace {name}",
                command=("ip", "netns", "delete", name),
                destructive=True,
            )
        ]
        leaks.append(leak)
    return leaks


def _ns_name(path: str) -> str:
    return path.rpartition("/")[2]


__all__: List[str] = [
    "detect_orphan_veth",
    "detect_stale_network_bridges",
    "detect_stale_routes",
    "detect_stale_network_namespaces",
    "runtime_bridge_name",
]

_unused: Dict[str, object] = {}