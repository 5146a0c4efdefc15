"""Host and runtime inventory records that detection rules work on."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RuntimeName(str, Enum):
    """Container runtimes that can be inspected."""

    AUTO = "auto"
    DOCKER = "docker"
    CONTAINERD = "containerd"
    PODMAN = "podman"

    def __str__(self) -> str:
        return self.value


def _empty() -> Any:
    """A field that starts as a fresh empty list."""
    return field(default_factory=list)


@dataclass
class NetworkInterface:
    name: str = ""
    index: int = 0
    peer_index: int = 0
    kind: str = ""
    flags: list[str] = _empty()
    bridge_ports: list[str] = _empty()
    bridge_ports_known: bool = False


@dataclass
class Route:
    interface: str = ""
    destination: str = ""
    mask: str = ""
    gateway: str = ""
    source: str = ""


@dataclass
class NetworkNamespace:
    path: str = ""
    inode: str = ""
    source: str = ""
    pid: int = 0


@dataclass
class Mount:
    id: str = ""
    root: str = ""
    mount_point: str = ""
    fs_type: str = ""
    source: str = ""
    options: list[str] = _empty()
    super_opts: list[str] = _empty()


@dataclass
class Snapshot:
    runtime: str = ""
    id: str = ""
    path: str = ""


@dataclass
class Cgroup:
    hierarchy_id: str = ""
    controllers: list[str] = _empty()
    path: str = ""
    process_count: int = 0
    process_count_known: bool = False


@dataclass
class Process:
    pid: int = 0
    command: str = ""
    args: list[str] = _empty()


@dataclass
class HostInventory:
    network_interfaces: list[NetworkInterface] = _empty()
    routes: list[Route] = _empty()
    network_namespaces: list[NetworkNamespace] = _empty()
    mounts: list[Mount] = _empty()
    snapshots: list[Snapshot] = _empty()
    cgroups: list[Cgroup] = _empty()
    processes: list[Process] = _empty()
    warnings: list[str] = _empty()


@dataclass
class Container:
    id: str = ""
    state: str = ""


@dataclass
class RuntimeInventory:
    runtime: RuntimeName = RuntimeName.AUTO
    available: bool = False
    containers: list[Container] = _empty()
    warnings: list[str] = _empty()


@dataclass
class DetectionInput:
    """Everything the detection rules look at."""

    host: HostInventory = field(default_factory=HostInventory)
    runtimes: list[RuntimeInventory] = _empty()