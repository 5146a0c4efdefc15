"""Detection rules for leaked mounts, overlay snapshots and cgroups."""

from __future__ import annotations

from typing import Iterable, List

from scrubd.cleanup import Step
from scrubd.inventory import DetectionInput, Mount, Snapshot
from scrubd.leaks import Leak, LeakType, Severity, new_leak
from scrubd.paths import (
    path_has_prefix_boundary,
    path_has_segment,
    path_has_segment_prefix,
    path_last_segment,
    path_segments,
)
from scrubd.references import (
    known_container_ids,
    references_any_container,
    running_container_ids,
    runtime_correlation_available,
)

_CONTAINERD_OVERLAY = "io.containerd.snapshotter.v1.overlayfs"
_RUNTIME_SEGMENTS = frozenset({"docker", "containerd", "libpod"})
_RUNTIME_SCOPE_PREFIXES = ("docker-", "containerd-", "libpod-")


def _referenced(value: str, known_ids: List[str], running_ids: List[str]) -> bool:
    return references_any_container(value, known_ids) or references_any_container(
        value, running_ids
    )


def detect_abandoned_mounts(detection_input: DetectionInput) -> List[Leak]:
    """Runtime overlay mounts that no known container refers to."""
    runtimes = detection_input.runtimes
    if not runtime_correlation_available(runtimes):
        return []

    known_ids = known_container_ids(runtimes)
    running_ids = running_container_ids(runtimes)

    leaks: List[Leak] = []
    for mount in detection_input.host.mounts:
        if not container_mount_candidate(mount):
            continue
        if _referenced(_mount_fingerprint(mount), known_ids, running_ids):
            continue

        leak = new_leak(
            LeakType.MOUNT,
            Severity.MEDIUM,
            mount.mount_point,
            "container runtime mount has no matching known container reference",
        )
        leak.evidence = [
            f"mount id: {mount.id}",
            f"mount point: {mount.mount_point}",
            f"filesystem: {mount.fs_type}",
            f"source: {mount.source}",
            "known container reference: none",
        ]
        leak.safe_action = f"umount {mount.mount_point}"
        leak.risk_notes = (
            "unmount only after confirming no runtime task or process still uses this mount"
        )
        leak.cleanup_plan = [
            Step(
                description=f"unmount {mount.mount_point}",
                command=("umount", mount.mount_point),
                destructive=True,
            )
        ]
        leaks.append(leak)
    return leaks


def container_mount_candidate(mount: Mount) -> bool:
    """True for docker or containerd overlay mount points of a container."""
    path = mount.mount_point
    docker = path_has_segment(path, "overlay2") and path_last_segment(path) == "merged"
    containerd = (
        path_has_segment(path, _CONTAINERD_OVERLAY)
        and path_has_segment(path, "snapshots")
        and path_last_segment(path) == "fs"
    )
    return docker or containerd


def _mount_fingerprint(mount: Mount) -> str:
    return " ".join(
        (
            mount.root,
            mount.mount_point,
            mount.fs_type,
            mount.source,
            ",".join(mount.options),
            ",".join(mount.super_opts),
        )
    )


def detect_dangling_overlay_snapshots(detection_input: DetectionInput) -> List[Leak]:
    """Overlay snapshots that are neither mounted nor referenced by a container."""
    runtimes = detection_input.runtimes
    if not runtime_correlation_available(runtimes):
        return []

    known_ids = known_container_ids(runtimes)
    running_ids = running_container_ids(runtimes)
    mounts = detection_input.host.mounts

    leaks: List[Leak] = []
    for snapshot in detection_input.host.snapshots:
        if not _overlay_snapshot_candidate(snapshot):
            continue
        if _referenced(snapshot.path, known_ids, running_ids):
            continue
        if snapshot_mounted(snapshot, mounts):
            continue

        leak = new_leak(
            LeakType.OVERLAY_SNAPSHOT,
            Severity.LOW,
            snapshot.path,
            "overlay snapshot is not mounted and has no matching known container reference",
        )
        leak.evidence = [
            f"runtime: {snapshot.runtime}",
            f"snapshot id: {snapshot.id}",
            f"path: {snapshot.path}",
            "mounted: false",
            "known container reference: none",
        ]
        leak.safe_action = (
            f"{snapshot.runtime} runtime garbage collection or manual snapshot review"
        )
        leak.risk_notes = (
            "snapshot directories can back images or stopped containers; "
            "do not remove directly without runtime metadata"
        )
        leaks.append(leak)
    return leaks


def _overlay_snapshot_candidate(snapshot: Snapshot) -> bool:
    if snapshot.runtime == "docker":
        return path_has_segment(snapshot.path, "overlay2")
    if snapshot.runtime == "containerd":
        return path_has_segment(snapshot.path, _CONTAINERD_OVERLAY) and path_has_segment(
            snapshot.path, "snapshots"
        )
    return False


def snapshot_mounted(snapshot: Snapshot, mounts: Iterable[Mount]) -> bool:
    """True if any mount uses the snapshot directory or something beneath it."""
    path = snapshot.path
    return any(
        path_has_prefix_boundary(mount.mount_point, path)
        or path_has_prefix_boundary(mount.root, path)
        or path_has_prefix_boundary(mount.source, path)
        or _options_reference_path(mount.options, path)
        or _options_reference_path(mount.super_opts, path)
        for mount in mounts
    )


def _options_reference_path(options: Iterable[str], path: str) -> bool:
    for option in options:
        for value in option.split(":"):
            if "=" in value:
                value = value.partition("=")[2]
            if path_has_prefix_boundary(value, path):
                return True
    return False


def detect_stale_cgroups(detection_input: DetectionInput) -> List[Leak]:
    """Empty container cgroups that no known container refers to."""
    runtimes = detection_input.runtimes
    if not runtime_correlation_available(runtimes):
        return []

    running_ids = running_container_ids(runtimes)
    known_ids = known_container_ids(runtimes)

    leaks: List[Leak] = []
    for cgroup in detection_input.host.cgroups:
        if not container_cgroup_candidate(cgroup.path):
            continue
        if not cgroup.process_count_known or cgroup.process_count != 0:
            continue
        if _referenced(cgroup.path, known_ids, running_ids):
            continue

        leak = new_leak(
            LeakType.CGROUP,
            Severity.LOW,
            cgroup.path,
            "container runtime cgroup has no matching known container reference",
        )
        leak.evidence = [
            f"hierarchy: {cgroup.hierarchy_id}",
            f"controllers: {','.join(cgroup.controllers)}",
            f"process count: {cgroup.process_count}",
            "known container reference: none",
        ]
        leak.safe_action = f"rmdir /sys/fs/cgroup{cgroup.path}"
        leak.risk_notes = (
            "remove only after confirming the cgroup is empty and no runtime owns it"
        )
        leak.cleanup_plan = [
            Step(
                description=f"remove cgroup {cgroup.path}",
                command=("rmdir", "/sys/fs/cgroup" + cgroup.path),
                destructive=True,
            )
        ]
        leaks.append(leak)
    return leaks


def container_cgroup_candidate(path: str) -> bool:
    """True for cgroup paths that belong to a container or pod."""
    lower = path.lower()
    if lower.endswith((".service", ".socket")):
        return False

    segments = path_segments(lower)
    if (
        path_has_segment(lower, "kubepods")
        or path_has_segment(lower, "kubepods.slice")
        or path_has_segment_prefix(lower, "kubepods-")
    ):
        return any(segment.startswith("pod") for segment in segments)

    return any(_runtime_cgroup_segment(segment) for segment in segments)


def _runtime_cgroup_segment(segment: str) -> bool:
    if segment in _RUNTIME_SEGMENTS:
        return True
    return segment.startswith(_RUNTIME_SCOPE_PREFIXES) and segment.endswith(".scope")