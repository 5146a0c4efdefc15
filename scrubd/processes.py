"""Detection rule for orphaned container runtime helper processes."""

from __future__ import annotations

from typing import Iterable, List

from scrubd.cleanup import Step
from scrubd.inventory import DetectionInput, Process, RuntimeInventory, RuntimeName
from scrubd.leaks import Leak, LeakType, Severity, new_leak
from scrubd.references import (
    known_container_ids,
    references_any_container,
    runtime_correlation_available,
)

# For each runtime: a command substring naming its helper, and the words that
# tie a bare runc invocation to it.
_RUNTIME_HELPERS = {
    RuntimeName.DOCKER: ("docker-proxy", ("docker",)),
    RuntimeName.CONTAINERD: ("containerd-shim", ("containerd",)),
    RuntimeName.PODMAN: ("conmon", ("podman", "libpod")),
}


def detect_orphan_runtime_processes(detection_input: DetectionInput) -> List[Leak]:
    """Runtime helper processes that no known container refers to."""
    runtimes = detection_input.runtimes
    if not runtime_correlation_available(runtimes):
        return []

    # Running containers are a subset of the known ones.
    known_ids = known_container_ids(runtimes)
    return [
        _orphan_process_leak(process)
        for process in detection_input.host.processes
        if runtime_process_candidate(process, runtimes)
        and not references_any_container(_process_fingerprint(process), known_ids)
    ]


def runtime_process_candidate(
    process: Process, runtimes: Iterable[RuntimeInventory]
) -> bool:
    """True if ``process`` is a helper of one of the usable ``runtimes``."""
    command = process.command.lower()
    for runtime in runtimes:
        if not runtime.available and not runtime.containers:
            continue
        helper = _RUNTIME_HELPERS.get(runtime.runtime)
        if helper is None:
            continue
        marker, contexts = helper
        if marker in command or any(_runc_with_context(process, c) for c in contexts):
            return True
    return False


def _orphan_process_leak(process: Process) -> Leak:
    resource = str(process.pid)
    leak = new_leak(
        LeakType.RUNTIME_PROCESS,
        Severity.MEDIUM,
        resource,
        "container runtime helper process has no matching known container reference",
    )
    leak.evidence = [
        f"pid: {process.pid}",
        f"command: {process.command}",
        f"args: {' '.join(process.args)}",
        "known container reference: none",
    ]
    leak.safe_action = f"kill -TERM {process.pid}"
    leak.risk_notes = (
        "terminate only after confirming the runtime no longer owns this process"
    )
    leak.cleanup_plan = [
        Step(
            description=f"terminate runtime helper process {process.pid}",
            command=("kill", "-TERM", resource),
            destructive=True,
        )
    ]
    return leak


def _process_fingerprint(process: Process) -> str:
    return " ".join([process.command, *process.args])


def _runc_with_context(process: Process, runtime_name: str) -> bool:
    if process.command.lower() != "runc":
        return False
    return runtime_name in _process_fingerprint(process).lower()