# scrubd

`scrubd` is a library that finds container runtime resources left behind on
a Linux host: orphaned veth interfaces, stale bridges and routes, named
network namespaces with no process, abandoned overlay mounts, dangling
overlay snapshots, empty runtime cgroups and orphaned runtime helper
processes. Each finding carries evidence, a suggested safe action, risk notes
and, where it is safe to express one, a cleanup plan made of argv-form
commands.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Describing what is on the host

Detection works on an inventory that you build from host and runtime data.
The inventory types are dataclasses in `scrubd.inventory`: `NetworkInterface`,
`Route`, `NetworkNamespace`, `Mount`, `Snapshot`, `Cgroup`, `Process`,
`HostInventory`, `Container`, `RuntimeInventory` and `DetectionInput`, with
`RuntimeName` naming the runtimes (`docker`, `containerd`, `podman`, `auto`).

```python
from scrubd.inventory import (
    DetectionInput, HostInventory, NetworkInterface, NetworkNamespace,
    RuntimeInventory, RuntimeName,
)

host = HostInventory(
    network_interfaces=[NetworkInterface(name="veth0", index=2, kind="veth")],
    network_namespaces=[
        NetworkNamespace(path="/var/run/netns/stale", inode="10", source="netns"),
    ],
)
runtimes = [RuntimeInventory(runtime=RuntimeName.DOCKER, available=True)]
detection_input = DetectionInput(host=host, runtimes=runtimes)
```

## Detecting leaks

```python
from scrubd.detector import detect
from scrubd.leaks import Severity, filter_by_min_severity

leaks = filter_by_min_severity(detect(detection_input), Severity.MEDIUM)
for leak in leaks:
    print(leak.id, leak.severity.value, leak.leak_type.value, leak.resource)
    for line in leak.evidence:
        print("   ", line)
```

`detect` returns findings sorted by severity (highest first), then by leak
type, then by resource; `sort_leaks` applies the same order to any list.
Leak identifiers come from `stable_id`: the same leak type on the same
resource always gets the same `leak-` id followed by twelve hex digits.
`filter_by_min_severity` keeps everything when the minimum is `low` or not a
known severity.

Detection is deliberately conservative:

* Checks that correlate host resources with containers (bridges, routes,
  mounts, snapshots, cgroups, processes) are skipped unless at least one
  runtime inventory is available or lists containers.
* Host-wide orphan checks (veth interfaces, bridges) only run when every
  runtime inventory is available and no container is running.
* Stale network namespaces are found from host data alone: a named namespace
  whose inode no process namespace shares.
* A resource is never reported if it references the id of any known
  container, running or stopped, as a whole alphanumeric token.
* Bridges and routes on the default `docker0`, `cni0` and `podman0`
  interfaces are never reported.

The individual detectors are also available on their own:
`scrubd.network` (`detect_orphan_veth`, `detect_stale_network_bridges`,
`detect_stale_routes`, `detect_stale_network_namespaces`),
`scrubd.filesystem` (`detect_abandoned_mounts`,
`detect_dangling_overlay_snapshots`, `detect_stale_cgroups`) and
`scrubd.processes` (`detect_orphan_runtime_processes`).

## Cleaning up

Cleanup plans are lists of `scrubd.cleanup.Step`. Commands run as child
processes without a shell. Destructive steps are skipped unless `force=True`;
`dry_run=True` prints the plan without running anything. Any object with a
`run(command)` method that raises on failure can be passed as `runner`;
by default `ExecRunner` is used.

```python
import sys
from scrubd.cleanup import CleanupError, execute

try:
    results = execute(sys.stdout, leak.cleanup_plan, dry_run=True)
except CleanupError as error:
    print("cleanup stopped:", error)
    print("steps handled:", len(error.results))
```

`execute` returns one `StepResult` per handled step and stops at the first
invalid or failing step, raising `CleanupError`. `format_command` renders an
argv list as a shell-quoted string for display.

## What it does not do

`scrubd` does not gather inventories itself: it does not read `/proc`,
`/sys` or runtime APIs, and it does not query Docker, containerd or Podman.
You supply the host and runtime data. There is no command-line tool and no
text or JSON report writer; the package is a library of detection rules and
a cleanup executor.