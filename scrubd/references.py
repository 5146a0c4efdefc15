"""Correlation of host resources with runtime container inventories."""

from __future__ import annotations

import string
from typing import Iterable, List, Sequence

from scrubd.inventory import RuntimeInventory

_ID_CHARS = frozenset(string.ascii_letters + string.digits)


def running_container_count(runtimes: Iterable[RuntimeInventory]) -> int:
    return sum(
        1
        for runtime in runtimes
        for container in runtime.containers
        if container.state == "running"
    )


def runtime_correlation_available(runtimes: Iterable[RuntimeInventory]) -> bool:
    """True if any runtime is available or reported containers."""
    return any(runtime.available or runtime.containers for runtime in runtimes)


def runtime_inventory_complete(runtimes: Sequence[RuntimeInventory]) -> bool:
    """True if there is at least one runtime and every runtime is available."""
    return bool(runtimes) and all(runtime.available for runtime in runtimes)


def running_container_ids(runtimes: Iterable[RuntimeInventory]) -> List[str]:
    return [
        container.id
        for runtime in runtimes
        for container in runtime.containers
        if container.id and container.state == "running"
    ]


def known_container_ids(runtimes: Iterable[RuntimeInventory]) -> List[str]:
    return [
        container.id
        for runtime in runtimes
        for container in runtime.containers
        if container.id
    ]


def references_any_container(value: str, ids: Iterable[str]) -> bool:
    """True if ``value`` mentions any of ``ids`` as a whole token."""
    value = value.lower()
    for container_id in ids:
        container_id = container_id.strip().lower()
        if container_id and contains_container_id_reference(value, container_id):
            return True
    return False


def contains_container_id_reference(value: str, container_id: str) -> bool:
    """True if ``container_id`` occurs in ``value`` not flanked by alphanumerics."""
    offset = 0
    while True:
        index = value.find(container_id, offset)
        if index < 0:
            return False
        end = index + len(container_id)
        before_ok = index == 0 or value[index - 1] not in _ID_CHARS
        after_ok = end == len(value) or value[end] not in _ID_CHARS
        if before_ok and after_ok:
            return True
        offset = index + 1