import pytest

from scrubd.leaks import (
    LeakType,
    Severity,
    filter_by_min_severity,
    new_leak,
    severity_rank,
    stable_id,
    valid_severity,
)


def test_stable_id():
    first = stable_id(LeakType.VETH_INTERFACE, "veth9f31a2")
    second = stable_id(LeakType.VETH_INTERFACE, "veth9f31a2")
    assert first == second
    assert first == "leak-f03aba9c2c00"


def test_stable_id_accepts_plain_string_and_trims():
    expected = stable_id(LeakType.VETH_INTERFACE, "veth9f31a2")
    assert stable_id("orphaned_veth_interface", "  veth9f31a2 ") == expected
    assert stable_id(LeakType.NETWORK_NS, "veth9f31a2") != expected


def test_new_leak():
    leak = new_leak(
        LeakType.NETWORK_NS,
        Severity.MEDIUM,
        "/var/run/netns/cni-test",
        "no active container task found",
    )
    assert leak.is_valid()
    assert leak.id == stable_id(LeakType.NETWORK_NS, "/var/run/netns/cni-test")
    assert leak.evidence == []
    assert leak.cleanup_plan == []


def test_leak_without_reason_is_invalid():
    leak = new_leak(LeakType.CGROUP, Severity.LOW, "/x", "")
    assert leak.is_valid() is False


def test_valid_severity():
    for severity in Severity:
        assert valid_severity(severity)
    assert valid_severity("unknown") is False


def test_severity_rank_orders_levels():
    ranks = [severity_rank(s) for s in (Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)]
    assert ranks == sorted(ranks)
    assert len(set(ranks)) == 4
    assert severity_rank("high") == severity_rank(Severity.HIGH)
    assert severity_rank("unknown") == 0


def test_filter_by_min_severity():
    leaks = [
        new_leak(LeakType.CGROUP, Severity.LOW, "low", "test"),
        new_leak(LeakType.NETWORK_NS, Severity.MEDIUM, "medium", "test"),
        new_leak(LeakType.VETH_INTERFACE, Severity.HIGH, "high", "test"),
    ]
    filtered = filter_by_min_severity(leaks, Severity.MEDIUM)
    assert [leak.severity for leak in filtered] == [Severity.MEDIUM, Severity.HIGH]


@pytest.mark.parametrize("minimum", [Severity.LOW, "unknown"])
def test_filter_by_min_severity_keeps_all_for_low_or_unknown(minimum):
    leaks = [new_leak(LeakType.CGROUP, Severity.LOW, "low", "test")]
    assert len(filter_by_min_severity(leaks, minimum)) == 1