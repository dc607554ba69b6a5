from __future__ import annotations

import pytest

from custom_components.videohub_panel.lib.device_info import DeviceInfo
from custom_components.videohub_panel.lib.registry import (
    ClientRegistry,
    PanelClient,
    make_internal_id,
)


class _FakeWriter:
    def write(self, data: bytes) -> None:
        pass


def _client(address: str = "10.0.0.5", port: int = 50000) -> PanelClient:
    return PanelClient(
        internal_id=make_internal_id(address, port),
        public_id=address,
        remote_address=address,
        remote_port=port,
        writer=_FakeWriter(),
    )


def test_add_and_lookup_by_address() -> None:
    registry = ClientRegistry()
    client = _client()
    registry.add(client)

    assert len(registry) == 1
    assert client.internal_id in registry
    assert registry.get("10.0.0.5:50000") is client
    assert registry.lookup("10.0.0.5") is client
    assert not client.configurable


def test_duplicate_internal_id_rejected() -> None:
    registry = ClientRegistry()
    registry.add(_client())

    with pytest.raises(ValueError):
        registry.add(_client())


def test_rebind_sets_identity_once() -> None:
    registry = ClientRegistry()
    client = _client()
    registry.add(client)
    info = DeviceInfo(id="ABC123", buttons_columns=10, buttons_rows=4)
    configure_writer = _FakeWriter()

    registry.rebind(client.internal_id, "ABC123", info, configure_writer)

    assert client.public_id == "ABC123"
    assert client.device_info is info
    assert client.configurable
    assert registry.lookup("ABC123") is client
    # address still resolves
    assert registry.lookup("10.0.0.5") is client

    with pytest.raises(ValueError):
        registry.rebind(client.internal_id, "OTHER", info, configure_writer)


def test_rebind_unknown_client() -> None:
    with pytest.raises(KeyError):
        ClientRegistry().rebind("1.2.3.4:1", "X", DeviceInfo(), _FakeWriter())


def test_remove_cleans_indexes() -> None:
    registry = ClientRegistry()
    client = _client()
    registry.add(client)
    registry.rebind(client.internal_id, "ABC123", DeviceInfo(), _FakeWriter())

    assert registry.remove(client.internal_id) is client
    assert registry.remove(client.internal_id) is None
    assert registry.lookup("ABC123") is None
    assert registry.lookup("10.0.0.5") is None
    assert len(registry) == 0


def test_indexes_follow_latest_registration() -> None:
    registry = ClientRegistry()
    old = _client(port=50000)
    new = _client(port=50001)
    registry.add(old)
    registry.add(new)

    assert registry.lookup("10.0.0.5") is new

    # removing the stale connection must not drop the newer one's index
    registry.remove(old.internal_id)
    assert registry.lookup("10.0.0.5") is new


def test_clear_returns_everything() -> None:
    registry = ClientRegistry()
    a = _client("10.0.0.5")
    b = _client("10.0.0.6")
    registry.add(a)
    registry.add(b)

    cleared = registry.clear()

    assert {c.internal_id for c in cleared} == {a.internal_id, b.internal_id}
    assert len(registry) == 0
    assert list(registry) == []


def test_iteration_is_a_snapshot() -> None:
    registry = ClientRegistry()
    registry.add(_client("10.0.0.5"))
    registry.add(_client("10.0.0.6"))

    for client in registry:
        registry.remove(client.internal_id)

    assert len(registry) == 0


def test_discard_only_removes_the_registered_instance() -> None:
    registry = ClientRegistry()
    old = _client()
    registry.add(old)
    registry.remove(old.internal_id)
    new = _client()
    registry.add(new)

    # same address:port, but a different connection
    assert not registry.discard(old)
    assert registry.get(new.internal_id) is new

    assert registry.discard(new)
    assert len(registry) == 0
