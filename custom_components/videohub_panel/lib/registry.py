"""Book-keeping for connected panels.

Each panel is stored once, keyed by its transport id (``address:port``).
Two secondary indexes give direct lookups by public id (the panel's unique
id once the handshake finished) and by remote address.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .device_info import DeviceInfo


def make_internal_id(remote_address: str, remote_port: int) -> str:
    return f"{remote_address}:{remote_port}"


@dataclass(slots=True)
class PanelClient:
    internal_id: str
    public_id: str
    remote_address: str
    remote_port: int
    writer: asyncio.StreamWriter
    configure_writer: Optional[asyncio.StreamWriter] = None
    device_info: DeviceInfo = field(default_factory=DeviceInfo)
    identified: bool = False

    @property
    def configurable(self) -> bool:
        return self.configure_writer is not None


class ClientRegistry:
    """Single table of clients with public-id and address indexes.

    Secondary indexes point at the most recent registration for a key; an
    entry is only removed from an index when it still points at the client
    being removed.
    """

    def __init__(self) -> None:
        self._clients: Dict[str, PanelClient] = {}
        self._by_public: Dict[str, str] = {}
        self._by_address: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._clients)

    def __iter__(self) -> Iterator[PanelClient]:
        return iter(list(self._clients.values()))

    def __contains__(self, internal_id: object) -> bool:
        return internal_id in self._clients

    def add(self, client: PanelClient) -> None:
        if client.internal_id in self._clients:
            raise ValueError(f"client {client.internal_id} already registered")
        self._clients[client.internal_id] = client
        self._by_public[client.public_id] = client.internal_id
        self._by_address[client.remote_address] = client.internal_id

    def get(self, internal_id: str) -> Optional[PanelClient]:
        return self._clients.get(internal_id)

    def rebind(
        self,
        internal_id: str,
        public_id: str,
        device_info: DeviceInfo,
        configure_writer: asyncio.StreamWriter,
    ) -> PanelClient:
        """Finalize identity once the configure handshake completed."""
        client = self._clients.get(internal_id)
        if client is None:
            raise KeyError(internal_id)
        if client.identified:
            raise ValueError(f"client {internal_id} is already identified")

        if self._by_public.get(client.public_id) == internal_id:
            del self._by_public[client.public_id]
        client.public_id = public_id
        client.device_info = device_info
        client.configure_writer = configure_writer
        client.identified = True
        self._by_public[public_id] = internal_id
        return client

    def lookup(self, public_id: str) -> Optional[PanelClient]:
        """Find by public id, falling back to the remote address."""
        internal_id = self._by_public.get(public_id) or self._by_address.get(public_id)
        if internal_id is None:
            return None
        return self._clients.get(internal_id)

    def remove(self, internal_id: str) -> Optional[PanelClient]:
        client = self._clients.pop(internal_id, None)
        if client is None:
            return None
        if self._by_public.get(client.public_id) == internal_id:
            del self._by_public[client.public_id]
        if self._by_address.get(client.remote_address) == internal_id:
            del self._by_address[client.remote_address]
        return client

    def discard(self, client: PanelClient) -> bool:
        """Remove ``client`` only if it is still the one registered under its id."""
        if self._clients.get(client.internal_id) is not client:
            return False
        self.remove(client.internal_id)
        return True

    def clear(self) -> list[PanelClient]:
        clients = list(self._clients.values())
        self._clients.clear()
        self._by_public.clear()
        self._by_address.clear()
        return clients


__all__ = ["ClientRegistry", "PanelClient", "make_internal_id"]
