"""Exceptions raised by the Videohub panel library."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .handshake import HandshakeOutcome


class VideohubPanelError(Exception):
    """Base class for all library errors."""


class InvalidArgumentError(VideohubPanelError, ValueError):
    """A command argument is out of range."""


class UnknownClientError(VideohubPanelError, LookupError):
    """No connected panel matches the given id."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Unknown client: {client_id}")
        self.client_id = client_id


class ClientNotConfigurableError(VideohubPanelError):
    """The panel has no configure connection (handshake not finished)."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Unavailable for configuration: {client_id}")
        self.client_id = client_id


class HandshakeError(VideohubPanelError):
    def __init__(self, remote_address: str, outcome: "HandshakeOutcome") -> None:
        super().__init__(f"Configure handshake with {remote_address} failed: {outcome.value}")
        self.remote_address = remote_address
        self.outcome = outcome


__all__ = [
    "ClientNotConfigurableError",
    "HandshakeError",
    "InvalidArgumentError",
    "UnknownClientError",
    "VideohubPanelError",
]
