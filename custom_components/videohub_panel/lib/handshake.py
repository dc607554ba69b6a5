"""Configure-port handshake with a freshly connected panel.

When a panel connects to us we open a second connection back to it on the
configure port and wait for its ``SMART DEVICE:`` block. The whole exchange
is one coroutine with a hard deadline; whichever terminal signal comes first
(connected, connect timeout, closed, error, deadline) decides the outcome.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .device_info import DeviceInfo, is_device_info_block, parse_device_info
from .errors import HandshakeError
from .framing import BlockDecoder
from .protocol_const import CONFIGURE_IDLE_TIMEOUT, CONFIGURE_PORT, CONFIGURE_TIMEOUT

log = logging.getLogger("videohub_panel.handshake")


class HandshakeState(enum.Enum):
    CONNECTING = "connecting"
    AWAITING_DEVICE_INFO = "awaiting_device_info"
    READY = "ready"
    FAILED = "failed"


class HandshakeOutcome(enum.Enum):
    CONNECTED = "connected"
    TIMED_OUT = "timed_out"
    CLOSED = "closed"
    ERRORED = "errored"
    DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass(slots=True)
class HandshakeResult:
    outcome: HandshakeOutcome
    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    device_info: Optional[DeviceInfo] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.outcome is HandshakeOutcome.CONNECTED

    def raise_for_outcome(self, remote_address: str) -> None:
        if not self.ok:
            raise HandshakeError(remote_address, self.outcome)


def _abort(writer: Optional[asyncio.StreamWriter]) -> None:
    if writer is not None:
        writer.transport.abort()


class ConfigureHandshake:
    """Run the configure handshake against ``remote_address``."""

    def __init__(
        self,
        remote_address: str,
        *,
        port: int = CONFIGURE_PORT,
        deadline: float = CONFIGURE_TIMEOUT,
        connect_timeout: float = CONFIGURE_IDLE_TIMEOUT,
    ) -> None:
        self.remote_address = remote_address
        self.port = port
        self.deadline = deadline
        self.connect_timeout = connect_timeout
        self.state = HandshakeState.CONNECTING
        self.lines: list[str] = []
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    async def async_run(self) -> HandshakeResult:
        self.state = HandshakeState.CONNECTING
        try:
            result = await asyncio.wait_for(self._async_exchange(), timeout=self.deadline)
        except asyncio.TimeoutError:
            log.debug("[CFG] %s hard timeout after %.1fs", self.remote_address, self.deadline)
            result = HandshakeResult(HandshakeOutcome.DEADLINE_EXCEEDED)
        except asyncio.CancelledError:
            self._fail()
            raise

        if not result.ok:
            self._fail()
            return result

        self.state = HandshakeState.READY
        return result

    def _fail(self) -> None:
        self.state = HandshakeState.FAILED
        _abort(self._writer)
        self._reader = None
        self._writer = None

    async def _async_exchange(self) -> HandshakeResult:
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.remote_address, self.port),
                timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError:
            return HandshakeResult(HandshakeOutcome.TIMED_OUT)
        except OSError as err:
            log.debug("[CFG] %s connect error: %s", self.remote_address, err)
            return HandshakeResult(HandshakeOutcome.ERRORED, error=err)

        log.debug("[CFG] %s configure opened", self.remote_address)
        self.state = HandshakeState.AWAITING_DEVICE_INFO

        decoder = BlockDecoder()
        while True:
            try:
                data = await self._reader.read(65536)
            except OSError as err:
                log.debug("[CFG] %s read error: %s", self.remote_address, err)
                return HandshakeResult(HandshakeOutcome.ERRORED, error=err)
            if not data:
                return HandshakeResult(HandshakeOutcome.CLOSED)

            for block in decoder.feed(data):
                if not is_device_info_block(block):
                    continue
                self.lines = block
                info = parse_device_info(block)
                log.debug("[CFG] %s configure info %s", self.remote_address, info.as_dict())
                return HandshakeResult(
                    HandshakeOutcome.CONNECTED,
                    reader=self._reader,
                    writer=self._writer,
                    device_info=info,
                )


__all__ = [
    "ConfigureHandshake",
    "HandshakeOutcome",
    "HandshakeResult",
    "HandshakeState",
]
