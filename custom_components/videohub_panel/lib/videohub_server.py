from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from .command_handlers import dispatch_block
from .configure import generate_configure, generate_settings
from .device_info import DeviceInfo
from .errors import ClientNotConfigurableError, HandshakeError, UnknownClientError
from .framing import BlockDecoder
from .handshake import ConfigureHandshake
from .prelude import generate_prelude
from .protocol_const import (
    CONFIGURE_IDLE_TIMEOUT,
    CONFIGURE_PORT,
    CONFIGURE_TIMEOUT,
    DEFAULT_LISTEN_PORT,
    IDLE_TIMEOUT,
)
from .registry import ClientRegistry, PanelClient, make_internal_id
from .validation import validate_backlight, validate_destination_count

log = logging.getLogger("videohub_panel.server")

ConnectCallback = Callable[[str, DeviceInfo, str], None]
DisconnectCallback = Callable[[str], None]
PressCallback = Callable[[str, int, int], None]
DiagnosticCallback = Callable[..., None]
Unsubscribe = Callable[[], None]

READ_CHUNK = 65536


class VideohubServer:
    """Accept Videohub Smart Control panels and translate their protocol.

    Panels connect to us on the primary port. For each one we open a second
    connection back to it on the configure port to learn who it is, then
    report ``connect``; button presses arrive as ``press`` and a closed
    primary connection as ``disconnect``.

    Callbacks run on the event loop, in order, per connection. A failing
    callback is logged and does not affect the connection.
    """

    def __init__(
        self,
        *,
        manual_configure: bool = False,
        configure_port: int = CONFIGURE_PORT,
        configure_timeout: float = CONFIGURE_TIMEOUT,
        configure_idle_timeout: float = CONFIGURE_IDLE_TIMEOUT,
        idle_timeout: float = IDLE_TIMEOUT,
        prelude: Optional[str] = None,
    ) -> None:
        self.manual_configure = bool(manual_configure)
        self.configure_port = int(configure_port)
        self.configure_timeout = float(configure_timeout)
        self.configure_idle_timeout = float(configure_idle_timeout)
        self.idle_timeout = float(idle_timeout)
        self._prelude = prelude if prelude is not None else generate_prelude()

        self._server: Optional[asyncio.AbstractServer] = None
        self._running = False
        self._registry = ClientRegistry()
        self._tasks: set[asyncio.Task] = set()

        # callbacks
        self._connect_cbs: list[ConnectCallback] = []
        self._disconnect_cbs: list[DisconnectCallback] = []
        self._press_cbs: list[PressCallback] = []
        self._error_cbs: list[DiagnosticCallback] = []
        self._debug_cbs: list[DiagnosticCallback] = []

    # ------------------------------------------------------------------
    # Callback registration
    # ------------------------------------------------------------------
    def on_connect(self, cb: ConnectCallback) -> Unsubscribe:
        return self._subscribe(self._connect_cbs, cb)

    def on_disconnect(self, cb: DisconnectCallback) -> Unsubscribe:
        return self._subscribe(self._disconnect_cbs, cb)

    def on_press(self, cb: PressCallback) -> Unsubscribe:
        return self._subscribe(self._press_cbs, cb)

    def on_error(self, cb: DiagnosticCallback) -> Unsubscribe:
        return self._subscribe(self._error_cbs, cb)

    def on_debug(self, cb: DiagnosticCallback) -> Unsubscribe:
        return self._subscribe(self._debug_cbs, cb)

    @staticmethod
    def _subscribe(cbs: list, cb: Callable[..., None]) -> Unsubscribe:
        cbs.append(cb)

        def _unsubscribe() -> None:
            try:
                cbs.remove(cb)
            except ValueError:
                pass

        return _unsubscribe

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def port(self) -> Optional[int]:
        """Port actually bound, once started."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    @property
    def clients(self) -> List[PanelClient]:
        return list(self._registry)

    def get_client(self, public_id: str) -> Optional[PanelClient]:
        return self._registry.lookup(public_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def async_start(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Start listening. Calling it again while running does nothing."""
        if self._running:
            return
        self._running = True

        listen_port = DEFAULT_LISTEN_PORT if port is None else int(port)
        try:
            self._server = await asyncio.start_server(
                self._async_handle_client, host=host, port=listen_port
            )
        except OSError as err:
            self._running = False
            self._emit_error("listen error", err)
            raise

        self._emit_debug(f"listening on port {self.port}")
        log.info("[TCP] listening for panels on %s:%s", host or "*", self.port)

    async def async_destroy(self) -> None:
        """Stop listening and drop every connection without flushing."""
        if not self._running:
            return
        self._running = False

        server, self._server = self._server, None
        if server is not None:
            server.close()

        for client in self._registry.clear():
            client.writer.transport.abort()
            if client.configure_writer is not None:
                client.configure_writer.transport.abort()

        for task in list(self._tasks):
            task.cancel()

        if server is not None:
            try:
                await asyncio.wait_for(server.wait_closed(), timeout=5.0)
            except asyncio.TimeoutError:
                log.debug("[TCP] listener did not close within 5s")
        log.info("[STOP] videohub server stopped")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def set_backlight(self, public_id: str, backlight: Any) -> None:
        """Set backlight (0-10) of a panel; raises on bad input or unknown panel."""
        level = validate_backlight(backlight)
        client = self._require_configurable(public_id)
        client.configure_writer.write(generate_settings(level).encode())

    def configure_device(self, public_id: str, destination_count: Any) -> None:
        """Send a button layout with ``destination_count`` destinations (0-8, even)."""
        count = validate_destination_count(destination_count)
        client = self._require_configurable(public_id)
        info = client.device_info
        client.configure_writer.write(
            generate_configure(info.buttons_columns or 0, info.buttons_rows or 0, count).encode()
        )

    def _require_configurable(self, public_id: str) -> PanelClient:
        client = self._registry.lookup(public_id)
        if client is None:
            raise UnknownClientError(public_id)
        if client.configure_writer is None:
            raise ClientNotConfigurableError(public_id)
        return client

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------
    async def _async_handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        peer = writer.get_extra_info("peername")
        if not self._running or not isinstance(peer, tuple) or len(peer) < 2 or not peer[0] or not peer[1]:
            # already closed, or we are shutting down
            writer.transport.abort()
            return

        remote_address, remote_port = str(peer[0]), int(peer[1])
        client = PanelClient(
            internal_id=make_internal_id(remote_address, remote_port),
            public_id=remote_address,
            remote_address=remote_address,
            remote_port=remote_port,
            writer=writer,
        )
        stale = self._registry.get(client.internal_id)
        if stale is not None:
            # same address:port as a connection we never saw close
            self._emit_debug("replacing stale client", stale.internal_id, stale.public_id)
            stale.writer.transport.abort()
            self._cleanup_client(stale)
        self._registry.add(client)
        self._emit_debug("new client", client.internal_id, client.public_id)

        writer.write(self._prelude.encode())
        handshake_task = self._spawn(self._async_configure_client(client))

        decoder = BlockDecoder()
        try:
            while True:
                try:
                    data = await asyncio.wait_for(reader.read(READ_CHUNK), timeout=self.idle_timeout)
                except asyncio.TimeoutError:
                    self._emit_debug("socket timeout", client.internal_id, client.public_id)
                    break
                if not data:
                    break
                for block in decoder.feed(data):
                    self._emit_debug(client.public_id, block)
                    dispatch_block(writer, client.public_id, block, self._emit_press)
        except OSError as err:
            self._emit_error("socket error", client.internal_id, client.public_id, err)
        finally:
            handshake_task.cancel()
            self._cleanup_client(client)

    def _cleanup_client(self, client: PanelClient) -> None:
        client.writer.close()
        if client.configure_writer is not None:
            client.configure_writer.transport.abort()

        if not self._registry.discard(client):
            # dropped by async_destroy, or already replaced
            return
        self._emit_debug("lost client", client.internal_id, client.public_id)
        self._emit_disconnect(client.public_id)

    async def _async_configure_client(self, client: PanelClient) -> None:
        handshake = ConfigureHandshake(
            client.remote_address,
            port=self.configure_port,
            deadline=self.configure_timeout,
            connect_timeout=self.configure_idle_timeout,
        )
        result = await handshake.async_run()
        try:
            result.raise_for_outcome(client.remote_address)
        except HandshakeError as err:
            self._emit_debug("configure failed", err)
            client.writer.transport.abort()
            return

        if self._registry.get(client.internal_id) is not client:
            # primary went away while we were waiting
            result.writer.transport.abort()
            return

        info = result.device_info or DeviceInfo()
        public_id = info.id or client.public_id
        self._registry.rebind(client.internal_id, public_id, info, result.writer)
        self._spawn(self._async_watch_configure(client, result.reader))
        self._emit_debug("configure ready", client.remote_address, info.as_dict())

        if not self.manual_configure:
            if info.buttons_columns and info.buttons_rows:
                result.writer.write(
                    generate_configure(info.buttons_columns, info.buttons_rows).encode()
                )
            else:
                self._emit_debug("configure skipped, unknown layout", client.remote_address)

        self._emit_connect(public_id, info, client.remote_address)

    async def _async_watch_configure(
        self, client: PanelClient, reader: asyncio.StreamReader
    ) -> None:
        """Drain the configure connection; when it closes, close the primary too."""
        try:
            while True:
                data = await reader.read(READ_CHUNK)
                if not data:
                    break
                if log.isEnabledFor(logging.DEBUG):
                    log.debug("[CFG] %s sent %dB", client.public_id, len(data))
        except OSError as err:
            self._emit_debug("configure error", client.remote_address, err)
        finally:
            client.writer.transport.abort()

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("[TCP] background task failed", exc_info=exc)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    @staticmethod
    def _notify(cbs: list, name: str, *args: Any) -> None:
        for cb in list(cbs):
            try:
                cb(*args)
            except Exception:
                log.exception("%s listener failed", name)

    def _emit_connect(self, public_id: str, info: DeviceInfo, remote_address: str) -> None:
        log.info("[TCP] panel %s connected from %s (%s)", public_id, remote_address, info.model)
        self._notify(self._connect_cbs, "connect", public_id, info, remote_address)

    def _emit_disconnect(self, public_id: str) -> None:
        log.info("[TCP] panel %s disconnected", public_id)
        self._notify(self._disconnect_cbs, "disconnect", public_id)

    def _emit_press(self, public_id: str, destination: int, value: int) -> None:
        self._notify(self._press_cbs, "press", public_id, destination, value)

    def _emit_error(self, *args: Any) -> None:
        log.warning("[TCP] %s", " ".join(str(a) for a in args))
        self._notify(self._error_cbs, "error", *args)

    def _emit_debug(self, *args: Any) -> None:
        if log.isEnabledFor(logging.DEBUG):
            log.debug("[TCP] %s", " ".join(str(a) for a in args))
        self._notify(self._debug_cbs, "debug", *args)


__all__ = ["VideohubServer"]
