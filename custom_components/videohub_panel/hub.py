from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional

from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.debounce import Debouncer
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.entity import DeviceInfo as HADeviceInfo

from .const import (
    BRIGHTNESS_DEBOUNCE_SECONDS,
    DOMAIN,
    EVENT_BUTTON_PRESSED,
    signal_panel_added,
    signal_panel_press,
    signal_panel_state,
)
from .lib.device_info import DeviceInfo
from .lib.errors import VideohubPanelError
from .lib.layout import button_position
from .lib.videohub_server import VideohubServer

_LOGGER = logging.getLogger(__name__)


@dataclass
class PanelInfo:
    """What the hub remembers about a panel that connected at least once."""

    panel_id: str
    address: str
    device_info: DeviceInfo
    connected: bool = True
    brightness: Optional[int] = None
    destination_count: int = 0

    @property
    def columns(self) -> int:
        return self.device_info.buttons_columns or 0

    @property
    def rows(self) -> int:
        return self.device_info.buttons_rows or 0

    @property
    def display_name(self) -> str:
        return self.device_info.name or f"Videohub {self.device_info.model or 'Panel'}"


def panel_device_info(panel: PanelInfo) -> HADeviceInfo:
    return HADeviceInfo(
        identifiers={(DOMAIN, panel.panel_id)},
        name=panel.display_name,
        manufacturer="Blackmagic Design",
        model=panel.device_info.model or "Videohub Smart Control",
    )


class VideohubPanelHub:
    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        name: str,
        host: Optional[str],
        port: int,
        manual_configure: bool,
    ) -> None:
        self.hass = hass
        self.entry_id = entry_id
        self.name = name
        self.host = host
        self.port = port
        self.manual_configure = manual_configure

        self.panels: Dict[str, PanelInfo] = {}
        self._pending_brightness: Dict[str, int] = {}
        self._debouncers: Dict[str, Debouncer] = {}
        self._unsubscribe: list[Callable[[], None]] = []

        _LOGGER.debug(
            "[%s] Creating VideohubServer on %s:%s (manual_configure=%s)",
            self.entry_id,
            host or "*",
            port,
            manual_configure,
        )
        self._server = self._create_server()

    def _create_server(self) -> VideohubServer:
        server = VideohubServer(manual_configure=self.manual_configure)
        self._unsubscribe = [
            server.on_connect(self._on_connect),
            server.on_disconnect(self._on_disconnect),
            server.on_press(self._on_press),
            server.on_error(self._on_error),
        ]
        return server

    @property
    def server(self) -> VideohubServer:
        return self._server

    async def async_start(self) -> None:
        _LOGGER.debug("[%s] Starting panel server", self.entry_id)
        await self._server.async_start(self.host, self.port)

    async def async_stop(self) -> None:
        _LOGGER.debug("[%s] Stopping panel server", self.entry_id)
        for unsub in self._unsubscribe:
            unsub()
        self._unsubscribe = []
        for debouncer in self._debouncers.values():
            debouncer.async_shutdown()
        self._debouncers.clear()
        self._pending_brightness.clear()
        await self._server.async_destroy()

        for panel in self.panels.values():
            panel.connected = False

    async def async_apply_new_settings(
        self,
        *,
        host: Optional[str],
        port: int,
        manual_configure: bool,
    ) -> None:
        changed = (
            str(host) != str(self.host)
            or int(port) != int(self.port)
            or bool(manual_configure) != self.manual_configure
        )
        if not changed:
            return

        _LOGGER.debug(
            "[%s] Updating server settings to %s:%s (manual_configure=%s)",
            self.entry_id,
            host or "*",
            port,
            manual_configure,
        )
        await self.async_stop()
        self.host = host
        self.port = int(port)
        self.manual_configure = bool(manual_configure)
        self._server = self._create_server()
        await self.async_start()
        for panel_id in self.panels:
            async_dispatcher_send(self.hass, signal_panel_state(self.entry_id, panel_id))

    # ------------------------------------------------------------------
    # server → HA
    # ------------------------------------------------------------------
    @callback
    def _on_connect(self, panel_id: str, info: DeviceInfo, address: str) -> None:
        _LOGGER.info("[%s] Panel %s connected from %s", self.entry_id, panel_id, address)
        existing = self.panels.get(panel_id)
        if existing is None:
            self.panels[panel_id] = PanelInfo(panel_id=panel_id, address=address, device_info=info)
            async_dispatcher_send(self.hass, signal_panel_added(self.entry_id), panel_id)
        else:
            existing.address = address
            existing.device_info = info
            existing.connected = True
            existing.destination_count = 0
        async_dispatcher_send(self.hass, signal_panel_state(self.entry_id, panel_id))

    @callback
    def _on_disconnect(self, panel_id: str) -> None:
        panel = self.panels.get(panel_id)
        if panel is None:
            # never got past the handshake
            return
        if self._server.get_client(panel_id) is not None:
            # an older connection closed; a newer one still owns this id
            _LOGGER.debug("[%s] Stale connection of %s closed", self.entry_id, panel_id)
            return
        _LOGGER.info("[%s] Panel %s disconnected", self.entry_id, panel_id)
        panel.connected = False
        async_dispatcher_send(self.hass, signal_panel_state(self.entry_id, panel_id))

    @callback
    def _on_press(self, panel_id: str, destination: int, button: int) -> None:
        panel = self.panels.get(panel_id)
        if panel is None:
            _LOGGER.debug("[%s] Press from unidentified panel %s ignored", self.entry_id, panel_id)
            return

        position = button_position(button, panel.columns, panel.rows)
        if position is None:
            _LOGGER.warning(
                "[%s] Button index out of range: button=%s (%sx%s panel %s)",
                self.entry_id,
                button,
                panel.columns,
                panel.rows,
                panel_id,
            )
            return

        data = {
            "panel_id": panel_id,
            "destination": destination,
            "button": button,
            "row": position.row,
            "column": position.column,
            "control_id": position.control_id,
        }
        _LOGGER.debug("[%s] Button press: %s (button: %s)", self.entry_id, position.control_id, button)
        self.hass.bus.async_fire(EVENT_BUTTON_PRESSED, data)
        async_dispatcher_send(self.hass, signal_panel_press(self.entry_id, panel_id), data)

    @callback
    def _on_error(self, *args: Any) -> None:
        _LOGGER.debug("[%s] Server error: %s", self.entry_id, " ".join(str(a) for a in args))

    # ------------------------------------------------------------------
    # HA → panel
    # ------------------------------------------------------------------
    async def async_set_brightness(self, panel_id: str, percent: float) -> None:
        """Queue a brightness change; rapid changes are coalesced."""
        panel = self.panels.get(panel_id)
        if panel is None:
            raise HomeAssistantError(f"Unknown panel: {panel_id}")

        percent = int(max(0, min(100, percent)))
        panel.brightness = percent
        self._pending_brightness[panel_id] = percent

        debouncer = self._debouncers.get(panel_id)
        if debouncer is None:
            debouncer = Debouncer(
                self.hass,
                _LOGGER,
                cooldown=BRIGHTNESS_DEBOUNCE_SECONDS,
                immediate=False,
                function=partial(self._async_flush_brightness, panel_id),
            )
            self._debouncers[panel_id] = debouncer
        await debouncer.async_call()
        async_dispatcher_send(self.hass, signal_panel_state(self.entry_id, panel_id))

    async def _async_flush_brightness(self, panel_id: str) -> None:
        percent = self._pending_brightness.pop(panel_id, None)
        if percent is None:
            return
        try:
            self._server.set_backlight(panel_id, percent / 10)
        except VideohubPanelError as err:
            _LOGGER.warning("[%s] Could not set backlight of %s: %s", self.entry_id, panel_id, err)

    async def async_configure_destinations(self, panel_id: str, destination_count: int) -> None:
        panel = self.panels.get(panel_id)
        if panel is None:
            raise HomeAssistantError(f"Unknown panel: {panel_id}")
        try:
            self._server.configure_device(panel_id, destination_count)
        except VideohubPanelError as err:
            raise HomeAssistantError(str(err)) from err

        panel.destination_count = int(destination_count)
        async_dispatcher_send(self.hass, signal_panel_state(self.entry_id, panel_id))
