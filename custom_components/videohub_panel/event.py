from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.event import EventEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, signal_panel_added, signal_panel_press, signal_panel_state
from .hub import VideohubPanelHub, panel_device_info

_LOGGER = logging.getLogger(__name__)

EVENT_TYPE_PRESS = "press"


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    hub: VideohubPanelHub = hass.data[DOMAIN][entry.entry_id]

    @callback
    def _add_panel(panel_id: str) -> None:
        async_add_entities([VideohubPanelButtonEvent(hub, panel_id)])

    entry.async_on_unload(
        async_dispatcher_connect(hass, signal_panel_added(entry.entry_id), _add_panel)
    )
    for panel_id in list(hub.panels):
        _add_panel(panel_id)


class VideohubPanelButtonEvent(EventEntity):
    """Fires once per button press, with the button's row and column."""

    _attr_should_poll = False
    _attr_event_types = [EVENT_TYPE_PRESS]

    def __init__(self, hub: VideohubPanelHub, panel_id: str) -> None:
        self._hub = hub
        self._panel_id = panel_id
        panel = hub.panels[panel_id]
        self._attr_unique_id = f"{panel_id}_button"
        self._attr_name = f"{panel.display_name} Button"

    @property
    def device_info(self) -> DeviceInfo:
        return panel_device_info(self._hub.panels[self._panel_id])

    @property
    def available(self) -> bool:
        return self._hub.panels[self._panel_id].connected

    async def async_added_to_hass(self) -> None:
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                signal_panel_press(self._hub.entry_id, self._panel_id),
                self._handle_press,
            )
        )
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                signal_panel_state(self._hub.entry_id, self._panel_id),
                self._handle_panel_state,
            )
        )

    @callback
    def _handle_press(self, data: dict[str, Any]) -> None:
        self._trigger_event(
            EVENT_TYPE_PRESS,
            {
                "control_id": data["control_id"],
                "row": data["row"],
                "column": data["column"],
                "button": data["button"],
                "destination": data["destination"],
            },
        )
        self.async_write_ha_state()

    @callback
    def _handle_panel_state(self) -> None:
        self.async_write_ha_state()
