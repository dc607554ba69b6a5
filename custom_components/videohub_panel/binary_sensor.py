# custom_components/videohub_panel/binary_sensor.py
from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, signal_panel_added, signal_panel_state
from .hub import VideohubPanelHub, panel_device_info


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    hub: VideohubPanelHub = hass.data[DOMAIN][entry.entry_id]

    @callback
    def _add_panel(panel_id: str) -> None:
        async_add_entities([VideohubPanelConnectedSensor(hub, panel_id)])

    entry.async_on_unload(
        async_dispatcher_connect(hass, signal_panel_added(entry.entry_id), _add_panel)
    )
    for panel_id in list(hub.panels):
        _add_panel(panel_id)


class VideohubPanelConnectedSensor(BinarySensorEntity):
    """Is the panel currently connected to us?"""

    _attr_should_poll = False
    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY

    def __init__(self, hub: VideohubPanelHub, panel_id: str) -> None:
        self._hub = hub
        self._panel_id = panel_id
        panel = hub.panels[panel_id]
        self._attr_unique_id = f"{panel_id}_connected"
        self._attr_name = f"{panel.display_name} Connected"

    @property
    def device_info(self) -> DeviceInfo:
        return panel_device_info(self._hub.panels[self._panel_id])

    async def async_added_to_hass(self) -> None:
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                signal_panel_state(self._hub.entry_id, self._panel_id),
                self._handle_panel_state,
            )
        )

    @callback
    def _handle_panel_state(self) -> None:
        self.async_write_ha_state()

    @property
    def is_on(self) -> bool:
        return self._hub.panels[self._panel_id].connected

    @property
    def extra_state_attributes(self) -> dict:
        panel = self._hub.panels[self._panel_id]
        return {
            "address": panel.address,
            "model": panel.device_info.model,
            "columns": panel.columns,
            "rows": panel.rows,
        }
