from __future__ import annotations

import logging

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo, EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    DESTINATION_COUNT_OPTIONS,
    DOMAIN,
    signal_panel_added,
    signal_panel_state,
)
from .hub import VideohubPanelHub, panel_device_info

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    hub: VideohubPanelHub = hass.data[DOMAIN][entry.entry_id]

    @callback
    def _add_panel(panel_id: str) -> None:
        async_add_entities([VideohubPanelDestinationSelect(hub, panel_id)])

    entry.async_on_unload(
        async_dispatcher_connect(hass, signal_panel_added(entry.entry_id), _add_panel)
    )
    for panel_id in list(hub.panels):
        _add_panel(panel_id)


class VideohubPanelDestinationSelect(SelectEntity):
    """How many buttons (rightmost columns) act as destinations."""

    _attr_should_poll = False
    _attr_entity_category = EntityCategory.CONFIG
    _attr_options = DESTINATION_COUNT_OPTIONS
    _attr_icon = "mdi:view-column"

    def __init__(self, hub: VideohubPanelHub, panel_id: str) -> None:
        self._hub = hub
        self._panel_id = panel_id
        panel = hub.panels[panel_id]
        self._attr_unique_id = f"{panel_id}_destinations"
        self._attr_name = f"{panel.display_name} Destinations"

    @property
    def device_info(self) -> DeviceInfo:
        return panel_device_info(self._hub.panels[self._panel_id])

    @property
    def available(self) -> bool:
        return self._hub.panels[self._panel_id].connected

    @property
    def current_option(self) -> str | None:
        return str(self._hub.panels[self._panel_id].destination_count)

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

    async def async_select_option(self, option: str) -> None:
        if option not in DESTINATION_COUNT_OPTIONS:
            _LOGGER.warning("Unknown destination count %s", option)
            return
        await self._hub.async_configure_destinations(self._panel_id, int(option))
