from __future__ import annotations

from homeassistant.components.number import NumberEntity, NumberMode
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo, EntityCategory
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
        async_add_entities([VideohubPanelBacklight(hub, panel_id)])

    entry.async_on_unload(
        async_dispatcher_connect(hass, signal_panel_added(entry.entry_id), _add_panel)
    )
    for panel_id in list(hub.panels):
        _add_panel(panel_id)


class VideohubPanelBacklight(NumberEntity):
    """Button backlight, as a percentage. The panel itself has 11 steps."""

    _attr_should_poll = False
    _attr_entity_category = EntityCategory.CONFIG
    _attr_mode = NumberMode.SLIDER
    _attr_native_min_value = 0
    _attr_native_max_value = 100
    _attr_native_step = 10
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_icon = "mdi:brightness-6"

    def __init__(self, hub: VideohubPanelHub, panel_id: str) -> None:
        self._hub = hub
        self._panel_id = panel_id
        panel = hub.panels[panel_id]
        self._attr_unique_id = f"{panel_id}_backlight"
        self._attr_name = f"{panel.display_name} Backlight"

    @property
    def device_info(self) -> DeviceInfo:
        return panel_device_info(self._hub.panels[self._panel_id])

    @property
    def available(self) -> bool:
        return self._hub.panels[self._panel_id].connected

    @property
    def native_value(self) -> float | None:
        return self._hub.panels[self._panel_id].brightness

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

    async def async_set_native_value(self, value: float) -> None:
        await self._hub.async_set_brightness(self._panel_id, value)
