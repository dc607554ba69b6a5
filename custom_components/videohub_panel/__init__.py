from __future__ import annotations

import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from .const import (
    CONF_HOST,
    CONF_MANUAL_CONFIGURE,
    CONF_NAME,
    CONF_PORT,
    DEFAULT_HOST,
    DEFAULT_MANUAL_CONFIGURE,
    DEFAULT_NAME,
    DEFAULT_PORT,
    DOMAIN,
    PLATFORMS,
)
from .hub import VideohubPanelHub

_LOGGER = logging.getLogger(__name__)


def _entry_settings(entry: ConfigEntry) -> dict[str, Any]:
    """Options win over the data captured by the config flow."""
    merged = {**entry.data, **entry.options}
    host = merged.get(CONF_HOST, DEFAULT_HOST) or None
    return {
        "host": host,
        "port": int(merged.get(CONF_PORT, DEFAULT_PORT)),
        "manual_configure": bool(merged.get(CONF_MANUAL_CONFIGURE, DEFAULT_MANUAL_CONFIGURE)),
    }


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    settings = _entry_settings(entry)

    hub = VideohubPanelHub(
        hass=hass,
        entry_id=entry.entry_id,
        name=entry.data.get(CONF_NAME, DEFAULT_NAME),
        **settings,
    )
    try:
        await hub.async_start()
    except OSError as err:
        raise ConfigEntryNotReady(
            f"Could not listen for panels on port {settings['port']}: {err}"
        ) from err

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = hub

    # ← important: tell HA to call us when options change
    entry.async_on_unload(entry.add_update_listener(async_update_options))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Called when user changes options in the UI."""
    hub: VideohubPanelHub = hass.data[DOMAIN][entry.entry_id]
    await hub.async_apply_new_settings(**_entry_settings(entry))


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hub = hass.data[DOMAIN].pop(entry.entry_id, None)
        if not hass.data[DOMAIN]:
            hass.data.pop(DOMAIN)
        if hub is not None:
            await hub.async_stop()
    return unload_ok
