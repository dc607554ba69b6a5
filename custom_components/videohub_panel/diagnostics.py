from __future__ import annotations

"""Support for Home Assistant diagnostics downloads."""

import logging
import re
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import CONF_HOST, DOMAIN

_LOGGER = logging.getLogger(__name__)

_IP_ADDRESS_PATTERN = re.compile(r"\b\d{1,3}(?:\.\d{1,3}){3}\b")
_HOST_KEYS = {CONF_HOST.lower(), "address", "remote_address"}


def _redact_value(value: Any) -> Any:
    """Scrub IP addresses from a value."""

    if isinstance(value, str):
        value = _IP_ADDRESS_PATTERN.sub("[REDACTED_IP]", value)

    return value


def _redact_data_structure(data: Any) -> Any:
    """Redact host-like fields, recursing into containers."""

    if isinstance(data, dict):
        redacted: dict[Any, Any] = {}
        for key, value in data.items():
            if str(key).lower() in _HOST_KEYS:
                redacted[key] = "[REDACTED_IP]"
                continue
            redacted[_redact_value(key)] = _redact_data_structure(value)
        return redacted

    if isinstance(data, (list, tuple)):
        return type(data)(_redact_data_structure(item) for item in data)

    return _redact_value(data)


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""

    entry_dict = {
        "data": _redact_data_structure(dict(entry.data)),
        "options": _redact_data_structure(dict(entry.options)),
    }

    hub = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub_state: dict[str, Any] = {}
    if hub is not None:
        server = hub.server
        hub_state = _redact_data_structure(
            {
                "name": hub.name,
                "host": hub.host,
                "port": hub.port,
                "manual_configure": hub.manual_configure,
                "server_running": server.is_running,
                "bound_port": server.port,
                "panels": [
                    {
                        "panel_id": panel.panel_id,
                        "address": panel.address,
                        "connected": panel.connected,
                        "brightness": panel.brightness,
                        "destination_count": panel.destination_count,
                        "device_info": panel.device_info.as_dict(),
                    }
                    for panel in hub.panels.values()
                ],
                "clients": [
                    {
                        "public_id": client.public_id,
                        "remote_address": client.remote_address,
                        "configurable": client.configurable,
                    }
                    for client in server.clients
                ],
            }
        )

    _LOGGER.debug("Collected diagnostics for %s", entry.entry_id)
    return {
        "entry": entry_dict,
        "hub": hub_state,
    }
