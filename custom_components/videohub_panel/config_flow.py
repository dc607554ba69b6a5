from __future__ import annotations

import logging
from typing import Any, Dict

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback

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
)

_LOGGER = logging.getLogger(__name__)

PORT_VALIDATOR = vol.All(int, vol.Range(min=1, max=65535))


def _server_schema(defaults: Dict[str, Any]) -> Dict[Any, Any]:
    return {
        vol.Required(CONF_HOST, default=defaults.get(CONF_HOST, DEFAULT_HOST)): str,
        vol.Required(CONF_PORT, default=defaults.get(CONF_PORT, DEFAULT_PORT)): PORT_VALIDATOR,
        vol.Optional(
            CONF_MANUAL_CONFIGURE,
            default=defaults.get(CONF_MANUAL_CONFIGURE, DEFAULT_MANUAL_CONFIGURE),
        ): bool,
    }


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    # ------------------------------------------------------------------
    # step user: listen address, port and configure mode
    # ------------------------------------------------------------------
    async def async_step_user(self, user_input: Dict[str, Any] | None = None):
        if user_input is not None:
            port = user_input[CONF_PORT]
            # one listener per port
            await self.async_set_unique_id(f"{DOMAIN}_{port}")
            self._abort_if_unique_id_configured()

            return self.async_create_entry(
                title=user_input[CONF_NAME],
                data={
                    CONF_NAME: user_input[CONF_NAME],
                    CONF_HOST: user_input[CONF_HOST],
                    CONF_PORT: port,
                    CONF_MANUAL_CONFIGURE: user_input.get(
                        CONF_MANUAL_CONFIGURE, DEFAULT_MANUAL_CONFIGURE
                    ),
                },
            )

        schema = vol.Schema({
            vol.Required(CONF_NAME, default=DEFAULT_NAME): str,
            **_server_schema({}),
        })
        return self.async_show_form(
            step_id="user",
            data_schema=schema,
            description_placeholders={
                "help": (
                    "Panels connect to Home Assistant on this port (9990 by default). "
                    "Point each Smart Control panel's Videohub address at this host. "
                    "With manual configure off, every panel gets the default "
                    "all-source button layout as soon as it connects."
                )
            },
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the options flow for this entry."""
        return VideohubPanelOptionsFlowHandler(config_entry)


# ----------------------------------------------------------------------
# options flow: user can later change the listener settings
# ----------------------------------------------------------------------
class VideohubPanelOptionsFlowHandler(config_entries.OptionsFlow):
    def __init__(self, entry: config_entries.ConfigEntry) -> None:
        self.entry = entry

    async def async_step_init(self, user_input: Dict[str, Any] | None = None):
        if user_input is not None:
            return self.async_create_entry(title="Videohub panel options", data=user_input)

        current = {**self.entry.data, **self.entry.options}
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(_server_schema(current)),
        )
