# const.py
DOMAIN = "videohub_panel"

CONF_HOST = "host"
CONF_PORT = "port"
CONF_NAME = "name"
CONF_MANUAL_CONFIGURE = "manual_configure"

DEFAULT_NAME = "Videohub panels"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9990
DEFAULT_MANUAL_CONFIGURE = True

# Brightness changes are coalesced before reaching the panel
BRIGHTNESS_DEBOUNCE_SECONDS = 0.05

DESTINATION_COUNT_OPTIONS = ["0", "2", "4", "6", "8"]

EVENT_BUTTON_PRESSED = f"{DOMAIN}_button_pressed"

PLATFORMS = ["binary_sensor", "event", "number", "select"]


def signal_panel_added(entry_id: str) -> str:
    return f"{DOMAIN}_{entry_id}_panel_added"


def signal_panel_state(entry_id: str, panel_id: str) -> str:
    return f"{DOMAIN}_{entry_id}_{panel_id}_state"


def signal_panel_press(entry_id: str, panel_id: str) -> str:
    return f"{DOMAIN}_{entry_id}_{panel_id}_press"
