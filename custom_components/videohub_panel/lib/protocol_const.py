"""Common protocol constants shared by the Videohub panel helpers."""

from __future__ import annotations

# Ports
DEFAULT_LISTEN_PORT = 9990
CONFIGURE_PORT = 9991

# Timeouts (seconds)
CONFIGURE_TIMEOUT = 5.0  # hard deadline for the whole configure handshake
IDLE_TIMEOUT = 20.0  # primary connection; PING keeps it alive
CONFIGURE_IDLE_TIMEOUT = 20.0

# Framing
LINE_TERMINATOR = b"\n"
BLOCK_TERMINATOR = b"\n\n"
MAX_BUFFERED_BYTES = 1 << 20

# Block headers
HEADER_PING = "PING:"
HEADER_ROUTING = "VIDEO OUTPUT ROUTING:"
HEADER_SMART_DEVICE = "SMART DEVICE:"
HEADER_SETTINGS = "SETTINGS:"
HEADER_BUTTON_KIND = "BUTTON KIND:"
HEADER_BUTTON_SDI_A = "BUTTON SDI_A:"
HEADER_BUTTON_SDI_B = "BUTTON SDI_B:"
HEADER_BUTTON_REMOTE = "BUTTON REMOTE:"

ACK_BLOCK = "ACK\n\n"

# Button kinds used in the BUTTON KIND section
KIND_SOURCE = "Source"
KIND_DESTINATION = "Destination"

# SMART DEVICE keys -> DeviceInfo attribute
DEVICE_INFO_TEXT_KEYS = {
    "Model": "model",
    "Label": "name",
    "Unique ID": "id",
}
DEVICE_INFO_INT_KEYS = {
    "Input count": "buttons_total",
    "Inputs across": "buttons_columns",
    "Inputs down": "buttons_rows",
}

# Limits
BACKLIGHT_MIN = 0
BACKLIGHT_MAX = 10
MAX_DESTINATIONS = 8

__all__ = [
    "ACK_BLOCK",
    "BACKLIGHT_MAX",
    "BACKLIGHT_MIN",
    "BLOCK_TERMINATOR",
    "CONFIGURE_IDLE_TIMEOUT",
    "CONFIGURE_PORT",
    "CONFIGURE_TIMEOUT",
    "DEFAULT_LISTEN_PORT",
    "DEVICE_INFO_INT_KEYS",
    "DEVICE_INFO_TEXT_KEYS",
    "HEADER_BUTTON_KIND",
    "HEADER_BUTTON_REMOTE",
    "HEADER_BUTTON_SDI_A",
    "HEADER_BUTTON_SDI_B",
    "HEADER_PING",
    "HEADER_ROUTING",
    "HEADER_SETTINGS",
    "HEADER_SMART_DEVICE",
    "IDLE_TIMEOUT",
    "KIND_DESTINATION",
    "KIND_SOURCE",
    "LINE_TERMINATOR",
    "MAX_BUFFERED_BYTES",
    "MAX_DESTINATIONS",
]
