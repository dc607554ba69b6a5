"""Argument schemas for commands sent to a panel."""

from __future__ import annotations

import math
from typing import Any

import voluptuous as vol

from .errors import InvalidArgumentError
from .protocol_const import BACKLIGHT_MAX, BACKLIGHT_MIN, MAX_DESTINATIONS


def _floor_int(value: Any) -> int:
    if isinstance(value, bool):
        raise vol.Invalid("expected a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as err:
        raise vol.Invalid("expected a number") from err
    if not math.isfinite(number):
        raise vol.Invalid("expected a finite number")
    return math.floor(number)


def _even(value: int) -> int:
    if value % 2:
        raise vol.Invalid("must be even")
    return value


BACKLIGHT_SCHEMA = vol.Schema(
    vol.All(_floor_int, vol.Range(min=BACKLIGHT_MIN, max=BACKLIGHT_MAX))
)

DESTINATION_COUNT_SCHEMA = vol.Schema(
    vol.All(_floor_int, vol.Range(min=0, max=MAX_DESTINATIONS), _even)
)


def validate_backlight(value: Any) -> int:
    try:
        return BACKLIGHT_SCHEMA(value)
    except vol.Invalid as err:
        raise InvalidArgumentError(f'Invalid backlight value: "{value}" ({err.msg})') from err


def validate_destination_count(value: Any) -> int:
    try:
        return DESTINATION_COUNT_SCHEMA(value)
    except vol.Invalid as err:
        raise InvalidArgumentError(
            f'Invalid destination count: "{value}" ({err.msg})'
        ) from err


__all__ = [
    "BACKLIGHT_SCHEMA",
    "DESTINATION_COUNT_SCHEMA",
    "validate_backlight",
    "validate_destination_count",
]
