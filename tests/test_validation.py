from __future__ import annotations

import math

import pytest

from custom_components.videohub_panel.lib.errors import InvalidArgumentError, VideohubPanelError
from custom_components.videohub_panel.lib.validation import (
    validate_backlight,
    validate_destination_count,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 0), (10, 10), (5, 5), (10.7, 10), ("3", 3), (0.2, 0)],
)
def test_backlight_accepted(value, expected) -> None:
    assert validate_backlight(value) == expected


@pytest.mark.parametrize("value", [-1, 11, 125, math.nan, math.inf, "bright", None, True, 10**400])
def test_backlight_rejected(value) -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        validate_backlight(value)

    assert "Invalid backlight value" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)
    assert isinstance(excinfo.value, VideohubPanelError)


@pytest.mark.parametrize("value", [0, 2, 4, 6, 8, "4"])
def test_destination_count_accepted(value) -> None:
    assert validate_destination_count(value) == int(value)


@pytest.mark.parametrize("value", [1, 3, 7, -2, 10, math.nan, "x", 10**400])
def test_destination_count_rejected(value) -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        validate_destination_count(value)

    assert "Invalid destination count" in str(excinfo.value)
