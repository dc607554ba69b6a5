"""Text blocks written to a panel's configure connection."""

from __future__ import annotations

from typing import Iterator, Tuple

from .protocol_const import (
    HEADER_BUTTON_KIND,
    HEADER_BUTTON_REMOTE,
    HEADER_BUTTON_SDI_A,
    HEADER_BUTTON_SDI_B,
    HEADER_SETTINGS,
    KIND_DESTINATION,
    KIND_SOURCE,
)


def _iter_buttons(columns: int, rows: int) -> Iterator[Tuple[int, int, int]]:
    """Yield ``(index, x, y)`` in row-major order."""
    for y in range(rows):
        for x in range(columns):
            yield x + y * columns, x, y


def _section(header: str, lines: list[str]) -> str:
    return header + "\n" + "".join(f"{line}\n" for line in lines) + "\n"


def generate_configure(columns: int, rows: int, destination_count: int = 0) -> str:
    """Build the BUTTON KIND / SDI_A / SDI_B / REMOTE configuration.

    The rightmost ``destination_count // 2`` columns become destination
    buttons, routed column by column; all other buttons are sources routed
    to their own index. SDI_B and REMOTE are always left unassigned.

    ``destination_count`` is expected to be validated by the caller.
    """
    destination_cols = destination_count // 2
    destination_from_col = columns - destination_cols

    kinds: list[str] = []
    sdi_a: list[str] = ["-1 0"]
    unassigned: list[str] = ["-1 -1"]

    for i, x, y in _iter_buttons(columns, rows):
        if x >= destination_from_col:
            kinds.append(f"{i} {KIND_DESTINATION}")
            destination_col = x - destination_from_col
            sdi_a.append(f"{i} {destination_col * rows + y}")
        else:
            kinds.append(f"{i} {KIND_SOURCE}")
            sdi_a.append(f"{i} {i}")
        unassigned.append(f"{i} -1")

    return (
        _section(HEADER_BUTTON_KIND, kinds)
        + _section(HEADER_BUTTON_SDI_A, sdi_a)
        + _section(HEADER_BUTTON_SDI_B, unassigned)
        + _section(HEADER_BUTTON_REMOTE, unassigned)
    )


def generate_settings(backlight: int) -> str:
    return _section(
        HEADER_SETTINGS,
        [f"Backlight: {backlight}", f"Destination backlight: {backlight}"],
    )


__all__ = ["generate_configure", "generate_settings"]
