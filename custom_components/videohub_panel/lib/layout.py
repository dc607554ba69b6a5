"""Map panel button indices onto a row/column grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class ButtonPosition:
    row: int
    column: int

    @property
    def control_id(self) -> str:
        return f"{self.row}/{self.column}"


def button_position(index: int, columns: int, rows: int) -> Optional[ButtonPosition]:
    """Return the grid position of ``index`` or ``None`` if it is off the panel."""
    if columns <= 0 or rows <= 0 or index < 0:
        return None
    row, column = divmod(index, columns)
    if row >= rows:
        return None
    return ButtonPosition(row, column)


def button_index(position: ButtonPosition, columns: int) -> int:
    return position.column + position.row * columns


def build_surface_layout(columns: int, rows: int) -> Dict[str, Dict[str, int]]:
    """``{"row/col": {"row": r, "column": c}}`` for every button."""
    layout: Dict[str, Dict[str, int]] = {}
    for row in range(max(rows, 0)):
        for column in range(max(columns, 0)):
            layout[f"{row}/{column}"] = {"row": row, "column": column}
    return layout


__all__ = ["ButtonPosition", "build_surface_layout", "button_index", "button_position"]
