"""Decode the ``SMART DEVICE:`` block a panel sends on its configure port."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence

from .protocol_const import DEVICE_INFO_INT_KEYS, DEVICE_INFO_TEXT_KEYS, HEADER_SMART_DEVICE

_INT_RE = re.compile(r"-?[0-9]+")


@dataclass(slots=True)
class DeviceInfo:
    """What a panel reports about itself. Every field is best-effort."""

    model: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None
    buttons_total: Optional[int] = None
    buttons_columns: Optional[int] = None
    buttons_rows: Optional[int] = None

    def as_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def is_device_info_block(lines: Sequence[str]) -> bool:
    return bool(lines) and lines[0] == HEADER_SMART_DEVICE


def _parse_int(value: str) -> Optional[int]:
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


def parse_device_info(lines: Sequence[str]) -> DeviceInfo:
    """Build a :class:`DeviceInfo` from ``Key: value`` lines.

    The header line is skipped. Unknown keys, lines without a colon and
    numeric fields that do not parse are ignored rather than raising.
    """
    info = DeviceInfo()
    for line in lines[1:]:
        key, sep, value = line.partition(":")
        if not sep:
            continue
        value = value.strip()

        attr = DEVICE_INFO_TEXT_KEYS.get(key)
        if attr is not None:
            setattr(info, attr, value)
            continue

        attr = DEVICE_INFO_INT_KEYS.get(key)
        if attr is not None:
            number = _parse_int(value)
            if number is not None:
                setattr(info, attr, number)
    return info


__all__ = ["DeviceInfo", "is_device_info_block", "parse_device_info"]
