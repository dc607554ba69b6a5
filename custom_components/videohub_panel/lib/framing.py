"""Split the panel byte stream into command blocks.

A block is every line up to a blank line (``\\n\\n``). Blocks are returned in
arrival order; an incomplete block stays buffered until the next ``feed``.
"""

from __future__ import annotations

import logging
from typing import List

from .protocol_const import BLOCK_TERMINATOR, LINE_TERMINATOR, MAX_BUFFERED_BYTES

log = logging.getLogger("videohub_panel.framing")

Block = List[str]


def split_lines(raw: bytes) -> Block:
    text = raw.decode("utf-8", errors="replace")
    return [line.rstrip("\r") for line in text.split(LINE_TERMINATOR.decode())]


class BlockDecoder:
    def __init__(self, max_buffered: int = MAX_BUFFERED_BYTES) -> None:
        self.buf = bytearray()
        self._max_buffered = max_buffered

    def feed(self, data: bytes) -> list[Block]:
        out: list[Block] = []
        if not data:
            return out
        self.buf.extend(data)

        while True:
            idx = self.buf.find(BLOCK_TERMINATOR)
            if idx < 0:
                break
            raw = bytes(self.buf[:idx])
            del self.buf[: idx + len(BLOCK_TERMINATOR)]
            if raw:
                out.append(split_lines(raw))

        if len(self.buf) > self._max_buffered:
            log.debug("[FRAME] dropping %dB without a block terminator", len(self.buf))
            self.buf.clear()
        return out

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet part of a complete block."""
        return len(self.buf)

    def reset(self) -> None:
        self.buf.clear()


__all__ = ["Block", "BlockDecoder", "split_lines"]
