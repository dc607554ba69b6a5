"""Tests for splitting the panel byte stream into blocks."""

from __future__ import annotations

from custom_components.videohub_panel.lib.framing import BlockDecoder, split_lines


def _feed_all(decoder: BlockDecoder, chunks: list[bytes]) -> list[list[str]]:
    out: list[list[str]] = []
    for chunk in chunks:
        out.extend(decoder.feed(chunk))
    return out


def test_single_block() -> None:
    decoder = BlockDecoder()

    assert decoder.feed(b"PING:\n\n") == [["PING:"]]
    assert decoder.pending == 0


def test_partial_block_is_buffered() -> None:
    decoder = BlockDecoder()

    assert decoder.feed(b"VIDEO OUTPUT ROUTING:\n3 7") == []
    assert decoder.pending > 0
    assert decoder.feed(b"\n\n") == [["VIDEO OUTPUT ROUTING:", "3 7"]]
    assert decoder.pending == 0


def test_terminator_split_across_reads() -> None:
    decoder = BlockDecoder()

    assert decoder.feed(b"PING:\n") == []
    assert decoder.feed(b"\nPING:\n\n") == [["PING:"], ["PING:"]]


def test_multiple_blocks_in_one_read_keep_order() -> None:
    decoder = BlockDecoder()

    blocks = decoder.feed(b"PING:\n\nVIDEO OUTPUT ROUTING:\n1 2\n3 4\n\nSMART DEVICE:\nModel: X\n\n")
    assert blocks == [
        ["PING:"],
        ["VIDEO OUTPUT ROUTING:", "1 2", "3 4"],
        ["SMART DEVICE:", "Model: X"],
    ]


def test_chunking_does_not_change_result() -> None:
    stream = b"PING:\n\nVIDEO OUTPUT ROUTING:\n0 5\n\nPING:\n\n"
    expected = BlockDecoder().feed(stream)

    for size in (1, 2, 3, 5, 7):
        chunks = [stream[i : i + size] for i in range(0, len(stream), size)]
        assert _feed_all(BlockDecoder(), chunks) == expected


def test_empty_blocks_are_skipped() -> None:
    decoder = BlockDecoder()

    assert decoder.feed(b"\n\nPING:\n\n") == [["PING:"]]


def test_crlf_lines_are_trimmed() -> None:
    assert split_lines(b"VIDEO OUTPUT ROUTING:\r\n3 7\r") == ["VIDEO OUTPUT ROUTING:", "3 7"]


def test_invalid_utf8_does_not_raise() -> None:
    decoder = BlockDecoder()

    blocks = decoder.feed(b"PING:\xff\n\n")
    assert len(blocks) == 1
    assert blocks[0][0].startswith("PING:")


def test_oversized_buffer_is_dropped() -> None:
    decoder = BlockDecoder(max_buffered=16)

    assert decoder.feed(b"x" * 32) == []
    assert decoder.pending == 0
    assert decoder.feed(b"PING:\n\n") == [["PING:"]]


def test_reset_discards_partial_data() -> None:
    decoder = BlockDecoder()
    decoder.feed(b"VIDEO OUTPUT")
    decoder.reset()

    assert decoder.feed(b"PING:\n\n") == [["PING:"]]
