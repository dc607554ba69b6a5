from __future__ import annotations

from custom_components.videohub_panel.lib.framing import BlockDecoder
from custom_components.videohub_panel.lib.prelude import PROTOCOL_VERSION, generate_prelude


def _headers(text: str) -> list[str]:
    return [block[0] for block in BlockDecoder().feed(text.encode())]


def test_prelude_block_order() -> None:
    assert _headers(generate_prelude()) == [
        "PROTOCOL PREAMBLE:",
        "VIDEOHUB DEVICE:",
        "INPUT LABELS:",
        "OUTPUT LABELS:",
        "VIDEO OUTPUT LOCKS:",
        "VIDEO OUTPUT ROUTING:",
        "CONFIGURATION:",
        "END PRELUDE:",
    ]


def test_prelude_version_and_device() -> None:
    blocks = BlockDecoder().feed(generate_prelude(friendly_name="Rack", unique_id="42").encode())

    assert blocks[0] == ["PROTOCOL PREAMBLE:", f"Version: {PROTOCOL_VERSION}"]
    device = blocks[1]
    assert "Friendly name: Rack" in device
    assert "Unique ID: 42" in device
    assert "Video inputs: 40" in device
    assert "Video outputs: 40" in device


def test_prelude_sizes_follow_port_counts() -> None:
    blocks = BlockDecoder().feed(generate_prelude(inputs=2, outputs=3).encode())
    by_header = {block[0]: block[1:] for block in blocks}

    assert by_header["INPUT LABELS:"] == ["0 Input 1", "1 Input 2"]
    assert by_header["VIDEO OUTPUT LOCKS:"] == ["0 U", "1 U", "2 U"]
    assert by_header["VIDEO OUTPUT ROUTING:"] == ["0 0", "1 1", "2 0"]


def test_prelude_is_fully_terminated() -> None:
    text = generate_prelude()

    assert text.endswith("END PRELUDE:\n\n")
    decoder = BlockDecoder()
    decoder.feed(text.encode())
    assert decoder.pending == 0
