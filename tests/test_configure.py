"""Tests for the configure and settings blocks sent to panels."""

from __future__ import annotations

from custom_components.videohub_panel.lib.configure import generate_configure, generate_settings


def _sections(text: str) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for raw in text.split("\n\n"):
        if not raw:
            continue
        header, *lines = raw.split("\n")
        out[header] = lines
    return out


def test_small_panel_exact_text() -> None:
    assert generate_configure(2, 1) == (
        "BUTTON KIND:\n0 Source\n1 Source\n\n"
        "BUTTON SDI_A:\n-1 0\n0 0\n1 1\n\n"
        "BUTTON SDI_B:\n-1 -1\n0 -1\n1 -1\n\n"
        "BUTTON REMOTE:\n-1 -1\n0 -1\n1 -1\n\n"
    )


def test_all_sources_without_destinations() -> None:
    sections = _sections(generate_configure(10, 4))

    kinds = sections["BUTTON KIND:"]
    assert len(kinds) == 40
    assert all(line.endswith(" Source") for line in kinds)
    assert sections["BUTTON SDI_A:"][0] == "-1 0"
    assert sections["BUTTON SDI_A:"][1:] == [f"{i} {i}" for i in range(40)]


def test_rightmost_columns_become_destinations() -> None:
    columns, rows = 4, 2
    sections = _sections(generate_configure(columns, rows, 4))

    kinds = dict(line.split(" ", 1) for line in sections["BUTTON KIND:"])
    # columns 2 and 3 on both rows
    destinations = {i for i, kind in kinds.items() if kind == "Destination"}
    assert destinations == {"2", "3", "6", "7"}

    sdi_a = dict(line.split(" ", 1) for line in sections["BUTTON SDI_A:"][1:])
    # routed column by column: (col 0, row 0), (col 0, row 1), (col 1, row 0), ...
    assert sdi_a["2"] == "0"
    assert sdi_a["6"] == "1"
    assert sdi_a["3"] == "2"
    assert sdi_a["7"] == "3"
    assert sdi_a["0"] == "0"
    assert sdi_a["5"] == "5"


def test_sdi_b_and_remote_are_unassigned() -> None:
    sections = _sections(generate_configure(3, 2, 2))

    for header in ("BUTTON SDI_B:", "BUTTON REMOTE:"):
        lines = sections[header]
        assert lines[0] == "-1 -1"
        assert lines[1:] == [f"{i} -1" for i in range(6)]


def test_section_order_and_terminators() -> None:
    text = generate_configure(1, 1, 0)

    assert text.index("BUTTON KIND:") < text.index("BUTTON SDI_A:")
    assert text.index("BUTTON SDI_A:") < text.index("BUTTON SDI_B:")
    assert text.index("BUTTON SDI_B:") < text.index("BUTTON REMOTE:")
    assert text.endswith("\n\n")
    assert text.count("\n\n") == 4


def test_settings_block() -> None:
    assert generate_settings(7) == "SETTINGS:\nBacklight: 7\nDestination backlight: 7\n\n"
