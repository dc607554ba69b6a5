"""Regression tests for the CLI helper module."""

from importlib import import_module

import pytest


def test_cli_importable_via_package_path() -> None:
    """The CLI should be importable as part of the HA custom component package."""

    cli = import_module("custom_components.videohub_panel.lib.cli")

    args = cli.build_parser().parse_args([])
    assert args.port == 9990
    assert args.host is None
    assert not args.manual_configure
    assert args.backlight is None
    assert args.destinations is None


def test_cli_parses_options() -> None:
    cli = import_module("custom_components.videohub_panel.lib.cli")

    args = cli.build_parser().parse_args(
        ["--host", "127.0.0.1", "--port", "9000", "--manual-configure",
         "--backlight", "7", "--destinations", "4", "--debug"]
    )
    assert args.host == "127.0.0.1"
    assert args.port == 9000
    assert args.manual_configure
    assert args.backlight == 7
    assert args.destinations == 4
    assert args.debug


@pytest.mark.parametrize("argv", [["--backlight", "11"], ["--destinations", "3"]])
def test_cli_rejects_out_of_range_options(argv) -> None:
    cli = import_module("custom_components.videohub_panel.lib.cli")

    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(argv)
