"""Tests for the interactive CLI shell using a fake server."""

from __future__ import annotations

from custom_components.videohub_panel.lib.cli import PanelShell
from custom_components.videohub_panel.lib.device_info import DeviceInfo
from custom_components.videohub_panel.lib.errors import UnknownClientError
from custom_components.videohub_panel.lib.validation import (
    validate_backlight,
    validate_destination_count,
)


class _FakeClient:
    def __init__(self, public_id: str) -> None:
        self.public_id = public_id
        self.internal_id = "10.0.0.5:50000"
        self.configurable = True


class _FakeServer:
    def __init__(self) -> None:
        self.port = 9990
        self.clients = [_FakeClient("PANEL1")]
        self.calls: list[tuple] = []
        self.callbacks: dict[str, list] = {}

    def _register(self, name: str, cb) -> None:
        self.callbacks.setdefault(name, []).append(cb)

    def on_connect(self, cb) -> None:
        self._register("connect", cb)

    def on_disconnect(self, cb) -> None:
        self._register("disconnect", cb)

    def on_press(self, cb) -> None:
        self._register("press", cb)

    def on_error(self, cb) -> None:
        self._register("error", cb)

    def set_backlight(self, public_id: str, level) -> None:
        if public_id != "PANEL1":
            raise UnknownClientError(public_id)
        self.calls.append(("backlight", public_id, validate_backlight(level)))

    def configure_device(self, public_id: str, count) -> None:
        if public_id != "PANEL1":
            raise UnknownClientError(public_id)
        self.calls.append(("configure", public_id, validate_destination_count(count)))


def test_backlight_and_configure_commands(capsys) -> None:
    server = _FakeServer()
    shell = PanelShell(server)

    shell.handle_line("backlight PANEL1 6")
    shell.handle_line("configure PANEL1 4")

    assert server.calls == [("backlight", "PANEL1", 6), ("configure", "PANEL1", 4)]


def test_bad_arguments_print_errors(capsys) -> None:
    server = _FakeServer()
    shell = PanelShell(server)

    shell.handle_line("backlight PANEL1")
    shell.handle_line("backlight PANEL1 99")
    shell.handle_line("configure OTHER 2")
    shell.handle_line("frobnicate")

    out = capsys.readouterr().out
    assert "usage: backlight" in out
    assert "Invalid backlight value" in out
    assert "Unknown client: OTHER" in out
    assert "commands:" in out
    assert server.calls == []


def test_status_lists_panels(capsys) -> None:
    shell = PanelShell(_FakeServer())

    shell.handle_line("status")

    out = capsys.readouterr().out
    assert "listening on    : 9990" in out
    assert "PANEL1" in out


def test_connect_applies_startup_settings(capsys) -> None:
    server = _FakeServer()
    PanelShell(server, backlight=3, destinations=2)

    info = DeviceInfo(model="Smart Control", buttons_columns=10, buttons_rows=4)
    for cb in server.callbacks["connect"]:
        cb("PANEL1", info, "10.0.0.5")
    for cb in server.callbacks["press"]:
        cb("PANEL1", 3, 7)

    assert server.calls == [("configure", "PANEL1", 2), ("backlight", "PANEL1", 3)]
    out = capsys.readouterr().out
    assert "connect: PANEL1 Smart Control 10x4 from 10.0.0.5" in out
    assert "press: PANEL1 destination=3 button=7" in out


def test_quit_stops_loop() -> None:
    shell = PanelShell(_FakeServer())

    shell.handle_line("quit")

    assert shell._stop
