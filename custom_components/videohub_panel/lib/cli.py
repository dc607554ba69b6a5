#!/usr/bin/env python3
"""
cli.py: tiny command-line front end for the Videohub panel server

- starts the VideohubServer
- prints panel connect/disconnect/press events
- optional backlight / destination layout applied to every panel on connect
- simple prompt: status, backlight, configure, quit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from .device_info import DeviceInfo
from .errors import VideohubPanelError
from .protocol_const import DEFAULT_LISTEN_PORT
from .validation import validate_backlight, validate_destination_count
from .videohub_server import VideohubServer

# ----------------- helpers -----------------


def _backlight_arg(value: str) -> int:
    try:
        return validate_backlight(value)
    except VideohubPanelError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def _destinations_arg(value: str) -> int:
    try:
        return validate_destination_count(value)
    except VideohubPanelError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Videohub Smart Control panel server")
    ap.add_argument("--host", default=None, help="address to listen on (default: all)")
    ap.add_argument("--port", type=int, default=DEFAULT_LISTEN_PORT)
    ap.add_argument(
        "--manual-configure",
        action="store_true",
        help="do not push the default button layout on connect",
    )
    ap.add_argument("--backlight", type=_backlight_arg, default=None, help="0-10, applied on connect")
    ap.add_argument(
        "--destinations",
        type=_destinations_arg,
        default=None,
        help="destination buttons (0-8, even), applied on connect",
    )
    ap.add_argument("--debug", action="store_true", help="verbose logging")
    return ap


# ----------------- CLI -----------------


class PanelShell:
    """
    Very simple prompt on top of a running server.
    """

    prompt = "videohub> "

    def __init__(
        self,
        server: VideohubServer,
        *,
        backlight: Optional[int] = None,
        destinations: Optional[int] = None,
    ) -> None:
        self.server = server
        self.backlight = backlight
        self.destinations = destinations
        self._stop = False

        server.on_connect(self._on_connect)
        server.on_disconnect(self._on_disconnect)
        server.on_press(self._on_press)
        server.on_error(self._on_error)

    # ----- event handlers -----

    def _on_connect(self, public_id: str, info: DeviceInfo, remote_address: str) -> None:
        print(
            f"[event] connect: {public_id} {info.model or 'panel'} "
            f"{info.buttons_columns}x{info.buttons_rows} from {remote_address}"
        )
        if self.destinations is not None:
            self.server.configure_device(public_id, self.destinations)
        if self.backlight is not None:
            self.server.set_backlight(public_id, self.backlight)

    def _on_disconnect(self, public_id: str) -> None:
        print(f"[event] disconnect: {public_id}")

    def _on_press(self, public_id: str, destination: int, value: int) -> None:
        print(f"[event] press: {public_id} destination={destination} button={value}")

    def _on_error(self, *args) -> None:
        print("[event] error:", *args)

    # ----- command implementations -----

    def do_status(self, _args: str) -> None:
        print("== status ==")
        print(f"listening on    : {self.server.port}")
        clients = self.server.clients
        print(f"panels          : {len(clients)}")
        for client in clients:
            state = "ready" if client.configurable else "handshaking"
            print(f"  {client.public_id:<20} {client.internal_id:<22} {state}")

    def do_backlight(self, args: str) -> None:
        try:
            public_id, level = args.split()
            self.server.set_backlight(public_id, level)
        except ValueError:
            print("usage: backlight <panel> <0-10>")
        except VideohubPanelError as err:
            print(err)

    def do_configure(self, args: str) -> None:
        try:
            public_id, count = args.split()
            self.server.configure_device(public_id, count)
        except ValueError:
            print("usage: configure <panel> <0|2|4|6|8>")
        except VideohubPanelError as err:
            print(err)

    def do_quit(self, _args: str) -> None:
        self._stop = True

    def do_exit(self, _args: str) -> None:
        self._stop = True

    def handle_line(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        cmd, *rest = line.split(" ", 1)
        meth = getattr(self, f"do_{cmd}", None)
        if not meth:
            print("commands: status, backlight, configure, quit")
            return
        meth(rest[0] if rest else "")

    # ----- prompt loop -----

    async def async_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while not self._stop:
            try:
                line = await loop.run_in_executor(None, input, self.prompt)
            except EOFError:
                break
            self.handle_line(line)


async def _async_main(args: argparse.Namespace) -> None:
    server = VideohubServer(manual_configure=args.manual_configure)
    shell = PanelShell(server, backlight=args.backlight, destinations=args.destinations)
    await server.async_start(args.host, args.port)
    print("server started; type 'status'")
    try:
        await shell.async_loop()
    finally:
        await server.async_destroy()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        asyncio.run(_async_main(args))
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
