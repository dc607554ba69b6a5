"""Interpret command blocks received on a panel's primary connection.

Every block is acknowledged first, then routed to the handlers registered for
its header. To support a new command:

1. Subclass :class:`BaseCommandHandler` and override
   :meth:`BaseCommandHandler.handle`.
2. Decorate it with :func:`register_handler`, passing the header(s) it
   answers to.
3. Use the :class:`CommandContext` to read the block lines and emit events
   through ``ctx.emit_press``.

Blocks without a matching handler are dropped silently so newer panel
firmware never breaks the connection.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import (
    Callable,
    Iterator,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from .protocol_const import ACK_BLOCK, HEADER_PING, HEADER_ROUTING

log = logging.getLogger("videohub_panel.commands")

# ASCII digits only, optional minus
_INT_RE = re.compile(r"-?[0-9]+")

PressCallback = Callable[[str, int, int], None]


class BlockWriter(Protocol):  # pragma: no cover - protocol
    def write(self, data: bytes) -> None: ...


@dataclass(slots=True)
class CommandContext:
    """State passed to each handler invocation."""

    client_id: str
    lines: Sequence[str]
    emit_press: PressCallback

    @property
    def header(self) -> str:
        return self.lines[0]

    @property
    def body(self) -> Sequence[str]:
        return self.lines[1:]


@runtime_checkable
class CommandHandler(Protocol):
    """Interface implemented by command handlers."""

    def matches(self, lines: Sequence[str]) -> bool:  # pragma: no cover - protocol
        """Return ``True`` when this handler should process the block."""

    def handle(self, ctx: CommandContext) -> None:  # pragma: no cover - protocol
        """Act on the block."""


class BaseCommandHandler(CommandHandler):
    """Match on the block header, optionally requiring a body."""

    headers: tuple[str, ...] | None = None
    requires_body: bool = False
    single_line: bool = False

    def matches(self, lines: Sequence[str]) -> bool:
        if not lines:
            return False
        if self.headers is not None and lines[0] not in self.headers:
            return False
        if self.single_line and len(lines) != 1:
            return False
        if self.requires_body and len(lines) < 2:
            return False
        return True

    def handle(self, ctx: CommandContext) -> None:
        return None


class CommandHandlerRegistry:
    """Collection of registered handlers."""

    def __init__(self) -> None:
        self._handlers: list[CommandHandler] = []

    def register(self, handler: CommandHandler) -> CommandHandler:
        self._handlers.append(handler)
        return handler

    def iter_for(self, lines: Sequence[str]) -> Iterator[CommandHandler]:
        for handler in self._handlers:
            if handler.matches(lines):
                yield handler


command_handler_registry = CommandHandlerRegistry()


def register_handler(
    handler: Optional[type[BaseCommandHandler] | CommandHandler] = None,
    *,
    headers: Sequence[str] | None = None,
    registry: CommandHandlerRegistry = command_handler_registry,
):
    """Decorator used to register ``CommandHandler`` implementations."""

    def _decorator(obj):
        instance = obj() if isinstance(obj, type) else obj
        if headers is not None:
            instance.headers = tuple(headers)  # type: ignore[attr-defined]
        registry.register(instance)
        return obj

    if handler is not None:
        return _decorator(handler)
    return _decorator


def parse_routing_line(line: str) -> tuple[int, int] | None:
    parts = line.split()
    if len(parts) < 2:
        return None
    if not (_INT_RE.fullmatch(parts[0]) and _INT_RE.fullmatch(parts[1])):
        return None
    return int(parts[0]), int(parts[1])


@register_handler(headers=(HEADER_PING,))
class PingHandler(BaseCommandHandler):
    """Keep-alive; the ACK already answered it."""

    single_line = True


@register_handler(headers=(HEADER_ROUTING,))
class RoutingHandler(BaseCommandHandler):
    """A button press, reported as a routing change."""

    requires_body = True

    def handle(self, ctx: CommandContext) -> None:
        for line in ctx.body:
            parsed = parse_routing_line(line)
            if parsed is None:
                continue
            destination, value = parsed
            ctx.emit_press(ctx.client_id, destination, value)
        # A single press could flash the button here; panels light it themselves.


def dispatch_block(
    writer: BlockWriter,
    client_id: str,
    lines: Sequence[str],
    emit_press: PressCallback,
    *,
    registry: CommandHandlerRegistry = command_handler_registry,
) -> bool:
    """ACK ``lines`` on ``writer`` and run matching handlers.

    Returns ``True`` when at least one handler recognised the block.
    """
    writer.write(ACK_BLOCK.encode())

    ctx = CommandContext(client_id=client_id, lines=lines, emit_press=emit_press)
    handled = False
    for handler in registry.iter_for(lines):
        handled = True
        handler.handle(ctx)

    if not handled and log.isEnabledFor(logging.DEBUG):
        log.debug("[CMD] %s ignoring unknown block %r", client_id, lines[0] if lines else "")
    return handled


__all__ = [
    "BaseCommandHandler",
    "CommandContext",
    "CommandHandler",
    "CommandHandlerRegistry",
    "PingHandler",
    "RoutingHandler",
    "command_handler_registry",
    "dispatch_block",
    "parse_routing_line",
    "register_handler",
]
