"""Banner written to a panel as soon as it connects.

Panels expect to talk to a Videohub router, so we announce ourselves as one
with identity routing and no locks.
"""

from __future__ import annotations

PROTOCOL_VERSION = "2.8"
DEFAULT_MODEL_NAME = "Blackmagic Smart Videohub 40 x 40"
DEFAULT_FRIENDLY_NAME = "Home Assistant"
DEFAULT_UNIQUE_ID = "000000000000"
DEFAULT_PORT_COUNT = 40


def _block(header: str, lines: list[str]) -> str:
    return header + "\n" + "".join(f"{line}\n" for line in lines) + "\n"


def generate_prelude(
    *,
    model_name: str = DEFAULT_MODEL_NAME,
    friendly_name: str = DEFAULT_FRIENDLY_NAME,
    unique_id: str = DEFAULT_UNIQUE_ID,
    inputs: int = DEFAULT_PORT_COUNT,
    outputs: int = DEFAULT_PORT_COUNT,
) -> str:
    routing_source_count = max(inputs, 1)
    return (
        _block("PROTOCOL PREAMBLE:", [f"Version: {PROTOCOL_VERSION}"])
        + _block(
            "VIDEOHUB DEVICE:",
            [
                "Device present: true",
                f"Model name: {model_name}",
                f"Friendly name: {friendly_name}",
                f"Unique ID: {unique_id}",
                f"Video inputs: {inputs}",
                "Video processing units: 0",
                f"Video outputs: {outputs}",
                "Video monitoring outputs: 0",
                "Serial ports: 0",
            ],
        )
        + _block("INPUT LABELS:", [f"{i} Input {i + 1}" for i in range(inputs)])
        + _block("OUTPUT LABELS:", [f"{i} Output {i + 1}" for i in range(outputs)])
        + _block("VIDEO OUTPUT LOCKS:", [f"{i} U" for i in range(outputs)])
        + _block(
            "VIDEO OUTPUT ROUTING:",
            [f"{i} {i % routing_source_count}" for i in range(outputs)],
        )
        + _block("CONFIGURATION:", ["Take Mode: false"])
        + _block("END PRELUDE:", [])
    )


__all__ = ["PROTOCOL_VERSION", "generate_prelude"]
