"""Line framing and hit-event decoding for the smack wire protocol.

The daemon writes one JSON object per line::

    {"severity": "hard", "amplitude": 2.5012, "undos": 5}

Socket reads may split a line across chunks or merge several lines into one
chunk, so bytes are buffered until a newline arrives.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Union

LINE_TERMINATOR = b"\n"


@dataclass(frozen=True)
class HitEvent:
    severity: str
    amplitude: float = 0.0
    # Producer's suggestion only; the dispatcher resolves undo counts locally.
    undos: int = 1


class LineFramer:
    """Accumulates raw socket bytes and yields complete lines."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def feed(self, chunk: bytes) -> List[bytes]:
        if chunk:
            self._buffer.extend(chunk)
        lines: List[bytes] = []
        while True:
            index = self._buffer.find(LINE_TERMINATOR)
            if index < 0:
                break
            line = bytes(self._buffer[:index])
            del self._buffer[: index + 1]
            if line:
                lines.append(line)
        return lines


def _coerce_amplitude(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    amplitude = float(value)
    if math.isnan(amplitude) or amplitude < 0:
        return 0.0
    return amplitude


def _coerce_undos(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    try:
        return int(value)
    except (OverflowError, ValueError):
        return 1


def decode_event(line: Union[bytes, str]) -> Optional[HitEvent]:
    """Decode one line into a HitEvent, or return None for anything malformed."""
    if isinstance(line, bytes):
        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError:
            return None
    else:
        text = line
    if not text.strip():
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    severity = payload.get("severity")
    if severity is None:
        return None
    return HitEvent(
        severity=str(severity),
        amplitude=_coerce_amplitude(payload.get("amplitude", 0)),
        undos=_coerce_undos(payload.get("undos", 1)),
    )
