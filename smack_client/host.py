"""Interface between the smack core and the editor hosting it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

Callback = Callable[[], None]


@dataclass(frozen=True)
class ViewSnapshot:
    """Viewport state: 1-based top line and cursor line, 0-based columns."""

    topline: int
    lnum: int
    col: int
    curswant: int


class EditorHost(Protocol):
    """Capabilities the core needs from the editor.

    Notification levels are ``logging`` levels. ``undo`` returns False when
    there is nothing left to undo. View operations must not raise when lines
    have disappeared; they clamp instead.
    """

    def undo(self) -> bool: ...
    def save_view(self) -> Optional[ViewSnapshot]: ...
    def restore_view(self, view: ViewSnapshot) -> None: ...
    def notify(self, message: str, level: int) -> None: ...
    def schedule(self, callback: Callback) -> None: ...
    def start_timer(self, interval_ms: int, callback: Callback) -> object: ...
    def stop_timer(self, handle: object) -> None: ...
    def register_command(self, name: str, callback: Callback) -> None: ...
    def on_startup(self, callback: Callback) -> None: ...
    def on_shutdown(self, callback: Callback) -> None: ...
