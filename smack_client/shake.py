"""Timer-stepped screen shake that nudges the viewport and puts it back."""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

from smack_client.host import EditorHost, ViewSnapshot

SHAKE_INTERVAL_MS = 25

_LOGGER = logging.getLogger("Smack.Client.Shake")


def shake_offsets(intensity: int) -> Tuple[int, ...]:
    """Build the alternating ``+m, -m, ..., 0`` pattern for ``intensity``.

    The pattern has ``2 * intensity + 1`` entries with ``m = ceil(intensity / 2)``.
    """
    intensity = max(1, int(intensity))
    magnitude = math.ceil(intensity / 2)
    offsets: List[int] = []
    for step in range(1, intensity * 2 + 1):
        offsets.append(magnitude if step % 2 == 1 else -magnitude)
    offsets.append(0)
    return tuple(offsets)


class ShakeSession:
    """One run of the offset sequence; owns its own snapshot and timer."""

    def __init__(
        self,
        host: EditorHost,
        saved_view: ViewSnapshot,
        offsets: Tuple[int, ...],
        *,
        on_finished: Optional[Callable[["ShakeSession"], None]] = None,
    ) -> None:
        self._host = host
        self.saved_view = saved_view
        self.offsets = offsets
        self.step = 0
        self._timer: Optional[object] = None
        self._finished = False
        self._on_finished = on_finished

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self, interval_ms: int = SHAKE_INTERVAL_MS) -> None:
        if self._timer is not None or self._finished:
            return
        self._timer = self._host.start_timer(interval_ms, self.tick)

    def tick(self) -> None:
        if self._finished:
            return
        self.step += 1
        if self.step > len(self.offsets):
            self._finish()
            return
        saved = self.saved_view
        offset = self.offsets[self.step - 1]
        self._restore(
            ViewSnapshot(
                topline=max(1, saved.topline + offset),
                lnum=saved.lnum,
                col=saved.col,
                curswant=saved.curswant,
            )
        )

    def cancel(self) -> None:
        if not self._finished:
            self._finish()

    def _finish(self) -> None:
        self._finished = True
        timer = self._timer
        self._timer = None
        if timer is not None:
            try:
                self._host.stop_timer(timer)
            except Exception as exc:
                _LOGGER.debug("Failed to stop shake timer: %s", exc)
        self._restore(self.saved_view)
        if self._on_finished is not None:
            self._on_finished(self)

    def _restore(self, view: ViewSnapshot) -> None:
        # The editor may be tearing down underneath a running shake.
        try:
            self._host.restore_view(view)
        except Exception as exc:
            _LOGGER.debug("Shake restore skipped: %s", exc)


class ScreenShaker:
    """Starts shake sessions; overlapping sessions run side by side."""

    def __init__(self, host: EditorHost, *, interval_ms: int = SHAKE_INTERVAL_MS) -> None:
        self._host = host
        self._interval_ms = interval_ms
        self._sessions: List[ShakeSession] = []

    @property
    def active_sessions(self) -> List[ShakeSession]:
        return list(self._sessions)

    def shake(self, intensity: int) -> Optional[ShakeSession]:
        try:
            view = self._host.save_view()
        except Exception as exc:
            _LOGGER.debug("Shake aborted, view snapshot failed: %s", exc)
            return None
        if view is None:
            _LOGGER.debug("Shake aborted, no view to snapshot")
            return None
        session = ShakeSession(self._host, view, shake_offsets(intensity), on_finished=self._forget)
        self._sessions.append(session)
        session.start(self._interval_ms)
        _LOGGER.debug("Shake started: intensity=%d steps=%d topline=%d", intensity, len(session.offsets), view.topline)
        return session

    def cancel_all(self) -> None:
        # Newest first so the oldest snapshot is the one left on screen.
        for session in reversed(self.active_sessions):
            session.cancel()

    def _forget(self, session: ShakeSession) -> None:
        try:
            self._sessions.remove(session)
        except ValueError:
            pass
