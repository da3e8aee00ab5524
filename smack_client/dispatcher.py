from __future__ import annotations

import logging
from typing import Callable

from smack_client.config import SmackConfig
from smack_client.host import EditorHost
from smack_client.protocol import HitEvent
from smack_client.severity import resolve_policy
from smack_client.shake import ScreenShaker

_LOGGER = logging.getLogger("Smack.Client.Dispatcher")


def format_hit_message(undo_count: int, amplitude: float) -> str:
    return f"SMACK! ({undo_count}x undo, {amplitude:.2f}g)"


class HitDispatcher:
    """Turns decoded hit events into undo, shake and a notification."""

    def __init__(
        self,
        host: EditorHost,
        config_provider: Callable[[], SmackConfig],
        shaker: ScreenShaker,
    ) -> None:
        self._host = host
        self._config = config_provider
        self._shaker = shaker
        self.hits = 0

    def submit(self, event: HitEvent) -> None:
        """Queue ``event`` on the editor loop unless the client is disabled."""
        if not self._config().enabled:
            _LOGGER.debug("Dropping %s hit while disabled", event.severity)
            return
        self._host.schedule(lambda: self.apply(event))

    def apply(self, event: HitEvent) -> None:
        config = self._config()
        policy = resolve_policy(config, event.severity)
        undone = 0
        for _ in range(policy.undo_count):
            if not self._host.undo():
                break
            undone += 1
        if config.shake:
            self._shaker.shake(policy.shake_intensity)
        self.hits += 1
        _LOGGER.debug(
            "Hit #%d [%s amp=%.4f payload_undos=%d] undo=%d/%d shake=%s",
            self.hits,
            event.severity,
            event.amplitude,
            event.undos,
            undone,
            policy.undo_count,
            policy.shake_intensity if config.shake else "off",
        )
        self._host.notify(format_hit_message(policy.undo_count, event.amplitude), logging.WARNING)
