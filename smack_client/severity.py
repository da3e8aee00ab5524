from __future__ import annotations

from typing import NamedTuple

from smack_client.config import SmackConfig


class SeverityPolicy(NamedTuple):
    undo_count: int
    shake_intensity: int


def resolve_policy(config: SmackConfig, severity: str) -> SeverityPolicy:
    """Map a severity tag to (undo count, shake intensity); unknown tags get 1/1."""
    return SeverityPolicy(
        undo_count=config.undo_count.get(severity),
        shake_intensity=config.shake_intensity.get(severity),
    )
