"""Data models for display_channels table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class DisplayMode(IntEnum):
    """How a refresh updates a display message (``queue_guilds.msg_mode``)."""

    EDIT = 1
    REPLACE = 2
    REPLACE_STRIP = 3


@dataclass(frozen=True)
class DisplayTarget:
    """Binding of a queue to one display message."""

    id: int
    queue_channel_id: int
    display_channel_id: int
    message_id: int
