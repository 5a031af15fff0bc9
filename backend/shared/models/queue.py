"""Data models for queues and queue_members tables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

TIMESTAMP_MODES = ("off", "time", "date", "date+time", "relative")


@dataclass(frozen=True)
class QueueSnapshot:
    """Read-only view of one queue at render time.

    ``timestamps`` is joined in from the owning guild's settings.
    """

    channel_id: int
    guild_id: int
    name: str
    is_locked: bool = False
    max_members: int | None = None
    color: int | None = None
    header: str | None = None
    target_channel_id: int | None = None
    grace_period: int = 0
    hide_button: bool = False
    timestamps: str = "off"

    def __post_init__(self) -> None:
        if self.max_members is not None and self.max_members < 0:
            raise ValueError(f"max_members must be >= 0, got {self.max_members}")
        if self.grace_period < 0:
            raise ValueError(f"grace_period must be >= 0, got {self.grace_period}")
        if self.timestamps not in TIMESTAMP_MODES:
            raise ValueError(f"Unknown timestamp mode: {self.timestamps!r}")


@dataclass(frozen=True)
class QueueMemberEntry:
    """One member waiting in a queue."""

    member_id: int
    display_time: datetime
    is_priority: bool = False
    personal_message: str | None = None
