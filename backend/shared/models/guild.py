"""Data model for queue_guilds table."""

from __future__ import annotations

from dataclasses import dataclass

from .display import DisplayMode


@dataclass
class GuildSettings:
    """Guild-level queue configuration."""

    guild_id: int
    msg_mode: DisplayMode = DisplayMode.EDIT
    disable_mentions: bool = False
    timestamps: str = "off"

    def __post_init__(self) -> None:
        self.msg_mode = DisplayMode(self.msg_mode)
