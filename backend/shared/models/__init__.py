"""Shared data models for the queue display services."""

from .display import DisplayMode, DisplayTarget
from .guild import GuildSettings
from .queue import QueueMemberEntry, QueueSnapshot
from .rank import RankAnnotation, RankSetting
from .schedule import QueueSchedule

__all__ = [
    "DisplayMode",
    "DisplayTarget",
    "GuildSettings",
    "QueueMemberEntry",
    "QueueSchedule",
    "QueueSnapshot",
    "RankAnnotation",
    "RankSetting",
]
