"""Shared repository layer for the queue display services."""

from .display import DisplayTargetRepository
from .guild import GuildSettingsRepository
from .queue import QueueRepository
from .rank import RankSettingsRepository
from .schedule import ScheduleRepository

__all__ = [
    "DisplayTargetRepository",
    "GuildSettingsRepository",
    "QueueRepository",
    "RankSettingsRepository",
    "ScheduleRepository",
]
