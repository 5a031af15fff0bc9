"""Data model for queue_schedules table."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class QueueSchedule:
    """A recurring command run against a queue."""

    id: int
    queue_channel_id: int
    command: str
    schedule: str
    utc_offset: int = 0
