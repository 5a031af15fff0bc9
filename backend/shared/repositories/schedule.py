"""Repository for queue_schedules table."""

from __future__ import annotations

import asyncpg

from shared.models.schedule import QueueSchedule

_COLUMNS = "id, queue_channel_id, command, schedule, utc_offset"


class ScheduleRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def list_for_queue(self, queue_channel_id: int) -> list[QueueSchedule]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM queue_schedules WHERE queue_channel_id = $1 ORDER BY id",
                queue_channel_id,
            )
            return [QueueSchedule(**dict(row)) for row in rows]

    async def get_summary_text(self, queue_channel_id: int) -> str:
        """One description line per schedule, each starting with a newline."""
        schedules = await self.list_for_queue(queue_channel_id)
        return "".join(
            f"\nScheduled: `/{s.command}` at `{s.schedule}` (UTC{s.utc_offset:+d})"
            for s in schedules
        )
