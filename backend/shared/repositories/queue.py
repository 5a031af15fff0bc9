"""Repository for queues and queue_members tables."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import asyncpg

from shared.models.queue import QueueMemberEntry, QueueSnapshot

logger = logging.getLogger(__name__)

_QUEUE_COLUMNS = (
    "q.channel_id, q.guild_id, q.name, q.is_locked, q.max_members, q.color, q.header, "
    "q.target_channel_id, q.grace_period, q.hide_button, "
    "COALESCE(g.timestamps, 'off') AS timestamps"
)

_MEMBER_COLUMNS = "member_id, display_time, is_priority, personal_message"


class QueueRepository:
    """Reads queue state and performs the display's self-healing writes."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get_queue(self, channel_id: int) -> QueueSnapshot | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_QUEUE_COLUMNS} FROM queues q "
                "LEFT JOIN queue_guilds g ON g.guild_id = q.guild_id "
                "WHERE q.channel_id = $1",
                channel_id,
            )
            if not row:
                return None
            return QueueSnapshot(**dict(row))

    async def list_for_guild(self, guild_id: int) -> list[QueueSnapshot]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_QUEUE_COLUMNS} FROM queues q "
                "LEFT JOIN queue_guilds g ON g.guild_id = q.guild_id "
                "WHERE q.guild_id = $1 ORDER BY q.channel_id",
                guild_id,
            )
            return [QueueSnapshot(**dict(row)) for row in rows]

    async def get_ordered_members(self, channel_id: int) -> list[QueueMemberEntry]:
        """Members in display order: priority first, then by display time."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_MEMBER_COLUMNS} FROM queue_members "
                "WHERE queue_channel_id = $1 "
                "ORDER BY is_priority DESC, display_time ASC, id ASC",
                channel_id,
            )
            return [QueueMemberEntry(**dict(row)) for row in rows]

    async def clear_target_channel(self, channel_id: int) -> None:
        """Reset a target channel reference that points at a deleted channel."""
        async with self.pool.acquire() as conn:
            await conn.execute(
                "UPDATE queues SET target_channel_id = NULL WHERE channel_id = $1",
                channel_id,
            )
        logger.info(f"Cleared stale target channel of queue {channel_id}")

    async def remove_members(
        self, guild_id: int, channel_id: int, member_ids: Sequence[int]
    ) -> int:
        """Delete membership rows. Returns count of removed rows."""
        if not member_ids:
            return 0
        async with self.pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM queue_members m USING queues q "
                "WHERE m.queue_channel_id = q.channel_id "
                "AND q.guild_id = $1 AND m.queue_channel_id = $2 AND m.member_id = ANY($3)",
                guild_id,
                channel_id,
                list(member_ids),
            )
            # result is like "DELETE N"
            return int(result.split()[-1])
