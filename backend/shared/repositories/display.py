"""Repository for display_channels table.

Bindings are never cached: every refresh must see the current rows.
"""

from __future__ import annotations

import asyncpg

from shared.models.display import DisplayTarget

_COLUMNS = "id, queue_channel_id, display_channel_id, message_id"


class DisplayTargetRepository:
    """Pure SQL operations for display_channels."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get_for_queue(self, queue_channel_id: int) -> list[DisplayTarget]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM display_channels "
                "WHERE queue_channel_id = $1 ORDER BY id",
                queue_channel_id,
            )
            return [DisplayTarget(**dict(row)) for row in rows]

    async def get_by_message(self, message_id: int) -> DisplayTarget | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM display_channels WHERE message_id = $1",
                message_id,
            )
            if not row:
                return None
            return DisplayTarget(**dict(row))

    async def insert(
        self, queue_channel_id: int, display_channel_id: int, message_id: int
    ) -> DisplayTarget:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO display_channels (queue_channel_id, display_channel_id, message_id)
                VALUES ($1, $2, $3)
                RETURNING {_COLUMNS}
                """,
                queue_channel_id,
                display_channel_id,
                message_id,
            )
            return DisplayTarget(**dict(row))

    async def delete(
        self, queue_channel_id: int, display_channel_id: int | None = None
    ) -> list[DisplayTarget]:
        """Delete the queue's bindings, optionally only those in one channel.

        Returns the deleted rows so callers can clean up their messages.
        """
        async with self.pool.acquire() as conn:
            if display_channel_id is None:
                rows = await conn.fetch(
                    f"DELETE FROM display_channels WHERE queue_channel_id = $1 RETURNING {_COLUMNS}",
                    queue_channel_id,
                )
            else:
                rows = await conn.fetch(
                    "DELETE FROM display_channels "
                    f"WHERE queue_channel_id = $1 AND display_channel_id = $2 RETURNING {_COLUMNS}",
                    queue_channel_id,
                    display_channel_id,
                )
            return [DisplayTarget(**dict(row)) for row in rows]
