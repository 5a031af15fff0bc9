"""Repository for queue_guilds table."""

from __future__ import annotations

import asyncpg

from shared.cache import AsyncTTLCache, cached
from shared.models.display import DisplayMode
from shared.models.guild import GuildSettings

_COLUMNS = "guild_id, msg_mode, disable_mentions, timestamps"

_settings_cache = AsyncTTLCache(maxsize=64, ttl=300)


class GuildSettingsRepository:
    """Guild-level queue configuration, with defaults for unknown guilds."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    @cached(
        cache=_settings_cache,
        key_func=lambda self, guild_id: f"queue_guild:{guild_id}",
    )
    async def get(self, guild_id: int) -> GuildSettings:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM queue_guilds WHERE guild_id = $1",
                guild_id,
            )
            if not row:
                return GuildSettings(guild_id=guild_id)
            return GuildSettings(**dict(row))

    async def update(
        self,
        guild_id: int,
        *,
        msg_mode: DisplayMode | None = None,
        disable_mentions: bool | None = None,
        timestamps: str | None = None,
    ) -> GuildSettings:
        """Upsert settings. Only provided fields are changed."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO queue_guilds (guild_id, msg_mode, disable_mentions, timestamps)
                VALUES ($1, COALESCE($2, 1), COALESCE($3, FALSE), COALESCE($4, 'off'))
                ON CONFLICT (guild_id) DO UPDATE SET
                    msg_mode         = COALESCE($2, queue_guilds.msg_mode),
                    disable_mentions = COALESCE($3, queue_guilds.disable_mentions),
                    timestamps       = COALESCE($4, queue_guilds.timestamps)
                RETURNING {_COLUMNS}
                """,
                guild_id,
                int(msg_mode) if msg_mode is not None else None,
                disable_mentions,
                timestamps,
            )
            result = GuildSettings(**dict(row))
        _settings_cache.invalidate(f"queue_guild:{guild_id}")
        return result
