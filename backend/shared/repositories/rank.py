"""Repository for rank_settings table (cached external game ranks)."""

from __future__ import annotations

from collections.abc import Sequence

import asyncpg

from shared.models.rank import RankSetting

_COLUMNS = "id, guild_id, member_id, account_name, account_id, cached_score, cached_unranked"


class RankSettingsRepository:
    """Pure SQL operations for rank_settings."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, guild_id: int, member_id: int) -> RankSetting | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM rank_settings WHERE guild_id = $1 AND member_id = $2",
                guild_id,
                member_id,
            )
            if not row:
                return None
            return RankSetting(**dict(row))

    async def get_many_for_members(
        self, guild_id: int, member_ids: Sequence[int]
    ) -> dict[int, RankSetting]:
        """Bulk lookup keyed by member id. Members without a row are absent."""
        if not member_ids:
            return {}
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM rank_settings "
                "WHERE guild_id = $1 AND member_id = ANY($2)",
                guild_id,
                list(member_ids),
            )
            return {row["member_id"]: RankSetting(**dict(row)) for row in rows}

    async def list_for_guild(self, guild_id: int) -> list[RankSetting]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM rank_settings WHERE guild_id = $1 ORDER BY id",
                guild_id,
            )
            return [RankSetting(**dict(row)) for row in rows]

    async def update_rank(
        self,
        guild_id: int,
        member_id: int,
        cached_score: int | None,
        cached_unranked: bool | None,
    ) -> bool:
        """Store a freshly looked-up rank. Returns True if a row was updated."""
        async with self.pool.acquire() as conn:
            result = await conn.execute(
                "UPDATE rank_settings SET cached_score = $3, cached_unranked = $4 "
                "WHERE guild_id = $1 AND member_id = $2",
                guild_id,
                member_id,
                cached_score,
                cached_unranked,
            )
            return result == "UPDATE 1"

    async def upsert(
        self, guild_id: int, member_id: int, account_name: str, account_id: str
    ) -> RankSetting:
        """Link a member to an account. A changed account drops the cached rank."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO rank_settings (guild_id, member_id, account_name, account_id)
                VALUES ($1, $2, $3, $4)
                ON CONFLICT (guild_id, member_id) DO UPDATE SET
                    account_name    = EXCLUDED.account_name,
                    account_id      = EXCLUDED.account_id,
                    cached_score    = CASE WHEN rank_settings.account_id = EXCLUDED.account_id
                                           THEN rank_settings.cached_score END,
                    cached_unranked = CASE WHEN rank_settings.account_id = EXCLUDED.account_id
                                           THEN rank_settings.cached_unranked END
                RETURNING {_COLUMNS}
                """,
                guild_id,
                member_id,
                account_name,
                account_id,
            )
            return RankSetting(**dict(row))

    async def delete(self, guild_id: int, member_id: int | None = None) -> int:
        """Delete one member's row, or every row of the guild."""
        async with self.pool.acquire() as conn:
            if member_id is None:
                result = await conn.execute(
                    "DELETE FROM rank_settings WHERE guild_id = $1", guild_id
                )
            else:
                result = await conn.execute(
                    "DELETE FROM rank_settings WHERE guild_id = $1 AND member_id = $2",
                    guild_id,
                    member_id,
                )
            return int(result.split()[-1])
