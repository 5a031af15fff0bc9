"""In-memory stand-ins for the repositories and the asyncpg pool, plus model factories."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import discord

from shared.models.display import DisplayTarget
from shared.models.guild import GuildSettings
from shared.models.queue import QueueMemberEntry, QueueSnapshot
from shared.models.rank import RankSetting


class FakeQueueRepository:
    def __init__(
        self,
        queues: Sequence[QueueSnapshot] = (),
        members: dict[int, list[QueueMemberEntry]] | None = None,
    ) -> None:
        self.queues = {q.channel_id: q for q in queues}
        self.members = members or {}
        self.cleared_targets: list[int] = []
        self.removed: list[tuple[int, int, list[int]]] = []

    async def get_queue(self, channel_id: int) -> QueueSnapshot | None:
        return self.queues.get(channel_id)

    async def list_for_guild(self, guild_id: int) -> list[QueueSnapshot]:
        return [q for q in self.queues.values() if q.guild_id == guild_id]

    async def get_ordered_members(self, channel_id: int) -> list[QueueMemberEntry]:
        return list(self.members.get(channel_id, []))

    async def clear_target_channel(self, channel_id: int) -> None:
        self.cleared_targets.append(channel_id)

    async def remove_members(self, guild_id: int, channel_id: int, member_ids) -> int:
        ids = list(member_ids)
        self.removed.append((guild_id, channel_id, ids))
        before = len(self.members.get(channel_id, []))
        self.members[channel_id] = [
            m for m in self.members.get(channel_id, []) if m.member_id not in ids
        ]
        return before - len(self.members[channel_id])


class FakeDisplayRepository:
    def __init__(self, targets: Sequence[DisplayTarget] = ()) -> None:
        self.targets = list(targets)
        self._ids = itertools.count(1000)

    async def get_for_queue(self, queue_channel_id: int) -> list[DisplayTarget]:
        return [t for t in self.targets if t.queue_channel_id == queue_channel_id]

    async def get_by_message(self, message_id: int) -> DisplayTarget | None:
        return next((t for t in self.targets if t.message_id == message_id), None)

    async def insert(self, queue_channel_id: int, display_channel_id: int, message_id: int):
        target = DisplayTarget(next(self._ids), queue_channel_id, display_channel_id, message_id)
        self.targets.append(target)
        return target

    async def delete(self, queue_channel_id: int, display_channel_id: int | None = None):
        removed = [
            t
            for t in self.targets
            if t.queue_channel_id == queue_channel_id
            and (display_channel_id is None or t.display_channel_id == display_channel_id)
        ]
        self.targets = [t for t in self.targets if t not in removed]
        return removed


class FakeGuildSettingsRepository:
    def __init__(self, settings: Sequence[GuildSettings] = ()) -> None:
        self.settings = {s.guild_id: s for s in settings}

    async def get(self, guild_id: int) -> GuildSettings:
        return self.settings.get(guild_id, GuildSettings(guild_id=guild_id))


class FakeRankSettingsRepository:
    def __init__(self, settings: Sequence[RankSetting] = (), error: Exception | None = None):
        self.settings = list(settings)
        self.error = error
        self.deleted: list[tuple[int, int | None]] = []

    async def get_many_for_members(self, guild_id: int, member_ids) -> dict[int, RankSetting]:
        if self.error:
            raise self.error
        return {
            s.member_id: s
            for s in self.settings
            if s.guild_id == guild_id and s.member_id in member_ids
        }

    async def list_for_guild(self, guild_id: int) -> list[RankSetting]:
        return [s for s in self.settings if s.guild_id == guild_id]

    async def delete(self, guild_id: int, member_id: int | None = None) -> int:
        self.deleted.append((guild_id, member_id))
        before = len(self.settings)
        self.settings = [
            s
            for s in self.settings
            if not (s.guild_id == guild_id and (member_id is None or s.member_id == member_id))
        ]
        return before - len(self.settings)


class FakeScheduleRepository:
    def __init__(self, summary: str = "", error: Exception | None = None) -> None:
        self.summary = summary
        self.error = error

    async def get_summary_text(self, queue_channel_id: int) -> str:
        if self.error:
            raise self.error
        return self.summary


class FakeConnection:
    """Records queries; returns the next scripted result for each call type."""

    def __init__(self, pool: FakePool) -> None:
        self.pool = pool

    async def _next(self, kind: str, query: str, args: tuple) -> Any:
        self.pool.queries.append((kind, " ".join(query.split()), args))
        results = self.pool.results.get(kind, [])
        return results.pop(0) if results else None

    async def fetch(self, query: str, *args: Any) -> Any:
        return await self._next("fetch", query, args) or []

    async def fetchrow(self, query: str, *args: Any) -> Any:
        return await self._next("fetchrow", query, args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        return await self._next("fetchval", query, args)

    async def execute(self, query: str, *args: Any) -> Any:
        return await self._next("execute", query, args)

    @asynccontextmanager
    async def transaction(self):
        yield


class FakePool:
    def __init__(self, **results: list[Any]) -> None:
        self.results: dict[str, list[Any]] = {k: list(v) for k, v in results.items()}
        self.queries: list[tuple[str, str, tuple]] = []

    @asynccontextmanager
    async def acquire(self, timeout: float | None = None):
        yield FakeConnection(self)


def http_error(cls: type[discord.HTTPException], status: int, text: str = "error"):
    response = MagicMock(status=status, reason=text)
    return cls(response, text)


GUILD_ID = 100
QUEUE_ID = 200

JOINED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_queue(**overrides) -> QueueSnapshot:
    values: dict[str, Any] = {"channel_id": QUEUE_ID, "guild_id": GUILD_ID, "name": "ranked-queue"}
    values.update(overrides)
    return QueueSnapshot(**values)


def make_members(count: int, start: int = 1, **overrides: Any) -> list[QueueMemberEntry]:
    return [
        QueueMemberEntry(
            member_id=start + i,
            display_time=JOINED_AT + timedelta(minutes=i),
            **overrides,
        )
        for i in range(count)
    ]


def make_channel(channel_id: int, guild=None, kind=discord.ChannelType.text):
    channel = MagicMock(name=f"channel-{channel_id}")
    channel.id = channel_id
    channel.name = f"channel-{channel_id}"
    channel.type = kind
    channel.guild = guild
    return channel
