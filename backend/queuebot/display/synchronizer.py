"""Keep every display message of a queue in step with the queue.

A refresh renders the queue once and then reconciles each registered
display on its own: a failure on one display is logged and never stops the
others. Displays whose channel is gone are deregistered; anything that might
recover later (missing message, lost permissions, HTTP errors) is left in
place for the next refresh.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import discord

from shared.models.display import DisplayMode, DisplayTarget
from shared.models.guild import GuildSettings
from shared.models.queue import QueueMemberEntry, QueueSnapshot
from shared.models.rank import RankAnnotation
from shared.repositories.guild import GuildSettingsRepository
from shared.repositories.queue import QueueRepository
from shared.repositories.rank import RankSettingsRepository
from shared.repositories.schedule import ScheduleRepository

from .controls import control_for, is_voice_channel
from .document import QueueDocumentBuilder, RenderContext, RenderedDocument
from .platform import LookupStatus, PlatformClient
from .registry import DisplayTargetRegistry
from .validator import QueueValidator

logger = logging.getLogger(__name__)


class TargetOutcome(enum.Enum):
    EDITED = "edited"
    REPLACED = "replaced"
    REMOVED = "removed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RefreshResult:
    """What one refresh did, per display outcome."""

    targets: int = 0
    edited: int = 0
    replaced: int = 0
    removed: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, outcome: TargetOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)


class DisplaySynchronizer:
    def __init__(
        self,
        platform: PlatformClient,
        queues: QueueRepository,
        registry: DisplayTargetRegistry,
        guilds: GuildSettingsRepository,
        ranks: RankSettingsRepository,
        schedules: ScheduleRepository,
        *,
        builder: QueueDocumentBuilder | None = None,
        validator: QueueValidator | None = None,
        validation_delay: float = 1.0,
    ) -> None:
        self.platform = platform
        self.queues = queues
        self.registry = registry
        self.guilds = guilds
        self.ranks = ranks
        self.schedules = schedules
        self.builder = builder or QueueDocumentBuilder()
        self.validator = validator
        self.validation_delay = validation_delay
        self._background: set[asyncio.Task] = set()

    # ==================== Refresh ====================

    async def refresh(self, queue_id: int) -> RefreshResult:
        """Bring every display of ``queue_id`` up to date."""
        result = RefreshResult()
        queue = await self.queues.get_queue(queue_id)
        if queue is None:
            return result

        # Always re-read: bindings may have changed since the last refresh
        targets = await self.registry.targets_for(queue_id)
        if not targets:
            return result
        result.targets = len(targets)

        guild = self.platform.get_guild(queue.guild_id)
        if guild is None:
            logger.warning(f"Guild {queue.guild_id} unavailable, skipping refresh of {queue_id}")
            return result

        settings = await self.guilds.get(queue.guild_id)
        document = await self.render(queue, settings, guild)
        embed = document.to_embed()
        control = control_for(guild.get_channel(queue_id), queue)

        for target in targets:
            try:
                outcome = await self._sync_target(queue, settings, target, embed, control)
            except discord.HTTPException as e:
                logger.warning(f"Display {target.message_id} of queue {queue_id} not updated: {e}")
                outcome = TargetOutcome.FAILED
            except Exception:
                logger.exception(f"Unexpected error updating display {target.message_id}")
                outcome = TargetOutcome.FAILED
            result.record(outcome)

        self._schedule_validation(queue.guild_id)
        logger.debug(f"Refreshed queue {queue_id}: {result}")
        return result

    async def _sync_target(
        self,
        queue: QueueSnapshot,
        settings: GuildSettings,
        target: DisplayTarget,
        embed: discord.Embed,
        control: discord.ui.View | None,
    ) -> TargetOutcome:
        channel_lookup = await self.platform.fetch_channel(target.display_channel_id)
        if channel_lookup.status is LookupStatus.GONE:
            await self.registry.detach(queue.channel_id, target.display_channel_id)
            logger.info(
                f"Display channel {target.display_channel_id} of queue {queue.channel_id} is gone, "
                "binding removed"
            )
            return TargetOutcome.REMOVED
        if not channel_lookup.found:
            return TargetOutcome.SKIPPED
        channel = channel_lookup.value

        message_lookup = await self.platform.fetch_message(channel, target.message_id)
        if not message_lookup.found:
            return TargetOutcome.SKIPPED
        if not self.platform.can_post(channel):
            return TargetOutcome.SKIPPED

        if settings.msg_mode is DisplayMode.EDIT:
            await self.platform.edit_message(message_lookup.value, embed, control)
            return TargetOutcome.EDITED

        await self.registry.detach(
            queue.channel_id, channel.id, delete_old=settings.msg_mode is DisplayMode.REPLACE
        )
        await self.registry.attach(queue.channel_id, channel, embed, control)
        return TargetOutcome.REPLACED

    # ==================== Attach ====================

    async def attach(self, queue_id: int, channel: Any) -> DisplayTarget | None:
        """Post a new display for a queue in ``channel`` and register it."""
        queue = await self.queues.get_queue(queue_id)
        guild = self.platform.get_guild(queue.guild_id) if queue else None
        if queue is None or guild is None:
            return None
        settings = await self.guilds.get(queue.guild_id)
        document = await self.render(queue, settings, guild)
        control = control_for(guild.get_channel(queue_id), queue)
        return await self.registry.attach(queue_id, channel, document.to_embed(), control)

    # ==================== Render ====================

    async def render(
        self, queue: QueueSnapshot, settings: GuildSettings, guild: discord.Guild
    ) -> RenderedDocument:
        """Resolve everything the builder needs, build, then apply its write-backs."""
        members = await self.queues.get_ordered_members(queue.channel_id)

        target_name = None
        if queue.target_channel_id:
            target_channel = guild.get_channel(queue.target_channel_id)
            target_name = target_channel.name if target_channel else None

        display_names: dict[int, str] = {}
        gone: set[int] = set()
        if settings.disable_mentions:
            display_names, gone = await self._resolve_names(guild, members)

        context = RenderContext(
            queue_mention=f"<#{queue.channel_id}>",
            is_voice=is_voice_channel(guild.get_channel(queue.channel_id)),
            schedule_summary=await self._schedule_summary(queue.channel_id),
            target_channel_name=target_name,
            mask_names=settings.disable_mentions,
            display_names=display_names,
        )
        ranks = await self._rank_annotations(queue.guild_id, members)
        document = self.builder.build(
            queue, members, ranks, self.platform.emoji_resolver(), context
        )

        if document.target_missing:
            try:
                await self.queues.clear_target_channel(queue.channel_id)
            except Exception as e:
                logger.warning(f"Could not clear stale target channel of {queue.channel_id}: {e}")
        stale = [m for m in document.skipped_member_ids if m in gone]
        if stale:
            try:
                await self.queues.remove_members(queue.guild_id, queue.channel_id, stale)
            except Exception as e:
                logger.warning(f"Could not remove departed members from {queue.channel_id}: {e}")
        return document

    async def _resolve_names(
        self, guild: discord.Guild, members: Sequence[QueueMemberEntry]
    ) -> tuple[dict[int, str], set[int]]:
        """Display names of reachable members, and the ids confirmed gone."""
        names: dict[int, str] = {}
        gone: set[int] = set()
        for member in members:
            lookup = await self.platform.fetch_member(guild, member.member_id)
            if lookup.found:
                names[member.member_id] = lookup.value.display_name
            elif lookup.status is LookupStatus.GONE:
                gone.add(member.member_id)
        return names, gone

    async def _rank_annotations(
        self, guild_id: int, members: Sequence[QueueMemberEntry]
    ) -> dict[int, RankAnnotation]:
        try:
            settings = await self.ranks.get_many_for_members(
                guild_id, [m.member_id for m in members]
            )
        except Exception as e:
            logger.warning(f"Rank lookup failed for guild {guild_id}, rendering without ranks: {e}")
            return {}
        return {member_id: s.to_annotation() for member_id, s in settings.items()}

    async def _schedule_summary(self, queue_id: int) -> str:
        try:
            return await self.schedules.get_summary_text(queue_id)
        except Exception as e:
            logger.warning(f"Schedule summary unavailable for queue {queue_id}: {e}")
            return ""

    # ==================== Validation ====================

    def _schedule_validation(self, guild_id: int) -> None:
        if self.validator is None:
            return
        task = asyncio.create_task(self._validate_later(guild_id))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _validate_later(self, guild_id: int) -> None:
        try:
            if self.validation_delay:
                await asyncio.sleep(self.validation_delay)
            await self.validator.validate_guild(guild_id)  # type: ignore[union-attr]
        except Exception:
            logger.debug(f"Validation of guild {guild_id} failed", exc_info=True)

    @property
    def pending_tasks(self) -> set[asyncio.Task]:
        return set(self._background)

    def close(self) -> None:
        """Cancel validations still waiting to run."""
        for task in self._background:
            task.cancel()
