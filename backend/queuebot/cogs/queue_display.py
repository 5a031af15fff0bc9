"""Queue display cog.

Re-renders displays when a ``queue_update`` event is dispatched
(``bot.dispatch("queue_update", queue_id)``) and lets admins attach or
detach a display in the current channel. Join/Leave clicks are handed on as
``queue_toggle(interaction, queue_id)``; that listener must answer the
interaction.
"""

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from queuebot.display.controls import JOIN_LEAVE_ID

if TYPE_CHECKING:
    from queuebot.bot import QueueBot

logger = logging.getLogger(__name__)


class QueueDisplayCog(commands.Cog):
    """Queue display messages"""

    def __init__(self, bot: "QueueBot"):
        self.bot = bot
        self.synchronizer = bot.synchronizer
        self.registry = bot.registry

    async def cog_unload(self) -> None:
        self.synchronizer.close()

    # ==================== Events ====================

    @commands.Cog.listener()
    async def on_queue_update(self, queue_id: int) -> None:
        try:
            await self.synchronizer.refresh(queue_id)
        except Exception:
            logger.exception(f"Refresh of queue {queue_id} failed")

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Route join/leave clicks to the queue behind the clicked display."""
        if interaction.type is not discord.InteractionType.component:
            return
        if (interaction.data or {}).get("custom_id") != JOIN_LEAVE_ID or not interaction.message:
            return
        target = await self.registry.find_by_message(interaction.message.id)
        if target is None:
            await interaction.response.send_message(
                "This display is no longer linked to a queue.", ephemeral=True
            )
            return
        self.bot.dispatch("queue_toggle", interaction, target.queue_channel_id)

    # ==================== Commands ====================

    display_group = app_commands.Group(
        name="display",
        description="Queue display messages",
        default_permissions=discord.Permissions(manage_guild=True),
        guild_only=True,
    )

    @display_group.command(name="add", description="Show a queue in this channel")
    @app_commands.describe(queue="Queue channel to display")
    async def display_add(
        self, interaction: discord.Interaction, queue: app_commands.AppCommandChannel
    ) -> None:
        channel = interaction.channel
        if channel is None or not self.bot.platform.can_post(channel):
            await interaction.response.send_message(
                "I need permission to send messages and embed links here.", ephemeral=True
            )
            return

        await interaction.response.defer(ephemeral=True)
        if await self.bot.queues.get_queue(queue.id) is None:
            await interaction.followup.send(f"{queue.mention} is not a queue.", ephemeral=True)
            return

        target = await self.synchronizer.attach(queue.id, channel)
        if target is None:
            await interaction.followup.send(
                f"Could not post the display of {queue.mention} here, try again later.",
                ephemeral=True,
            )
            return

        await interaction.followup.send(f"Displaying {queue.mention} here.", ephemeral=True)
        logger.info(
            f"Display added | guild: {interaction.guild_id} | queue: {queue.id} | "
            f"channel: {channel.id} | by: {interaction.user.name}"
        )

    @display_group.command(name="remove", description="Stop showing a queue in this channel")
    @app_commands.describe(queue="Queue channel to stop displaying")
    async def display_remove(
        self, interaction: discord.Interaction, queue: app_commands.AppCommandChannel
    ) -> None:
        removed = await self.registry.detach(queue.id, interaction.channel_id)
        if not removed:
            await interaction.response.send_message(
                f"{queue.mention} is not displayed here.", ephemeral=True
            )
            return
        await interaction.response.send_message(
            f"Removed {len(removed)} display(s) of {queue.mention}.", ephemeral=True
        )


async def setup(bot: "QueueBot"):
    """Load the cog"""
    await bot.add_cog(QueueDisplayCog(bot))
