"""The join/leave button attached to display messages."""

from __future__ import annotations

from typing import Any

import discord
from discord import ui

from shared.models.queue import QueueSnapshot

JOIN_LEAVE_ID = "joinLeave"

VOICE_CHANNEL_TYPES = (discord.ChannelType.voice, discord.ChannelType.stage_voice)


def is_voice_channel(channel: Any) -> bool:
    return getattr(channel, "type", None) in VOICE_CHANNEL_TYPES


class JoinLeaveView(ui.View):
    """Single stateless toggle button, identical for every queue.

    Clicks are routed to a queue through the display message they came from.
    """

    def __init__(self) -> None:
        super().__init__(timeout=None)
        self.add_item(
            ui.Button(
                label="Join / Leave",
                style=discord.ButtonStyle.secondary,
                custom_id=JOIN_LEAVE_ID,
            )
        )


def control_for(queue_channel: Any, queue: QueueSnapshot) -> JoinLeaveView | None:
    """Voice queues are joined through the channel itself, so they get no button."""
    if is_voice_channel(queue_channel) or queue.hide_button:
        return None
    return JoinLeaveView()
