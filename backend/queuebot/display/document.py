"""Render a queue into a size-bounded embed document.

The builder is a pure function of its inputs: everything that needs Discord
or the database (rank settings, member names, the target channel, the
schedule summary) is resolved by the caller beforehand. Conditions that need
a write-back are reported on the returned document instead of performed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

import discord

from shared.models.queue import QueueMemberEntry, QueueSnapshot
from shared.models.rank import RankAnnotation

from .durations import DurationFormatter
from .ranks import classify

# Discord embed limits
BLOCK_LIMIT = 1024
DOCUMENT_LIMIT = 6000
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096

EMPTY = "\u200b"
LOCK_MARKER = "🔒"
PRIORITY_MARKER = "⋆"

TIMESTAMP_STYLES: dict[str, str] = {
    "time": "t",
    "date": "D",
    "date+time": "f",
    "relative": "R",
}

VOICE_INSTRUCTION = "Join {mention} to join this queue."
TEXT_INSTRUCTION = "To interact, click the button or use `/join` & `/leave`."
LOCKED_TEXT = "Queue is locked."
GRACE_TEXT = "\nIf you leave, you have **{duration}** to rejoin to reclaim your spot."
PRIORITY_TEXT = f"\nPriority users are marked with a {PRIORITY_MARKER}."
UNRESOLVED_TEXT = "\nIf your R6 rank is not shown use `/ubisoftname set <your-ubisoft-name>`."

EmojiResolver = Callable[[str], "str | None"]


@dataclass
class DocumentBlock:
    """One embed field; rendered side by side as a column."""

    name: str
    value: str
    inline: bool = True


@dataclass
class RenderedDocument:
    title: str
    description: str
    blocks: list[DocumentBlock]
    color: int | None = None
    # Positions assigned; entries past the document limit are not in ``blocks``
    member_count: int = 0
    entry_count: int = 0
    target_missing: bool = False
    skipped_member_ids: list[int] = field(default_factory=list)

    @property
    def length(self) -> int:
        """Characters Discord counts toward the 6000 embed limit."""
        return (
            len(self.title)
            + len(self.description)
            + sum(len(b.name) + len(b.value) for b in self.blocks)
        )

    def to_embed(self) -> discord.Embed:
        embed = discord.Embed(title=self.title, description=self.description, color=self.color)
        for block in self.blocks:
            embed.add_field(name=block.name, value=block.value, inline=block.inline)
        return embed


@dataclass(frozen=True)
class RenderContext:
    """Values the caller resolved from Discord for one render."""

    queue_mention: str
    is_voice: bool = False
    schedule_summary: str = ""
    # None while a target is configured means the channel no longer exists
    target_channel_name: str | None = None
    mask_names: bool = False
    display_names: Mapping[int, str] = field(default_factory=dict)


def _clip(text: str, limit: int, suffix: str = "…") -> str:
    if len(text) < limit:
        return text
    return text[: limit - 1 - len(suffix)] + suffix


class QueueDocumentBuilder:
    """Builds the display document for one queue."""

    def __init__(
        self,
        durations: DurationFormatter | None = None,
        classifier: Callable[[int | None, bool], str] = classify,
    ) -> None:
        self.durations = durations or DurationFormatter()
        self.classifier = classifier

    def build(
        self,
        snapshot: QueueSnapshot,
        members: Sequence[QueueMemberEntry],
        ranks: Mapping[int, RankAnnotation],
        emoji_resolver: EmojiResolver,
        context: RenderContext,
    ) -> RenderedDocument:
        title, target_missing = self._title(snapshot, context)

        entries: list[str] = []
        skipped: list[int] = []
        scores: list[int] = []
        has_unresolved = False
        for member in members:
            name = self._member_name(member, context)
            if name is None:
                skipped.append(member.member_id)
                continue

            annotation = ranks.get(member.member_id)
            if annotation is None or not annotation.resolved:
                has_unresolved = True
            if annotation is not None and not annotation.unranked and annotation.score is not None:
                scores.append(annotation.score)

            entries.append(
                self._entry(len(entries) + 1, member, name, annotation, emoji_resolver, snapshot)
            )

        description = self._description(snapshot, members, context, has_unresolved)
        header = self._aggregate_header(snapshot, len(entries), scores)
        blocks, placed = self._paginate(entries, len(title) + len(description) + len(header))
        blocks[0].name = header

        return RenderedDocument(
            title=title,
            description=description,
            blocks=blocks,
            color=snapshot.color,
            member_count=len(entries),
            entry_count=placed,
            target_missing=target_missing,
            skipped_member_ids=skipped,
        )

    # ==================== Parts ====================

    def _title(self, snapshot: QueueSnapshot, context: RenderContext) -> tuple[str, bool]:
        title = f"{LOCK_MARKER} {snapshot.name}" if snapshot.is_locked else snapshot.name
        target_missing = False
        if snapshot.target_channel_id:
            if context.target_channel_name:
                title += f"  ->  {context.target_channel_name}"
            else:
                target_missing = True
        return _clip(title, TITLE_LIMIT + 1), target_missing

    def _description(
        self,
        snapshot: QueueSnapshot,
        members: Sequence[QueueMemberEntry],
        context: RenderContext,
        has_unresolved: bool,
    ) -> str:
        if snapshot.is_locked:
            description = LOCKED_TEXT
        elif context.is_voice:
            description = VOICE_INSTRUCTION.format(mention=context.queue_mention)
        else:
            description = TEXT_INSTRUCTION

        if duration := self.durations.format(snapshot.grace_period):
            description += GRACE_TEXT.format(duration=duration)
        description += context.schedule_summary
        if any(m.is_priority for m in members):
            description += PRIORITY_TEXT
        if has_unresolved:
            description += UNRESOLVED_TEXT
        if snapshot.header:
            description += f"\n\n{snapshot.header}"
        return _clip(description, DESCRIPTION_LIMIT + 1)

    @staticmethod
    def _member_name(member: QueueMemberEntry, context: RenderContext) -> str | None:
        if not context.mask_names:
            return f"<@{member.member_id}>"
        display_name = context.display_names.get(member.member_id)
        if display_name is None:
            return None
        return f"`{display_name}`"

    def _entry(
        self,
        position: int,
        member: QueueMemberEntry,
        name: str,
        annotation: RankAnnotation | None,
        emoji_resolver: EmojiResolver,
        snapshot: QueueSnapshot,
    ) -> str:
        parts = [f"`{position:<2}` "]

        style = TIMESTAMP_STYLES.get(snapshot.timestamps)
        if style:
            parts.append(f"{discord.utils.format_dt(member.display_time, style)} ")
        if member.is_priority:
            parts.append(PRIORITY_MARKER)

        if annotation is not None:
            emoji = emoji_resolver(self.classifier(annotation.score, annotation.unranked))
            if emoji:
                parts.append(f"{emoji}  ")
            if annotation.score:
                parts.append(f"`{annotation.score}`  ")

        parts.append(name)
        if member.personal_message:
            parts.append(f" -- {member.personal_message}")
        return _clip("".join(parts), BLOCK_LIMIT - 1) + "\n"

    @staticmethod
    def _aggregate_header(snapshot: QueueSnapshot, count: int, scores: list[int]) -> str:
        if snapshot.max_members:
            header = f"Capacity:  {count} / {snapshot.max_members}"
        else:
            header = f"Length:  {count}"
        if len(scores) >= 2:
            difference = max(scores) - min(scores)
            if difference > 0:
                header += f", Max Difference: {difference}"
        return header

    @staticmethod
    def _paginate(entries: list[str], used: int) -> tuple[list[DocumentBlock], int]:
        """Pack entries into blocks below BLOCK_LIMIT, stopping before DOCUMENT_LIMIT.

        ``used`` already counts the first block's name. Returns the blocks
        and how many entries were placed.
        """
        blocks = [DocumentBlock(name=EMPTY, value="")]
        placed = 0
        for entry in entries:
            current = blocks[-1]
            new_block = bool(current.value) and len(current.value) + len(entry) >= BLOCK_LIMIT
            cost = len(entry) + (len(EMPTY) if new_block else 0)
            if used + cost >= DOCUMENT_LIMIT:
                break
            if new_block:
                current = DocumentBlock(name=EMPTY, value="")
                blocks.append(current)
            current.value += entry
            used += cost
            placed += 1

        if not blocks[-1].value:
            blocks[-1].value = EMPTY
        return blocks, placed
