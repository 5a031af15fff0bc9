"""Data models for rank_settings table."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RankAnnotation:
    """Cached rank data for one member, as used by the display."""

    score: int | None = None
    unranked: bool = False
    resolved: bool = False


@dataclass
class RankSetting:
    """Per-guild member link to an external game account."""

    id: int
    guild_id: int
    member_id: int
    account_name: str | None = None
    account_id: str | None = None
    cached_score: int | None = None
    cached_unranked: bool | None = None

    def to_annotation(self) -> RankAnnotation:
        # An account without a cached score has not been resolved yet
        return RankAnnotation(
            score=self.cached_score,
            unranked=bool(self.cached_unranked),
            resolved=bool(self.account_name) and self.cached_score is not None,
        )
