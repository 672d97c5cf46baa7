"""
backend/fixturesync/models/matches.py

Purpose:
    Canonical match record shared by every provider mapper. Holds the modern
    status, the score breakdown, stage classification and provenance, and
    derives the legacy status mirror and the stage key so they can never drift
    from the fields they describe.

Dependencies:
    - pydantic
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MatchStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PLAY = "IN_PLAY"
    PAUSED = "PAUSED"
    FINISHED = "FINISHED"


class LegacyStatus(str, Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    FINISHED = "finished"


class Stage(str, Enum):
    GROUP = "GROUP"
    R32 = "R32"
    R16 = "R16"
    QF = "QF"
    SF = "SF"
    THIRD_PLACE = "3P"
    FINAL = "FINAL"


class SyncRecordStatus(str, Enum):
    OK = "ok"
    SKIPPED_MANUAL = "skipped_manual"


# Score fields are written together or not at all.
SCORE_FIELDS = ("score", "HomeScore", "AwayScore")


def legacy_status_for(status: MatchStatus | str | None) -> str:
    """Map the modern status onto the three-value vocabulary older consumers read."""
    normalized = str(getattr(status, "value", status) or "").upper()
    if normalized == MatchStatus.FINISHED.value:
        return LegacyStatus.FINISHED.value
    if normalized in {MatchStatus.IN_PLAY.value, MatchStatus.PAUSED.value}:
        return LegacyStatus.LIVE.value
    return LegacyStatus.UPCOMING.value


def build_stage_key(stage: Stage | str | None, group: str | None, matchday: int | None) -> str | None:
    """Return e.g. ``GROUP-A-MD1`` for group fixtures or the bare stage code for knockouts."""
    code = str(getattr(stage, "value", stage) or "")
    if not code:
        return None
    if code == Stage.GROUP.value:
        if not group or not matchday:
            return None
        return f"GROUP-{group}-MD{matchday}"
    return code


class ScorePair(BaseModel):
    home: int | None = None
    away: int | None = None


class MatchScore(BaseModel):
    home: int | None = None
    away: int | None = None
    full_time: ScorePair = Field(default_factory=ScorePair, alias="fullTime")
    half_time: ScorePair = Field(default_factory=ScorePair, alias="halfTime")

    model_config = ConfigDict(populate_by_name=True)


class MatchRecord(BaseModel):
    """Provider-agnostic draft of one fixture, produced by the record mappers."""

    external_provider: str = Field(alias="externalProvider")
    external_match_id: str = Field(default="", alias="externalMatchId")
    home_team: str = Field(default="", alias="HomeTeam")
    away_team: str = Field(default="", alias="AwayTeam")
    kickoff: str | None = Field(default=None, alias="utcDate")
    status: MatchStatus = MatchStatus.SCHEDULED
    score: MatchScore | None = None
    stage: Stage | None = Field(default=None, alias="Stage")
    group: str | None = Field(default=None, alias="Group")
    matchday: int | None = Field(default=None, alias="Matchday")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _enforce_invariants(self) -> "MatchRecord":
        if self.stage != Stage.GROUP:
            self.group = None
            self.matchday = None
        if self.status != MatchStatus.FINISHED:
            self.score = None
        return self

    @property
    def legacy_status(self) -> str:
        return legacy_status_for(self.status)

    @property
    def stage_key(self) -> str | None:
        return build_stage_key(self.stage, self.group, self.matchday)

    @property
    def home_score(self) -> int | None:
        return self.score.home if self.score else None

    @property
    def away_score(self) -> int | None:
        return self.score.away if self.score else None

    def to_document(self) -> dict[str, Any]:
        """Serialize into the persisted field layout.

        Score fields are emitted only for finished matches so a merge write
        never clobbers a stored result with nulls.
        """
        doc: dict[str, Any] = {
            "externalProvider": self.external_provider,
            "externalMatchId": self.external_match_id,
            "utcDate": self.kickoff,
            "KickOffTime": self.kickoff,
            "status": self.status.value,
            "Status": self.legacy_status,
            "HomeTeam": self.home_team,
            "AwayTeam": self.away_team,
            "Stage": self.stage.value if self.stage else None,
            "Group": self.group,
            "Matchday": self.matchday,
            "StageKey": self.stage_key,
        }
        if self.status == MatchStatus.FINISHED and self.score is not None:
            doc["score"] = self.score.model_dump(by_alias=True)
            doc["HomeScore"] = self.score.home
            doc["AwayScore"] = self.score.away
        return doc
