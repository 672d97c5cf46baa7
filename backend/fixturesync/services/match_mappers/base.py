"""
backend/fixturesync/services/match_mappers/base.py

Purpose:
    Shared normalization rules used by every provider mapper: status
    translation, score extraction, stage/group/matchday inference and kickoff
    normalization. Every helper degrades to None/default on bad input and
    never raises, so a mapper always yields a draft.

Dependencies:
    - re
    - fixturesync.models.matches
    - fixturesync.utils
"""

from __future__ import annotations

import re
from typing import Any, Protocol

from fixturesync.models.matches import MatchRecord, MatchScore, MatchStatus, ScorePair, Stage
from fixturesync.utils import parse_utc, to_iso_utc


class MatchMapper(Protocol):
    def __call__(self, raw: dict[str, Any]) -> MatchRecord:
        """Return one canonical draft for one raw upstream record."""
        ...


# Exact upstream tokens (lowercased) checked before substring rules.
_STATUS_EXACT: dict[str, MatchStatus] = {
    "finished": MatchStatus.FINISHED,
    "ft": MatchStatus.FINISHED,
    "aet": MatchStatus.FINISHED,
    "pen": MatchStatus.FINISHED,
    "awarded": MatchStatus.FINISHED,
    "in_play": MatchStatus.IN_PLAY,
    "live": MatchStatus.IN_PLAY,
    "1h": MatchStatus.IN_PLAY,
    "2h": MatchStatus.IN_PLAY,
    "et": MatchStatus.IN_PLAY,
    "paused": MatchStatus.PAUSED,
    "ht": MatchStatus.PAUSED,
}

# Ordered: first matching substring wins.
_STATUS_CONTAINS: tuple[tuple[str, MatchStatus], ...] = (
    ("finished", MatchStatus.FINISHED),
    ("half", MatchStatus.PAUSED),
    ("progress", MatchStatus.IN_PLAY),
    ("live", MatchStatus.IN_PLAY),
)

_ROUND_NUMBER_STAGES: dict[int, Stage] = {
    1: Stage.GROUP,
    2: Stage.GROUP,
    3: Stage.GROUP,
    32: Stage.R32,
    16: Stage.R16,
    8: Stage.QF,
    125: Stage.QF,
    4: Stage.SF,
    150: Stage.SF,
    160: Stage.THIRD_PLACE,
    200: Stage.FINAL,
}

# Ordered: "semi-final" must hit SF before FINAL, "third place final" 3P before FINAL.
_STAGE_TEXT_RULES: tuple[tuple[tuple[str, ...], Stage], ...] = (
    (("round of 32", "last 32"), Stage.R32),
    (("round of 16", "last 16"), Stage.R16),
    (("quarter",), Stage.QF),
    (("semi",), Stage.SF),
    (("third",), Stage.THIRD_PLACE),
    (("final",), Stage.FINAL),
    (("group",), Stage.GROUP),
)

_GROUP_RE = re.compile(r"\bgroup[\s_-]*([a-z])\b", re.IGNORECASE)
_MATCHDAY_RE = re.compile(r"(?:matchday|round)\s*(\d+)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"(\d+)")
_ZONE_RE = re.compile(r"([zZ]|[+-]\d{2}:?\d{2})$")

GROUP_MATCHDAYS = range(1, 4)


def translate_status(raw_status: Any) -> MatchStatus:
    raw = str(raw_status or "").strip().lower()
    if not raw:
        return MatchStatus.SCHEDULED
    exact = _STATUS_EXACT.get(raw)
    if exact is not None:
        return exact
    for needle, status in _STATUS_CONTAINS:
        if needle in raw:
            return status
    return MatchStatus.SCHEDULED


def parse_int(value: Any) -> int | None:
    """Integer or integer-like string; anything else (including bools) is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _pair(period: Any) -> ScorePair:
    if not isinstance(period, dict):
        return ScorePair()
    return ScorePair(home=parse_int(period.get("home")), away=parse_int(period.get("away")))


def pick_score(periods: dict[str, Any] | None) -> MatchScore:
    """Build the score breakdown from provider periods keyed fullTime/regularTime/extraTime/penalties/halfTime."""
    periods = periods if isinstance(periods, dict) else {}
    full_time = _pair(periods.get("fullTime"))
    half_time = _pair(periods.get("halfTime"))
    fallbacks = [
        full_time,
        _pair(periods.get("regularTime")),
        _pair(periods.get("extraTime")),
        _pair(periods.get("penalties")),
        half_time,
    ]
    home = next((pair.home for pair in fallbacks if pair.home is not None), None)
    away = next((pair.away for pair in fallbacks if pair.away is not None), None)
    return MatchScore(home=home, away=away, full_time=full_time, half_time=half_time)


def infer_stage(round_number: Any, text: Any) -> Stage | None:
    number = parse_int(round_number)
    if number is not None and number in _ROUND_NUMBER_STAGES:
        return _ROUND_NUMBER_STAGES[number]

    normalized = str(text or "").replace("_", " ").lower()
    if not normalized.strip():
        return None
    for needles, stage in _STAGE_TEXT_RULES:
        if any(needle in normalized for needle in needles):
            return stage
    return None


def extract_group(value: Any) -> str | None:
    text = str(value or "").strip()
    if not text:
        return None
    match = _GROUP_RE.search(text)
    if match:
        return match.group(1).upper()
    if len(text) == 1 and text.isalpha():
        return text.upper()
    return None


def parse_matchday(stage: Stage | None, round_number: Any, text: Any) -> int | None:
    if stage != Stage.GROUP:
        return None
    number = parse_int(round_number)
    if number is not None and number in GROUP_MATCHDAYS:
        return number

    raw = str(text or "")
    match = _MATCHDAY_RE.search(raw) or _NUMBER_RE.search(raw)
    if not match:
        return None
    parsed = parse_int(match.group(1))
    return parsed if parsed in GROUP_MATCHDAYS else None


def _iso_or_none(value: str) -> str | None:
    try:
        return to_iso_utc(parse_utc(value))
    except (TypeError, ValueError, OverflowError):
        return None


def normalize_kickoff(timestamp: Any = None, date_value: Any = None, time_value: Any = None) -> str | None:
    """Return the kickoff as ISO UTC, or None when nothing parses. Never falls back to now."""
    stamp = str(timestamp or "").strip()
    if stamp:
        return _iso_or_none(stamp)

    day = str(date_value or "").strip()
    clock = str(time_value or "").strip()
    if day and clock:
        raw = f"{day}T{clock}" if _ZONE_RE.search(clock) else f"{day}T{clock}Z"
        return _iso_or_none(raw)
    if day:
        return _iso_or_none(f"{day}T00:00:00Z")
    return None


def external_id_of(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()
