"""
backend/fixturesync/utils/team_matching.py

Purpose:
    Team-name normalization for the fuzzy match key. Deterministic and
    deliberately simple: accents stripped, case folded, whitespace collapsed.

Notes:
    - External IDs always take precedence over fuzzy names.
    - No alias tables or token heuristics; "Korea Republic" and "South Korea"
      are different keys.
"""

from __future__ import annotations

import unicodedata


def normalize_team_name(name: str | None) -> str:
    """Normalize a team name into a lowercase, accent-free comparison string."""
    normalized = unicodedata.normalize("NFKD", str(name or ""))
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return " ".join(normalized.casefold().split())
