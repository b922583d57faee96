# kickoff_hub/models.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from .config import PLATFORM_SPLIT_PATTERN


def split_platforms(value: str) -> tuple[str, ...]:
    """
    "Xbox, PS5" -> ("Xbox", "PS5")

    Order-preserving, trimmed, de-duplicated (case-insensitive).
    """
    out: list[str] = []
    seen: set[str] = set()
    for token in re.split(PLATFORM_SPLIT_PATTERN, (value or "").strip()):
        token = token.strip()
        if not token or token.lower() in seen:
            continue
        seen.add(token.lower())
        out.append(token)
    return tuple(out)


@dataclass
class GameRecord:
    """
    One row of the games tab after header normalization.

    Everything is a string; missing columns come through as "".
    """
    game_id: str = ""
    title: str = ""
    platform: str = ""
    genre: str = ""
    trailer_url: str = ""
    thumbnail_url: str = ""
    station: str = ""
    status: str = ""
    featured: str = ""

    @property
    def platforms(self) -> tuple[str, ...]:
        return split_platforms(self.platform)

    @property
    def primary_platform(self) -> str:
        p = self.platforms
        return p[0] if p else ""


@dataclass
class StationRecord:
    station_name: str = ""
    status: str = ""
    note: str = ""


@dataclass
class RowProblem:
    """Entry of the "needs attention" report. row_number is 1-based over data rows."""
    row_number: int
    title: str
    game_id: str = ""
    problems: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class QueueTicket:
    code: str
    issued_at: datetime
    title: str = ""  # set when the ticket came from a "Book" click
