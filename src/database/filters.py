"""Filtered, paginated song queries built from ordered predicates.

Every filter value is a bound parameter (``p1``, ``p2``, ...) numbered in the
order the predicates were added; nothing is interpolated into SQL text.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from sqlalchemy import Select, and_, bindparam, func, literal_column, select
from sqlalchemy.sql.elements import ColumnElement

from src.database.models import Song, SongDetail


class Operator(str, Enum):
    """Comparison applied by a predicate."""

    CONTAINS = "contains"  # case-insensitive substring (ILIKE '%value%')
    EQUALS = "equals"


@dataclass(frozen=True, eq=False)
class Predicate:
    """One ``column <operator> value`` condition."""

    column: ColumnElement
    operator: Operator
    value: Any

    def compile(self, position: int) -> ColumnElement:
        """Render as a SQLAlchemy expression bound to parameter ``p{position}``."""
        name = f"p{position}"
        if self.operator is Operator.CONTAINS:
            return self.column.ilike(bindparam(name, f"%{self.value}%"))
        if self.operator is Operator.EQUALS:
            return self.column == bindparam(name, self.value, type_=self.column.type)
        raise ValueError(f"Unsupported operator: {self.operator}")


@dataclass
class SongFilter:
    """Optional predicates over the song catalog; all empty matches everything."""

    group: str = ""
    artist: str = ""
    album: str = ""
    song: str = ""
    release_date: Optional[date] = None

    def is_empty(self) -> bool:
        return not (self.group or self.artist or self.album or self.song or self.release_date)


# Album is nullable on the detail side; treat NULL as empty string when matching
_ALBUM = func.coalesce(SongDetail.album, literal_column("''"))


def build_predicates(song_filter: SongFilter) -> list[Predicate]:
    """Turn a filter into predicates in the fixed order group, artist, album, title, release date."""
    predicates = []
    if song_filter.group:
        predicates.append(Predicate(Song.group_name, Operator.CONTAINS, song_filter.group))
    if song_filter.artist:
        predicates.append(Predicate(SongDetail.artist, Operator.CONTAINS, song_filter.artist))
    if song_filter.album:
        predicates.append(Predicate(_ALBUM, Operator.CONTAINS, song_filter.album))
    if song_filter.song:
        predicates.append(Predicate(Song.song_name, Operator.CONTAINS, song_filter.song))
    if song_filter.release_date:
        predicates.append(
            Predicate(SongDetail.release_date, Operator.EQUALS, song_filter.release_date)
        )
    return predicates


def total_pages(total_count: int, page_size: int) -> int:
    """Ceiling division of the row count by the page size."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return math.ceil(total_count / page_size)


@dataclass
class SongQuery:
    """COUNT and page SELECT sharing one WHERE clause."""

    predicates: list[Predicate] = field(default_factory=list)

    @classmethod
    def from_filter(cls, song_filter: SongFilter) -> "SongQuery":
        return cls(build_predicates(song_filter))

    def where_clause(self) -> Optional[ColumnElement]:
        """AND of all predicates, or None when there are none."""
        if not self.predicates:
            return None
        conditions = [
            predicate.compile(position)
            for position, predicate in enumerate(self.predicates, start=1)
        ]
        return and_(*conditions)

    def _apply_where(self, stmt: Select) -> Select:
        clause = self.where_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt

    def count_statement(self) -> Select:
        stmt = (
            select(func.count())
            .select_from(Song)
            .outerjoin(SongDetail, Song.id == SongDetail.song_id)
        )
        return self._apply_where(stmt)

    def page_statement(self, page: int, page_size: int) -> Select:
        """SELECT for one page, ordered by song id."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        stmt = (
            select(
                Song.id,
                Song.group_name,
                Song.song_name,
                SongDetail.link,
                SongDetail.artist,
                _ALBUM.label("album"),
                SongDetail.release_date,
                SongDetail.text,
                SongDetail.genre,
                SongDetail.duration,
                SongDetail.key,
                SongDetail.tempo,
            )
            .select_from(Song)
            .outerjoin(SongDetail, Song.id == SongDetail.song_id)
        )
        stmt = self._apply_where(stmt)
        return stmt.order_by(Song.id.asc()).limit(page_size).offset((page - 1) * page_size)
