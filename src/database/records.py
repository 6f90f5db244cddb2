"""Plain records passed between the store, the service and the API layer."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass
class SongDetailRecord:
    """Enrichment data for a song; empty strings stand in for missing values."""

    link: str = ""
    artist: str = ""
    album: str = ""
    release_date: Optional[date] = None
    text: str = ""
    genre: str = ""
    duration: str = ""
    key: str = ""
    tempo: str = ""


@dataclass
class SongRecord:
    id: int
    group: str
    song: str
    details: SongDetailRecord = field(default_factory=SongDetailRecord)


@dataclass
class Pagination:
    page: int
    page_size: int
    total_count: int
    total_pages: int


@dataclass
class SongPage:
    songs: list[SongRecord]
    pagination: Pagination
