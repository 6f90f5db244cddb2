"""Song persistence: filtered listing, lyrics lookup and mutations."""

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.filters import SongFilter, SongQuery, total_pages
from src.database.models import Song, SongDetail
from src.database.records import Pagination, SongDetailRecord, SongPage, SongRecord
from src.utils.lyrics import format_song_text, paginate_lines

logger = logging.getLogger(__name__)


class SongNotFoundError(LookupError):
    """No stored song (or song text) for the requested id."""


class SongRepository:
    """Data access for songs and their details, bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_songs(self, song_filter: SongFilter, page: int, page_size: int) -> SongPage:
        """
        List songs matching a filter, one page at a time.

        Args:
            song_filter: Substring/equality predicates; empty matches all
            page: 1-based page number
            page_size: Songs per page (must be >= 1)

        Returns:
            The page of songs with pagination totals
        """
        query = SongQuery.from_filter(song_filter)
        logger.debug("Listing songs: %d predicate(s), page=%d, page_size=%d", len(query.predicates), page, page_size)

        total_count = (await self.session.execute(query.count_statement())).scalar_one()
        result = await self.session.execute(query.page_statement(page, page_size))

        songs = [_row_to_record(row) for row in result.all()]
        return SongPage(
            songs=songs,
            pagination=Pagination(
                page=page,
                page_size=page_size,
                total_count=total_count,
                total_pages=total_pages(total_count, page_size),
            ),
        )

    async def get_song_text(self, song_id: int, verse: int, limit: int) -> list[str]:
        """
        Get one verse page of a song's formatted lyrics.

        Raises:
            SongNotFoundError: If the song has no stored text
        """
        result = await self.session.execute(
            select(SongDetail.text).where(SongDetail.song_id == song_id)
        )
        text = result.scalar_one_or_none()
        if text is None:
            raise SongNotFoundError(f"song not found: {song_id}")

        return paginate_lines(format_song_text(text), verse, limit)

    async def find_song_id(self, group: str, title: str) -> Optional[int]:
        """Get the id of an existing song with exactly this group and title."""
        result = await self.session.execute(
            select(Song.id)
            .where(Song.group_name == group, Song.song_name == title)
            .order_by(Song.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add_song(self, group: str, title: str, detail: SongDetailRecord) -> int:
        """
        Insert a song header and its detail row in one transaction.

        Returns:
            The new song id
        """
        song = Song(
            group_name=group,
            song_name=title,
            detail=SongDetail(
                release_date=detail.release_date,
                text=detail.text,
                link=detail.link,
                artist=detail.artist,
                album=detail.album,
                genre=detail.genre,
                duration=detail.duration,
                key=detail.key,
                tempo=detail.tempo,
            ),
        )
        self.session.add(song)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return song.id

    async def update_song(self, song: SongRecord) -> None:
        """Update group, title, album and lyrics text; other details stay as fetched."""
        try:
            await self.session.execute(
                update(Song)
                .where(Song.id == song.id)
                .values(group_name=song.group, song_name=song.song)
            )
            await self.session.execute(
                update(SongDetail)
                .where(SongDetail.song_id == song.id)
                .values(album=song.details.album, text=song.details.text)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def delete_song(self, song_id: int) -> None:
        """Delete a song; its detail row goes with it. Unknown ids are a no-op."""
        try:
            await self.session.execute(delete(Song).where(Song.id == song_id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise


def _row_to_record(row) -> SongRecord:
    values = row._mapping
    return SongRecord(
        id=values["id"],
        group=values["group_name"],
        song=values["song_name"],
        details=SongDetailRecord(
            link=values["link"] or "",
            artist=values["artist"] or "",
            album=values["album"] or "",
            release_date=values["release_date"],
            text=values["text"] or "",
            genre=values["genre"] or "",
            duration=values["duration"] or "",
            key=values["key"] or "",
            tempo=values["tempo"] or "",
        ),
    )
