"""Song business logic: orchestrates the store and the lyrics provider."""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from src.database.filters import SongFilter
from src.database.records import SongPage, SongRecord
from src.database.repository import SongNotFoundError, SongRepository
from src.lyrics.client import LyricsAPIError, LyricsClient
from src.services.errors import (
    BadRequestError,
    ExternalAPIError,
    InternalError,
    NotFoundError,
)
from src.utils.lyrics import clean_lyrics

logger = logging.getLogger(__name__)


class SongService:
    """
    Song operations exposed to the API layer.

    Store failures are logged and collapsed to ``InternalError`` so that
    callers never see database-specific messages.
    """

    def __init__(self, repository: SongRepository, lyrics_client: LyricsClient):
        self.repository = repository
        self.lyrics_client = lyrics_client

    async def get_songs(self, song_filter: SongFilter, page: int, page_size: int) -> SongPage:
        """Get one page of songs matching ``song_filter``."""
        logger.debug("Fetching songs with filter=%s page=%d page_size=%d", song_filter, page, page_size)
        if page < 1 or page_size < 1:
            raise BadRequestError("Invalid pagination parameters")

        try:
            response = await self.repository.get_songs(song_filter, page, page_size)
        except SQLAlchemyError as e:
            logger.error("Error fetching filtered songs: %s", e)
            raise InternalError() from e

        logger.debug("Fetched %d song(s), total %d", len(response.songs), response.pagination.total_count)
        return response

    async def get_song_text(self, song_id: int, verse: int, limit: int) -> list[str]:
        """Get one verse page of a song's lyrics."""
        logger.debug("Fetching text for song id=%d verse=%d limit=%d", song_id, verse, limit)
        if verse < 1 or limit < 1:
            raise BadRequestError("Invalid verse or limit")

        try:
            verses = await self.repository.get_song_text(song_id, verse, limit)
        except SongNotFoundError as e:
            logger.info("No text stored for song id=%d", song_id)
            raise NotFoundError("Song not found") from e
        except SQLAlchemyError as e:
            logger.error("Error fetching song text: %s", e)
            raise InternalError() from e

        return verses

    async def add_song(self, group: str, title: str) -> int:
        """
        Look a song up with the lyrics provider and store it.

        Raises:
            ExternalAPIError: If the lookup fails or returns no canonical link
            InternalError: If the store rejects the insert
        """
        logger.debug("Attempting to add song group=%s title=%s", group, title)

        try:
            existing_id = await self.repository.find_song_id(group, title)
        except SQLAlchemyError as e:
            logger.error("Error checking for existing song: %s", e)
            raise InternalError() from e
        if existing_id is not None:
            # Duplicates are allowed; the header is not unique on (group, title)
            logger.warning("Song already stored as id=%d, adding another copy", existing_id)

        loop = asyncio.get_running_loop()
        try:
            detail = await loop.run_in_executor(
                None, self.lyrics_client.get_song_details, group, title
            )
        except LyricsAPIError as e:
            logger.error("Lyrics lookup failed for group=%s title=%s: %s", group, title, e)
            raise ExternalAPIError() from e

        if not detail.link:
            logger.error("Lyrics API returned no link for group=%s title=%s", group, title)
            raise ExternalAPIError()

        detail.text = clean_lyrics(detail.text)

        try:
            new_id = await self.repository.add_song(group, title, detail)
        except SQLAlchemyError as e:
            logger.error("Failed to add song to repository: %s", e)
            raise InternalError() from e

        logger.info("Song added successfully with id=%d", new_id)
        return new_id

    async def update_song(self, song: SongRecord) -> None:
        logger.debug("Attempting to update song %s", song.id)
        try:
            await self.repository.update_song(song)
        except SQLAlchemyError as e:
            logger.error("Failed to update song: %s", e)
            raise InternalError() from e
        logger.info("Song updated successfully: %d", song.id)

    async def delete_song(self, song_id: int) -> None:
        logger.debug("Attempting to delete song id=%d", song_id)
        try:
            await self.repository.delete_song(song_id)
        except SQLAlchemyError as e:
            logger.error("Failed to delete song: %s", e)
            raise InternalError() from e
        logger.info("Song deleted successfully: %d", song_id)
