"""API routes."""

import logging
from datetime import date
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.models import (
    AddSongRequest,
    AddSongResponse,
    ErrorResponse,
    MessageResponse,
    SongModel,
    SongsResponse,
)
from src.database.db import get_session
from src.database.filters import SongFilter
from src.database.repository import SongRepository
from src.lyrics.client import LyricsClient
from src.services.errors import BadRequestError, InternalError
from src.services.song_service import SongService
from src.utils.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/songs", tags=["songs"])

# Keeps (page - 1) * pageSize well inside a 64-bit OFFSET
MAX_PAGE = 1_000_000_000

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def get_lyrics_client() -> Iterator[LyricsClient]:
    """Lyrics client for one request; its HTTP session is closed afterwards."""
    lyrics_client = LyricsClient(
        base_url=settings.lyrics_api_base_url,
        access_token=settings.lyrics_api_access_token,
        timeout=settings.lyrics_api_timeout,
    )
    try:
        yield lyrics_client
    finally:
        lyrics_client.close()


async def get_song_service(
    session: AsyncSession = Depends(get_session),
    lyrics_client: LyricsClient = Depends(get_lyrics_client),
) -> SongService:
    """Dependency for the song service, one per request."""
    return SongService(SongRepository(session), lyrics_client)


@router.get("/", response_model=SongsResponse, responses=ERROR_RESPONSES)
async def get_songs(
    group: str = Query(default="", description="Filter by group"),
    artist: str = Query(default="", description="Filter by artist"),
    album: str = Query(default="", description="Filter by album"),
    song: str = Query(default="", description="Filter by song title"),
    release: Optional[date] = Query(default=None, description="Filter by release date (YYYY-MM-DD)"),
    page: int = Query(default=1, le=MAX_PAGE, description="Page number"),
    page_size: int = Query(
        default=settings.default_page_size, alias="pageSize", description="Items per page"
    ),
    service: SongService = Depends(get_song_service),
) -> SongsResponse:
    """
    List songs with optional filters and pagination.

    Text filters are case-insensitive substring matches; ``pageSize`` is
    clamped to the configured maximum.
    """
    if page <= 0:
        logger.warning("Invalid page number: %d", page)
        raise BadRequestError("Invalid page number")
    if page_size <= 0:
        logger.warning("Invalid page size: %d", page_size)
        raise BadRequestError("Invalid page size")
    page_size = min(page_size, settings.max_page_size)

    song_filter = SongFilter(
        group=group, artist=artist, album=album, song=song, release_date=release
    )
    response = await service.get_songs(song_filter, page, page_size)
    return SongsResponse.from_page(response)


@router.get(
    "/{song_id}",
    response_model=list[str],
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "Song not found"}},
)
async def get_song_text(
    song_id: int = Path(description="Song ID"),
    verse: int = Query(default=1, description="Verse number"),
    limit: int = Query(default=4, description="Number of lines per verse"),
    service: SongService = Depends(get_song_service),
) -> list[str]:
    """Get one verse page of a song's lyrics."""
    if verse <= 0:
        logger.warning("Invalid verse parameter: %d", verse)
        raise BadRequestError("Invalid verse parameter")
    if limit <= 0:
        logger.warning("Invalid limit parameter: %d", limit)
        raise BadRequestError("Invalid limit parameter")

    return await service.get_song_text(song_id, verse, limit)


@router.post(
    "/",
    response_model=AddSongResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        502: {"model": ErrorResponse, "description": "Failed to fetch data from external API"},
    },
)
async def add_song(
    request: AddSongRequest,
    service: SongService = Depends(get_song_service),
) -> AddSongResponse:
    """Add a song; details and lyrics are fetched from the lyrics provider."""
    try:
        new_id = await service.add_song(request.group, request.song)
    except InternalError as e:
        raise InternalError("Failed to add song") from e
    return AddSongResponse(message="Song added successfully", id=new_id)


@router.put("/{song_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def update_song(
    request: SongModel,
    song_id: int = Path(description="Song ID"),
    service: SongService = Depends(get_song_service),
) -> MessageResponse:
    """Update group, title, album and lyrics text of a song."""
    try:
        await service.update_song(request.to_record(song_id))
    except InternalError as e:
        raise InternalError("Failed to update song") from e
    return MessageResponse(message="Song updated successfully")


@router.delete("/{song_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_song(
    song_id: int = Path(description="Song ID"),
    service: SongService = Depends(get_song_service),
) -> MessageResponse:
    """Delete a song and its details. Deleting an unknown id still succeeds."""
    try:
        await service.delete_song(song_id)
    except InternalError as e:
        raise InternalError("Failed to delete song") from e
    return MessageResponse(message="Song deleted successfully")
