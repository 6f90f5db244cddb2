"""Pydantic models for API requests and responses."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.database.records import SongDetailRecord, SongPage, SongRecord


class SongDetailModel(BaseModel):
    """Song detail model; ``release_date`` is ``YYYY-MM-DD`` or empty."""

    link: str = ""
    artist: str = ""
    album: str = ""
    release_date: str = ""
    text: str = ""
    genre: str = ""
    duration: str = ""
    key: str = ""
    tempo: str = ""

    @field_validator("release_date", mode="before")
    @classmethod
    def _format_release_date(cls, value):
        if value is None:
            return ""
        if isinstance(value, date):
            return value.isoformat()
        return value

    @classmethod
    def from_record(cls, record: SongDetailRecord) -> "SongDetailModel":
        return cls(
            link=record.link,
            artist=record.artist,
            album=record.album,
            release_date=record.release_date,
            text=record.text,
            genre=record.genre,
            duration=record.duration,
            key=record.key,
            tempo=record.tempo,
        )


class SongModel(BaseModel):
    """Song model."""

    id: int = 0
    group: str
    song: str
    details: SongDetailModel = Field(default_factory=SongDetailModel)

    @classmethod
    def from_record(cls, record: SongRecord) -> "SongModel":
        return cls(
            id=record.id,
            group=record.group,
            song=record.song,
            details=SongDetailModel.from_record(record.details),
        )

    def to_record(self, song_id: int) -> SongRecord:
        """Convert to a store record under the given id (the body id is ignored)."""
        return SongRecord(
            id=song_id,
            group=self.group,
            song=self.song,
            details=SongDetailRecord(album=self.details.album, text=self.details.text),
        )


class PaginationModel(BaseModel):
    """Pagination summary."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    page_size: int = Field(alias="pageSize")
    total_count: int = Field(alias="totalCount")
    total_pages: int = Field(alias="totalPages")


class SongsResponse(BaseModel):
    """Song listing response model."""

    songs: list[SongModel]
    pagination: PaginationModel

    @classmethod
    def from_page(cls, page: SongPage) -> "SongsResponse":
        return cls(
            songs=[SongModel.from_record(song) for song in page.songs],
            pagination=PaginationModel(
                page=page.pagination.page,
                page_size=page.pagination.page_size,
                total_count=page.pagination.total_count,
                total_pages=page.pagination.total_pages,
            ),
        )


class AddSongRequest(BaseModel):
    """Add song request model."""

    group: str = Field(min_length=1)
    song: str = Field(min_length=1)


class AddSongResponse(BaseModel):
    """Add song response model."""

    message: str
    id: int


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    message: str
