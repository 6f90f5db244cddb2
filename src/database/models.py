"""SQLAlchemy models for the database."""

from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Song(Base):
    """Song header: the group/title identity row."""

    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)
    song_name: Mapped[str] = mapped_column(String(255), nullable=False)

    detail: Mapped[Optional["SongDetail"]] = relationship(
        back_populates="song",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, group='{self.group_name}', song='{self.song_name}')>"


class SongDetail(Base):
    """Enrichment record (lyrics and metadata) owned 1:1 by a song."""

    __tablename__ = "song_details"

    song_id: Mapped[int] = mapped_column(
        ForeignKey("songs.id", ondelete="CASCADE"), primary_key=True
    )
    release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    link: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    artist: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    album: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    duration: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    key: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    tempo: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    song: Mapped[Song] = relationship(back_populates="detail")

    def __repr__(self) -> str:
        return f"<SongDetail(song_id={self.song_id}, artist='{self.artist}')>"
