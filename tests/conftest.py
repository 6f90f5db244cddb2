"""Pytest configuration and fixtures."""

import asyncio
from datetime import date
from pathlib import Path
from typing import Awaitable, Callable

import pytest

from src.database.db import close_db, create_engine, create_session_factory, init_db
from src.database.records import SongDetailRecord
from src.utils.config import Settings


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite database in a temporary directory."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def run_db(database_url: str) -> Callable:
    """
    Run an async scenario against a fresh database.

    The scenario receives a session factory; tables are created first and the
    engine is disposed afterwards.
    """

    def run(scenario: Callable[..., Awaitable]):
        async def runner():
            engine = create_engine(database_url)
            try:
                await init_db(engine)
                return await scenario(create_session_factory(engine))
            finally:
                await close_db(engine)

        return asyncio.run(runner())

    return run


@pytest.fixture
def sample_details() -> list[SongDetailRecord]:
    """Detail records for three songs, in insertion order."""
    return [
        SongDetailRecord(
            link="https://genius.com/Muse-supermassive-black-hole-lyrics",
            artist="Muse",
            album="Black Holes and Revelations",
            release_date=date(2006, 6, 19),
            text="[Verse 1]\nOoh baby, don't you know I suffer?",
            genre="Alternative Rock",
            duration="3:29",
            key="E minor",
            tempo="120",
        ),
        SongDetailRecord(
            link="https://genius.com/Muse-uprising-lyrics",
            artist="Muse",
            album="The Resistance",
            release_date=date(2009, 9, 7),
            text="[Verse 1]\nParanoia is in bloom",
        ),
        SongDetailRecord(
            link="https://genius.com/Queen-bohemian-rhapsody-lyrics",
            artist="Queen",
            album="A Night at the Opera",
            release_date=date(1975, 10, 31),
            text="[Intro]\nIs this the real life? Is this just fantasy?",
        ),
    ]


@pytest.fixture
def sample_songs(sample_details) -> list[tuple[str, str, SongDetailRecord]]:
    """(group, title, detail) triples matching ``sample_details``."""
    return [
        ("Muse", "Supermassive Black Hole", sample_details[0]),
        ("Muse", "Uprising", sample_details[1]),
        ("Queen", "Bohemian Rhapsody", sample_details[2]),
    ]


@pytest.fixture
def test_settings(database_url: str) -> Settings:
    """Create test settings with a temporary database."""
    return Settings(
        database_url=database_url,
        lyrics_api_base_url="https://lyrics.test",
        lyrics_api_access_token="fake_token",
    )
