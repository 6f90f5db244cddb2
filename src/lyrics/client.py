"""Client for a Genius-compatible lyrics API plus lyrics page scraping."""

import logging
from datetime import date
from typing import Any, Optional

import requests
from bs4 import BeautifulSoup

from src.database.records import SongDetailRecord

logger = logging.getLogger(__name__)

# Tried in order; the first selector that yields text wins
LYRICS_SELECTORS = (".lyrics", "div[class^='Lyrics__Container']")


class LyricsAPIError(Exception):
    """The lyrics provider was unreachable or returned unusable data."""


class LyricsNotFoundError(LyricsAPIError):
    """The lyrics page was fetched but contained no lyrics."""


class LyricsClient:
    """
    Resolves a group and song title to a detail record.

    Lookup is a search, a fetch by id, then a scrape of the song's
    canonical page. Any failure along the way aborts the lookup; there
    are no retries.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, e.g. https://api.genius.com
            access_token: Bearer token sent with API calls
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _get_json(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise LyricsAPIError(f"error sending request to {url}: {e}") from e

        if response.status_code != 200:
            raise LyricsAPIError(f"external API returned status {response.status_code} for {url}")

        try:
            data = response.json()
        except ValueError as e:
            raise LyricsAPIError(f"error decoding JSON response from {url}: {e}") from e

        if not isinstance(data, dict):
            raise LyricsAPIError(f"malformed response from {url}: expected a JSON object")
        return data

    def search(self, group: str, song: str) -> int:
        """
        Find the provider id of the first search hit for ``"{group} {song}"``.

        Raises:
            LyricsAPIError: On HTTP failure or when nothing matches
        """
        data = self._get_json("/search", params={"q": f"{group} {song}"})
        hits = _field(_field(data, "response", dict), "hits", list)
        if not hits:
            raise LyricsAPIError(f"no song found for group: {group}, song: {song}")

        try:
            return int(hits[0]["result"]["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise LyricsAPIError(f"malformed search hit for group: {group}, song: {song}") from e

    def get_song(self, provider_id: int) -> SongDetailRecord:
        """Fetch metadata for a song id and scrape its lyrics page."""
        data = self._get_json(f"/songs/{provider_id}")
        song = _field(_field(data, "response", dict), "song", dict)

        link = _as_text(song.get("url"))
        detail = SongDetailRecord(
            link=link,
            artist=_name_of(song.get("primary_artist")),
            album=_name_of(song.get("album")),
            release_date=_parse_release_date(song.get("release_date")),
            genre=_as_text(song.get("genre")),
            duration=_as_text(song.get("duration")),
            key=_as_text(song.get("key")),
            tempo=_as_text(song.get("tempo")),
        )
        if link:
            detail.text = self.fetch_lyrics(link)
        return detail

    def fetch_lyrics(self, song_url: str) -> str:
        """
        Scrape raw lyrics text from a song page.

        Raises:
            LyricsAPIError: If the page cannot be fetched
            LyricsNotFoundError: If no selector yields any text
        """
        try:
            response = self.session.get(song_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise LyricsAPIError(f"failed to fetch song page {song_url}: {e}") from e

        if response.status_code != 200:
            raise LyricsAPIError(f"failed to fetch song page {song_url}: status {response.status_code}")

        soup = BeautifulSoup(response.text, "html.parser")
        for selector in LYRICS_SELECTORS:
            lyrics = ""
            for container in soup.select(selector):
                for br in container.select("br"):
                    br.replace_with("\n")
                lyrics += container.get_text() + "\n"
            if lyrics.strip():
                logger.debug("Lyrics found on %s with selector %s", song_url, selector)
                return lyrics

        raise LyricsNotFoundError(f"no lyrics found on the page {song_url}")

    def get_song_details(self, group: str, song: str) -> SongDetailRecord:
        """Search for a song and return its metadata with lyrics."""
        logger.debug("Looking up lyrics for group=%s song=%s", group, song)
        provider_id = self.search(group, song)
        return self.get_song(provider_id)


def _field(data: dict, name: str, kind: type) -> Any:
    """
    Get a nested JSON value, empty when absent or null.

    Raises:
        LyricsAPIError: If the value has the wrong JSON type
    """
    value = data.get(name)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise LyricsAPIError(f"malformed response: '{name}' is not a JSON {kind.__name__}")
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _name_of(value: Any) -> str:
    """Providers send either a nested object with a name or a bare string."""
    if isinstance(value, dict):
        return _as_text(value.get("name"))
    return _as_text(value)


def _parse_release_date(value: Any) -> Optional[date]:
    """Parse ``YYYY-MM-DD``; anything else is treated as unknown."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        logger.warning("Ignoring unparseable release date from lyrics API: %r", value)
        return None
