"""Tests for the lyrics API client."""

from datetime import date

import pytest
import requests

from src.lyrics.client import LyricsAPIError, LyricsClient, LyricsNotFoundError
from tests.helpers import StubResponse, StubSession

BASE_URL = "https://lyrics.test"
SONG_URL = "https://genius.com/Coldplay-fix-you-lyrics"

SEARCH_RESPONSE = {"response": {"hits": [{"result": {"id": 12345}}]}}

SONG_RESPONSE = {
    "response": {
        "song": {
            "id": 12345,
            "title": "Fix You",
            "primary_artist": {"name": "Coldplay"},
            "url": SONG_URL,
            "album": {"name": "X&Y"},
            "release_date": "2005-03-22",
            "genre": "Alternative Rock",
            "duration": "4:55",
            "key": "B♭",
            "tempo": 138,
        }
    }
}

CONTAINER_PAGE = """
<html><body>
<div class="Lyrics__Container-sc-1ynbvzw-6 jYfhrf">[Verse 1]<br/>When you try your best<br/>But you don't succeed</div>
<div class="Lyrics__Container-sc-1ynbvzw-6 jYfhrf">[Chorus]<br/>Lights will guide you home</div>
</body></html>
"""


def make_client(routes: dict) -> tuple[LyricsClient, StubSession]:
    session = StubSession(routes)
    return LyricsClient(BASE_URL, "fake_token", timeout=5, session=session), session


def full_routes(page: str = CONTAINER_PAGE) -> dict:
    return {
        f"{BASE_URL}/search": StubResponse(json_data=SEARCH_RESPONSE),
        f"{BASE_URL}/songs/12345": StubResponse(json_data=SONG_RESPONSE),
        SONG_URL: StubResponse(text=page),
    }


def test_get_song_details():
    """Test search, fetch by id and scrape end to end."""
    client, session = make_client(full_routes())

    detail = client.get_song_details("Coldplay", "Fix You")

    assert detail.link == SONG_URL
    assert detail.artist == "Coldplay"
    assert detail.album == "X&Y"
    assert detail.release_date == date(2005, 3, 22)
    assert detail.genre == "Alternative Rock"
    assert detail.duration == "4:55"
    assert detail.key == "B♭"
    assert detail.tempo == "138"
    assert "[Verse 1]\nWhen you try your best\nBut you don't succeed" in detail.text
    assert "[Chorus]\nLights will guide you home" in detail.text


def test_requests_carry_query_token_and_timeout():
    client, session = make_client(full_routes())

    client.get_song_details("Coldplay", "Fix You")

    search_call, song_call, page_call = session.calls
    assert search_call["params"] == {"q": "Coldplay Fix You"}
    assert search_call["headers"] == {"Authorization": "Bearer fake_token"}
    assert song_call["url"] == f"{BASE_URL}/songs/12345"
    assert song_call["headers"] == {"Authorization": "Bearer fake_token"}
    assert page_call["url"] == SONG_URL
    assert all(call["timeout"] == 5 for call in session.calls)


def test_base_url_trailing_slash_is_ignored():
    session = StubSession(full_routes())
    client = LyricsClient(BASE_URL + "/", "fake_token", session=session)

    client.search("Coldplay", "Fix You")

    assert session.calls[0]["url"] == f"{BASE_URL}/search"


def test_album_as_plain_string_and_missing_fields():
    """Test providers that send bare strings or omit optional fields."""
    song = {"url": SONG_URL, "primary_artist": {"name": "Coldplay"}, "album": "X&Y"}
    routes = full_routes()
    routes[f"{BASE_URL}/songs/12345"] = StubResponse(json_data={"response": {"song": song}})
    client, _ = make_client(routes)

    detail = client.get_song(12345)

    assert detail.album == "X&Y"
    assert detail.release_date is None
    assert detail.genre == ""
    assert detail.tempo == ""


def test_null_album_and_bad_release_date():
    song = dict(SONG_RESPONSE["response"]["song"], album=None, release_date="March 2005")
    routes = full_routes()
    routes[f"{BASE_URL}/songs/12345"] = StubResponse(json_data={"response": {"song": song}})
    client, _ = make_client(routes)

    detail = client.get_song(12345)

    assert detail.album == ""
    assert detail.release_date is None


def test_first_selector_wins():
    """Test that the '.lyrics' selector is preferred when it has text."""
    page = """
    <div class="lyrics">Old layout line one<br>Old layout line two</div>
    <div class="Lyrics__Container-abc">New layout</div>
    """
    client, _ = make_client(full_routes(page))

    lyrics = client.fetch_lyrics(SONG_URL)

    assert lyrics == "Old layout line one\nOld layout line two\n"


def test_falls_back_to_container_selector():
    page = '<div class="lyrics">   </div><div class="Lyrics__Container-xyz">New layout</div>'
    client, _ = make_client(full_routes(page))

    assert client.fetch_lyrics(SONG_URL) == "New layout\n"


def test_no_lyrics_on_page():
    client, _ = make_client(full_routes("<html><body><p>Nothing here</p></body></html>"))

    with pytest.raises(LyricsNotFoundError) as exc_info:
        client.fetch_lyrics(SONG_URL)
    assert isinstance(exc_info.value, LyricsAPIError)


@pytest.mark.parametrize("status_code", [401, 404, 500, 503])
def test_search_error_status(status_code):
    client, _ = make_client({f"{BASE_URL}/search": StubResponse(status_code=status_code)})

    with pytest.raises(LyricsAPIError, match=str(status_code)):
        client.get_song_details("Coldplay", "Fix You")


def test_song_error_status():
    routes = full_routes()
    routes[f"{BASE_URL}/songs/12345"] = StubResponse(status_code=500)
    client, _ = make_client(routes)

    with pytest.raises(LyricsAPIError):
        client.get_song_details("Coldplay", "Fix You")


def test_page_error_status():
    routes = full_routes()
    routes[SONG_URL] = StubResponse(status_code=403)
    client, _ = make_client(routes)

    with pytest.raises(LyricsAPIError) as exc_info:
        client.get_song_details("Coldplay", "Fix You")
    assert not isinstance(exc_info.value, LyricsNotFoundError)


def test_no_search_hits():
    client, _ = make_client(
        {f"{BASE_URL}/search": StubResponse(json_data={"response": {"hits": []}})}
    )

    with pytest.raises(LyricsAPIError, match="no song found"):
        client.get_song_details("Nobody", "Nothing")


def test_invalid_json():
    client, _ = make_client({f"{BASE_URL}/search": StubResponse(json_data=None)})

    with pytest.raises(LyricsAPIError, match="decoding JSON"):
        client.search("Coldplay", "Fix You")


def test_transport_error():
    client, _ = make_client(
        {f"{BASE_URL}/search": requests.exceptions.ConnectionError("connection refused")}
    )

    with pytest.raises(LyricsAPIError, match="connection refused"):
        client.search("Coldplay", "Fix You")


def test_missing_link_skips_scrape():
    """Test that a song without a URL comes back without text or a page fetch."""
    song = dict(SONG_RESPONSE["response"]["song"], url=None)
    routes = full_routes()
    routes[f"{BASE_URL}/songs/12345"] = StubResponse(json_data={"response": {"song": song}})
    client, session = make_client(routes)

    detail = client.get_song(12345)

    assert detail.link == ""
    assert detail.text == ""
    assert [call["url"] for call in session.calls] == [f"{BASE_URL}/songs/12345"]


@pytest.mark.parametrize(
    "payload",
    [
        ["unexpected"],
        "just a string",
        {"response": "not an object"},
        {"response": {"hits": {"result": {"id": 1}}}},
        {"response": {"hits": ["not a hit"]}},
    ],
)
def test_search_malformed_payload(payload):
    """Test that valid JSON of the wrong shape is an API error, not a crash."""
    client, _ = make_client({f"{BASE_URL}/search": StubResponse(json_data=payload)})

    with pytest.raises(LyricsAPIError, match="malformed"):
        client.search("Coldplay", "Fix You")


@pytest.mark.parametrize(
    "payload", [[SONG_RESPONSE], {"response": []}, {"response": {"song": [SONG_URL]}}]
)
def test_get_song_malformed_payload(payload):
    routes = full_routes()
    routes[f"{BASE_URL}/songs/12345"] = StubResponse(json_data=payload)
    client, session = make_client(routes)

    with pytest.raises(LyricsAPIError, match="malformed"):
        client.get_song(12345)
    assert [call["url"] for call in session.calls] == [f"{BASE_URL}/songs/12345"]
