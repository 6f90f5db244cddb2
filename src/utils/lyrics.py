"""Lyrics text utilities: storage cleanup, display formatting and verse paging."""

import re
import unicodedata

# Section headers that start a new display line
SECTION_MARKERS = ("[Verse", "[Chorus", "[Bridge")

# Sentence terminators followed by a space end a display line
SENTENCE_BREAKS = (". ", "! ", "? ")

# Typographic characters found in scraped pages, mapped to ASCII equivalents
TYPOGRAPHIC_MAP = {
    "\u2018": "'",  # Left single quotation mark
    "\u2019": "'",  # Right single quotation mark (apostrophe)
    "\u201A": "'",  # Single low-9 quotation mark
    "\u201B": "'",  # Single high-reversed-9 quotation mark
    "\u201C": '"',  # Left double quotation mark
    "\u201D": '"',  # Right double quotation mark
    "\u201E": '"',  # Double low-9 quotation mark
    "\u201F": '"',  # Double high-reversed-9 quotation mark
    "\u2013": "-",  # En dash
    "\u2014": "--",  # Em dash
    "\u2026": "...",  # Horizontal ellipsis
    "\u00A0": " ",  # Non-breaking space
    "\u2028": "\n",  # Line separator
    "\u2029": "\n\n",  # Paragraph separator
}


def clean_lyrics(lyrics: str) -> str:
    """
    Prepare scraped lyrics text for storage.

    - Removes BOM, zero-width and bidirectional formatting characters
    - Normalizes typographic quotes, dashes and non-breaking spaces
    - Puts a line break after every closing bracket so section headers
      such as ``[Chorus]`` end their own line
    - Drops trailing whitespace and collapses runs of blank lines

    Args:
        lyrics: Raw lyrics text as scraped from the provider page

    Returns:
        Cleaned lyrics text
    """
    if not lyrics:
        return ""

    lyrics = unicodedata.normalize("NFC", lyrics)

    for typo_char, ascii_char in TYPOGRAPHIC_MAP.items():
        lyrics = lyrics.replace(typo_char, ascii_char)

    # Keep newline/tab/carriage return, drop other control and format chars
    lyrics = "".join(
        char
        for char in lyrics
        if char in "\n\t\r" or unicodedata.category(char) not in ("Cc", "Cf")
    )

    lyrics = lyrics.replace("\r\n", "\n").replace("]", "]\n")

    lines = [line.rstrip() for line in lyrics.split("\n")]
    cleaned = "\n".join(lines)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)

    return cleaned.strip()


def insert_space_before_uppercase(line: str) -> str:
    """
    Split words that were glued together when the page lost its spacing.

    A space is inserted before every upper-case letter that directly follows
    a non-space character, e.g. ``"HelloWorld"`` becomes ``"Hello World"``.
    Works on any Unicode letter, not only ASCII.
    """
    result = []
    for i, char in enumerate(line):
        if i > 0 and char.isupper() and line[i - 1] != " ":
            result.append(" ")
        result.append(char)
    return "".join(result)


def format_song_text(text: str) -> list[str]:
    """
    Break raw lyrics into display lines.

    Section markers (``[Verse``, ``[Chorus``, ``[Bridge``) start a new line,
    sentence-ending punctuation followed by a space ends one. Each line is
    trimmed and de-concatenated; empty lines are dropped. The splitter is a
    heuristic: abbreviations and decimals get split too.

    Args:
        text: Lyrics text as stored

    Returns:
        Non-empty lines in source order
    """
    for marker in SECTION_MARKERS:
        text = text.replace(marker, "\n" + marker)

    for sentence_break in SENTENCE_BREAKS:
        text = text.replace(sentence_break, sentence_break[0] + "\n")

    formatted = []
    for line in text.split("\n"):
        fixed = insert_space_before_uppercase(line.strip())
        if fixed:
            formatted.append(fixed)

    return formatted


def paginate_lines(lines: list[str], verse: int, limit: int) -> list[str]:
    """
    Return the ``verse``-th page of ``limit`` lines (1-based).

    A page that starts past the end is empty rather than an error.

    Raises:
        ValueError: If verse or limit is not positive
    """
    if verse < 1:
        raise ValueError(f"verse must be >= 1, got {verse}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    start = (verse - 1) * limit
    if start >= len(lines):
        return []
    return lines[start:start + limit]
