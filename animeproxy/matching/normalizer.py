"""Title normalization for slugs and free-text queries.

Turns identifiers such as ``attack-on-titan-2nd-season-112`` into the
human-readable titles the upstream catalog search expects, and provides the
comparison helpers the matcher builds on.
"""

import re
from dataclasses import dataclass

from .config import ARC_KEYWORDS, MIN_SIGNIFICANT_WORD_LENGTH, STOP_WORDS

ID_SUFFIX_RE = re.compile(r"-\d+$")
EPISODE_SLUG_RE = re.compile(r"^(.*)-episode-(\d+)$")
TV_MARKER_RE = re.compile(r"\btv\b", re.IGNORECASE)
WORLDS_RE = re.compile(r"worlds", re.IGNORECASE)
APOSTROPHE_S_RE = re.compile(r"(\w)'S\b")
ORDINAL_SEASON_RE = re.compile(r"(\d+)(?:st|nd|rd|th)\s+season", re.IGNORECASE)
SEASON_NUMBER_RE = re.compile(r"season\s+(\d+)", re.IGNORECASE)
WORD_START_RE = re.compile(r"\b\w")

# Season markers recognised in comparable (lowercase, space separated) text
SEASON_MARKER_PATTERNS = (
    re.compile(r"\bseason (\d+)\b"),
    re.compile(r"\bs(\d+)\b"),
    re.compile(r"\b(\d+)(?:st|nd|rd|th) season\b"),
)


@dataclass(frozen=True)
class EpisodeInfo:
    """Anime slug and episode number parsed from ``<id>-episode-<n>``."""

    anime_id: str
    episode_number: int


def is_slug(value: str) -> bool:
    """Check if the value ends in a numeric catalog id (``-<digits>``)."""
    return bool(ID_SUFFIX_RE.search(value))


def strip_id_suffix(value: str) -> str:
    return ID_SUFFIX_RE.sub("", value)


def extract_episode_info(slug: str) -> EpisodeInfo | None:
    match = EPISODE_SLUG_RE.match(slug)
    if not match:
        return None
    return EpisodeInfo(anime_id=match.group(1), episode_number=int(match.group(2)))


def _fix_apostrophes(text: str) -> str:
    text = WORLDS_RE.sub("world's", text)
    # Capitalizing "world's" word-by-word yields "World'S"
    return APOSTROPHE_S_RE.sub(r"\1's", text)


def format_season(title: str) -> str:
    """Rewrite ``2nd season`` and ``season 2`` as ``Season 2``."""
    title = ORDINAL_SEASON_RE.sub(r"Season \1", title)
    return SEASON_NUMBER_RE.sub(r"Season \1", title)


def capitalize_words(text: str) -> str:
    return WORD_START_RE.sub(lambda m: m.group(0).upper(), text)


def normalize(raw: str, strip_id: bool = False) -> str:
    """Clean a slug or query into a search title.

    Args:
        raw: Slug or free-text query
        strip_id: Drop a trailing ``-<digits>`` catalog id first (slugs only)

    Returns:
        Title with hyphens, "tv" markers and extra whitespace removed,
        season ordinals rewritten and every word capitalized
    """
    text = strip_id_suffix(raw) if strip_id else raw
    text = text.replace("-", " ")
    text = TV_MARKER_RE.sub("", text)
    text = _fix_apostrophes(text)
    text = re.sub(r"\s+", " ", text).strip()
    text = format_season(text)
    text = capitalize_words(text)
    return _fix_apostrophes(text)


def slug_to_title(slug: str) -> str:
    return normalize(slug, strip_id=True)


def normalize_query(query: str) -> str:
    """Normalize an inbound query, treating ``...-<digits>`` as a slug."""
    return normalize(query, strip_id=is_slug(query))


def comparable(text: str) -> str:
    """Lowercase form with hyphens as spaces, used for all title comparisons."""
    return re.sub(r"\s+", " ", text.replace("-", " ").lower()).strip()


def season_number(text: str) -> int | None:
    """Season number named by an explicit marker, if any."""
    lowered = comparable(text)
    for pattern in SEASON_MARKER_PATTERNS:
        match = pattern.search(lowered)
        if match:
            return int(match.group(1))
    return None


def has_season(text: str, season: int) -> bool:
    """Check if the title marks the given season in any accepted spelling.

    Besides the explicit markers a trailing bare number counts, as in
    ``one-punch-man-2``.
    """
    lowered = comparable(text)
    if season_number(lowered) == season:
        return True
    return bool(re.search(rf"(?:^|\s){season}$", lowered))


def arc_keywords(text: str) -> list[str]:
    words = comparable(text).split()
    return [keyword for keyword in ARC_KEYWORDS if keyword in words]


def significant_words(text: str) -> list[str]:
    """Words of the title that carry signal, in order."""
    return [
        word
        for word in comparable(text).split()
        if word not in STOP_WORDS and len(word) > MIN_SIGNIFICANT_WORD_LENGTH
    ]


def apostrophe_variants(text: str) -> list[str]:
    """The text plus spellings that tolerate apostrophe drift."""
    return list(dict.fromkeys([text, text.replace("'", "")]))


def contains_phrase(title: str, phrase: str) -> bool:
    """Substring test on comparable forms, ignoring apostrophe differences."""
    haystack = comparable(title)
    haystacks = (haystack, haystack.replace("'", ""))
    return any(
        variant in candidate
        for variant in apostrophe_variants(comparable(phrase))
        for candidate in haystacks
    )
